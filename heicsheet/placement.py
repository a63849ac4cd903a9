# placement.py
import logging
from typing import List

from .exceptions import PlacementFault
from .sheets import SheetsClient, to_a1
from .storage.base import StorageClient
from .storage.dto import ConversionSuccess, GridPosition

IMAGE_URL = "https://drive.google.com/uc?export=view&id={file_id}"
FIT_TO_CELL = 1


def grid_position(
    index: int, width: int = 6, start_row: int = 2, start_col: int = 2
) -> GridPosition:
    """Row-major position of the index-th image in a grid `width` cells wide."""
    if index < 0:
        raise ValueError(f"Grid index must be >= 0, got {index}")
    if width < 1:
        raise ValueError(f"Grid width must be >= 1, got {width}")
    return GridPosition(row=start_row + index // width, col=start_col + index % width)


def image_url(file_id: str) -> str:
    return IMAGE_URL.format(file_id=file_id)


def image_formula(file_id: str, mode: int = FIT_TO_CELL) -> str:
    return f'=IMAGE("{image_url(file_id)}", {mode})'


def _place_one(
    sheets_client: SheetsClient,
    storage_client: StorageClient,
    file_id: str,
    position: GridPosition,
):
    # IMAGE() fetches the picture anonymously, so the file must be link-viewable first
    try:
        storage_client.share_publicly(file_id)
    except Exception as e:
        raise PlacementFault(f"Could not share file ID '{file_id}': {e}") from e
    try:
        sheets_client.set_formula(position.row, position.col, image_formula(file_id))
    except Exception as e:
        raise PlacementFault(
            f"Could not write image to {to_a1(position.row, position.col)}: {e}"
        ) from e


def _size_grid(
    sheets_client: SheetsClient,
    start_row: int,
    start_col: int,
    rows: int,
    columns: int,
    cell_size: int,
):
    try:
        sheets_client.set_row_heights(start_row, rows, cell_size)
        sheets_client.set_column_widths(start_col, columns, cell_size)
    except Exception as e:
        raise PlacementFault(f"Could not resize the grid cells: {e}") from e


def place_single(
    sheets_client: SheetsClient,
    storage_client: StorageClient,
    file_id: str,
    position: GridPosition,
    cell_size: int = 300,
):
    """
    Shows one converted image in a single cell, replacing what was there
    and enlarging the cell to `cell_size` pixels. Faults propagate.
    """
    sheets_client.clear_cell(position.row, position.col)
    sheets_client.set_row_heights(position.row, 1, cell_size)
    sheets_client.set_column_widths(position.col, 1, cell_size)
    _place_one(sheets_client, storage_client, file_id, position)
    logging.info(f"Placed file ID '{file_id}' at {to_a1(position.row, position.col)}.")


def place_batch(
    sheets_client: SheetsClient,
    storage_client: StorageClient,
    converted: List[ConversionSuccess],
    width: int = 6,
    start_row: int = 2,
    start_col: int = 2,
    cell_size: int = 150,
) -> int:
    """
    Lays converted images out in a grid, `width` cells per row.

    Every row and column the grid occupies is sized before any formula is
    written. If sizing fails the images are still written at the current
    size. A file that cannot be shared or written is logged and skipped.

    :return: The number of cells written.
    """
    if not converted:
        return 0

    rows = (len(converted) + width - 1) // width
    columns = min(len(converted), width)
    try:
        _size_grid(sheets_client, start_row, start_col, rows, columns, cell_size)
    except PlacementFault as e:
        logging.error(f"Writing images without resizing: {e}")

    placed = 0
    for index, result in enumerate(converted):
        position = grid_position(index, width, start_row, start_col)
        try:
            _place_one(sheets_client, storage_client, result.new_file_id, position)
            placed += 1
            logging.info(
                f"Placed {result.new_name} at {to_a1(position.row, position.col)}."
            )
        except PlacementFault as e:
            logging.error(f"Skipping {result.new_name}: {e}")
    return placed
