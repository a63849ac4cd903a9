# main.py
import argparse
import logging
import time
from typing import Optional, Tuple

from pydantic import ValidationError

from .config import Settings, get_settings
from .exceptions import HeicSheetError, InvalidReference, NotFound, PlacementFault
from .gdrive import GoogleDriveClient
from .gdrive_auth import gdrive_authenticate, load_credentials
from .listing import find_heic_files
from .placement import place_batch, place_single
from .processing import convert_file
from .resolver import extract_folder_id
from .sheets import SheetsClient, parse_a1
from .storage.base import StorageClient
from .storage.dto import BatchSummary, ConversionResult, GridPosition
from .ui import ConsoleUI

FOLDER_PROMPT = "Paste the Google Drive folder link (or folder ID) containing the HEIC photos:"
NO_FILES_MESSAGE = "No HEIC/HEIF files found in this folder."


def setup_logging():
    """Configures logging to file and console explicitly."""
    settings = get_settings()
    log_level_name = settings.LOG_LEVEL.upper()

    # Get the root logger
    root_logger = logging.getLogger()
    root_logger.setLevel(log_level_name)

    # Clear any existing handlers to prevent duplicate logs on re-runs or implicit configs
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    # Add StreamHandler (for console output)
    stream_handler = logging.StreamHandler()
    stream_handler.setFormatter(formatter)
    root_logger.addHandler(stream_handler)

    # Add FileHandler
    try:
        file_handler = logging.FileHandler(settings.LOG_FILE)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)
    except IOError as e:
        # Log to console if file logging fails (e.g., permissions)
        root_logger.error(f"Failed to set up file logging to {settings.LOG_FILE}: {e}")

    # Reducing "noise" from third-party libraries
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)
    logging.getLogger("google.auth").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)


def initialize_clients(
    settings,
) -> Tuple[Optional[GoogleDriveClient], Optional[SheetsClient]]:
    """
    Builds the Drive and Sheets clients from one set of user credentials.

    Returns (None, None) if either client could not be created.
    """
    try:
        credentials = load_credentials(
            settings.GDRIVE_CREDENTIALS_JSON, settings.GDRIVE_TOKEN_JSON
        )
        storage_client = GoogleDriveClient(credentials)
        sheets_client = SheetsClient(
            credentials, settings.SPREADSHEET_ID, settings.SHEET_NAME
        )
        return storage_client, sheets_client
    except Exception as e:
        logging.error(f"Failed to initialize Google clients. Error: {e}", exc_info=True)
        return None, None


def _ask_folder(ui, folder_ref: Optional[str]) -> Optional[str]:
    if folder_ref is None:
        folder_ref = ui.prompt(FOLDER_PROMPT)
        if folder_ref is None:
            return None
    return extract_folder_id(folder_ref)


def _ask_index(ui, files, index: Optional[int]) -> Optional[int]:
    if index is None:
        listing = "\n".join(f"{i}. {entry.name}" for i, entry in enumerate(files, start=1))
        answer = ui.prompt(
            f"Found {len(files)} HEIC/HEIF file(s):\n{listing}\n\n"
            "Enter the number of the file to convert:"
        )
        if answer is None:
            return None
        try:
            index = int(answer.strip())
        except ValueError:
            raise NotFound(f"'{answer.strip()}' is not a file number.")
    if not 1 <= index <= len(files):
        raise NotFound(f"Invalid selection: choose a number from 1 to {len(files)}.")
    return index


def convert_single_file(
    storage_client: StorageClient,
    sheets_client: SheetsClient,
    ui,
    folder_ref: Optional[str] = None,
    index: Optional[int] = None,
) -> Optional[ConversionResult]:
    """
    Converts one HEIC/HEIF file picked by its 1-based position in the folder
    listing and shows it in the configured target cell. The original is kept.

    Missing inputs are asked for through `ui`; returns None if the user cancels.
    """
    settings = get_settings()
    folder_id = _ask_folder(ui, folder_ref)
    if folder_id is None:
        return None

    files = find_heic_files(storage_client, folder_id)
    if not files:
        raise NotFound(NO_FILES_MESSAGE)

    index = _ask_index(ui, files, index)
    if index is None:
        return None
    file_entry = files[index - 1]

    result = convert_file(
        storage_client,
        file_entry,
        settings.DEST_FOLDER_ID or folder_id,
        settings.THUMBNAIL_SIZE,
    )
    if not result.success:
        ui.alert(f"Error converting {result.original_name}: {result.error}")
        return result

    row, col = parse_a1(settings.SINGLE_TARGET_CELL)
    try:
        place_single(
            sheets_client,
            storage_client,
            result.new_file_id,
            GridPosition(row, col),
            settings.SINGLE_CELL_SIZE,
        )
    except PlacementFault as e:
        logging.error(f"Could not place {result.new_name}: {e}")
        ui.alert(f"Converted {result.original_name} to {result.new_name}, but it could not be shown in the sheet: {e}")
        return result

    ui.alert(
        f"Converted {result.original_name} to {result.new_name} and placed it in {settings.SINGLE_TARGET_CELL.upper()}."
    )
    return result


def convert_all_files(
    storage_client: StorageClient,
    sheets_client: SheetsClient,
    ui,
    folder_ref: Optional[str] = None,
    assume_yes: bool = False,
) -> Optional[BatchSummary]:
    """
    Converts every HEIC/HEIF file in a folder, in natural name order, and lays
    the results out as a grid in the sheet.

    Each original is trashed right after its own conversion succeeds, so an
    interrupted run leaves earlier files converted and later files untouched.
    A failed file is neither converted nor trashed and does not stop the run.
    """
    settings = get_settings()
    folder_id = _ask_folder(ui, folder_ref)
    if folder_id is None:
        return None

    files = find_heic_files(storage_client, folder_id, sort=True)
    if not files:
        raise NotFound(NO_FILES_MESSAGE)

    # A missing tab must stop the run before any original is trashed
    sheets_client.sheet_id

    if not assume_yes and not ui.confirm(
        f"Found {len(files)} HEIC/HEIF file(s). Convert all of them to JPEG and move the originals to the trash?"
    ):
        ui.alert("Cancelled.")
        return None

    dest_folder_id = settings.DEST_FOLDER_ID or folder_id
    summary = BatchSummary()
    converted = []
    start_time = time.monotonic()
    for number, file_entry in enumerate(files, start=1):
        logging.info(f"--- Processing file {number}/{len(files)}: {file_entry.name} ---")
        result = convert_file(
            storage_client, file_entry, dest_folder_id, settings.THUMBNAIL_SIZE
        )
        if not result.success:
            summary.fail_count += 1
            summary.failures.append(result)
            continue

        summary.success_count += 1
        converted.append(result)
        try:
            storage_client.trash_file(file_entry.id)
        except Exception as e:
            logging.error(f"Converted {file_entry.name} but could not trash the original: {e}")

    # Originals are already trashed at this point, so the summary is shown whatever happens
    try:
        summary.placed_count = place_batch(
            sheets_client,
            storage_client,
            converted,
            settings.GRID_WIDTH,
            settings.GRID_START_ROW,
            settings.GRID_START_COL,
            settings.GRID_CELL_SIZE,
        )
    except Exception as e:
        logging.error(f"Could not place the converted images: {e}", exc_info=True)
    duration = time.monotonic() - start_time
    logging.info(
        f"Batch finished in {duration:.2f} seconds: {summary.success_count} converted, "
        f"{summary.fail_count} failed, {summary.placed_count} placed."
    )

    message = f"Done.\nConverted: {summary.success_count}\nFailed: {summary.fail_count}"
    if summary.placed_count < summary.success_count:
        message = f"{message}\nNot shown in the sheet: {summary.success_count - summary.placed_count}"
    if summary.failures:
        details = "\n".join(f"- {f.original_name}: {f.error}" for f in summary.failures)
        message = f"{message}\n\nErrors:\n{details}"
    ui.alert(message)
    return summary


# Commands exposed to the shell, in the order they are listed in --help
COMMANDS = {
    "convert-one": convert_single_file,
    "convert-all": convert_all_files,
}


def run_command(command, storage_client, sheets_client, ui, **kwargs):
    """
    Runs one workflow command and turns every failure into a dialog.
    """
    try:
        return command(storage_client, sheets_client, ui, **kwargs)
    except (InvalidReference, NotFound) as e:
        logging.warning(f"{command.__name__} stopped: {e}")
        ui.alert(str(e))
    except HeicSheetError as e:
        logging.error(f"{command.__name__} failed: {e}", exc_info=True)
        ui.alert(f"Error: {e}")
    except Exception as e:
        logging.critical(
            f"An unexpected error occurred in {command.__name__}: {e}", exc_info=True
        )
        ui.alert(f"Unexpected error: {e}")
    return None


def default_token_path() -> str:
    """Token file the settings read back, usable before the rest of the config is valid."""
    try:
        settings = get_settings()
    except ValidationError:
        return Settings.model_fields["TOKEN_STORAGE_FILE"].default
    return str(settings.BASE_DIR / settings.TOKEN_STORAGE_FILE)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Convert HEIC/HEIF photos in a Google Drive folder to JPEG and show them in a Google Sheet."
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    auth_parser = subparsers.add_parser(
        "authorize", help="Sign in with Google and save the OAuth token."
    )
    auth_parser.add_argument(
        "--token-file",
        help="Where to save the token (defaults to TOKEN_STORAGE_FILE). A custom path is only read back if TOKEN_STORAGE_FILE points to it.",
    )

    one_parser = subparsers.add_parser(
        "convert-one", help="Convert a single file and show it in one cell."
    )
    one_parser.add_argument("--folder", help="Folder link or ID (prompted if omitted).")
    one_parser.add_argument(
        "--index", type=int, help="1-based number of the file to convert (prompted if omitted)."
    )

    all_parser = subparsers.add_parser(
        "convert-all",
        help="Convert every file, trash the originals and show them as a grid.",
    )
    all_parser.add_argument("--folder", help="Folder link or ID (prompted if omitted).")
    all_parser.add_argument(
        "--yes", action="store_true", help="Do not ask for confirmation."
    )
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    if args.command == "authorize":
        return 0 if gdrive_authenticate(args.token_file or default_token_path()) else 1

    try:
        settings = get_settings()
    except ValidationError as e:
        print(f"Invalid configuration:\n{e}")
        return 1

    setup_logging()
    ui = ConsoleUI()

    storage_client, sheets_client = initialize_clients(settings)
    if storage_client is None:
        ui.alert("Could not connect to Google. Run `heicsheet authorize` and check your settings.")
        return 1

    if args.command == "convert-one":
        kwargs = {"folder_ref": args.folder, "index": args.index}
    else:
        kwargs = {"folder_ref": args.folder, "assume_yes": args.yes}

    logging.info(f"Running {args.command}...")
    result = run_command(COMMANDS[args.command], storage_client, sheets_client, ui, **kwargs)
    return 0 if result is not None else 1


if __name__ == "__main__":
    raise SystemExit(main())
