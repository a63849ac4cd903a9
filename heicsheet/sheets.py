# sheets.py
import logging
import re
from typing import Tuple

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from .exceptions import NotFound


def column_letter(col: int) -> str:
    """Converts a 1-based column number to its letter form (1 -> A, 27 -> AA)."""
    if col < 1:
        raise ValueError(f"Column must be >= 1, got {col}")
    letters = ""
    while col:
        col, remainder = divmod(col - 1, 26)
        letters = chr(ord("A") + remainder) + letters
    return letters


def to_a1(row: int, col: int) -> str:
    if row < 1:
        raise ValueError(f"Row must be >= 1, got {row}")
    return f"{column_letter(col)}{row}"


def parse_a1(cell: str) -> Tuple[int, int]:
    """Converts a cell such as 'B2' to a 1-based (row, col) pair."""
    match = re.fullmatch(r"([A-Za-z]+)([1-9][0-9]*)", cell.strip())
    if not match:
        raise ValueError(f"Not a cell in A1 notation: '{cell}'")
    col = 0
    for letter in match.group(1).upper():
        col = col * 26 + (ord(letter) - ord("A") + 1)
    return int(match.group(2)), col


class SheetsClient:
    """
    Client for writing image formulas and cell sizes to one tab of a Google spreadsheet.
    """

    def __init__(self, credentials, spreadsheet_id: str, sheet_name: str):
        try:
            self.service = build("sheets", "v4", credentials=credentials)
            self.spreadsheet_id = spreadsheet_id
            self.sheet_name = sheet_name
            self._sheet_id = None
            logging.info("Google Sheets client initialized successfully.")
        except Exception as e:
            logging.error(f"Failed to initialize Google Sheets client. Error: {e}")
            raise

    def _range(self, row: int, col: int) -> str:
        # Quotes inside a tab name are doubled in A1 notation
        quoted = self.sheet_name.replace("'", "''")
        return f"'{quoted}'!{to_a1(row, col)}"

    @property
    def sheet_id(self) -> int:
        """Numeric ID of the target tab, looked up once by its title."""
        if self._sheet_id is None:
            spreadsheet = (
                self.service.spreadsheets()
                .get(
                    spreadsheetId=self.spreadsheet_id,
                    fields="sheets(properties(sheetId,title))",
                )
                .execute()
            )
            for sheet in spreadsheet.get("sheets", []):
                properties = sheet.get("properties", {})
                if properties.get("title") == self.sheet_name:
                    self._sheet_id = properties["sheetId"]
                    break
            else:
                raise NotFound(
                    f"Sheet '{self.sheet_name}' not found in spreadsheet '{self.spreadsheet_id}'."
                )
        return self._sheet_id

    def clear_cell(self, row: int, col: int):
        self.service.spreadsheets().values().clear(
            spreadsheetId=self.spreadsheet_id, range=self._range(row, col), body={}
        ).execute()

    def set_formula(self, row: int, col: int, formula: str):
        """Writes a formula to a cell, letting Sheets parse it as if typed."""
        try:
            self.service.spreadsheets().values().update(
                spreadsheetId=self.spreadsheet_id,
                range=self._range(row, col),
                valueInputOption="USER_ENTERED",
                body={"values": [[formula]]},
            ).execute()
        except HttpError as e:
            logging.error(f"Failed to write formula to {to_a1(row, col)}: {e}")
            raise

    def _resize(self, dimension: str, start: int, count: int, pixel_size: int):
        # Dimension indexes are 0-based and end-exclusive
        request = {
            "updateDimensionProperties": {
                "range": {
                    "sheetId": self.sheet_id,
                    "dimension": dimension,
                    "startIndex": start - 1,
                    "endIndex": start - 1 + count,
                },
                "properties": {"pixelSize": pixel_size},
                "fields": "pixelSize",
            }
        }
        self.service.spreadsheets().batchUpdate(
            spreadsheetId=self.spreadsheet_id, body={"requests": [request]}
        ).execute()

    def set_row_heights(self, start_row: int, count: int, pixel_size: int):
        logging.info(f"Setting {count} row(s) from row {start_row} to {pixel_size}px.")
        self._resize("ROWS", start_row, count, pixel_size)

    def set_column_widths(self, start_col: int, count: int, pixel_size: int):
        logging.info(
            f"Setting {count} column(s) from column {column_letter(start_col)} to {pixel_size}px."
        )
        self._resize("COLUMNS", start_col, count, pixel_size)
