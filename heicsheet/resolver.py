# resolver.py
import re

from .exceptions import InvalidReference

# Drive IDs are long runs of URL-safe characters
FOLDER_ID_PATTERN = re.compile(r"[A-Za-z0-9_-]{25,}")


def extract_folder_id(reference: str) -> str:
    """
    Extracts a Google Drive folder ID from a folder link or a bare ID.

    The first run of 25 or more URL-safe characters wins, so any link shape
    containing the ID works. A longer unrelated token placed before the ID
    (a tracking parameter, for example) would be picked instead.
    """
    text = (reference or "").strip()
    if not text:
        raise InvalidReference("No folder link or ID was entered.")

    match = FOLDER_ID_PATTERN.search(text)
    if match:
        return match.group(0)
    if FOLDER_ID_PATTERN.fullmatch(text):
        return text
    raise InvalidReference(
        f"Could not find a Google Drive folder ID in '{text}'. Paste the folder link or its ID."
    )
