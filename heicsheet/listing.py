# listing.py
import logging
import re
from typing import List

from .storage.base import StorageClient
from .storage.dto import FileMetadata

HEIC_MIME_TYPE = "image/heic"
HEIC_MARKERS = (".heic", ".heif")

_DIGITS = re.compile(r"(\d+)")


def is_heic_candidate(file: FileMetadata) -> bool:
    name = file.name.lower()
    return any(marker in name for marker in HEIC_MARKERS) or file.mime_type == HEIC_MIME_TYPE


def filter_heic_files(files: List[FileMetadata]) -> List[FileMetadata]:
    """Keeps HEIC/HEIF files, preserving the order they were listed in."""
    return [file for file in files if is_heic_candidate(file)]


def natural_key(name: str):
    """
    Sort key comparing digit runs by value and the rest case-insensitively,
    so "img2" sorts before "img10".
    """
    parts = _DIGITS.split(name.casefold())
    # Odd positions are digit runs; pair them with the text so int and str never meet
    return [(0, int(part), "") if i % 2 else (1, 0, part) for i, part in enumerate(parts)]


def sort_by_name(files: List[FileMetadata]) -> List[FileMetadata]:
    return sorted(files, key=lambda file: natural_key(file.name))


def find_heic_files(
    storage_client: StorageClient, folder_id: str, sort: bool = False
) -> List[FileMetadata]:
    """
    Lists a folder and returns its HEIC/HEIF files.
    An empty list means the folder has none; it is not an error.
    """
    files = storage_client.list_files(folder_id)
    candidates = filter_heic_files(files)
    logging.info(
        f"Found {len(candidates)} HEIC/HEIF file(s) among {len(files)} file(s) in folder '{folder_id}'."
    )
    if sort:
        candidates = sort_by_name(candidates)
    return candidates
