# processing.py
import logging

from .exceptions import ConversionFault
from .storage.base import StorageClient
from .storage.dto import (
    ConversionFailure,
    ConversionResult,
    ConversionSuccess,
    FileMetadata,
)

JPEG_MIME_TYPE = "image/jpeg"


def derive_jpeg_name(name: str) -> str:
    """Replaces the last extension with .jpg ("a.b.heic" -> "a.b.jpg")."""
    base, dot, _ = name.rpartition(".")
    if not dot:
        base = name
    return f"{base}.jpg"


def _render_and_store(
    storage_client: StorageClient,
    file_entry: FileMetadata,
    dest_folder_id: str,
    size: int,
) -> ConversionSuccess:
    try:
        content = storage_client.fetch_rendition(file_entry.id, size)
    except Exception as e:
        raise ConversionFault(f"Could not render {file_entry.name} as JPEG: {e}") from e

    new_name = derive_jpeg_name(file_entry.name)
    try:
        new_file_id = storage_client.create_file(
            content, dest_folder_id, new_name, JPEG_MIME_TYPE
        )
    except Exception as e:
        raise ConversionFault(f"Could not save {new_name}: {e}") from e

    return ConversionSuccess(
        original_name=file_entry.name, new_name=new_name, new_file_id=new_file_id
    )


def convert_file(
    storage_client: StorageClient,
    file_entry: FileMetadata,
    dest_folder_id: str,
    size: int = 1000,
) -> ConversionResult:
    """
    Converts one stored HEIC/HEIF file to a new JPEG file in the destination folder.
    Never raises: any fault is returned as a ConversionFailure and is not retried.
    """
    logging.info(f"Converting {file_entry.name} (ID '{file_entry.id}')...")
    try:
        result = _render_and_store(storage_client, file_entry, dest_folder_id, size)
    except Exception as e:
        logging.error(f"Conversion of {file_entry.name} failed: {e}", exc_info=True)
        return ConversionFailure(original_name=file_entry.name, error=str(e))

    logging.info(
        f"Converted {result.original_name} -> {result.new_name} (ID '{result.new_file_id}')."
    )
    return result
