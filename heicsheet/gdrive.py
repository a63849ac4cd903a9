# gdrive.py
import logging
import io

from .storage.base import StorageClient
from .storage.dto import FileMetadata
from typing import List
from google.auth.transport.requests import AuthorizedSession
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseUpload
from PIL import Image
from .exceptions import NotFound

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
THUMBNAIL_URL = "https://drive.google.com/thumbnail?id={file_id}&sz=w{size}"
JPEG_MIME_TYPE = "image/jpeg"


def build_thumbnail_url(file_id: str, size: int) -> str:
    return THUMBNAIL_URL.format(file_id=file_id, size=size)


def coerce_to_jpeg(content: bytes, content_type: str = "") -> bytes:
    """Returns JPEG bytes, re-encoding other raster formats with Pillow."""
    if content_type.split(";")[0].strip().lower() == JPEG_MIME_TYPE:
        return content
    with Image.open(io.BytesIO(content)) as img:
        if img.format == "JPEG":
            return content
        buffered = io.BytesIO()
        img.convert("RGB").save(buffered, format="JPEG", quality=90)
        return buffered.getvalue()


class GoogleDriveClient(StorageClient):
    """
    Client for interacting with the Google Drive API, implementing the StorageClient interface.
    """

    def __init__(self, credentials):
        try:
            self.service = build("drive", "v3", credentials=credentials)
            # Thumbnails are served outside the discovery API, so they are
            # fetched with a plain session carrying the same user credentials.
            self.session = AuthorizedSession(credentials)
            logging.info("Google Drive client initialized successfully.")
        except Exception as e:
            logging.error(f"Failed to initialize Google Drive client. Error: {e}")
            raise

    def verify_folder_exists(self, folder_id: str) -> str:
        """
        Verifies if a folder with a given ID exists and is actually a folder.

        Raises:
            NotFound: If the ID does not exist, or if the item is not a folder.
        """
        try:
            file = (
                self.service.files()
                .get(fileId=folder_id, fields="id, mimeType, trashed")
                .execute()
            )
        except HttpError as e:
            if e.resp.status == 404:
                raise NotFound(
                    f"Google Drive folder with ID '{folder_id}' not found or not accessible."
                ) from e
            logging.error(f"Failed to verify Google Drive folder ID '{folder_id}': {e}")
            raise

        if file.get("mimeType") != FOLDER_MIME_TYPE:
            raise NotFound(f"Google Drive ID '{folder_id}' exists but is not a folder.")
        if file.get("trashed"):
            raise NotFound(f"Google Drive folder '{folder_id}' is in the trash.")
        logging.info(f"Google Drive folder with ID '{folder_id}' exists and is a folder.")
        return folder_id

    def list_files(self, folder_id: str) -> List[FileMetadata]:
        """
        Lists all files in a given Google Drive folder ID and returns them as DTOs,
        following pagination until every page has been read.
        """
        self.verify_folder_exists(folder_id)
        logging.info(f"Listing files in Google Drive folder ID: '{folder_id}'")
        items = []
        page_token = None
        while True:
            response = (
                self.service.files()
                .list(
                    q=f"'{folder_id}' in parents and trashed=false",
                    fields="nextPageToken, files(id, name, mimeType, trashed)",
                    pageToken=page_token,
                )
                .execute()
            )
            items.extend(response.get("files", []))
            page_token = response.get("nextPageToken")
            if not page_token:
                break

        # Convert the raw API response to a list of FileMetadata DTOs
        return [
            FileMetadata(
                id=item["id"],
                name=item["name"],
                mime_type=item.get("mimeType", ""),
                trashed=item.get("trashed", False),
                folder_id=folder_id,
            )
            for item in items
        ]

    def fetch_rendition(self, file_id: str, size: int) -> bytes:
        """
        Downloads a JPEG rendition of a file from the Drive thumbnail endpoint.
        """
        url = build_thumbnail_url(file_id, size)
        logging.info(f"Requesting {size}px rendition of file ID '{file_id}'...")
        response = self.session.get(url)
        response.raise_for_status()
        return coerce_to_jpeg(response.content, response.headers.get("Content-Type", ""))

    def create_file(
        self, content: bytes, folder_id: str, filename: str, mime_type: str
    ) -> str:
        """
        Creates a file in a specified Google Drive folder from in-memory content.
        """
        try:
            file_metadata = {"name": filename, "parents": [folder_id]}
            media = MediaIoBaseUpload(io.BytesIO(content), mimetype=mime_type)

            logging.info(f"Uploading {filename} to folder ID {folder_id}...")
            created = (
                self.service.files()
                .create(body=file_metadata, media_body=media, fields="id")
                .execute()
            )
            logging.info(f"Successfully uploaded {filename} to folder ID: {folder_id}.")
            return created["id"]
        except HttpError as e:
            logging.error(f"Failed to upload file to folder ID '{folder_id}': {e}")
            raise

    def share_publicly(self, file_id: str):
        """
        Grants "anyone with the link" read access so the image can be fetched anonymously.
        """
        try:
            logging.info(f"Sharing file ID '{file_id}' with anyone who has the link...")
            self.service.permissions().create(
                fileId=file_id,
                body={"type": "anyone", "role": "reader"},
                fields="id",
            ).execute()
        except HttpError as e:
            logging.error(f"Failed to share file ID '{file_id}': {e}")
            raise

    def trash_file(self, file_id: str):
        """
        Moves a file to the Google Drive trash by its file ID.
        """
        try:
            logging.info(f"Trashing file with ID '{file_id}'...")
            self.service.files().update(
                fileId=file_id, body={"trashed": True}, fields="id, trashed"
            ).execute()
        except HttpError as e:
            if e.resp.status == 404:
                logging.warning(f"File with ID '{file_id}' not found. Nothing to trash.")
                return
            logging.error(f"Failed to trash file with ID '{file_id}': {e}")
            raise
