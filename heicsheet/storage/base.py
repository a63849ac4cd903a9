# storage/base.py
from abc import ABC, abstractmethod
from typing import List
from .dto import FileMetadata


class StorageClient(ABC):
    """
    Abstract base class for a cloud storage client.
    Defines the operations the conversion workflow needs from a storage
    backend (e.g., Google Drive): listing, rendering, creating, sharing
    and trashing files.
    """

    @abstractmethod
    def verify_folder_exists(self, folder_id: str) -> str:
        """
        Verifies if a folder exists with the given ID.
        Raises an error if the folder does not exist or is inaccessible.

        :param folder_id: The ID of the folder to verify.
        :return: The verified folder ID.
        """
        pass

    @abstractmethod
    def list_files(self, folder_id: str) -> List[FileMetadata]:
        """
        Lists all live (non-trashed) files in a given folder.

        :param folder_id: The ID of the folder to list.
        :return: A list of standardized FileMetadata DTOs, in backend order.
        """
        pass

    @abstractmethod
    def fetch_rendition(self, file_id: str, size: int) -> bytes:
        """
        Asks the backend to render a stored file as a JPEG image.

        :param file_id: The ID of the file to render.
        :param size: Minimum length of the long edge, in pixels.
        :return: JPEG encoded bytes.
        """
        pass

    @abstractmethod
    def create_file(
        self, content: bytes, folder_id: str, filename: str, mime_type: str
    ) -> str:
        """
        Creates a new file from in-memory content.

        :param content: The file body.
        :param folder_id: The ID of the destination folder.
        :param filename: The name of the new file.
        :param mime_type: The content type of the new file.
        :return: The ID of the created file.
        """
        pass

    @abstractmethod
    def share_publicly(self, file_id: str):
        """
        Makes a file viewable by anyone who has its link.

        :param file_id: The ID of the file to share.
        """
        pass

    @abstractmethod
    def trash_file(self, file_id: str):
        """
        Moves a file to the trash.

        :param file_id: The ID of the file to trash.
        """
        pass
