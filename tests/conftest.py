# tests/conftest.py
import pytest
from unittest.mock import MagicMock
from pathlib import Path

from heicsheet.config import Settings, get_settings
from heicsheet.storage.dto import FileMetadata


@pytest.fixture
def mock_settings():
    """
    Provides a mock of the application settings for testing.
    This avoids the need for environment variables during tests.
    """
    settings = MagicMock(spec=Settings)
    settings.GDRIVE_CREDENTIALS_JSON = '{"installed": {"client_id": "id", "client_secret": "secret"}}'
    settings.GDRIVE_TOKEN_JSON = '{"token": "t", "refresh_token": "r"}'
    settings.SPREADSHEET_ID = "spreadsheet_id"
    settings.SHEET_NAME = "Sheet1"
    settings.DEST_FOLDER_ID = None
    settings.THUMBNAIL_SIZE = 1000
    settings.GRID_WIDTH = 6
    settings.GRID_START_ROW = 2
    settings.GRID_START_COL = 2
    settings.GRID_CELL_SIZE = 150
    settings.SINGLE_TARGET_CELL = "B2"
    settings.SINGLE_CELL_SIZE = 300
    settings.LOG_LEVEL = "INFO"
    settings.TOKEN_STORAGE_FILE = "gdrive_token.json"
    settings.BASE_DIR = Path("/tmp")
    settings.LOG_FILE = Path("/tmp/app.log")
    return settings


@pytest.fixture
def mock_storage_client():
    """Fixture for a mock storage client."""
    return MagicMock()


@pytest.fixture
def mock_sheets_client():
    """Fixture for a mock sheets client."""
    return MagicMock()


@pytest.fixture
def make_file():
    """Builds FileMetadata entries with sensible defaults."""

    def _make(name, file_id=None, mime_type="image/heic"):
        return FileMetadata(
            id=file_id or f"id_{name}", name=name, mime_type=mime_type, folder_id="folder"
        )

    return _make


@pytest.fixture(autouse=True)
def patch_settings_class(monkeypatch, mock_settings):
    """
    This autouse fixture automatically replaces the `Settings` class constructor.
    Any part of the app code that calls `Settings()` during a test run will
    receive the `mock_settings` instance instead of a real settings object.
    """
    # get_settings may have cached a real instance during test collection
    get_settings.cache_clear()
    monkeypatch.setattr("heicsheet.config.Settings", lambda *args, **kwargs: mock_settings)
    yield
    get_settings.cache_clear()
