import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

A1_CELL_PATTERN = re.compile(r"^[A-Za-z]{1,3}[1-9][0-9]*$")


class Settings(BaseSettings):
    """
    Centralized application configuration with type validation.
    Automatically reads variables from the environment, the .env file
    and the token file written by `heicsheet authorize`.
    """

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    TOKEN_STORAGE_FILE: str = "gdrive_token.json"
    LOG_LEVEL: str = "INFO"

    # --- Google Settings ---
    GDRIVE_CREDENTIALS_JSON: str
    GDRIVE_TOKEN_JSON: Optional[str] = None
    DEST_FOLDER_ID: Optional[str] = None  # None means "same folder as the source"

    # --- Spreadsheet Settings ---
    SPREADSHEET_ID: str
    SHEET_NAME: str = "Sheet1"

    # --- Conversion Settings ---
    THUMBNAIL_SIZE: int = Field(1000, validation_alias="THUMBNAIL_SIZE")

    # --- Grid Settings ---
    GRID_WIDTH: int = 6
    GRID_START_ROW: int = 2
    GRID_START_COL: int = 2
    GRID_CELL_SIZE: int = 150  # pixels, used for both row height and column width
    SINGLE_TARGET_CELL: str = "B2"
    SINGLE_CELL_SIZE: int = 300

    # --- Constants and Computed Paths ---
    BASE_DIR: Path = Field(default_factory=Path.cwd)

    @model_validator(mode="after")
    def validate_layout(self):
        for key in (
            "THUMBNAIL_SIZE",
            "GRID_WIDTH",
            "GRID_START_ROW",
            "GRID_START_COL",
            "GRID_CELL_SIZE",
            "SINGLE_CELL_SIZE",
        ):
            if getattr(self, key) <= 0:
                raise ValueError(f"{key} must be a positive integer")

        if not A1_CELL_PATTERN.match(self.SINGLE_TARGET_CELL):
            raise ValueError(
                f"SINGLE_TARGET_CELL must be a cell in A1 notation, got '{self.SINGLE_TARGET_CELL}'"
            )
        return self

    def model_post_init(self, __context):
        """
        After initial settings are loaded from the environment,
        try to load the OAuth token from the local token file as a fallback.
        """
        if self.GDRIVE_TOKEN_JSON:
            return
        token_file = self.BASE_DIR / self.TOKEN_STORAGE_FILE
        if token_file.is_file():
            content = token_file.read_text().strip()
            if content:
                self.GDRIVE_TOKEN_JSON = content
                logging.info(f"Found Google token in file: {token_file}")

    @property
    def LOG_FILE(self) -> Path:
        return self.BASE_DIR / "app.log"


@lru_cache()
def get_settings() -> Settings:
    """
    Returns a cached instance of the application settings.
    The first call to this function will initialize the settings.
    """
    return Settings()
