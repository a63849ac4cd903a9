# storage/dto.py
from typing import Literal, NamedTuple, Optional, Union, List

from pydantic import BaseModel, Field


class FileMetadata(BaseModel):
    """
    A standardized Data Transfer Object for a file stored in the drive.
    """

    id: str
    name: str
    mime_type: str = ""
    trashed: bool = False
    folder_id: Optional[str] = None


class ConversionSuccess(BaseModel):
    success: Literal[True] = True
    original_name: str
    new_name: str
    new_file_id: str


class ConversionFailure(BaseModel):
    success: Literal[False] = False
    original_name: str
    error: str


ConversionResult = Union[ConversionSuccess, ConversionFailure]


class GridPosition(NamedTuple):
    """1-based row and column of a sheet cell."""

    row: int
    col: int


class BatchSummary(BaseModel):
    """Counts reported at the end of a batch run."""

    success_count: int = 0
    fail_count: int = 0
    placed_count: int = 0
    failures: List[ConversionFailure] = Field(default_factory=list)
