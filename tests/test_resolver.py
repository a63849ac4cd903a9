# tests/test_resolver.py
import pytest

from heicsheet.exceptions import InvalidReference
from heicsheet.resolver import extract_folder_id

FOLDER_ID = "1AbCdEfGhIjKlMnOpQrStUvWxYz_-12"


@pytest.mark.parametrize(
    "reference",
    [
        f"https://drive.google.com/drive/folders/{FOLDER_ID}",
        f"https://drive.google.com/drive/folders/{FOLDER_ID}?usp=sharing",
        f"https://drive.google.com/drive/u/0/folders/{FOLDER_ID}",
        f"https://drive.google.com/open?id={FOLDER_ID}",
        FOLDER_ID,
        f"   {FOLDER_ID}\n",
    ],
)
def test_extract_folder_id_from_links_and_bare_ids(reference):
    assert extract_folder_id(reference) == FOLDER_ID


def test_extract_folder_id_first_long_run_wins():
    """An unrelated long token before the ID is picked instead of the ID."""
    tracking = "utm_" + "x" * 30
    reference = f"https://example.com/{tracking}/folders/{FOLDER_ID}"

    assert extract_folder_id(reference) == tracking


def test_extract_folder_id_exactly_25_characters():
    folder_id = "a" * 25
    assert extract_folder_id(f"folders/{folder_id}") == folder_id


@pytest.mark.parametrize(
    "reference",
    ["", "   ", "a" * 24, "https://drive.google.com/drive/folders/short", "not a link"],
)
def test_extract_folder_id_rejects_short_input(reference):
    with pytest.raises(InvalidReference):
        extract_folder_id(reference)


def test_extract_folder_id_rejects_none():
    with pytest.raises(InvalidReference):
        extract_folder_id(None)
