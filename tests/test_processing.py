# tests/test_processing.py
import pytest

from heicsheet.processing import convert_file, derive_jpeg_name


@pytest.mark.parametrize(
    "name, expected",
    [
        ("photo.HEIC", "photo.jpg"),
        ("a.b.heic", "a.b.jpg"),
        ("IMG_0001.heif", "IMG_0001.jpg"),
        ("no_extension", "no_extension.jpg"),
        (".heic", ".jpg"),
    ],
)
def test_derive_jpeg_name(name, expected):
    assert derive_jpeg_name(name) == expected


def test_convert_file_success(mock_storage_client, make_file):
    """Test the successful conversion of a single file."""
    mock_storage_client.fetch_rendition.return_value = b"jpeg-bytes"
    mock_storage_client.create_file.return_value = "new_id"
    file_entry = make_file("photo.HEIC", file_id="orig_id")

    result = convert_file(mock_storage_client, file_entry, "dest_folder", size=1000)

    assert result.success is True
    assert result.original_name == "photo.HEIC"
    assert result.new_name == "photo.jpg"
    assert result.new_file_id == "new_id"
    mock_storage_client.fetch_rendition.assert_called_once_with("orig_id", 1000)
    mock_storage_client.create_file.assert_called_once_with(
        b"jpeg-bytes", "dest_folder", "photo.jpg", "image/jpeg"
    )


def test_convert_file_rendering_failure(mock_storage_client, make_file):
    """A failed fetch becomes a failure result and nothing is created."""
    mock_storage_client.fetch_rendition.side_effect = Exception("403 Forbidden")
    file_entry = make_file("photo.heic")

    result = convert_file(mock_storage_client, file_entry, "dest_folder")

    assert result.success is False
    assert result.original_name == "photo.heic"
    assert "403 Forbidden" in result.error
    mock_storage_client.create_file.assert_not_called()


def test_convert_file_upload_failure(mock_storage_client, make_file):
    mock_storage_client.fetch_rendition.return_value = b"jpeg-bytes"
    mock_storage_client.create_file.side_effect = Exception("quota exceeded")

    result = convert_file(mock_storage_client, make_file("photo.heic"), "dest_folder")

    assert result.success is False
    assert "quota exceeded" in result.error
    assert "photo.jpg" in result.error


def test_convert_file_does_not_retry(mock_storage_client, make_file):
    mock_storage_client.fetch_rendition.side_effect = ConnectionError("network down")

    convert_file(mock_storage_client, make_file("photo.heic"), "dest_folder")

    mock_storage_client.fetch_rendition.assert_called_once()
