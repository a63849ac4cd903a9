# tests/test_gdrive_auth.py
import json

import pytest
from unittest.mock import patch, MagicMock, mock_open, call

from heicsheet.gdrive_auth import SCOPES, gdrive_authenticate, load_credentials

TOKEN = {"token": "t", "refresh_token": "r", "token_uri": "https://oauth2.googleapis.com/token"}


@patch("heicsheet.gdrive_auth.os.path.exists")
@patch("heicsheet.gdrive_auth.InstalledAppFlow.from_client_config")
@patch("builtins.input", return_value="credentials.json")
@patch("heicsheet.gdrive_auth.json.load")
def test_gdrive_authenticate_new_token(mock_json_load, mock_input, mock_flow, mock_exists):
    """Test the authentication process when no token exists."""

    def mock_path_exists(path):
        return path == "credentials.json"

    mock_exists.side_effect = mock_path_exists
    mock_json_load.return_value = {"installed": {}}
    mock_creds = MagicMock()
    mock_creds.to_json.return_value = "mock_json_token"
    mock_flow.return_value.run_local_server.return_value = mock_creds

    with patch("builtins.open", mock_open()) as mock_file:
        assert gdrive_authenticate() is mock_creds
        mock_exists.assert_has_calls([call("gdrive_token.json"), call("credentials.json")])
        mock_flow.assert_called_once_with({"installed": {}}, SCOPES)
        mock_file.assert_called_with("gdrive_token.json", "w")
        mock_file().write.assert_called_once_with("mock_json_token")


@patch("heicsheet.gdrive_auth.os.path.exists")
@patch("heicsheet.gdrive_auth.Credentials.from_authorized_user_info")
def test_gdrive_authenticate_existing_token(mock_creds_from_info, mock_exists):
    """Test the authentication process when a valid token already exists."""
    mock_exists.return_value = True
    mock_creds = MagicMock(valid=True)
    mock_creds_from_info.return_value = mock_creds

    with patch("builtins.open", mock_open(read_data="{}")):
        assert gdrive_authenticate() is mock_creds
        mock_creds.refresh.assert_not_called()


@patch("heicsheet.gdrive_auth.os.path.exists", return_value=False)
@patch("builtins.input", return_value="missing.json")
def test_gdrive_authenticate_bad_credentials_path(mock_input, mock_exists):
    assert gdrive_authenticate("token.json") is None


@patch("heicsheet.gdrive_auth.Credentials.from_authorized_user_info")
def test_load_credentials_uses_client_secrets(mock_from_info):
    mock_from_info.return_value = MagicMock(valid=True)
    client_json = json.dumps({"installed": {"client_id": "cid", "client_secret": "csecret"}})

    creds = load_credentials(client_json, json.dumps(TOKEN))

    assert creds is mock_from_info.return_value
    info = mock_from_info.call_args.kwargs["info"]
    assert info["client_id"] == "cid"
    assert info["client_secret"] == "csecret"
    assert mock_from_info.call_args.kwargs["scopes"] == SCOPES
    creds.refresh.assert_not_called()


@patch("heicsheet.gdrive_auth.Request")
@patch("heicsheet.gdrive_auth.Credentials.from_authorized_user_info")
def test_load_credentials_refreshes_expired_token(mock_from_info, MockRequest):
    creds = MagicMock(valid=False, expired=True, refresh_token="r")
    mock_from_info.return_value = creds

    load_credentials(json.dumps({}), json.dumps(TOKEN))

    creds.refresh.assert_called_once_with(MockRequest.return_value)


def test_load_credentials_requires_token():
    with pytest.raises(ValueError, match="authorize"):
        load_credentials(json.dumps({}), None)
