# gdrive_auth.py
import os
import json
import logging
from google_auth_oauthlib.flow import InstalledAppFlow
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials

# Drive for listing/creating/sharing files, Sheets for writing the image grid
SCOPES = [
    "https://www.googleapis.com/auth/drive",
    "https://www.googleapis.com/auth/spreadsheets",
]


def _client_secrets(credentials_data: dict) -> dict:
    # Client JSON downloaded from the console nests the values under "installed" or "web"
    for key in ("installed", "web"):
        if key in credentials_data:
            return credentials_data[key]
    return credentials_data


def load_credentials(credentials_json: str, token_json: str) -> Credentials:
    """
    Builds user credentials from the saved authorized-user token, using the
    client_id and client_secret from the OAuth client JSON when present.
    Expired credentials are refreshed.
    """
    if not token_json:
        raise ValueError(
            "Google token not configured. Run `heicsheet authorize` or set GDRIVE_TOKEN_JSON."
        )
    token_info = json.loads(token_json)
    credentials_data = _client_secrets(json.loads(credentials_json))

    if "client_id" in credentials_data and "client_secret" in credentials_data:
        token_info["client_id"] = credentials_data["client_id"]
        token_info["client_secret"] = credentials_data["client_secret"]
    else:
        logging.warning(
            "client_id or client_secret not found in GDRIVE_CREDENTIALS_JSON. Using existing from token if available."
        )

    creds = Credentials.from_authorized_user_info(info=token_info, scopes=SCOPES)

    if not creds.valid and creds.expired and creds.refresh_token:
        logging.info("Google token expired, refreshing...")
        creds.refresh(Request())
    return creds


def gdrive_authenticate(token_path: str = "gdrive_token.json"):
    """
    Handles the OAuth 2.0 flow for the Google Drive and Sheets APIs.
    It prompts the user for the path to their credentials.json file,
    and generates a token file.
    """
    creds = None

    # Check if a token file already exists
    if os.path.exists(token_path):
        with open(token_path, "r") as token_file:
            creds_data = json.load(token_file)
        creds = Credentials.from_authorized_user_info(creds_data, SCOPES)

    if creds and creds.valid:
        print(f"Token in {token_path} is still valid.")
        return creds

    if creds and creds.expired and creds.refresh_token:
        creds.refresh(Request())
    else:
        # Prompt the user for the path to their credentials.json file
        creds_path = input("Please enter the path to your credentials.json file: ")
        if not os.path.exists(creds_path):
            print("Error: The provided path to credentials.json is invalid.")
            return None
        with open(creds_path, "r") as creds_file:
            client_config = json.load(creds_file)

        flow = InstalledAppFlow.from_client_config(client_config, SCOPES)
        creds = flow.run_local_server(port=0)

    # Save the credentials for the next run
    with open(token_path, "w") as token_file:
        token_file.write(creds.to_json())
    print(f"Token saved to {token_path}")
    return creds
