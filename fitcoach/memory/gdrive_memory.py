"""Google Drive key-value store: one JSON file per key in an app folder."""

import json
import logging
from io import BytesIO
from typing import Any, Dict, List, Optional

from google.oauth2 import service_account
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from googleapiclient.http import MediaIoBaseDownload, MediaIoBaseUpload

from fitcoach.errors import StorageError
from fitcoach.memory.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/drive.file"]

FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"


def credentials_from_service_account(info: Dict[str, Any]) -> service_account.Credentials:
    """
    Build Drive credentials from service account info.

    Args:
        info: Parsed service account JSON (e.g. st.secrets["gcp_service_account"])

    Returns:
        Scoped service account credentials
    """
    return service_account.Credentials.from_service_account_info(dict(info), scopes=SCOPES)


class GoogleDriveKeyValueStore(KeyValueStore):
    """Store each key as '<key>.json' inside a Drive folder."""

    APP_FOLDER_NAME = "FitCoach"

    def __init__(
        self,
        credentials: Optional[Any] = None,
        folder_name: Optional[str] = None,
        service: Optional[Any] = None,
    ) -> None:
        """
        Initialize Google Drive storage.

        Args:
            credentials: Google credentials with drive.file scope
            folder_name: Drive folder holding the store (default: FitCoach)
            service: Prebuilt Drive v3 service, used instead of credentials
        """
        if service is None and credentials is None:
            raise ValueError("GoogleDriveKeyValueStore needs credentials or a service")
        super().__init__()
        self.service = service or build("drive", "v3", credentials=credentials)
        self.folder_name = folder_name or self.APP_FOLDER_NAME
        self.app_folder_id: Optional[str] = None

    @staticmethod
    def _filename(key: str) -> str:
        return f"{key}.json"

    def _ensure_app_folder(self) -> str:
        """
        Ensure the app folder exists on Drive.

        Returns:
            Folder ID of the app folder
        """
        if self.app_folder_id:
            return self.app_folder_id

        query = (
            f"name='{self.folder_name}' and "
            f"mimeType='{FOLDER_MIME_TYPE}' and "
            "trashed=false"
        )
        results = (
            self.service.files()
            .list(q=query, spaces="drive", fields="files(id, name)")
            .execute()
        )
        files = results.get("files", [])

        if files:
            self.app_folder_id = files[0]["id"]
            return self.app_folder_id

        folder_metadata = {"name": self.folder_name, "mimeType": FOLDER_MIME_TYPE}
        folder = self.service.files().create(body=folder_metadata, fields="id").execute()
        self.app_folder_id = folder.get("id")
        logger.info(f"Created Drive folder '{self.folder_name}' ({self.app_folder_id})")
        return self.app_folder_id

    def _find_file_id(self, key: str) -> Optional[str]:
        folder_id = self._ensure_app_folder()
        query = (
            f"name='{self._filename(key)}' and "
            f"'{folder_id}' in parents and "
            "trashed=false"
        )
        results = (
            self.service.files()
            .list(q=query, spaces="drive", fields="files(id)")
            .execute()
        )
        files = results.get("files", [])
        return files[0]["id"] if files else None

    def _download(self, file_id: str) -> bytes:
        request = self.service.files().get_media(fileId=file_id)
        fh = BytesIO()
        downloader = MediaIoBaseDownload(fh, request)

        done = False
        while not done:
            _, done = downloader.next_chunk()

        return fh.getvalue()

    def get(self, key: str) -> Optional[Any]:
        try:
            file_id = self._find_file_id(key)
            if not file_id:
                logger.debug(f"No Drive file for '{key}'")
                return None
            return json.loads(self._download(file_id).decode("utf-8"))
        except HttpError as e:
            raise StorageError(key, f"Drive read failed: {e}") from e

    def set(self, key: str, value: Any) -> None:
        encoded = self._encode(key, value)
        media = MediaIoBaseUpload(BytesIO(encoded.encode("utf-8")), mimetype="application/json")

        try:
            file_id = self._find_file_id(key)
            if file_id:
                self.service.files().update(fileId=file_id, media_body=media).execute()
            else:
                file_metadata = {"name": self._filename(key), "parents": [self._ensure_app_folder()]}
                self.service.files().create(
                    body=file_metadata, media_body=media, fields="id"
                ).execute()
        except HttpError as e:
            raise StorageError(key, f"Drive write failed: {e}") from e

    def remove(self, key: str) -> None:
        try:
            file_id = self._find_file_id(key)
            if file_id:
                self.service.files().delete(fileId=file_id).execute()
        except HttpError as e:
            raise StorageError(key, f"Drive delete failed: {e}") from e

    def list_files(self) -> List[Dict[str, Any]]:
        """
        List all files in the app folder.

        Returns:
            List of file metadata dictionaries with 'name', 'id', 'createdTime'
        """
        folder_id = self._ensure_app_folder()
        query = f"'{folder_id}' in parents and trashed=false"
        results = (
            self.service.files()
            .list(q=query, spaces="drive", fields="files(name, id, createdTime)")
            .execute()
        )
        return results.get("files", [])

    def clear(self) -> None:
        try:
            for file in self.list_files():
                self.service.files().delete(fileId=file["id"]).execute()
        except HttpError as e:
            raise StorageError(self.folder_name, f"Drive clear failed: {e}") from e
        logger.info(f"Cleared Drive folder '{self.folder_name}'")
