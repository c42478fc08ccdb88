"""Google Drive upload target (Drive v3 REST API over httpx).

Flow for one upload:
1. Find a folder named after the contractor under the parent folder
2. Create it when missing (if allowed)
3. Multipart-upload the PDF into that folder

Authentication is a bearer access token obtained elsewhere.
"""

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

import httpx

from pay_statements.errors import CollaboratorError, ConfigurationError, NotFoundError
from pay_statements.providers.base import UploadResult

logger = logging.getLogger(__name__)

DRIVE_API = "https://www.googleapis.com/drive/v3"
DRIVE_UPLOAD_API = "https://www.googleapis.com/upload/drive/v3"
FOLDER_MIME_TYPE = "application/vnd.google-apps.folder"
PDF_MIME_TYPE = "application/pdf"


def _quote(value: str) -> str:
    """Escape a value for a Drive query string literal."""
    return value.replace("\\", "\\\\").replace("'", "\\'")


def build_multipart_body(metadata: dict[str, Any], content: bytes, mime_type: str) -> tuple[bytes, str]:
    """Build a ``multipart/related`` body for a Drive upload."""
    boundary = f"pay-statements-{uuid.uuid4().hex}"
    head = (
        f"--{boundary}\r\n"
        "Content-Type: application/json; charset=UTF-8\r\n\r\n"
        f"{json.dumps(metadata)}\r\n"
        f"--{boundary}\r\n"
        f"Content-Type: {mime_type}\r\n\r\n"
    ).encode("utf-8")
    tail = f"\r\n--{boundary}--\r\n".encode("utf-8")
    return head + content + tail, f"multipart/related; boundary={boundary}"


class GoogleDriveUploader:
    """Uploads statements into per-contractor Drive folders."""

    provider_name = "google_drive"

    def __init__(
        self,
        access_token: str | None,
        parent_folder_id: str | None,
        drive_id: str | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
    ):
        if not parent_folder_id:
            raise ConfigurationError("Missing DRIVE_PARENT_FOLDER_ID")
        if not access_token:
            raise ConfigurationError("Missing Drive access token")
        self.access_token = access_token
        self.parent_folder_id = parent_folder_id
        self.drive_id = drive_id
        self._client = client
        self.timeout = timeout

    @property
    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.access_token}"}

    async def _request(
        self,
        client: httpx.AsyncClient,
        method: str,
        url: str,
        extra_headers: dict[str, str] | None = None,
        **kwargs,
    ) -> dict[str, Any]:
        headers = {**self._headers, **(extra_headers or {})}
        try:
            response = await client.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            detail = e.response.text
            logger.error("Drive API %s %s failed: %s", method, url, detail)
            raise CollaboratorError(
                self.provider_name, f"{e.response.status_code} from Drive: {detail}"
            ) from e
        except httpx.HTTPError as e:
            logger.exception("Drive API %s %s failed", method, url)
            raise CollaboratorError(self.provider_name, str(e)) from e
        return response.json()

    async def find_folder(self, client: httpx.AsyncClient, name: str) -> str | None:
        query = " and ".join(
            [
                f"'{self.parent_folder_id}' in parents",
                f"mimeType = '{FOLDER_MIME_TYPE}'",
                "trashed = false",
                f"name = '{_quote(name)}'",
            ]
        )
        params: dict[str, Any] = {
            "q": query,
            "fields": "files(id, name)",
            "includeItemsFromAllDrives": "true",
            "supportsAllDrives": "true",
            "corpora": "drive" if self.drive_id else "allDrives",
            "pageSize": 10,
        }
        if self.drive_id:
            params["driveId"] = self.drive_id
        data = await self._request(client, "GET", f"{DRIVE_API}/files", params=params)
        files = data.get("files") or []
        return files[0]["id"] if files else None

    async def create_folder(self, client: httpx.AsyncClient, name: str) -> str:
        data = await self._request(
            client,
            "POST",
            f"{DRIVE_API}/files",
            params={"fields": "id, name", "supportsAllDrives": "true"},
            json={"name": name, "mimeType": FOLDER_MIME_TYPE, "parents": [self.parent_folder_id]},
        )
        logger.info("Created Drive folder %s for %s", data.get("id"), name)
        return data["id"]

    async def upload(
        self,
        content: bytes,
        contractor_name: str,
        filename: str,
        allow_create: bool = True,
    ) -> UploadResult:
        """Upload ``content`` as ``filename`` into the contractor's folder."""
        folder_name = contractor_name.strip() or "Contractor"
        client = self._client or httpx.AsyncClient(timeout=self.timeout)
        try:
            folder_id = await self.find_folder(client, folder_name)
            if folder_id is None:
                if not allow_create:
                    raise NotFoundError("Drive folder", folder_name)
                folder_id = await self.create_folder(client, folder_name)

            body, content_type = build_multipart_body(
                {"name": filename, "parents": [folder_id], "mimeType": PDF_MIME_TYPE},
                content,
                PDF_MIME_TYPE,
            )
            data = await self._request(
                client,
                "POST",
                f"{DRIVE_UPLOAD_API}/files",
                params={
                    "uploadType": "multipart",
                    "supportsAllDrives": "true",
                    "fields": "id, name, webViewLink, webContentLink",
                },
                extra_headers={"Content-Type": content_type},
                content=body,
            )
        finally:
            if self._client is None:
                await client.aclose()

        logger.info("Uploaded %s to Drive folder %s", filename, folder_id)
        return UploadResult(
            id=data["id"],
            name=data.get("name", filename),
            folder_id=folder_id,
            web_view_link=data.get("webViewLink"),
            web_content_link=data.get("webContentLink"),
        )
