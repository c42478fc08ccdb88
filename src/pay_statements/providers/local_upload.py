"""Local folder upload target.

Mirrors the Drive layout on disk: ``<root>/<contractor name>/<filename>``.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path

from pay_statements.errors import CollaboratorError, NotFoundError
from pay_statements.providers.base import UploadResult

logger = logging.getLogger(__name__)


def _safe_component(value: str, fallback: str) -> str:
    cleaned = re.sub(r'[\\/:*?"<>|]+', "_", value).strip(" .")
    return cleaned or fallback


class LocalFolderUploader:
    """Writes exported statements under a root directory."""

    provider_name = "local_folder"

    def __init__(self, root: Path):
        self.root = Path(root)

    async def upload(
        self,
        content: bytes,
        contractor_name: str,
        filename: str,
        allow_create: bool = True,
    ) -> UploadResult:
        folder = self.root / _safe_component(contractor_name, "Contractor")
        if not folder.is_dir():
            if not allow_create:
                raise NotFoundError("Folder", folder.name)
        target = folder / _safe_component(filename, "pay-statement.pdf")
        try:
            folder.mkdir(parents=True, exist_ok=True)
            target.write_bytes(content)
        except OSError as e:
            logger.exception("Failed to write %s", target)
            raise CollaboratorError(self.provider_name, str(e)) from e

        logger.info("Stored %s (%d bytes)", target, len(content))
        uri = target.resolve().as_uri()
        return UploadResult(
            id=str(target),
            name=target.name,
            folder_id=str(folder),
            web_view_link=uri,
            web_content_link=uri,
        )
