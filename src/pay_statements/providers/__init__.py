"""Export and upload providers."""

from pay_statements.providers.base import (
    LayoutPreset,
    StatementRenderer,
    UploadResult,
    UploadTarget,
)
from pay_statements.providers.drive_upload import GoogleDriveUploader
from pay_statements.providers.local_upload import LocalFolderUploader
from pay_statements.providers.pdf_renderer import ReportLabStatementRenderer

__all__ = [
    "GoogleDriveUploader",
    "LayoutPreset",
    "LocalFolderUploader",
    "ReportLabStatementRenderer",
    "StatementRenderer",
    "UploadResult",
    "UploadTarget",
]
