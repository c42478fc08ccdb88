"""Base protocols and types for export and upload providers.

The API uses these adapters without knowing how a PDF is drawn or
where a file ends up.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from pay_statements.services.types import PayStatementRecord


class LayoutPreset(str, Enum):
    """Printable statement layouts."""

    CURRENT = "current"  # payment details table, then summary
    BPV1 = "bpv1"  # summary by building (sorted), itemized rates


@dataclass(frozen=True)
class UploadResult:
    """Reference to an uploaded file."""

    id: str
    name: str
    folder_id: str
    web_view_link: str | None = None
    web_content_link: str | None = None


class StatementRenderer(Protocol):
    """Turns a statement record into a printable document."""

    media_type: str

    def render(self, record: PayStatementRecord, preset: LayoutPreset = LayoutPreset.CURRENT) -> bytes:
        """Render the record.

        Raises:
            CollaboratorError: when the document cannot be produced.
        """
        ...


class UploadTarget(Protocol):
    """Destination for exported statements."""

    provider_name: str

    async def upload(
        self,
        content: bytes,
        contractor_name: str,
        filename: str,
        allow_create: bool = True,
    ) -> UploadResult:
        """Store ``content`` in the contractor's folder.

        Raises:
            NotFoundError: folder missing and ``allow_create`` is False.
            CollaboratorError: any transport or remote failure.
        """
        ...
