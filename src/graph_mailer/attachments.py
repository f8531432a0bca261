# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""File attachments for outbound Graph messages.

Callers hand in :class:`AttachmentInput` items with raw bytes. Entries
without a file name or without content are discarded. A missing content
type is derived from the file extension with a fixed table, so the result
does not depend on the host's ``mimetypes`` database.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePath

from .models import FileAttachment

DEFAULT_CONTENT_TYPE = "application/octet-stream"

EXTENSION_CONTENT_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    ".txt": "text/plain",
    ".csv": "text/csv",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}


@dataclass(frozen=True)
class AttachmentInput:
    """Attachment supplied by the caller for a single send.

    Attributes:
        file_name: Name shown to the recipient; its extension drives the
            content type guess.
        content: Raw file bytes.
        content_type: Optional MIME type override.
    """

    file_name: str
    content: bytes
    content_type: str | None = None

    @classmethod
    def from_path(cls, path: str | PurePath, content_type: str | None = None) -> AttachmentInput:
        """Read an attachment from disk, using the file's base name."""
        file_path = Path(path)
        return cls(file_name=file_path.name, content=file_path.read_bytes(), content_type=content_type)


def file_extension(file_name: str) -> str:
    """Lower-cased extension including the dot, or "" when there is none.

    A leading dot counts as an extension (``".pdf"`` -> ``".pdf"``).
    """
    name = PurePath(file_name).name
    _, dot, ext = name.rpartition(".")
    if not dot or not ext:
        return ""
    return f".{ext.lower()}"


def guess_content_type(file_name: str) -> str:
    """Return the MIME type for ``file_name`` based on its extension."""
    return EXTENSION_CONTENT_TYPES.get(file_extension(file_name), DEFAULT_CONTENT_TYPE)


def is_sendable(attachment: AttachmentInput | None) -> bool:
    """True if the attachment has a non-blank name and non-empty content."""
    if attachment is None:
        return False
    if not attachment.file_name or not attachment.file_name.strip():
        return False
    return bool(attachment.content)


def build_file_attachments(
    attachments: Iterable[AttachmentInput | None] | None,
) -> list[FileAttachment]:
    """Filter caller attachments and convert them to Graph file attachments."""
    result: list[FileAttachment] = []
    for att in attachments or ():
        if not is_sendable(att):
            continue
        content_type = att.content_type
        if not content_type or not content_type.strip():
            content_type = guess_content_type(att.file_name)
        result.append(
            FileAttachment(
                name=att.file_name,
                content_bytes=bytes(att.content),
                content_type=content_type,
            )
        )
    return result
