"""File type and size checks shared by the renderer, uploads and the validator."""

import os
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from formcraft.errors import FileTooLarge, FileTypeNotAllowed
from formcraft.schemas.form import DEFAULT_MAX_FILE_SIZE_MB

BYTES_PER_MB = 1024 * 1024


@dataclass(frozen=True)
class FileHandle:
    """A file selected by a respondent, before upload."""
    name: str
    size: int
    mime_type: str = ""
    last_modified: Optional[int] = None

    @property
    def extension(self) -> str:
        return os.path.splitext(self.name)[1].lower()

    def to_descriptor(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "size": self.size,
            "mime_type": self.mime_type,
            "last_modified": self.last_modified,
        }


def parse_accepted_types(accepted_file_types: Optional[str]) -> List[str]:
    if not accepted_file_types:
        return []
    return [t.strip().lower() for t in accepted_file_types.split(",") if t.strip()]


def matches_accepted_type(name: str, mime_type: str, pattern: str) -> bool:
    """
    Match one accepted-type pattern.

    ``.ext`` compares the extension, ``type/sub`` or ``type/*`` compares the
    MIME type, and a bare keyword matches either as a substring.
    """
    extension = os.path.splitext(name)[1].lower()
    mime = (mime_type or "").lower()
    pattern = pattern.lower()

    if pattern.startswith("."):
        return extension == pattern
    if "/" in pattern:
        if pattern.endswith("/*"):
            return mime.startswith(pattern[:-1])
        return mime == pattern
    return pattern in mime or (bool(extension) and pattern in extension)


def is_allowed_type(name: str, mime_type: str, accepted_file_types: Optional[str]) -> bool:
    patterns = parse_accepted_types(accepted_file_types)
    if not patterns:
        return True
    return any(matches_accepted_type(name, mime_type, p) for p in patterns)


def check_file(
    name: str,
    size: int,
    mime_type: str,
    accepted_file_types: Optional[str],
    max_file_size: Optional[float] = None,
    field_id: Optional[str] = None,
) -> None:
    """Raise FileTooLarge or FileTypeNotAllowed when the file breaks the field's limits."""
    limit_mb = max_file_size or DEFAULT_MAX_FILE_SIZE_MB
    if size > limit_mb * BYTES_PER_MB:
        raise FileTooLarge(limit_mb, field_id=field_id)
    if not is_allowed_type(name, mime_type, accepted_file_types):
        raise FileTypeNotAllowed(accepted_file_types, field_id=field_id)


def check_file_handle(file: FileHandle, accepted_file_types: Optional[str],
                      max_file_size: Optional[float] = None,
                      field_id: Optional[str] = None) -> None:
    check_file(file.name, file.size, file.mime_type, accepted_file_types, max_file_size, field_id)
