"""
Typed data models passed in and out of the facades.

Plain dataclasses, no Google dependencies.
"""
from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from typing import Optional, Sequence

from .utils.constants import DEFAULT_UPLOAD_FIELD, DEFAULT_UPLOAD_MIME_TYPE


@dataclass
class PostedFile:
    """One file received from a multipart form upload."""

    field_name: str
    tmp_path: str               # where the web framework stored the upload
    original_name: str          # filename the client sent
    mime_type: Optional[str] = None

    @property
    def resolved_mime_type(self) -> str:
        """Declared MIME type, else a guess from the original filename."""
        if self.mime_type:
            return self.mime_type
        guessed, _ = mimetypes.guess_type(self.original_name)
        return guessed or DEFAULT_UPLOAD_MIME_TYPE


@dataclass
class UploadedLink:
    """Name and view link of a file uploaded to Drive."""

    file_name: str
    web_link: str

    def as_dict(self) -> dict[str, str]:
        return {"fileName": self.file_name, "webLink": self.web_link}


def posted_files_from_form(
    names: str | Sequence[str],
    tmp_paths: str | Sequence[str],
    field_name: str = DEFAULT_UPLOAD_FIELD,
    mime_types: Optional[Sequence[Optional[str]]] = None,
) -> list[PostedFile]:
    """
    Build PostedFile entries from the parallel name/path lists a form
    handler typically exposes for one field (single value or array).
    """
    if isinstance(names, str):
        names = [names]
    if isinstance(tmp_paths, str):
        tmp_paths = [tmp_paths]
    if len(names) != len(tmp_paths):
        raise ValueError("names and tmp_paths must have the same length")
    mime_types = list(mime_types) if mime_types else [None] * len(names)
    return [
        PostedFile(field_name, path, name, mime)
        for name, path, mime in zip(names, tmp_paths, mime_types)
    ]
