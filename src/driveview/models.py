# Wire schemas for the storage backend, plus the local upload source record.
# Created: 2026-10-02

from __future__ import annotations

import mimetypes
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from driveview.paths import join_path, normalize_path


class FileEntry(BaseModel):
    """A file inside a listing. Owned by the backend, never edited locally."""

    name: str
    path: str
    size: int = Field(default=0, ge=0)
    modified: str = ""
    type: str = ""


class DirectoryListing(BaseModel):
    """Direct children of one folder, as returned by a single status call."""

    path: str = ""
    files: list[FileEntry] = []
    subfolders: list[str] = []

    def child_path(self, name: str) -> str:
        """Full path of a subfolder (subfolders arrive as bare names)."""
        return join_path(self.path, name)

    @property
    def file_paths(self) -> set[str]:
        return {f.path for f in self.files}

    def has_subfolder(self, name: str) -> bool:
        """Case-insensitive subfolder lookup."""
        wanted = name.strip().casefold()
        return any(sub.casefold() == wanted for sub in self.subfolders)


class UploadResponse(BaseModel):
    """Body of ``POST /api/files/upload``."""

    filename: str
    path: str
    size: int = 0
    url: str = ""


class UploadedFileRef(BaseModel):
    """Reference to a file the backend accepted."""

    name: str
    path: str
    size: int = 0
    url: str = ""

    @classmethod
    def from_response(cls, resp: UploadResponse) -> UploadedFileRef:
        return cls(name=resp.filename, path=resp.path, size=resp.size, url=resp.url)


class WebhookResponse(BaseModel):
    """Envelope returned by every webhook endpoint."""

    success: bool
    message: str = ""
    data: Any | None = None


class FolderCreate(BaseModel):
    name: str
    parent_path: str = ""


class FolderRename(BaseModel):
    old_name: str
    new_name: str
    parent_path: str = ""


class FileList(BaseModel):
    """Body of ``GET /api/files/list``."""

    files: list[FileEntry] = []
    count: int = 0


@dataclass
class UploadSource:
    """Bytes to upload plus the name they should get on the server."""

    name: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, file_path: str | Path, name: str | None = None) -> UploadSource:
        """Read a local file. Raises ``OSError`` (``FileNotFoundError`` if missing)."""
        local = Path(file_path).expanduser()
        if not local.is_file():
            raise FileNotFoundError(f"File not found: {local}")
        guessed, _ = mimetypes.guess_type(local.name)
        return cls(
            name=name or local.name,
            content=local.read_bytes(),
            content_type=guessed or "application/octet-stream",
        )

    @property
    def size(self) -> int:
        return len(self.content)


def listing_from_payload(payload: Any, fallback_path: str = "") -> DirectoryListing:
    """Decode a folder-status body, tolerating missing keys."""
    if not isinstance(payload, dict):
        return DirectoryListing(path=normalize_path(fallback_path))
    listing = DirectoryListing.model_validate(
        {
            "path": payload.get("path") or fallback_path,
            "files": payload.get("files") or [],
            "subfolders": payload.get("subfolders") or [],
        }
    )
    listing.path = normalize_path(listing.path)
    return listing
