# Presentation helpers: sizes, timestamps, file kinds and the upload accept hint.
# Created: 2026-10-05

from __future__ import annotations

from datetime import datetime

from driveview.paths import base_name

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")

IMAGE_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "gif", "webp"})
VIDEO_EXTENSIONS = frozenset({"mp4", "avi", "mov", "wmv", "flv"})
DOCUMENT_EXTENSIONS = frozenset({"doc", "docx"})
ARCHIVE_EXTENSIONS = frozenset({"zip", "rar"})

# What the upload drop zone offers by default. A hint only; the backend decides.
ACCEPTED_UPLOAD_EXTENSIONS = (
    IMAGE_EXTENSIONS | VIDEO_EXTENSIONS | {"pdf", "txt"} | DOCUMENT_EXTENSIONS | ARCHIVE_EXTENSIONS
)


def format_file_size(size: int) -> str:
    """Human-readable size: ``0 Bytes``, ``1.5 KB``, ``2 MB`` ... capped at GB."""
    if size <= 0:
        return "0 Bytes"
    value = float(size)
    unit = 0
    while value >= 1024 and unit < len(_SIZE_UNITS) - 1:
        value /= 1024
        unit += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[unit]}"


def format_modified(value: str | float | int | None) -> str:
    """Render a backend timestamp (ISO string or epoch seconds) for display.

    Unparseable values are returned unchanged.
    """
    if value is None or value == "":
        return ""
    try:
        if isinstance(value, (int, float)):
            dt = datetime.fromtimestamp(value)
        else:
            dt = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except (ValueError, OverflowError, OSError):
        return str(value)
    if dt.tzinfo is not None:
        dt = dt.astimezone()
    return dt.strftime("%Y-%m-%d %H:%M:%S")


def extension(name: str) -> str:
    name = base_name(name)
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[-1].lower()


def is_image(name: str) -> bool:
    return extension(name) in IMAGE_EXTENSIONS


def is_video(name: str) -> bool:
    return extension(name) in VIDEO_EXTENSIONS


def file_kind(name: str) -> str:
    ext = extension(name)
    if ext in IMAGE_EXTENSIONS:
        return "Image"
    if ext in VIDEO_EXTENSIONS:
        return "Video"
    if ext == "pdf":
        return "PDF"
    if ext in DOCUMENT_EXTENSIONS:
        return "Document"
    if ext in ARCHIVE_EXTENSIONS:
        return "Archive"
    return "File"


def is_accepted_upload(name: str, accepted: frozenset[str] | set[str] | None = None) -> bool:
    """Whether a file name passes the client-side upload filter."""
    allowed = ACCEPTED_UPLOAD_EXTENSIONS if accepted is None else accepted
    return extension(name) in allowed
