# Error taxonomy for the storage client and its front-ends.
# Created: 2026-10-02

from __future__ import annotations


class DriveError(Exception):
    """Base class for every error the client raises on purpose."""


class NetworkError(DriveError):
    """The request never got a response (DNS, refused, timeout, ...)."""


class HttpError(DriveError):
    """The server answered with a failure status or a failed webhook envelope."""

    def __init__(self, status: int, body: str = "") -> None:
        self.status = status
        self.body = body
        super().__init__(f"HTTP {status}: {body}" if body else f"HTTP {status}")

    @property
    def is_not_found(self) -> bool:
        return self.status == 404


class ConflictError(DriveError):
    """A folder with the same name (case-insensitive) is already listed."""

    def __init__(self, name: str, parent_path: str = "") -> None:
        self.name = name
        self.parent_path = parent_path
        super().__init__(
            f'Folder "{name}" already exists in this location. '
            "Please choose a different name."
        )


class InvalidArgument(DriveError):
    """A local precondition failed; no request was sent."""


class LoadError(DriveError):
    """Loading a directory listing failed. ``cause`` holds the underlying error."""

    def __init__(self, path: str, cause: DriveError) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Error loading {path or 'root'}: {cause}")


def describe_error(exc: BaseException, action: str = "") -> str:
    """Turn an error into a one-line message for the user."""
    prefix = f"{action} failed: " if action else ""

    if isinstance(exc, LoadError):
        return f"Error loading folder contents: {describe_error(exc.cause)}"
    if isinstance(exc, NetworkError):
        return f"{prefix}Error connecting to server ({exc})"
    if isinstance(exc, HttpError):
        if exc.status == 404:
            return f"{prefix}Not found (it may already have been deleted)"
        if exc.status == 401:
            return f"{prefix}Not authorized. Log in again and retry"
        return f"{prefix}{exc.body or f'server returned HTTP {exc.status}'}"
    if isinstance(exc, (ConflictError, InvalidArgument)):
        return f"{prefix}{exc}"
    return f"{prefix}Unexpected error: {exc}"
