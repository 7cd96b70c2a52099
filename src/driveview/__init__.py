"""driveview: client and browsing model for a remote file-storage backend."""

from driveview.auth import AuthContext, TokenStore
from driveview.errors import (
    ConflictError,
    DriveError,
    HttpError,
    InvalidArgument,
    LoadError,
    NetworkError,
    describe_error,
)
from driveview.models import DirectoryListing, FileEntry, UploadedFileRef, UploadSource
from driveview.navigation import FolderBrowser
from driveview.orchestrator import BatchReport, MutationOrchestrator, UploadReport
from driveview.paths import Crumb, breadcrumb, join_path, normalize_path
from driveview.store import StoreClient

__all__ = [
    "AuthContext",
    "BatchReport",
    "ConflictError",
    "Crumb",
    "DirectoryListing",
    "DriveError",
    "FileEntry",
    "FolderBrowser",
    "HttpError",
    "InvalidArgument",
    "LoadError",
    "MutationOrchestrator",
    "NetworkError",
    "StoreClient",
    "TokenStore",
    "UploadReport",
    "UploadSource",
    "UploadedFileRef",
    "breadcrumb",
    "describe_error",
    "join_path",
    "normalize_path",
]
