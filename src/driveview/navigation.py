"""Navigation / selection state for browsing the remote store.

Created: 2026-10-06
Updated: 2026-10-12, refresh-after-write skips when the user has moved on.

``FolderBrowser`` is the one place that owns the current path, the loaded
listing and the multi-select set. Every write goes through the store client
and is followed by a reload of the current folder; the listing is never
patched locally.

Loads are tagged with the path they were issued for and a sequence number.
A result is applied only when it is still for the current path and no newer
load has started, so a slow answer for a folder the user already left never
overwrites the listing of the folder they are looking at.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from contextlib import asynccontextmanager

from driveview.errors import ConflictError, DriveError, InvalidArgument, LoadError
from driveview.models import DirectoryListing, FileEntry, UploadSource
from driveview.orchestrator import BatchReport, MutationOrchestrator, UploadReport
from driveview.paths import Crumb, breadcrumb, join_path, normalize_path, parent_path
from driveview.store import StoreClient

logger = logging.getLogger(__name__)


class FolderBrowser:
    """Current folder, its listing, and the multi-select set."""

    def __init__(
        self,
        store: StoreClient,
        orchestrator: MutationOrchestrator | None = None,
    ):
        self._store = store
        self._orchestrator = orchestrator or MutationOrchestrator(store)

        self.current_path: str = ""
        self.listing: DirectoryListing | None = None
        self.loading = False
        self.busy = False
        self.selection: set[str] = set()
        self.multi_select_mode = False

        self._load_seq = 0
        self._listing_path: str | None = None  # path the shown listing was loaded for

    # =========================================================================
    # Derived state
    # =========================================================================

    @property
    def breadcrumb(self) -> list[Crumb]:
        return breadcrumb(self.current_path)

    @property
    def files(self) -> list[FileEntry]:
        return list(self.listing.files) if self.listing else []

    @property
    def subfolders(self) -> list[str]:
        return list(self.listing.subfolders) if self.listing else []

    @property
    def at_root(self) -> bool:
        return self.current_path == ""

    def subfolder_path(self, name: str) -> str:
        """Full path of a subfolder of the current folder."""
        return join_path(self.current_path, name)

    # =========================================================================
    # Navigation
    # =========================================================================

    async def navigate_to(self, path: str) -> DirectoryListing | None:
        """Go to ``path`` and load it.

        Returns the new listing, or None if a newer navigation overtook this
        one. Raises ``LoadError`` on failure; the previous listing stays.
        """
        target = normalize_path(path)
        self.current_path = target
        self.selection.clear()
        return await self._load(target)

    async def navigate_into(self, folder_name: str) -> DirectoryListing | None:
        if not folder_name or not folder_name.strip("/"):
            raise InvalidArgument("No folder name given")
        return await self.navigate_to(self.subfolder_path(folder_name))

    async def navigate_up(self) -> DirectoryListing | None:
        """Go to the parent folder. At the root this does nothing."""
        if self.at_root:
            return self.listing
        return await self.navigate_to(parent_path(self.current_path))

    async def refresh(self) -> DirectoryListing | None:
        """Reload the current folder, keeping (pruned) selection."""
        return await self._load(self.current_path)

    async def _load(self, path: str) -> DirectoryListing | None:
        self._load_seq += 1
        seq = self._load_seq
        self.loading = True

        try:
            listing = await self._store.list_directory(path)
        except DriveError as e:
            if not self._is_latest(path, seq):
                logger.debug("Dropping failed load of /%s; superseded", path)
                return None
            self.loading = False
            raise LoadError(path, e) from e

        if not self._is_latest(path, seq):
            logger.debug(
                "Dropping stale listing for /%s (now at /%s)", path, self.current_path
            )
            return None

        self.listing = listing
        self._listing_path = path
        self.loading = False
        self._prune_selection()
        return listing

    def _is_latest(self, path: str, seq: int) -> bool:
        return seq == self._load_seq and path == self.current_path

    # =========================================================================
    # Selection
    # =========================================================================

    def enter_multi_select(self) -> None:
        self.multi_select_mode = True

    def exit_multi_select(self) -> None:
        self.multi_select_mode = False
        self.selection.clear()

    def toggle_selected(self, path: str) -> bool:
        """Flip one file in or out of the selection. Returns the new state."""
        if self.listing is None or path not in self.listing.file_paths:
            raise InvalidArgument(f"{path} is not a file in the current folder")
        if path in self.selection:
            self.selection.discard(path)
            return False
        self.selection.add(path)
        return True

    def select_all(self) -> None:
        self.selection = set(self.listing.file_paths) if self.listing else set()

    def clear_selection(self) -> None:
        self.selection.clear()

    def _prune_selection(self) -> None:
        present = self.listing.file_paths if self.listing else set()
        stale = self.selection - present
        if stale:
            logger.debug("Pruning %d stale selection entries", len(stale))
            self.selection &= present

    # =========================================================================
    # Single-item writes (each followed by a refresh)
    # =========================================================================

    def check_folder_available(self, parent: str, name: str) -> None:
        """Raise ``ConflictError`` if the loaded listing already has ``name``.

        Only consults the listing currently on screen, and only when it is the
        listing of ``parent``. The backend still has the final word.
        """
        if (
            self.listing is not None
            and self._listing_path == normalize_path(parent)
            and self.listing.has_subfolder(name)
        ):
            raise ConflictError(name.strip(), parent)

    async def create_folder(self, name: str, parent: str | None = None) -> None:
        target = normalize_path(self.current_path if parent is None else parent)
        name = (name or "").strip()
        if not name:
            raise InvalidArgument("Please enter a folder name")
        self.check_folder_available(target, name)

        async with self._write():
            await self._store.create_folder(target, name)
        logger.info("Created folder %s", join_path(target, name))

    async def delete_file(self, path: str) -> None:
        async with self._write():
            await self._store.delete_file(path)
        logger.info("Deleted file %s", path)

    async def rename_file(self, path: str, new_name: str) -> None:
        async with self._write():
            await self._store.rename_file(path, new_name)
        logger.info("Renamed file %s to %s", path, new_name)

    async def delete_folder(self, path: str) -> None:
        """Delete a folder; if it contains the current folder, move to its parent.

        The move only happens if the user is still where the delete started.
        """
        folder = normalize_path(path)
        origin = self.current_path
        inside = origin == folder or origin.startswith(folder + "/")

        async with self._write(refresh=not inside):
            await self._store.delete_folder(folder)
        logger.info("Deleted folder %s", folder)

        if not inside:
            return
        if self.current_path != origin:
            logger.debug(
                "Skipping move out of deleted /%s; user moved to /%s",
                folder,
                self.current_path,
            )
            return
        await self.navigate_to(parent_path(folder))

    async def rename_folder(
        self, old_name: str, new_name: str, parent: str | None = None
    ) -> None:
        target = normalize_path(self.current_path if parent is None else parent)
        async with self._write():
            await self._store.rename_folder(target, old_name, new_name)
        logger.info("Renamed folder %s to %s", join_path(target, old_name), new_name)

    # =========================================================================
    # Batch writes (one refresh per batch)
    # =========================================================================

    async def upload_many(
        self, files: Sequence[UploadSource], dest_path: str | None = None
    ) -> UploadReport:
        dest = self.current_path if dest_path is None else dest_path
        async with self._write():
            report = await self._orchestrator.upload_many(files, dest)
        return report

    async def bulk_delete(self, paths: Iterable[str] | None = None) -> BatchReport:
        """Delete the given paths (default: the selection)."""
        targets = sorted(self.selection) if paths is None else list(paths)
        async with self._write():
            report = await self._orchestrator.bulk_delete(targets)
            if report.ok and paths is None:
                self.selection.clear()
        return report

    async def bulk_rename_with_prefix(
        self, prefix: str, paths: Iterable[str] | None = None
    ) -> BatchReport:
        targets = sorted(self.selection) if paths is None else list(paths)
        async with self._write():
            report = await self._orchestrator.bulk_rename_with_prefix(targets, prefix)
            if report.ok and paths is None:
                self.selection.clear()
        return report

    @asynccontextmanager
    async def _write(self, refresh: bool = True):
        """Mark busy for the duration of a write, then reload if still relevant.

        The reload runs only when the body succeeded and the user is still in
        the folder the write was started from.
        """
        origin = self.current_path
        self.busy = True
        try:
            yield
        finally:
            self.busy = False

        if not refresh:
            return
        if self.current_path != origin:
            logger.debug(
                "Skipping refresh of /%s after write; user moved to /%s",
                origin,
                self.current_path,
            )
            return
        await self.refresh()
