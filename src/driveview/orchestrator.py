"""Mutation Orchestrator.

Created: 2026-10-06

Sequences multi-item operations that the store client only supports one at
a time, and folds the outcomes into a single report:

- uploads run strictly one after another, in submission order
- bulk deletes and bulk renames are dispatched concurrently
- a partial failure is reported, never raised

Reports are keyed by path, so the order in which concurrent calls settle does
not matter. Refreshing the listing afterwards is the caller's decision.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable, Sequence
from dataclasses import dataclass, field

from driveview.errors import DriveError, InvalidArgument
from driveview.models import UploadedFileRef, UploadSource
from driveview.paths import base_name, normalize_path
from driveview.store import StoreClient

logger = logging.getLogger(__name__)


@dataclass
class UploadFailure:
    file: UploadSource
    error: DriveError


@dataclass
class UploadReport:
    """Outcome of ``upload_many``; both lists keep submission order."""

    succeeded: list[UploadedFileRef] = field(default_factory=list)
    failed: list[UploadFailure] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)


@dataclass
class BatchReport:
    """Outcome of a concurrent bulk operation."""

    succeeded_count: int = 0
    failed_paths: list[str] = field(default_factory=list)
    errors: dict[str, DriveError] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failed_paths

    @property
    def total(self) -> int:
        return self.succeeded_count + len(self.failed_paths)


class MutationOrchestrator:
    def __init__(self, store: StoreClient):
        self._store = store

    async def upload_many(
        self, files: Sequence[UploadSource], dest_path: str = ""
    ) -> UploadReport:
        """Upload every file, one at a time, continuing past failures."""
        if not files:
            raise InvalidArgument("No files to upload")

        dest = normalize_path(dest_path)
        report = UploadReport()
        for source in files:
            try:
                ref = await self._store.upload_file(source, source.name, dest)
            except DriveError as e:
                logger.warning("Upload of %s to /%s failed: %s", source.name, dest, e)
                report.failed.append(UploadFailure(source, e))
            else:
                report.succeeded.append(ref)

        logger.info(
            "Uploaded %d/%d file(s) to /%s", len(report.succeeded), report.total, dest
        )
        return report

    async def bulk_delete(self, paths: Iterable[str]) -> BatchReport:
        targets = _unique(paths)
        if not targets:
            raise InvalidArgument("No files selected")
        return await self._run_concurrently("delete", targets, self._store.delete_file)

    async def bulk_rename_with_prefix(self, paths: Iterable[str], prefix: str) -> BatchReport:
        """Rename each file to ``prefix + original name``.

        No separator is inserted and no collision check is made; a clash comes
        back as that path's backend error.
        """
        targets = _unique(paths)
        if not targets:
            raise InvalidArgument("No files selected")
        if not prefix:
            raise InvalidArgument("Prefix cannot be empty")
        if "/" in prefix:
            raise InvalidArgument(f"Prefix must not contain '/': {prefix!r}")

        async def rename(path: str) -> None:
            await self._store.rename_file(path, prefix + base_name(path))

        return await self._run_concurrently("rename", targets, rename)

    async def _run_concurrently(
        self,
        action: str,
        paths: list[str],
        op: Callable[[str], Awaitable[None]],
    ) -> BatchReport:
        results = await asyncio.gather(*(op(p) for p in paths), return_exceptions=True)

        report = BatchReport()
        for path, result in zip(paths, results):
            if isinstance(result, DriveError):
                report.failed_paths.append(path)
                report.errors[path] = result
            elif isinstance(result, BaseException):
                # Not one of ours: a bug, not a backend failure
                raise result
            else:
                report.succeeded_count += 1

        if report.failed_paths:
            logger.warning(
                "Bulk %s: %d succeeded, %d failed (%s)",
                action,
                report.succeeded_count,
                len(report.failed_paths),
                ", ".join(report.failed_paths),
            )
        else:
            logger.info("Bulk %s: %d succeeded", action, report.succeeded_count)
        return report


def _unique(paths: Iterable[str]) -> list[str]:
    """De-duplicate while keeping the first-seen order."""
    return list(dict.fromkeys(p for p in paths if p))
