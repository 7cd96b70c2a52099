# Shared fixtures: an in-memory stand-in for StoreClient.
# Created: 2026-10-07

import asyncio

import pytest

from driveview.errors import DriveError, HttpError
from driveview.models import DirectoryListing, FileEntry, UploadedFileRef
from driveview.paths import base_name, join_path, normalize_path, parent_path


def make_file(path: str, size: int = 10) -> FileEntry:
    return FileEntry(name=base_name(path), path=path, size=size, modified="2026-10-01T12:00:00")


class FakeStore:
    """Duck-typed StoreClient backed by a dict of listings.

    - ``failures[(op, key)]`` makes that call raise
    - ``gates[path]`` holds a list_directory call until the event is set
    - ``delays[name]`` sleeps inside upload_file / delete_file
    - ``events`` records ("start"|"end", op, key) in the order they happen
    """

    def __init__(self):
        self.tree: dict[str, DirectoryListing] = {"": DirectoryListing(path="")}
        self.calls: list[tuple[str, str]] = []
        self.events: list[tuple[str, str, str]] = []
        self.failures: dict[tuple[str, str], DriveError] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.delays: dict[str, float] = {}
        self.in_flight = 0
        self.max_in_flight = 0

    # -- fixture helpers --

    def add_folder(self, path: str, files=(), subfolders=()) -> None:
        path = normalize_path(path)
        self.tree[path] = DirectoryListing(
            path=path,
            files=[make_file(join_path(path, f)) for f in files],
            subfolders=list(subfolders),
        )

    def list_calls(self) -> list[str]:
        return [key for op, key in self.calls if op == "list"]

    async def _enter(self, op: str, key: str) -> None:
        self.calls.append((op, key))
        self.events.append(("start", op, key))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(key, 0))
        finally:
            self.in_flight -= 1
        self.events.append(("end", op, key))
        failure = self.failures.get((op, key))
        if failure is not None:
            raise failure

    # -- StoreClient surface --

    async def list_directory(self, path: str = "") -> DirectoryListing:
        path = normalize_path(path)
        self.calls.append(("list", path))
        gate = self.gates.get(path)
        if gate is not None:
            await gate.wait()
        failure = self.failures.get(("list", path))
        if failure is not None:
            raise failure
        if path not in self.tree:
            raise HttpError(404, "Folder not found")
        return self.tree[path].model_copy(deep=True)

    async def upload_file(self, file, name=None, dest_path="") -> UploadedFileRef:
        name = name or file.name
        await self._enter("upload", name)
        path = join_path(dest_path, name)
        self.tree.setdefault(normalize_path(dest_path), DirectoryListing(path=dest_path))
        self.tree[normalize_path(dest_path)].files.append(make_file(path, file.size))
        return UploadedFileRef(name=name, path=path, size=file.size, url=f"http://x/{path}")

    async def delete_file(self, path: str) -> None:
        await self._enter("delete", path)
        listing = self.tree.get(parent_path(path))
        if listing is None or path not in listing.file_paths:
            raise HttpError(404, "File not found")
        listing.files = [f for f in listing.files if f.path != path]

    async def rename_file(self, path: str, new_name: str) -> None:
        await self._enter("rename", path)
        listing = self.tree[parent_path(path)]
        for f in listing.files:
            if f.path == path:
                f.name = new_name
                f.path = join_path(parent_path(path), new_name)

    async def create_folder(self, parent_path_: str, name: str) -> None:
        await self._enter("mkdir", join_path(parent_path_, name))
        self.tree[normalize_path(parent_path_)].subfolders.append(name)
        self.add_folder(join_path(parent_path_, name))

    async def delete_folder(self, path: str) -> None:
        await self._enter("rmdir", path)
        listing = self.tree[parent_path(path)]
        listing.subfolders = [s for s in listing.subfolders if s != base_name(path)]
        self.tree.pop(normalize_path(path), None)

    async def rename_folder(self, parent_path_: str, old_name: str, new_name: str) -> None:
        await self._enter("rename_folder", join_path(parent_path_, old_name))
        listing = self.tree[normalize_path(parent_path_)]
        listing.subfolders = [new_name if s == old_name else s for s in listing.subfolders]


@pytest.fixture
def fake_store():
    store = FakeStore()
    store.add_folder("", files=["readme.txt"], subfolders=["Photos", "docs"])
    store.add_folder("Photos", files=["a.jpg", "b.jpg", "c.jpg"], subfolders=["2024"])
    store.add_folder("Photos/2024", files=["x.png"])
    store.add_folder("docs", files=["spec.pdf"])
    return store
