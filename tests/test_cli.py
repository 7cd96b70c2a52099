# Tests for the command-line front-end.
# Created: 2026-10-08

import json
from pathlib import Path

import httpx
import pytest

from driveview.__main__ import (
    EXIT_ERROR,
    EXIT_OK,
    EXIT_PARTIAL,
    build_parser,
    main,
    render_listing,
    run_command,
)
from driveview.auth import ANONYMOUS, TokenStore
from driveview.config import Settings
from driveview.models import DirectoryListing, FileEntry
from driveview.store import StoreClient

BASE = "http://storage.test"


class FakeBackend:
    """Tiny in-memory backend behind httpx.MockTransport."""

    def __init__(self):
        self.folders = {"": ["Photos"], "Photos": []}
        self.files = {"Photos/a.jpg", "Photos/b.jpg"}
        self.requests: list[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        await request.aread()
        self.requests.append(request)
        path = request.url.path
        params = request.url.params

        if path == "/api/folders/status":
            folder = params.get("folder_path", "")
            if folder not in self.folders:
                return httpx.Response(404, json={"detail": "Folder not found"})
            files = [
                {"name": p.rsplit("/", 1)[-1], "path": p, "size": 1536, "modified": "", "type": ""}
                for p in sorted(self.files)
                if p.rsplit("/", 1)[0] == folder
            ]
            return httpx.Response(
                200, json={"path": folder, "files": files, "subfolders": self.folders[folder]}
            )
        if path == "/api/files" and request.method == "DELETE":
            target = params["file_path"]
            if target not in self.files:
                return httpx.Response(404, json={"detail": "File not found"})
            self.files.remove(target)
            return httpx.Response(200, json={"message": "deleted"})
        if path == "/api/folders" and request.method == "POST":
            body = json.loads(request.content)
            self.folders.setdefault(body["parent_path"], []).append(body["name"])
            return httpx.Response(200, json={"success": True, "message": "created"})
        if path == "/api/files/upload":
            return httpx.Response(
                200, json={"filename": "n.txt", "path": "n.txt", "size": 2, "url": "/d/n.txt"}
            )
        return httpx.Response(500, text="unexpected")


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def settings():
    return Settings(api_url=BASE)


async def run(settings, backend, *argv):
    args = build_parser().parse_args(list(argv))
    store = StoreClient(BASE, transport=httpx.MockTransport(backend))
    return await run_command(settings, ANONYMOUS, args, store=store)


class TestCommands:
    @pytest.mark.asyncio
    async def test_ls(self, settings, backend, capsys):
        code = await run(settings, backend, "ls", "Photos")

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "Root / Photos" in out
        assert "a.jpg" in out
        assert "1.5 KB" in out

    @pytest.mark.asyncio
    async def test_ls_missing_folder(self, settings, backend, capsys):
        code = await run(settings, backend, "ls", "Nope")

        assert code == EXIT_ERROR
        assert "Error loading folder contents" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_rm_twice_reports_not_found(self, settings, backend, capsys):
        assert await run(settings, backend, "rm", "Photos/a.jpg") == EXIT_OK
        assert await run(settings, backend, "rm", "Photos/a.jpg") == EXIT_ERROR

        captured = capsys.readouterr()
        assert 'File "a.jpg" deleted successfully!' in captured.out
        assert "Delete file failed: Not found" in captured.err

    @pytest.mark.asyncio
    async def test_mkdir_conflict_sends_no_create(self, settings, backend, capsys):
        code = await run(settings, backend, "mkdir", "photos")

        assert code == EXIT_ERROR
        assert "already exists" in capsys.readouterr().err
        assert not any(r.method == "POST" for r in backend.requests)

    @pytest.mark.asyncio
    async def test_mkdir(self, settings, backend, capsys):
        code = await run(settings, backend, "mkdir", "Trips", "--in", "Photos")

        assert code == EXIT_OK
        assert backend.folders["Photos"] == ["Trips"]

    @pytest.mark.asyncio
    async def test_bulk_rm_partial(self, settings, backend, capsys):
        code = await run(settings, backend, "bulk-rm", "Photos/a.jpg", "Photos/zzz.jpg")

        out = capsys.readouterr().out
        assert code == EXIT_PARTIAL
        assert "Delete: 1 succeeded, 1 failed" in out
        assert "Photos/zzz.jpg" in out

    @pytest.mark.asyncio
    async def test_upload_skips_unaccepted_types(self, settings, backend, tmp_path, capsys):
        script = tmp_path / "run.sh"
        script.write_text("echo hi")
        note = tmp_path / "n.txt"
        note.write_text("hi")

        code = await run(settings, backend, "upload", str(script), str(note))

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "Skipping run.sh" in out
        assert "File n.txt uploaded successfully" in out
        uploads = [r for r in backend.requests if r.url.path == "/api/files/upload"]
        assert len(uploads) == 1

    @pytest.mark.asyncio
    async def test_upload_missing_file(self, settings, backend, tmp_path, capsys):
        code = await run(settings, backend, "upload", str(tmp_path / "ghost.txt"))
        assert code == EXIT_ERROR
        assert "File not found" in capsys.readouterr().err

    @pytest.mark.asyncio
    async def test_upload_unreadable_file(self, settings, backend, tmp_path, monkeypatch, capsys):
        note = tmp_path / "n.txt"
        note.write_text("hi")

        def deny(self):
            raise PermissionError(f"Permission denied: '{self}'")

        monkeypatch.setattr(Path, "read_bytes", deny)
        code = await run(settings, backend, "upload", str(note))

        assert code == EXIT_ERROR
        assert "Permission denied" in capsys.readouterr().err
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_url(self, settings, backend, capsys):
        await run(settings, backend, "url", "Photos/a.jpg")
        assert capsys.readouterr().out.strip() == f"{BASE}/api/files/download/Photos/a.jpg"

    @pytest.mark.asyncio
    async def test_webhook_curl(self, settings, backend, capsys):
        code = await run(settings, backend, "webhook", "delete", "--path", "Photos")
        assert code == EXIT_OK
        assert "file_path=Photos/filename.jpg" in capsys.readouterr().out
        assert backend.requests == []


class TestMain:
    def test_token_set_and_clear(self, monkeypatch, tmp_path, capsys):
        token_file = tmp_path / "session.json"
        monkeypatch.setenv("DRIVEVIEW_TOKEN_FILE", str(token_file))

        assert main(["token", "set", "abc"]) == EXIT_OK
        assert TokenStore(token_file).load() == "abc"
        assert main(["token", "clear"]) == EXIT_OK
        assert not token_file.exists()

    def test_webhook_reference_offline(self, monkeypatch, tmp_path, capsys):
        monkeypatch.setenv("DRIVEVIEW_TOKEN_FILE", str(tmp_path / "none.json"))
        code = main(["--api-url", "https://drive.example.com", "webhook"])

        out = capsys.readouterr().out
        assert code == EXIT_OK
        assert "https://drive.example.com/webhook/files/upload" in out

    def test_command_required(self):
        with pytest.raises(SystemExit):
            main([])


def test_render_empty_listing():
    assert "(empty folder)" in render_listing(DirectoryListing(path="a"))


def test_render_listing_sorts_folders_first():
    listing = DirectoryListing(
        path="",
        files=[FileEntry(name="z.pdf", path="z.pdf", size=0)],
        subfolders=["b", "A"],
    )
    lines = render_listing(listing).splitlines()
    assert lines[0] == "Root"
    assert lines[1].strip() == "[dir]  A/"
    assert "PDF" in lines[3]
