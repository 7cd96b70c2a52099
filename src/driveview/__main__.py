"""driveview command-line front-end.

Each command performs one user action against the storage backend and prints
the outcome. Handled errors become a one-line message and a non-zero exit.

Exit codes: 0 ok, 1 error, 2 batch finished with some failures.

Changes:
  - 2026-10-14: Added token set/clear and the webhook reference command.
  - 2026-10-08: Bulk commands report per-path failures.
  - 2026-10-07: Initial commands (ls, upload, rm, mv, mkdir, rmdir, url).
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from driveview.auth import AuthContext, TokenStore, resolve_auth
from driveview.config import Settings
from driveview.display import (
    file_kind,
    format_file_size,
    format_modified,
    is_accepted_upload,
)
from driveview.endpoints import WEBHOOK_OPERATIONS, curl_command, webhook_reference
from driveview.errors import DriveError, describe_error
from driveview.logging_setup import setup_logging
from driveview.models import DirectoryListing, UploadSource
from driveview.navigation import FolderBrowser
from driveview.orchestrator import BatchReport, MutationOrchestrator
from driveview.paths import base_name, breadcrumb, join_path, normalize_path
from driveview.store import StoreClient

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2


@dataclass
class Session:
    """What a command gets to work with."""

    settings: Settings
    store: StoreClient
    browser: FolderBrowser
    orchestrator: MutationOrchestrator


Command = Callable[[Session, argparse.Namespace], Awaitable[int]]


# =============================================================================
# Rendering
# =============================================================================


def render_listing(listing: DirectoryListing) -> str:
    crumbs = " / ".join(c.label for c in breadcrumb(listing.path))
    lines = [crumbs]
    if not listing.subfolders and not listing.files:
        lines.append("  (empty folder)")
        return "\n".join(lines)

    for name in sorted(listing.subfolders, key=str.lower):
        lines.append(f"  [dir]  {name}/")
    for f in sorted(listing.files, key=lambda e: e.name.lower()):
        lines.append(
            f"  {file_kind(f.name):<8} {f.name}  "
            f"({format_file_size(f.size)}, {format_modified(f.modified) or '-'})"
        )
    return "\n".join(lines)


def render_batch(action: str, report: BatchReport) -> str:
    lines = [f"{action}: {report.succeeded_count} succeeded, {len(report.failed_paths)} failed"]
    for path in report.failed_paths:
        lines.append(f"  {path}: {describe_error(report.errors[path])}")
    return "\n".join(lines)


# =============================================================================
# Commands
# =============================================================================


async def cmd_ls(session: Session, args: argparse.Namespace) -> int:
    listing = await session.browser.navigate_to(args.path)
    if listing is not None:
        print(render_listing(listing))
    return EXIT_OK


async def cmd_all_files(session: Session, args: argparse.Namespace) -> int:
    result = await session.store.list_all_files(args.path)
    print(f"{result.count} file(s)")
    for f in result.files:
        print(f"  {f.path}  ({format_file_size(f.size)})")
    return EXIT_OK


async def cmd_upload(session: Session, args: argparse.Namespace) -> int:
    sources: list[UploadSource] = []
    for local in args.files:
        try:
            source = UploadSource.from_path(local)
        except OSError as e:
            print(f"Error: {e}", file=sys.stderr)
            return EXIT_ERROR
        if not args.any_type and not is_accepted_upload(source.name):
            print(f"Skipping {source.name}: file type not accepted (use --any-type)")
            continue
        sources.append(source)

    if not sources:
        print("Error: nothing to upload", file=sys.stderr)
        return EXIT_ERROR

    report = await session.orchestrator.upload_many(sources, args.to)
    for ref in report.succeeded:
        print(f"File {ref.name} uploaded successfully ({format_file_size(ref.size)})")
    for failure in report.failed:
        print(f"  {failure.file.name}: {describe_error(failure.error)}")
    return EXIT_OK if report.ok else EXIT_PARTIAL


async def cmd_rm(session: Session, args: argparse.Namespace) -> int:
    await session.store.delete_file(args.path)
    print(f'File "{base_name(args.path)}" deleted successfully!')
    return EXIT_OK


async def cmd_mv(session: Session, args: argparse.Namespace) -> int:
    await session.store.rename_file(args.path, args.new_name)
    print(f'File "{base_name(args.path)}" renamed to "{args.new_name}"')
    return EXIT_OK


async def cmd_mkdir(session: Session, args: argparse.Namespace) -> int:
    # Load the parent first so the duplicate-name check has something to compare
    browser = session.browser
    await browser.navigate_to(args.parent)
    await browser.create_folder(args.name)
    print(f'Folder "{args.name.strip()}" created successfully!')
    return EXIT_OK


async def cmd_rmdir(session: Session, args: argparse.Namespace) -> int:
    await session.store.delete_folder(args.path)
    print(f'Folder "{normalize_path(args.path)}" deleted successfully!')
    return EXIT_OK


async def cmd_rename_folder(session: Session, args: argparse.Namespace) -> int:
    await session.store.rename_folder(args.parent, args.old_name, args.new_name)
    print(
        f'Folder "{join_path(args.parent, args.old_name)}" renamed to "{args.new_name}"'
    )
    return EXIT_OK


async def cmd_url(session: Session, args: argparse.Namespace) -> int:
    print(session.store.build_download_url(args.path))
    return EXIT_OK


async def cmd_bulk_rm(session: Session, args: argparse.Namespace) -> int:
    report = await session.orchestrator.bulk_delete(args.paths)
    print(render_batch("Delete", report))
    return EXIT_OK if report.ok else EXIT_PARTIAL


async def cmd_bulk_prefix(session: Session, args: argparse.Namespace) -> int:
    report = await session.orchestrator.bulk_rename_with_prefix(args.paths, args.prefix)
    print(render_batch("Rename", report))
    return EXIT_OK if report.ok else EXIT_PARTIAL


async def cmd_webhook(session: Session, args: argparse.Namespace) -> int:
    base_url = session.settings.api_url
    if args.operation:
        print(curl_command(args.operation, base_url, args.path))
        return EXIT_OK
    for entry in webhook_reference(base_url):
        print(f"{entry['method']:<5} {entry['url']}")
        print(f"      {entry['description']}; params: {', '.join(entry['params'])}")
    return EXIT_OK


COMMANDS: dict[str, Command] = {
    "ls": cmd_ls,
    "all-files": cmd_all_files,
    "upload": cmd_upload,
    "rm": cmd_rm,
    "mv": cmd_mv,
    "mkdir": cmd_mkdir,
    "rmdir": cmd_rmdir,
    "rename-folder": cmd_rename_folder,
    "url": cmd_url,
    "bulk-rm": cmd_bulk_rm,
    "bulk-prefix": cmd_bulk_prefix,
    "webhook": cmd_webhook,
}

ACTION_LABELS = {
    "ls": "Load folder",
    "all-files": "List files",
    "upload": "Upload",
    "rm": "Delete file",
    "mv": "Rename file",
    "mkdir": "Create folder",
    "rmdir": "Delete folder",
    "rename-folder": "Rename folder",
    "bulk-rm": "Bulk delete",
    "bulk-prefix": "Bulk rename",
}


# =============================================================================
# Entry point
# =============================================================================


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="driveview",
        description="Browse and manage files on a remote storage backend",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  driveview ls                         List the root folder
  driveview ls photos/2024             List a subfolder
  driveview upload a.jpg b.pdf --to photos
  driveview mkdir Holidays --in photos
  driveview bulk-prefix old_ photos/a.jpg photos/b.jpg
  driveview --webhook ls               Use the webhook endpoints instead
  driveview webhook upload --path photos
""",
    )
    parser.add_argument("--api-url", default=None, help="Backend base URL")
    parser.add_argument("--token", default=None, help="Bearer token for this call")
    parser.add_argument(
        "--webhook",
        action="store_true",
        default=None,
        help="Use the /webhook/* endpoint family",
    )
    parser.add_argument("--log-level", default=None, help="DEBUG, INFO, WARNING, ...")

    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("ls", help="List a folder")
    p.add_argument("path", nargs="?", default="")

    p = sub.add_parser("all-files", help="Flat list of files (direct API only)")
    p.add_argument("path", nargs="?", default="")

    p = sub.add_parser("upload", help="Upload files, one after another")
    p.add_argument("files", nargs="+")
    p.add_argument("--to", default="", help="Destination folder (default: root)")
    p.add_argument("--any-type", action="store_true", help="Skip the file type filter")

    p = sub.add_parser("rm", help="Delete a file")
    p.add_argument("path")

    p = sub.add_parser("mv", help="Rename a file (new name only, not a path)")
    p.add_argument("path")
    p.add_argument("new_name")

    p = sub.add_parser("mkdir", help="Create a folder")
    p.add_argument("name")
    p.add_argument("--in", dest="parent", default="", help="Parent folder")

    p = sub.add_parser("rmdir", help="Delete a folder")
    p.add_argument("path")

    p = sub.add_parser("rename-folder", help="Rename a folder")
    p.add_argument("old_name")
    p.add_argument("new_name")
    p.add_argument("--in", dest="parent", default="", help="Parent folder")

    p = sub.add_parser("url", help="Print the download URL of a file")
    p.add_argument("path")

    p = sub.add_parser("bulk-rm", help="Delete several files")
    p.add_argument("paths", nargs="+")

    p = sub.add_parser("bulk-prefix", help="Prepend a prefix to several file names")
    p.add_argument("prefix")
    p.add_argument("paths", nargs="+")

    p = sub.add_parser("webhook", help="Show webhook endpoints or a curl example")
    p.add_argument("operation", nargs="?", choices=sorted(WEBHOOK_OPERATIONS))
    p.add_argument("--path", default="", help="Folder used in the example")

    p = sub.add_parser("token", help="Manage the stored session token")
    token_sub = p.add_subparsers(dest="token_command", required=True)
    t = token_sub.add_parser("set", help="Store a bearer token")
    t.add_argument("value")
    token_sub.add_parser("clear", help="Remove the stored token")

    return parser


def run_token_command(settings: Settings, args: argparse.Namespace) -> int:
    store = TokenStore(settings.token_file)
    if args.token_command == "set":
        store.save(args.value)
        print(f"Token saved to {store.path}")
    elif store.clear():
        print("Token cleared")
    else:
        print("No stored token")
    return EXIT_OK


async def run_command(
    settings: Settings,
    auth: AuthContext,
    args: argparse.Namespace,
    store: StoreClient | None = None,
) -> int:
    """Run one command; handled errors become a message and exit code 1."""
    command = COMMANDS[args.command]
    store = store or StoreClient.from_settings(settings, auth=auth)
    async with store:
        orchestrator = MutationOrchestrator(store)
        session = Session(
            settings=settings,
            store=store,
            browser=FolderBrowser(store, orchestrator),
            orchestrator=orchestrator,
        )
        try:
            return await command(session, args)
        except DriveError as e:
            print(describe_error(e, ACTION_LABELS.get(args.command, "")), file=sys.stderr)
            return EXIT_ERROR


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    settings = Settings.load(
        api_url=args.api_url,
        access_token=args.token,
        use_webhook=args.webhook,
        log_level=args.log_level,
    )
    setup_logging(settings.log_level)

    if args.command == "token":
        return run_token_command(settings, args)

    auth = resolve_auth(settings)
    logger.debug(
        "Using %s endpoints at %s (%s)",
        settings.endpoint_family,
        settings.api_url,
        "authenticated" if auth.is_authenticated else "anonymous",
    )
    return asyncio.run(run_command(settings, auth, args))


if __name__ == "__main__":
    sys.exit(main())
