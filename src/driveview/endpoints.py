# Endpoint families: the direct API and the webhook variant of the same contract.
# Created: 2026-10-03
#
# Both families have identical semantics; they differ in base paths, in the
# HTTP verbs used for writes, and in the webhook family wrapping every answer
# in a WebhookResponse envelope.

from __future__ import annotations

import json
import shlex
from dataclasses import dataclass

from driveview.errors import InvalidArgument
from driveview.paths import join_path, normalize_path

DOWNLOAD_PREFIX = "/api/files/download"


@dataclass(frozen=True)
class Endpoint:
    method: str
    path: str


@dataclass(frozen=True)
class EndpointFamily:
    """Routes for one family of endpoints."""

    name: str
    list_directory: Endpoint
    upload_file: Endpoint
    delete_file: Endpoint
    rename_file: Endpoint
    create_folder: Endpoint
    delete_folder: Endpoint
    rename_folder: Endpoint
    list_files: Endpoint | None = None
    enveloped: bool = False  # answers wrapped in WebhookResponse


API = EndpointFamily(
    name="api",
    list_directory=Endpoint("GET", "/api/folders/status"),
    upload_file=Endpoint("POST", "/api/files/upload"),
    delete_file=Endpoint("DELETE", "/api/files"),
    rename_file=Endpoint("PUT", "/api/files/rename"),
    create_folder=Endpoint("POST", "/api/folders"),
    delete_folder=Endpoint("DELETE", "/api/folders"),
    rename_folder=Endpoint("PUT", "/api/folders/rename"),
    list_files=Endpoint("GET", "/api/files/list"),
)

WEBHOOK = EndpointFamily(
    name="webhook",
    list_directory=Endpoint("GET", "/webhook/folders/status"),
    upload_file=Endpoint("POST", "/webhook/files/upload"),
    delete_file=Endpoint("POST", "/webhook/files/delete"),
    rename_file=Endpoint("POST", "/webhook/files/rename"),
    create_folder=Endpoint("POST", "/webhook/folders/create"),
    delete_folder=Endpoint("POST", "/webhook/folders/delete"),
    rename_folder=Endpoint("POST", "/webhook/folders/rename"),
    enveloped=True,
)

FAMILIES: dict[str, EndpointFamily] = {API.name: API, WEBHOOK.name: WEBHOOK}


def get_family(name: str) -> EndpointFamily:
    try:
        return FAMILIES[name.lower()]
    except KeyError:
        raise InvalidArgument(
            f"Unknown endpoint family {name!r} (expected one of: {', '.join(FAMILIES)})"
        ) from None


# ---------------------------------------------------------------------------
# Webhook reference: what external callers need to hit each webhook endpoint
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WebhookOperation:
    key: str
    endpoint: Endpoint
    description: str
    params: tuple[str, ...]

    def url(self, base_url: str) -> str:
        return f"{base_url.rstrip('/')}{self.endpoint.path}"


WEBHOOK_OPERATIONS: dict[str, WebhookOperation] = {
    op.key: op
    for op in (
        WebhookOperation(
            "upload",
            WEBHOOK.upload_file,
            "Upload a file via webhook",
            ("file (multipart)", "folder_path (optional)"),
        ),
        WebhookOperation(
            "delete", WEBHOOK.delete_file, "Delete a file via webhook", ("file_path",)
        ),
        WebhookOperation(
            "rename",
            WEBHOOK.rename_file,
            "Rename a file via webhook",
            ("old_path", "new_name"),
        ),
        WebhookOperation(
            "create-folder",
            WEBHOOK.create_folder,
            "Create a folder via webhook",
            ("name", "parent_path (optional)"),
        ),
        WebhookOperation(
            "delete-folder",
            WEBHOOK.delete_folder,
            "Delete a folder via webhook",
            ("folder_path",),
        ),
        WebhookOperation(
            "rename-folder",
            WEBHOOK.rename_folder,
            "Rename a folder via webhook",
            ("old_name", "new_name", "parent_path (optional)"),
        ),
        WebhookOperation(
            "status",
            WEBHOOK.list_directory,
            "Get folder status via webhook",
            ("folder_path (optional)",),
        ),
    )
}


def webhook_reference(base_url: str) -> list[dict[str, object]]:
    """Describe every webhook endpoint as plain dicts (method, url, params)."""
    return [
        {
            "operation": op.key,
            "method": op.endpoint.method,
            "url": op.url(base_url),
            "description": op.description,
            "params": list(op.params),
        }
        for op in WEBHOOK_OPERATIONS.values()
    ]


def curl_command(operation: str, base_url: str, current_path: str = "") -> str:
    """Build a ready-to-paste curl example for a webhook operation.

    Example paths are placed inside ``current_path``. Query parameters mirror
    exactly what the client sends.
    """
    op = WEBHOOK_OPERATIONS.get(operation)
    if op is None:
        raise InvalidArgument(
            f"Unknown webhook operation {operation!r} "
            f"(expected one of: {', '.join(WEBHOOK_OPERATIONS)})"
        )

    folder = normalize_path(current_path)
    lines = [f"curl -X {op.endpoint.method} {shlex.quote(op.url(base_url))}"]

    if operation == "upload":
        lines.append('-F "file=@/path/to/your/file.jpg"')
        lines.append(f"-F {shlex.quote(f'folder_path={folder}')}")
    elif operation == "delete":
        lines.append(_query_arg("file_path", join_path(folder, "filename.jpg")))
    elif operation == "rename":
        lines.append(_query_arg("old_path", join_path(folder, "oldname.jpg")))
        lines.append(_query_arg("new_name", "newname.jpg"))
    elif operation == "create-folder":
        lines.append('-H "Content-Type: application/json"')
        lines.append(_json_arg({"name": "new-folder", "parent_path": folder}))
    elif operation == "delete-folder":
        lines.append(_query_arg("folder_path", join_path(folder, "folder-name")))
    elif operation == "rename-folder":
        lines.append('-H "Content-Type: application/json"')
        lines.append(
            _json_arg(
                {"old_name": "old-folder", "new_name": "new-folder", "parent_path": folder}
            )
        )
    elif operation == "status" and folder:
        lines.append(_query_arg("folder_path", folder))

    # -G moves --data-urlencode args into the query string; -X keeps the verb
    if any(line.startswith("--data-urlencode") for line in lines):
        lines.insert(1, "-G")

    return " \\\n  ".join(lines)


def _query_arg(name: str, value: str) -> str:
    return f"--data-urlencode {shlex.quote(f'{name}={value}')}"


def _json_arg(body: dict[str, str]) -> str:
    return f"-d {shlex.quote(json.dumps(body))}"
