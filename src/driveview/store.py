# Store Client: async HTTP client for the remote file-storage backend.
# Created: 2026-10-05
# Updated: 2026-10-11, webhook family support (enveloped responses).
#
# Every remote operation is one HTTP call. The client never caches listings;
# callers reload after each write.

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from driveview.auth import ANONYMOUS, AuthContext
from driveview.config import Settings
from driveview.endpoints import (
    API,
    DOWNLOAD_PREFIX,
    WEBHOOK,
    Endpoint,
    EndpointFamily,
    get_family,
)
from driveview.errors import HttpError, InvalidArgument, NetworkError
from driveview.models import (
    DirectoryListing,
    FileList,
    FolderCreate,
    FolderRename,
    UploadedFileRef,
    UploadResponse,
    UploadSource,
    WebhookResponse,
    listing_from_payload,
)
from driveview.paths import join_path, normalize_path

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class StoreClient:
    """Typed wrapper over the storage backend's REST (or webhook) surface.

    Owns one ``httpx.AsyncClient``; close it with ``aclose()`` or use the
    client as an async context manager.
    """

    def __init__(
        self,
        base_url: str,
        auth: AuthContext | None = None,
        family: EndpointFamily | str = API,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.auth = auth or ANONYMOUS
        self.family = get_family(family) if isinstance(family, str) else family
        self._client = httpx.AsyncClient(
            base_url=self.base_url, timeout=timeout, transport=transport
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        auth: AuthContext | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> StoreClient:
        return cls(
            settings.api_url,
            auth=auth,
            family=settings.endpoint_family,
            timeout=settings.request_timeout,
            transport=transport,
        )

    async def aclose(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> StoreClient:
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def list_directory(self, path: str = "") -> DirectoryListing:
        """Fetch the direct children of ``path``.

        The root is sent without a ``folder_path`` parameter at all.
        """
        folder = normalize_path(path)
        params = {"folder_path": folder} if folder else None
        resp = await self._request(self.family.list_directory, params=params)
        try:
            return listing_from_payload(self._payload(resp), fallback_path=folder)
        except ValidationError as e:
            raise HttpError(resp.status_code, f"Unexpected folder listing response: {e}") from e

    async def list_all_files(self, folder_path: str = "") -> FileList:
        """Flat file listing (direct API only)."""
        if self.family.list_files is None:
            raise InvalidArgument(
                f"Listing all files is not available on {self.family.name} endpoints"
            )
        folder = normalize_path(folder_path)
        params = {"folder_path": folder} if folder else None
        resp = await self._request(self.family.list_files, params=params)
        try:
            return FileList.model_validate(self._payload(resp) or {})
        except ValidationError as e:
            raise HttpError(resp.status_code, f"Unexpected file list response: {e}") from e

    async def folder_status(self, path: str = "") -> WebhookResponse:
        """Raw webhook status envelope, success or not."""
        folder = normalize_path(path)
        params = {"folder_path": folder} if folder else None
        resp = await self._request(WEBHOOK.list_directory, params=params)
        return self._envelope(resp)

    def build_download_url(self, path: str) -> str:
        """Direct download link for a file. No network call."""
        return f"{self.base_url}{DOWNLOAD_PREFIX}/{quote(path.lstrip('/'), safe='/')}"

    # ------------------------------------------------------------------
    # File writes
    # ------------------------------------------------------------------

    async def upload_file(
        self, file: UploadSource, name: str | None = None, dest_path: str = ""
    ) -> UploadedFileRef:
        """Upload one file into ``dest_path``."""
        upload_name = name or file.name
        if not upload_name:
            raise InvalidArgument("Upload needs a file name")
        folder = normalize_path(dest_path)

        resp = await self._request(
            self.family.upload_file,
            files={"file": (upload_name, file.content, file.content_type)},
            data={"folder_path": folder},
        )
        payload = self._payload(resp)

        if isinstance(payload, dict) and "filename" in payload:
            try:
                return UploadedFileRef.from_response(UploadResponse.model_validate(payload))
            except ValidationError as e:
                raise HttpError(resp.status_code, f"Unexpected upload response: {e}") from e

        # Webhook envelopes may carry no upload details
        data = payload if isinstance(payload, dict) else {}
        path = data.get("path") or join_path(folder, upload_name)
        return UploadedFileRef(
            name=data.get("name") or upload_name,
            path=path,
            size=data.get("size") or file.size,
            url=data.get("url") or self.build_download_url(path),
        )

    async def delete_file(self, path: str) -> None:
        """Delete a file. Deleting a missing file raises ``HttpError(404)``."""
        if not path or not path.strip("/"):
            raise InvalidArgument("No file path given")
        resp = await self._request(self.family.delete_file, params={"file_path": path})
        self._payload(resp)

    async def rename_file(self, path: str, new_name: str) -> None:
        """Rename a file in place. ``new_name`` is a bare name, not a path."""
        if not path or not path.strip("/"):
            raise InvalidArgument("No file path given")
        new_name = _bare_name(new_name)
        resp = await self._request(
            self.family.rename_file, params={"old_path": path, "new_name": new_name}
        )
        self._payload(resp)

    # ------------------------------------------------------------------
    # Folder writes
    # ------------------------------------------------------------------

    async def create_folder(self, parent_path: str, name: str) -> None:
        body = FolderCreate(name=_bare_name(name), parent_path=normalize_path(parent_path))
        resp = await self._request(self.family.create_folder, json=body.model_dump())
        self._payload(resp)

    async def delete_folder(self, path: str) -> None:
        folder = normalize_path(path)
        if not folder:
            raise InvalidArgument("Refusing to delete the root folder")
        resp = await self._request(self.family.delete_folder, params={"folder_path": folder})
        self._payload(resp)

    async def rename_folder(self, parent_path: str, old_name: str, new_name: str) -> None:
        body = FolderRename(
            old_name=_bare_name(old_name),
            new_name=_bare_name(new_name),
            parent_path=normalize_path(parent_path),
        )
        resp = await self._request(self.family.rename_folder, json=body.model_dump())
        self._payload(resp)

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        endpoint: Endpoint,
        *,
        params: dict[str, str] | None = None,
        json: dict[str, Any] | None = None,
        data: dict[str, str] | None = None,
        files: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            resp = await self._client.request(
                endpoint.method,
                endpoint.path,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=self.auth.headers(),
            )
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %r", endpoint.method, endpoint.path, e)
            raise NetworkError(str(e) or type(e).__name__) from e

        if resp.is_error:
            body = _error_body(resp)
            logger.warning(
                "%s %s -> HTTP %s: %s", endpoint.method, endpoint.path, resp.status_code, body
            )
            raise HttpError(resp.status_code, body)

        logger.debug("%s %s -> HTTP %s", endpoint.method, endpoint.path, resp.status_code)
        return resp

    def _payload(self, resp: httpx.Response) -> Any:
        """Decoded body; unwraps (and checks) webhook envelopes."""
        if self.family.enveloped:
            envelope = self._envelope(resp)
            if not envelope.success:
                raise HttpError(resp.status_code, envelope.message or "Webhook request failed")
            return envelope.data
        return _json_or_none(resp)

    def _envelope(self, resp: httpx.Response) -> WebhookResponse:
        try:
            return WebhookResponse.model_validate(_json_or_none(resp) or {})
        except ValidationError as e:
            raise HttpError(resp.status_code, f"Unexpected webhook response: {e}") from e


def _json_or_none(resp: httpx.Response) -> Any:
    if not resp.content:
        return None
    try:
        return resp.json()
    except ValueError as e:
        raise HttpError(resp.status_code, f"Invalid JSON response: {e}") from e


def _error_body(resp: httpx.Response) -> str:
    """Best error text: FastAPI ``detail``, webhook ``message``, else raw text."""
    try:
        data = resp.json()
    except ValueError:
        return resp.text.strip()
    if isinstance(data, dict):
        for key in ("detail", "message", "error"):
            value = data.get(key)
            if value:
                return value if isinstance(value, str) else str(value)
    return resp.text.strip()


def _bare_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise InvalidArgument("Name cannot be empty")
    if "/" in name:
        raise InvalidArgument(f"Name must not contain '/': {name!r}")
    return name
