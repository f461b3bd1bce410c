"""Dropbox v1 API client: one method per documented endpoint."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING
from urllib.parse import quote

from dropcore.api.decoder import (
    decode_account_info,
    decode_copy_ref,
    decode_file_list,
    decode_file_metadata,
    decode_share_link,
)
from dropcore.api.delta import decode_delta
from dropcore.api.models import (
    AccountInfo,
    CopyReference,
    DeltaEnvelope,
    FileMetadata,
    OAuthToken,
    ShareLink,
)
from dropcore.api.transport import DEFAULT_TIMEOUT_SECONDS, Transport
from dropcore.auth.signer import OAuthSigner

if TYPE_CHECKING:
    from dropcore.config import ClientConfig

logger = logging.getLogger(__name__)

API_URL = "https://api.dropbox.com/1/"
CONTENT_URL = "https://api-content.dropbox.com/1/"

ROOT_SANDBOX = "sandbox"
ROOT_DROPBOX = "dropbox"
VALID_ROOTS = (ROOT_SANDBOX, ROOT_DROPBOX)


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _with_slash(url: str) -> str:
    return url if url.endswith("/") else f"{url}/"


class DropClient:
    """Client for the Dropbox v1 API, authenticated with OAuth 1.0a.

    Every call is a single signed round trip. Errors propagate to the caller
    as SigningError, TransportError or DecodeError; nothing is retried.
    """

    def __init__(
        self,
        app_key: str,
        app_secret: str,
        access_token: str,
        access_token_secret: str,
        root: str = ROOT_SANDBOX,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_url: str = API_URL,
        content_url: str = CONTENT_URL,
    ) -> None:
        """Initialise the client.

        Args:
            app_key: Application (consumer) key.
            app_secret: Application (consumer) secret.
            access_token: User access token.
            access_token_secret: Secret paired with the access token.
            root: "sandbox" for the app folder, "dropbox" for full access.
            timeout: Default per-request deadline in seconds.
            api_url: Base URL for metadata and file operation calls.
            content_url: Base URL for upload, download and thumbnail calls.

        Raises:
            ValueError: If root is not "sandbox" or "dropbox".
            SigningError: If app_key is empty.
        """
        if root not in VALID_ROOTS:
            raise ValueError(f"root must be one of {VALID_ROOTS}, got {root!r}")
        signer = OAuthSigner(
            consumer=OAuthToken(app_key, app_secret),
            token=OAuthToken(access_token, access_token_secret),
        )
        self._transport = Transport(signer, timeout=timeout)
        self._root = root
        self._api_url = _with_slash(api_url)
        self._content_url = _with_slash(content_url)

    @property
    def root(self) -> str:
        return self._root

    # ------------------------------------------------------------------
    # URL builders
    # ------------------------------------------------------------------

    def _api(self, endpoint: str) -> str:
        return f"{self._api_url}{endpoint}"

    def _api_path(self, endpoint: str, path: str) -> str:
        return f"{self._api_url}{endpoint}/{self._root}/{quote(path.lstrip('/'), safe='/')}"

    def _content_path(self, endpoint: str, path: str) -> str:
        return f"{self._content_url}{endpoint}/{self._root}/{quote(path.lstrip('/'), safe='/')}"

    def _call(
        self,
        method: str,
        url: str,
        params: dict[str, str] | None = None,
        body: bytes | None = None,
        timeout: float | None = None,
    ) -> bytes:
        _, payload = self._transport.execute(method, url, params, body, timeout=timeout)
        return payload

    # ------------------------------------------------------------------
    # Account
    # ------------------------------------------------------------------

    def account_info(self, *, timeout: float | None = None) -> AccountInfo:
        """Retrieve information about the user's account."""
        url = self._api("account/info")
        return decode_account_info(self._call("GET", url, timeout=timeout), url)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def get_file(self, path: str, rev: str | None = None, *, timeout: float | None = None) -> bytes:
        """Download a file.

        Args:
            path: Path of the file relative to the root.
            rev: Revision to download. Latest when omitted.
            timeout: Deadline for this request.

        Returns:
            Raw file content.
        """
        params: dict[str, str] = {}
        if rev is not None:
            params["rev"] = rev
        return self._call("GET", self._content_path("files", path), params, timeout=timeout)

    def put_file(
        self,
        path: str,
        content: bytes | str,
        overwrite: bool = True,
        parent_rev: str | None = None,
        *,
        timeout: float | None = None,
    ) -> FileMetadata:
        """Upload a file using PUT semantics.

        Args:
            path: Destination path relative to the root.
            content: File content; strings are encoded as UTF-8.
            overwrite: Replace an existing file. When False a conflicting
                upload is renamed by the server.
            parent_rev: Revision the upload is based on.
            timeout: Deadline for this request.

        Returns:
            Metadata of the uploaded file.
        """
        if isinstance(content, str):
            content = content.encode("utf-8")
        params = {"overwrite": _bool_param(overwrite)}
        if parent_rev is not None:
            params["parent_rev"] = parent_rev
        url = self._content_path("files_put", path)
        metadata = decode_file_metadata(self._call("PUT", url, params, content, timeout), url)
        logger.info("[put_file] uploaded file; path:%s;bytes:%d", metadata.path, metadata.bytes)
        return metadata

    def metadata(
        self,
        path: str,
        list_contents: bool | None = None,
        file_limit: int | None = None,
        include_deleted: bool | None = None,
        rev: str | None = None,
        *,
        timeout: float | None = None,
    ) -> FileMetadata:
        """Retrieve file or folder metadata.

        Optional parameters are only sent when given; the server defaults apply
        otherwise. ``contents`` is populated for folders when listing is enabled.
        """
        params: dict[str, str] = {}
        if list_contents is not None:
            params["list"] = _bool_param(list_contents)
        if file_limit is not None:
            params["file_limit"] = str(file_limit)
        if include_deleted is not None:
            params["include_deleted"] = _bool_param(include_deleted)
        if rev is not None:
            params["rev"] = rev
        url = self._api_path("metadata", path)
        return decode_file_metadata(self._call("GET", url, params, timeout=timeout), url)

    def delta(self, cursor: str | None = None, *, timeout: float | None = None) -> DeltaEnvelope:
        """Fetch one page of changes since ``cursor``.

        Call again with the returned cursor while ``has_more`` is True. When
        ``reset`` is True, discard local state before applying the entries.

        Args:
            cursor: Cursor from the previous call, or None for a full listing.
            timeout: Deadline for this request.

        Returns:
            DeltaEnvelope for this page.
        """
        params: dict[str, str] = {}
        if cursor is not None:
            params["cursor"] = cursor
        url = self._api("delta")
        return decode_delta(self._call("POST", url, params, timeout=timeout), url)

    def revisions(
        self, path: str, rev_limit: int = 10, *, timeout: float | None = None
    ) -> list[FileMetadata]:
        """List metadata for previous revisions of a file, newest first."""
        url = self._api_path("revisions", path)
        params = {"rev_limit": str(rev_limit)}
        return decode_file_list(self._call("GET", url, params, timeout=timeout), url)

    def restore(self, path: str, rev: str, *, timeout: float | None = None) -> FileMetadata:
        """Restore a file to a previous revision."""
        url = self._api_path("restore", path)
        metadata = decode_file_metadata(self._call("POST", url, {"rev": rev}, timeout=timeout), url)
        logger.info("[restore] restored file; path:%s;rev:%s", metadata.path, rev)
        return metadata

    def search(
        self,
        query: str,
        path: str = "",
        file_limit: int = 1000,
        include_deleted: bool = False,
        *,
        timeout: float | None = None,
    ) -> list[FileMetadata]:
        """Find files and folders under ``path`` whose name contains ``query``."""
        params = {
            "query": query,
            "file_limit": str(file_limit),
            "include_deleted": _bool_param(include_deleted),
        }
        url = self._api_path("search", path)
        return decode_file_list(self._call("GET", url, params, timeout=timeout), url)

    # ------------------------------------------------------------------
    # Links
    # ------------------------------------------------------------------

    def shares(
        self, path: str, short_url: bool = True, *, timeout: float | None = None
    ) -> ShareLink:
        """Create a link to a preview page for a file or folder."""
        url = self._api_path("shares", path)
        params = {"short_url": _bool_param(short_url)}
        return decode_share_link(self._call("POST", url, params, timeout=timeout), url)

    def media(self, path: str, *, timeout: float | None = None) -> ShareLink:
        """Create a direct link to a file's content, suitable for streaming."""
        url = self._api_path("media", path)
        return decode_share_link(self._call("POST", url, timeout=timeout), url)

    def copy_ref(self, path: str, *, timeout: float | None = None) -> CopyReference:
        """Create a reference that lets another account copy this file."""
        url = self._api_path("copy_ref", path)
        return decode_copy_ref(self._call("POST", url, timeout=timeout), url)

    def thumbnail(
        self,
        path: str,
        format: str = "jpeg",
        size: str = "s",
        *,
        timeout: float | None = None,
    ) -> bytes:
        """Download a thumbnail for an image.

        Args:
            path: Path of the image relative to the root.
            format: "jpeg" (photos) or "png" (screenshots and digital art).
            size: One of xs (32x32), s (64x64), m (128x128), l (640x480)
                or xl (1024x768).
            timeout: Deadline for this request.

        Returns:
            Raw image bytes.
        """
        url = self._content_path("thumbnails", path)
        return self._call("POST", url, {"format": format, "size": size}, timeout=timeout)

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------

    def copy(
        self,
        to_path: str,
        from_path: str | None = None,
        from_copy_ref: str | None = None,
        *,
        timeout: float | None = None,
    ) -> FileMetadata:
        """Copy a file or folder, or materialize a copy reference at ``to_path``.

        Exactly one of ``from_path`` and ``from_copy_ref`` must be given.

        Raises:
            ValueError: If neither or both sources are given.
        """
        if (from_path is None) == (from_copy_ref is None):
            raise ValueError("Exactly one of from_path and from_copy_ref is required")
        params = {"root": self._root, "to_path": to_path}
        if from_path is not None:
            params["from_path"] = from_path
        elif from_copy_ref is not None:
            params["from_copy_ref"] = from_copy_ref
        url = self._api("fileops/copy")
        return decode_file_metadata(self._call("POST", url, params, timeout=timeout), url)

    def create_folder(self, path: str, *, timeout: float | None = None) -> FileMetadata:
        url = self._api("fileops/create_folder")
        params = {"root": self._root, "path": path}
        return decode_file_metadata(self._call("POST", url, params, timeout=timeout), url)

    def delete(self, path: str, *, timeout: float | None = None) -> FileMetadata:
        url = self._api("fileops/delete")
        params = {"root": self._root, "path": path}
        metadata = decode_file_metadata(self._call("POST", url, params, timeout=timeout), url)
        logger.info("[delete] deleted; path:%s", metadata.path)
        return metadata

    def move(self, from_path: str, to_path: str, *, timeout: float | None = None) -> FileMetadata:
        url = self._api("fileops/move")
        params = {"root": self._root, "from_path": from_path, "to_path": to_path}
        metadata = decode_file_metadata(self._call("POST", url, params, timeout=timeout), url)
        logger.info("[move] moved; from_path:%s;to_path:%s", from_path, metadata.path)
        return metadata


def drop_client_from_config(config: ClientConfig) -> DropClient:
    """Construct a DropClient from client configuration.

    Args:
        config: Client configuration instance.

    Returns:
        Configured DropClient instance.
    """
    return DropClient(
        app_key=config.app_key,
        app_secret=config.app_secret,
        access_token=config.access_token,
        access_token_secret=config.access_token_secret,
        root=config.root,
        timeout=config.timeout_seconds,
        api_url=config.api_url,
        content_url=config.content_url,
    )
