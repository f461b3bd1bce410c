"""Data models for Dropbox API responses."""

from __future__ import annotations

from dataclasses import dataclass, field

# Metadata JSON field names
FIELD_SIZE = "size"
FIELD_REV = "rev"
FIELD_THUMB_EXISTS = "thumb_exists"
FIELD_BYTES = "bytes"
FIELD_MODIFIED = "modified"
FIELD_PATH = "path"
FIELD_IS_DIR = "is_dir"
FIELD_ICON = "icon"
FIELD_ROOT = "root"
FIELD_MIME_TYPE = "mime_type"
FIELD_REVISION = "revision"
FIELD_CONTENTS = "contents"

# Account JSON field names
FIELD_REFERRAL_LINK = "referral_link"
FIELD_DISPLAY_NAME = "display_name"
FIELD_COUNTRY = "country"
FIELD_EMAIL = "email"
FIELD_UID = "uid"
FIELD_QUOTA_INFO = "quota_info"
FIELD_SHARED = "shared"
FIELD_QUOTA = "quota"
FIELD_NORMAL = "normal"

# Link and copy_ref JSON field names
FIELD_URL = "url"
FIELD_EXPIRES = "expires"
FIELD_COPY_REF = "copy_ref"

# Delta envelope keys
DELTA_RESET = "reset"
DELTA_CURSOR = "cursor"
DELTA_HAS_MORE = "has_more"
DELTA_ENTRIES = "entries"


@dataclass(frozen=True)
class QuotaInfo:
    """Quota breakdown for a user account, in bytes."""

    shared: int = 0
    quota: int = 0
    normal: int = 0


@dataclass(frozen=True)
class AccountInfo:
    """Snapshot of a user's account from /account/info."""

    referral_link: str = ""
    display_name: str = ""
    country: str = ""
    email: str = ""
    uid: int = 0
    quota_info: QuotaInfo = field(default_factory=QuotaInfo)


@dataclass(frozen=True)
class FileMetadata:
    """Metadata for a file or folder.

    ``size`` and ``rev`` stay strings as the API sends them, while ``bytes``
    and ``revision`` are integers. ``contents`` is only populated for folders
    when the API includes the listing.
    """

    size: str = ""
    rev: str = ""
    thumb_exists: bool = False
    bytes: int = 0
    modified: str = ""
    path: str = ""
    is_dir: bool = False
    icon: str = ""
    root: str = ""
    mime_type: str = ""
    revision: int = 0
    contents: list[FileMetadata] = field(default_factory=list)


@dataclass(frozen=True)
class ShareLink:
    """A shareable or direct media link and its expiration timestamp."""

    url: str
    expires: str


@dataclass(frozen=True)
class CopyReference:
    """Opaque token that lets another account copy a file via /fileops/copy."""

    copy_ref: str
    expires: str


@dataclass(frozen=True)
class DeltaEntry:
    """A path paired with its metadata; ``metadata`` is None when the path was deleted."""

    path: str
    metadata: FileMetadata | None

    @property
    def is_deleted(self) -> bool:
        return self.metadata is None


@dataclass(frozen=True)
class DeltaEnvelope:
    """One page of changes returned by /delta.

    Attributes:
        reset: True when the caller must discard its local state before
            applying ``entries``.
        cursor: Opaque cursor to pass to the next /delta call.
        has_more: True when another page is available immediately.
        entries: Ordered changes to apply.
    """

    reset: bool
    cursor: str
    has_more: bool
    entries: list[DeltaEntry] = field(default_factory=list)


@dataclass(frozen=True)
class OAuthToken:
    """An OAuth 1.0a key/secret pair (consumer, request or access token)."""

    key: str
    secret: str

    def __repr__(self) -> str:
        return f"OAuthToken(key={self.key!r}, secret='***')"
