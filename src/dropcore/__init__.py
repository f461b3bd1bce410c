"""dropcore — OAuth 1.0a client for the Dropbox v1 HTTP API."""

from dropcore.api.client import DropClient, drop_client_from_config
from dropcore.api.errors import DecodeError, DropboxError, SigningError, TransportError
from dropcore.api.models import (
    AccountInfo,
    CopyReference,
    DeltaEntry,
    DeltaEnvelope,
    FileMetadata,
    OAuthToken,
    QuotaInfo,
    ShareLink,
)
from dropcore.auth.flow import OAuthFlow
from dropcore.config import ClientConfig, load_config

__version__ = "0.1.0"

__all__ = [
    "AccountInfo",
    "ClientConfig",
    "CopyReference",
    "DecodeError",
    "DeltaEntry",
    "DeltaEnvelope",
    "DropClient",
    "DropboxError",
    "FileMetadata",
    "OAuthFlow",
    "OAuthToken",
    "QuotaInfo",
    "ShareLink",
    "SigningError",
    "TransportError",
    "drop_client_from_config",
    "load_config",
]
