"""Client configuration loaded from environment variables."""

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class ClientConfig:
    """Centralized client configuration.

    Required fields have no defaults and will cause a KeyError at startup
    if the corresponding environment variable is missing. Endpoint URLs and
    the request deadline have sensible defaults but can be overridden via
    environment variables.
    """

    # Required — no defaults, fail at startup if missing
    app_key: str
    app_secret: str
    access_token: str
    access_token_secret: str

    # Defaults provided, overridable via env
    root: str = "sandbox"
    timeout_seconds: float = 30.0
    api_url: str = "https://api.dropbox.com/1/"
    content_url: str = "https://api-content.dropbox.com/1/"


def load_config() -> ClientConfig:
    """Construct a ClientConfig from environment variables.

    Required environment variables:
        DROP_APP_KEY: Application (consumer) key.
        DROP_APP_SECRET: Application (consumer) secret.
        DROP_ACCESS_TOKEN: Previously obtained user access token.
        DROP_ACCESS_TOKEN_SECRET: Secret paired with the access token.

    Optional environment variables (with defaults):
        DROP_ROOT: Root namespace, "sandbox" or "dropbox" (default: sandbox).
        DROP_TIMEOUT_SECONDS: Per-request deadline in seconds (default: 30).
        DROP_API_URL: Base URL for metadata and file operation calls.
        DROP_CONTENT_URL: Base URL for upload, download and thumbnail calls.

    Returns:
        Configured ClientConfig instance.
    """
    return ClientConfig(
        app_key=os.environ["DROP_APP_KEY"],
        app_secret=os.environ["DROP_APP_SECRET"],
        access_token=os.environ["DROP_ACCESS_TOKEN"],
        access_token_secret=os.environ["DROP_ACCESS_TOKEN_SECRET"],
        root=os.environ.get("DROP_ROOT", "sandbox"),
        timeout_seconds=float(os.environ.get("DROP_TIMEOUT_SECONDS", "30")),
        api_url=os.environ.get("DROP_API_URL", "https://api.dropbox.com/1/"),
        content_url=os.environ.get("DROP_CONTENT_URL", "https://api-content.dropbox.com/1/"),
    )
