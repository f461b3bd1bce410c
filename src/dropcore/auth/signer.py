"""OAuth 1.0a request signing (HMAC-SHA1)."""

from __future__ import annotations

import base64
import hashlib
import hmac
import logging
import secrets
import time
from collections.abc import Mapping
from urllib.parse import parse_qsl, quote, urlsplit, urlunsplit

from dropcore.api.errors import SigningError
from dropcore.api.models import OAuthToken

logger = logging.getLogger(__name__)

SIGNATURE_METHOD = "HMAC-SHA1"
OAUTH_VERSION = "1.0"

_DEFAULT_PORTS = {"http": 80, "https": 443}


def percent_encode(value: str) -> str:
    """Encode a string per RFC 3986, leaving only unreserved characters as-is."""
    return quote(value, safe="~")


def normalize_url(url: str) -> str:
    """Return the base string URI: lowercase scheme and host, no query or fragment.

    Raises:
        SigningError: If the URL has no http(s) scheme or no host.
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError as exc:
        raise SigningError(f"Malformed URL: {url}") from exc

    scheme = parts.scheme.lower()
    if scheme not in _DEFAULT_PORTS or not parts.hostname:
        raise SigningError(f"Malformed URL: {url}")

    netloc = parts.hostname.lower()
    if port is not None and port != _DEFAULT_PORTS[scheme]:
        netloc = f"{netloc}:{port}"
    return urlunsplit((scheme, netloc, parts.path or "/", "", ""))


def signature_base_string(method: str, url: str, params: Mapping[str, str]) -> str:
    """Build the OAuth signature base string for a request.

    Query parameters embedded in ``url`` are merged with ``params``. Any
    ``oauth_signature`` entry is excluded.

    Args:
        method: HTTP method.
        url: Request URL, optionally carrying a query string.
        params: Request parameters including the oauth_* protocol parameters.

    Returns:
        ``METHOD&enc(base_url)&enc(normalized_params)``.
    """
    base_url = normalize_url(url)
    pairs = list(parse_qsl(urlsplit(url).query, keep_blank_values=True))
    pairs.extend((k, str(v)) for k, v in params.items() if k != "oauth_signature")
    encoded = sorted((percent_encode(k), percent_encode(v)) for k, v in pairs)
    normalized = "&".join(f"{k}={v}" for k, v in encoded)
    return "&".join(
        (
            percent_encode(method.upper()),
            percent_encode(base_url),
            percent_encode(normalized),
        )
    )


def hmac_sha1_signature(base_string: str, consumer_secret: str, token_secret: str = "") -> str:
    """Sign a base string with HMAC-SHA1 and return the base64 digest."""
    key = f"{percent_encode(consumer_secret)}&{percent_encode(token_secret)}"
    digest = hmac.new(key.encode("utf-8"), base_string.encode("utf-8"), hashlib.sha1).digest()
    return base64.b64encode(digest).decode("ascii")


class OAuthSigner:
    """Signs request parameters with a consumer and an optional token."""

    def __init__(self, consumer: OAuthToken, token: OAuthToken | None = None) -> None:
        """Initialise the signer.

        Args:
            consumer: Application key and secret.
            token: Request or access token. None while obtaining a request token.

        Raises:
            SigningError: If the consumer key is empty.
        """
        if not consumer.key:
            raise SigningError("Consumer key must not be empty")
        self._consumer = consumer
        self._token = token

    def sign(
        self,
        method: str,
        url: str,
        params: Mapping[str, str] | None = None,
        *,
        nonce: str | None = None,
        timestamp: int | None = None,
    ) -> dict[str, str]:
        """Return ``params`` extended with the oauth_* parameters and signature.

        A fresh nonce and timestamp are generated for every call unless
        given explicitly.

        Args:
            method: HTTP method.
            url: Request URL.
            params: Query parameters to send with the request.
            nonce: Override for the generated nonce.
            timestamp: Override for the current Unix time.

        Returns:
            New dict holding the request and protocol parameters.

        Raises:
            SigningError: If the URL is malformed.
        """
        signed: dict[str, str] = dict(params or {})
        signed.update(
            {
                "oauth_consumer_key": self._consumer.key,
                "oauth_nonce": nonce if nonce is not None else secrets.token_hex(16),
                "oauth_signature_method": SIGNATURE_METHOD,
                "oauth_timestamp": str(timestamp if timestamp is not None else int(time.time())),
                "oauth_version": OAUTH_VERSION,
            }
        )
        if self._token is not None:
            signed["oauth_token"] = self._token.key

        base_string = signature_base_string(method, url, signed)
        token_secret = self._token.secret if self._token is not None else ""
        signed["oauth_signature"] = hmac_sha1_signature(
            base_string, self._consumer.secret, token_secret
        )
        logger.debug("[sign] signed request; method:%s;url:%s", method.upper(), url)
        return signed
