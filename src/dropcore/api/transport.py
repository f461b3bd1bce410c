"""Signed HTTP transport for Dropbox API calls."""

from __future__ import annotations

import http.client
import logging
from collections.abc import Mapping
from typing import IO, TYPE_CHECKING
from urllib import request as urllib_request
from urllib.error import HTTPError
from urllib.parse import quote, urlencode, urlsplit

from dropcore.api.errors import TransportError

if TYPE_CHECKING:
    from email.message import Message

    from dropcore.auth.signer import OAuthSigner

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class _NoRedirectHandler(urllib_request.HTTPRedirectHandler):
    """Surfaces 3xx responses as HTTPError instead of following them.

    A redirect would replay the signed query string against another host.
    """

    def redirect_request(
        self,
        req: urllib_request.Request,
        fp: IO[bytes],
        code: int,
        msg: str,
        headers: Message,
        newurl: str,
    ) -> urllib_request.Request | None:
        return None


_OPENER = urllib_request.build_opener(_NoRedirectHandler)


class Transport:
    """Executes OAuth-signed requests and validates the response status."""

    def __init__(self, signer: OAuthSigner, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> None:
        """Initialise the transport.

        Args:
            signer: Signer holding the consumer and token credentials.
            timeout: Default per-request deadline in seconds.
        """
        self._signer = signer
        self._timeout = timeout

    def execute(
        self,
        method: str,
        url: str,
        params: Mapping[str, str] | None = None,
        body: bytes | None = None,
        *,
        timeout: float | None = None,
    ) -> tuple[int, bytes]:
        """Sign and send one request.

        The signed parameters travel in the query string; ``body`` is sent
        as-is (file uploads).

        Args:
            method: HTTP method (GET, POST or PUT).
            url: Endpoint URL. An existing query string is kept and signed.
            params: Request parameters.
            body: Raw request body.
            timeout: Deadline for this request, overriding the default.

        Returns:
            Tuple of (status_code, response_body).

        Raises:
            SigningError: If the URL cannot be signed.
            TransportError: On a network failure or any status other than 200.
        """
        method = method.upper()
        signed = self._signer.sign(method, url, params)
        separator = "&" if urlsplit(url).query else "?"
        full_url = f"{url}{separator}{urlencode(signed, safe='~', quote_via=quote)}"

        headers = {"Accept": "application/json"}
        data = body
        if body is not None:
            headers["Content-Type"] = "application/octet-stream"
        elif method in ("POST", "PUT"):
            data = b""

        req = urllib_request.Request(full_url, data=data, headers=headers, method=method)
        deadline = self._timeout if timeout is None else timeout
        logger.debug("[execute] sending request; method:%s;url:%s", method, url)

        try:
            with _OPENER.open(req, timeout=deadline) as resp:
                status = resp.status
                payload = resp.read()
        except HTTPError as exc:
            try:
                raw = exc.read()
            except (OSError, http.client.HTTPException) as read_exc:
                raw = str(read_exc).encode("utf-8")
            finally:
                exc.close()
            text = raw.decode("utf-8", errors="replace")
            logger.error("[execute] request failed; url:%s;status:%d", url, exc.code)
            raise TransportError(url, exc.code, text) from exc
        except OSError as exc:
            reason = getattr(exc, "reason", exc)
            logger.error("[execute] network error; url:%s;reason:%s", url, reason)
            raise TransportError(url, None, str(reason)) from exc
        except http.client.HTTPException as exc:
            reason = str(exc) or type(exc).__name__
            logger.error("[execute] invalid response; url:%s;reason:%s", url, reason)
            raise TransportError(url, None, reason) from exc

        if status != 200:
            text = payload.decode("utf-8", errors="replace")
            logger.error("[execute] request failed; url:%s;status:%d", url, status)
            raise TransportError(url, status, text)

        return status, payload
