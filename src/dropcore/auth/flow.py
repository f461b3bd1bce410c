"""OAuth 1.0a three-legged flow for obtaining a user access token."""

from __future__ import annotations

import logging
from urllib.parse import parse_qs, urlencode

from dropcore.api.client import API_URL
from dropcore.api.errors import DecodeError
from dropcore.api.models import OAuthToken
from dropcore.api.transport import DEFAULT_TIMEOUT_SECONDS, Transport
from dropcore.auth.signer import OAuthSigner

logger = logging.getLogger(__name__)

WEB_URL = "https://www.dropbox.com/1/"

FIELD_OAUTH_TOKEN = "oauth_token"
FIELD_OAUTH_TOKEN_SECRET = "oauth_token_secret"
FIELD_OAUTH_CALLBACK = "oauth_callback"


def parse_token_response(body: bytes, endpoint: str | None = None) -> OAuthToken:
    """Parse a form-encoded ``oauth_token=..&oauth_token_secret=..`` body.

    Raises:
        DecodeError: If the body is not UTF-8 or lacks either field.
    """
    try:
        fields = parse_qs(body.decode("utf-8"), keep_blank_values=True)
    except UnicodeDecodeError as exc:
        raise DecodeError("Token response is not valid UTF-8", endpoint) from exc

    key = fields.get(FIELD_OAUTH_TOKEN, [""])[0]
    secret = fields.get(FIELD_OAUTH_TOKEN_SECRET, [""])[0]
    if not key or not secret:
        raise DecodeError("Token response is missing oauth_token or oauth_token_secret", endpoint)
    return OAuthToken(key=key, secret=secret)


class OAuthFlow:
    """Walks a user through request token, authorization and access token.

    Typical use::

        flow = OAuthFlow(app_key, app_secret)
        request_token = flow.obtain_request_token()
        print(flow.authorize_url(request_token))
        # ... user approves the app in a browser ...
        access_token = flow.obtain_access_token(request_token)

    Storing the resulting access token is left to the caller.
    """

    def __init__(
        self,
        app_key: str,
        app_secret: str,
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        api_url: str = API_URL,
        web_url: str = WEB_URL,
    ) -> None:
        self._consumer = OAuthToken(app_key, app_secret)
        self._timeout = timeout
        self._api_url = api_url if api_url.endswith("/") else f"{api_url}/"
        self._web_url = web_url if web_url.endswith("/") else f"{web_url}/"

    def _fetch_token(
        self, endpoint: str, token: OAuthToken | None, timeout: float | None
    ) -> OAuthToken:
        url = f"{self._api_url}{endpoint}"
        transport = Transport(OAuthSigner(self._consumer, token), timeout=self._timeout)
        _, body = transport.execute("POST", url, timeout=timeout)
        return parse_token_response(body, url)

    def obtain_request_token(self, *, timeout: float | None = None) -> OAuthToken:
        """Obtain a temporary request token, signed with the consumer only.

        Raises:
            TransportError: If the server rejects the request.
            DecodeError: If the response lacks the token fields.
        """
        token = self._fetch_token("oauth/request_token", None, timeout)
        logger.info("[obtain_request_token] obtained request token")
        return token

    def authorize_url(self, request_token: OAuthToken, callback: str | None = None) -> str:
        """Return the URL the user must visit to authorize the request token.

        Args:
            request_token: Token from obtain_request_token().
            callback: Optional URL the browser is redirected to afterwards.
        """
        params = {FIELD_OAUTH_TOKEN: request_token.key}
        if callback is not None:
            params[FIELD_OAUTH_CALLBACK] = callback
        return f"{self._web_url}oauth/authorize?{urlencode(params)}"

    def obtain_access_token(
        self, request_token: OAuthToken, *, timeout: float | None = None
    ) -> OAuthToken:
        """Exchange an authorized request token for an access token.

        Raises:
            TransportError: If the server rejects the request (e.g. the user
                has not authorized the token yet).
            DecodeError: If the response lacks the token fields.
        """
        token = self._fetch_token("oauth/access_token", request_token, timeout)
        logger.info("[obtain_access_token] obtained access token")
        return token
