"""Identity provider interface and shared OAuth2 behavior.

Every provider follows the same flow:

1. ``auth_code_url(state)``: send the user to the provider
2. ``exchange(code)``: trade the returned code for a ``Token``
3. ``fetch_auth_user(token)``: fetch the user info payload and normalize it
   into an ``AuthUser`` using the provider's ``UserSchema``

The OAuth2 protocol work is delegated to authlib, HTTP to httpx. Providers
keep no per-user state, so one instance can serve concurrent requests.
"""

import json
from abc import ABC, abstractmethod
from typing import Any

import httpx
from authlib.common.security import generate_token
from authlib.oauth2.rfc6749 import OAuth2Token
from authlib.oauth2.rfc6749.parameters import prepare_grant_uri, prepare_token_request
from authlib.oauth2.rfc7636 import create_s256_code_challenge
from loguru import logger

from percolate_identity.errors import MalformedResponseError, TokenExchangeError, UserFetchError
from percolate_identity.extraction import UserSchema
from percolate_identity.models import AuthUser, Token
from percolate_identity.settings import settings


def generate_code_verifier() -> str:
    """Create a random PKCE code verifier (RFC 7636, 48 characters)."""
    return generate_token(48)


class Provider(ABC):
    """Abstract identity provider interface.

    Host applications pick an implementation by name (see
    ``percolate_identity.registry``) and only talk to this interface.
    """

    @property
    @abstractmethod
    def auth_url(self) -> str:
        """Authorization endpoint."""

    @property
    @abstractmethod
    def token_url(self) -> str:
        """Token endpoint."""

    @property
    @abstractmethod
    def scopes(self) -> list[str]:
        """Scopes requested during authorization."""

    @abstractmethod
    async def fetch_raw_user_data(self, token: Token) -> bytes:
        """Fetch the user info payload, unparsed.

        Raises:
            UserFetchError: Network failure, timeout or non-2xx status
        """

    @abstractmethod
    async def fetch_auth_user(self, token: Token) -> AuthUser:
        """Fetch and normalize the authenticated user.

        Raises:
            UserFetchError: User info request failed
            MalformedResponseError: Payload is not a JSON object
        """


class BaseProvider(Provider):
    """OAuth2 authorization code provider configured by class attributes.

    Subclasses set the endpoints, default scopes and ``schema``; they rarely
    need to override any method.

    Example:
        >>> provider = MicrosoftProvider(client_id="...", client_secret="...",
        ...                              redirect_url="https://app/callback")
        >>> url = provider.auth_code_url(state)
        >>> token = await provider.exchange(code)
        >>> user = await provider.fetch_auth_user(token)
    """

    name: str = ""
    display_name: str = ""

    default_auth_url: str = ""
    default_token_url: str = ""
    default_user_api_url: str = ""
    default_scopes: tuple[str, ...] = ()

    schema: UserSchema = UserSchema()

    def __init__(
        self,
        client_id: str = "",
        client_secret: str = "",
        redirect_url: str = "",
        scopes: list[str] | None = None,
        pkce: bool = False,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize provider.

        Args:
            client_id: OAuth client ID
            client_secret: OAuth client secret
            redirect_url: Redirect URI registered with the provider
            scopes: Scope override (defaults to ``default_scopes``)
            pkce: Add S256 code challenges to authorization URLs
            timeout: Request timeout in seconds (defaults to settings)
            transport: httpx transport override (tests, proxies)
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_url = redirect_url
        self.pkce = pkce
        self.timeout = timeout if timeout is not None else settings.http_timeout
        self.transport = transport
        self._scopes = list(scopes) if scopes is not None else list(self.default_scopes)

    @property
    def auth_url(self) -> str:
        return self.default_auth_url

    @property
    def token_url(self) -> str:
        return self.default_token_url

    @property
    def user_api_url(self) -> str:
        return self.default_user_api_url

    @property
    def scopes(self) -> list[str]:
        return list(self._scopes)

    def _http_client(self) -> httpx.AsyncClient:
        # One client per call: providers hold no open connections between requests.
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            headers={"User-Agent": settings.user_agent},
            transport=self.transport,
        )

    def auth_code_url(self, state: str, code_verifier: str | None = None, **params: str) -> str:
        """Build the authorization redirect URL.

        Args:
            state: Opaque anti-forgery value, echoed back by the provider
            code_verifier: PKCE verifier (used only when ``pkce`` is enabled)
            **params: Extra query parameters (e.g. ``prompt="consent"``)

        Returns:
            URL to redirect the user to
        """
        if self.pkce and code_verifier:
            params["code_challenge"] = create_s256_code_challenge(code_verifier)
            params["code_challenge_method"] = "S256"

        return prepare_grant_uri(
            self.auth_url,
            client_id=self.client_id,
            response_type="code",
            redirect_uri=self.redirect_url or None,
            scope=self._scopes,
            state=state,
            **params,
        )

    async def exchange(self, code: str, code_verifier: str | None = None, **params: str) -> Token:
        """Exchange an authorization code for a token.

        Args:
            code: Authorization code from the redirect callback
            code_verifier: PKCE verifier matching the challenge sent earlier
            **params: Extra token request parameters

        Returns:
            Token with access/refresh credentials

        Raises:
            TokenExchangeError: Network failure, error response, malformed or missing access token
        """
        auth = None
        if self.client_secret:
            auth = httpx.BasicAuth(self.client_id, self.client_secret)
        else:
            params["client_id"] = self.client_id

        body = prepare_token_request(
            "authorization_code",
            code=code,
            redirect_uri=self.redirect_url or None,
            code_verifier=code_verifier if self.pkce else None,
            **params,
        )

        async with self._http_client() as client:
            try:
                response = await client.post(
                    self.token_url,
                    content=body,
                    auth=auth,
                    headers={
                        "Accept": "application/json",
                        "Content-Type": "application/x-www-form-urlencoded",
                    },
                )
            except httpx.HTTPError as e:
                logger.warning(f"{self.name} token exchange failed: {e}")
                raise TokenExchangeError(str(e) or type(e).__name__) from e

        try:
            data = response.json()
        except (ValueError, RecursionError) as e:
            logger.warning(f"{self.name} token response unreadable: status={response.status_code}")
            raise TokenExchangeError(f"unreadable token response (status={response.status_code})") from e

        if not isinstance(data, dict):
            raise TokenExchangeError("token response is not a JSON object")

        if "error" in data:
            logger.warning(f"{self.name} token exchange rejected: {data['error']}")
            description = data.get("error_description")
            raise TokenExchangeError(f"{data['error']}: {description}" if description else str(data["error"]))

        if not response.is_success:
            logger.warning(f"{self.name} token exchange failed: status={response.status_code}")
            raise TokenExchangeError(f"status={response.status_code}")

        if not data.get("access_token"):
            raise TokenExchangeError("missing access_token")

        try:
            return Token.from_response(OAuth2Token.from_dict(data))
        except (TypeError, ValueError, OverflowError, OSError) as e:
            logger.warning(f"{self.name} token response malformed: {e}")
            raise TokenExchangeError(f"malformed token response: {e}") from e

    async def fetch_raw_user_data(self, token: Token) -> bytes:
        """GET the user info endpoint with the token as bearer credential."""
        return await self._authorized_get(self.user_api_url, token)

    async def _authorized_get(self, url: str, token: Token) -> bytes:
        async with self._http_client() as client:
            try:
                response = await client.get(
                    url,
                    headers={"Authorization": f"Bearer {token.access_token}"},
                )
            except httpx.HTTPError as e:
                logger.warning(f"{self.name} request to {url} failed: {e}")
                raise UserFetchError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(f"{self.name} request to {url} failed: status={response.status_code}")
            raise UserFetchError(f"status={response.status_code}", status_code=response.status_code)

        return response.content

    async def fetch_auth_user(self, token: Token) -> AuthUser:
        """Fetch the user info payload and normalize it with ``schema``."""
        data = await self.fetch_raw_user_data(token)
        raw_user = self._decode(data)

        extracted = self.schema.extract(raw_user)
        logger.debug(f"{self.name} user resolved: id={extracted['id']!r}")

        return AuthUser(
            **extracted,
            raw_user=raw_user,
            access_token=token.access_token,
            refresh_token=token.refresh_token,
            expiry=token.expiry,
        )

    def _decode(self, data: bytes) -> dict[str, Any]:
        try:
            raw_user = json.loads(data)
        except (ValueError, RecursionError) as e:
            raise MalformedResponseError(f"invalid JSON from {self.name} user info endpoint") from e

        if not isinstance(raw_user, dict):
            raise MalformedResponseError(
                f"expected a JSON object from {self.name}, got {type(raw_user).__name__}"
            )
        return raw_user

    def __repr__(self) -> str:
        return f"{type(self).__name__}(client_id={self.client_id!r}, scopes={self._scopes!r})"
