"""Auth service client.

Provides the session operations of the auth service on top of
:class:`RequestExecutor`: reading a session by token, creating a session
token from credentials, and creating impersonated session tokens.
"""

import httpx
import pydantic

from .context import Context
from .endpoint import resolve_endpoint, session_url
from .errors import DecodeError, EmptyResponseError, EncodeError
from .executor import DEFAULT_TIMEOUT, RequestExecutor
from .types import Credentials, SessionData

_CREDENTIALS = pydantic.TypeAdapter(dict[str, str])

# The service always expects a JSON body when creating sessions
_TOKEN_REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "text/plain",
}

_SESSION_REQUEST_HEADERS = {"Accept": "application/json"}


class AuthClient:
    """Client for the session endpoints of an auth service.

    The endpoint is resolved once at construction and never changes; every
    operation is an independent request/response exchange, so one client
    can serve many concurrent tasks. Can be used as an async context manager
    for automatic cleanup.
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the client.

        Args:
            endpoint: Base URL of the auth service (e.g., "https://auth.example.com").
            timeout: Transport timeout in seconds (default: 30.0).
            transport: Optional httpx transport, mainly for tests.

        Raises:
            InvalidEndpointError: If endpoint is not a parseable URL.
            UnsupportedSchemeError: If endpoint is not http or https.
            ValueError: If timeout is not positive.
        """
        self._endpoint = resolve_endpoint(endpoint)
        self._executor = RequestExecutor(timeout=timeout, transport=transport)

    @property
    def endpoint(self) -> httpx.URL:
        """The resolved session endpoint, e.g. ``https://host/session``."""
        return self._endpoint

    async def __aenter__(self):
        """Enter async context manager."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Exit async context manager and cleanup resources."""
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client."""
        await self._executor.aclose()

    async def read_session(
        self,
        token: str,
        *,
        ctx: Context | None = None,
    ) -> SessionData:
        """Read the session identified by ``token``.

        Args:
            token: Session token.
            ctx: Cancellation context (default: background).

        Returns:
            Session data with ``token`` set to the requested token.

        Raises:
            EmptyResponseError: If the service returned no session document.
            DecodeError: If the session document is malformed.
            AuthClientError: Any failure raised by the request executor.
        """
        body = await self._executor.execute(
            ctx or Context.background(),
            "GET",
            session_url(self._endpoint, token),
            headers=_SESSION_REQUEST_HEADERS,
        )
        if not body:
            msg = "Empty body returned reading session"
            raise EmptyResponseError(msg)

        try:
            session = SessionData.model_validate_json(body)
        except pydantic.ValidationError as exc:
            msg = f"Malformed session data: {exc}"
            raise DecodeError(msg) from exc

        # The token is not included in the session document
        return session.model_copy(update={"token": token})

    async def create_session_token(
        self,
        credentials: Credentials,
        *,
        ctx: Context | None = None,
    ) -> str:
        """Create a session from credentials and return its token.

        Args:
            credentials: Mapping of factor name to credential, e.g.
                ``{"username": "bob", "password": "foo"}``.
            ctx: Cancellation context (default: background).

        Returns:
            The new session token, exactly as returned by the service.

        Raises:
            EncodeError: If credentials are not a mapping of strings.
            EmptyResponseError: If the service returned no token.
            AuthClientError: Any failure raised by the request executor.
        """
        try:
            content = _CREDENTIALS.dump_json(_CREDENTIALS.validate_python(dict(credentials)))
        except (pydantic.ValidationError, TypeError, ValueError) as exc:
            msg = f"Credentials cannot be encoded: {exc}"
            raise EncodeError(msg) from exc

        return await self._request_token(
            ctx or Context.background(),
            self._endpoint,
            content,
        )

    async def create_session(
        self,
        credentials: Credentials,
        *,
        ctx: Context | None = None,
    ) -> SessionData:
        """Create a session from credentials and read it back.

        Whichever step fails first raises; nothing partial is returned.
        A token created before a failure in the read step is not revoked.

        Args:
            credentials: Mapping of factor name to credential.
            ctx: Cancellation context shared by both requests (default:
                background).

        Returns:
            Session data of the new session.
        """
        ctx = ctx or Context.background()
        token = await self.create_session_token(credentials, ctx=ctx)
        return await self.read_session(token, ctx=ctx)

    async def create_impersonated_session_token(
        self,
        acting_token: str,
        target_username: str,
        *,
        ctx: Context | None = None,
    ) -> str:
        """Create a session for ``target_username`` authorized by ``acting_token``.

        The acting session authorizes the request through the URL path; no
        credentials are sent.

        Args:
            acting_token: Token of the session doing the impersonation.
            target_username: User to create a session for.
            ctx: Cancellation context (default: background).

        Returns:
            The new session token.

        Raises:
            EmptyResponseError: If the service returned no token.
            AuthClientError: Any failure raised by the request executor.
        """
        return await self._request_token(
            ctx or Context.background(),
            session_url(self._endpoint, acting_token, target_username),
            b"{}",
        )

    async def _request_token(
        self,
        ctx: Context,
        url: httpx.URL,
        content: bytes,
    ) -> str:
        body = await self._executor.execute(
            ctx,
            "POST",
            url,
            content=content,
            headers=_TOKEN_REQUEST_HEADERS,
        )
        if not body:
            msg = "Empty body returned creating session"
            raise EmptyResponseError(msg)

        # The token is the bare response body; no trimming
        try:
            return body.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = "Session token is not valid UTF-8"
            raise DecodeError(msg) from exc
