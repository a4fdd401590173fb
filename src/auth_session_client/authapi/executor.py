"""Single-attempt HTTP request execution with cancellation support.

Runs one request through a shared ``httpx.AsyncClient`` and classifies the
outcome as raw body bytes, a transport failure, a cancellation or a server
rejection.
"""

import asyncio
import time

import httpx
import structlog

from .context import DEADLINE_EXCEEDED, Context
from .errors import RequestCancelledError, ServerRejectedError, TransportError

logger = structlog.get_logger(__name__)

DEFAULT_TIMEOUT = 30.0


class RequestExecutor:
    """Issues exactly one HTTP request per call, never retrying.

    The underlying ``httpx.AsyncClient`` is created lazily and shared by all
    requests, so connections are pooled across concurrent operations.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize the executor.

        Args:
            timeout: Transport timeout in seconds (default: 30.0).
            transport: Optional transport to send requests through instead
                of the default network transport.

        Raises:
            ValueError: If timeout is not positive.
        """
        if timeout <= 0:
            msg = "timeout must be positive"
            raise ValueError(msg)

        self._timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the shared httpx client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            )
        return self._client

    async def aclose(self) -> None:
        """Close the shared HTTP client if open."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()

    async def execute(
        self,
        ctx: Context,
        method: str,
        url: httpx.URL,
        content: bytes | None = None,
        headers: dict[str, str] | None = None,
    ) -> bytes:
        """Execute one request and return the response body.

        The request, including the body read, is raced against ``ctx``.
        Whichever finishes first decides the outcome; a losing request is
        cancelled and not waited for.

        Args:
            ctx: Cancellation context bounding the request.
            method: HTTP method.
            url: Absolute request URL.
            content: Optional request body.
            headers: Optional request headers.

        Returns:
            Raw body bytes of a 2xx response (may be empty).

        Raises:
            RequestCancelledError: If ``ctx`` fires before the response is read.
            TransportError: If the transport fails for any other reason.
            ServerRejectedError: If the response status is not 2xx.
        """
        if ctx.done():
            raise RequestCancelledError(ctx.reason)

        start_time = time.time()
        logger.debug("Making API request", method=method, url=str(url))

        send = asyncio.ensure_future(
            self.client.request(method, url, content=content, headers=headers),
        )
        cancelled = asyncio.ensure_future(ctx.wait())
        try:
            done, _ = await asyncio.wait(
                {send, cancelled},
                timeout=ctx.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            cancelled.cancel()
            if not send.done():
                send.cancel()

        if send not in done:
            # asyncio may wake marginally before the deadline clock agrees
            raise RequestCancelledError(ctx.reason or DEADLINE_EXCEEDED)

        try:
            response = send.result()
        except httpx.HTTPError as exc:
            if ctx.done():
                raise RequestCancelledError(ctx.reason) from exc
            msg = f"{method} {url} failed: {exc}"
            raise TransportError(msg) from exc

        duration = time.time() - start_time
        logger.debug(
            "API request completed",
            status_code=response.status_code,
            duration_seconds=round(duration, 3),
        )

        if not response.is_success:
            detail = response.text or f"{response.status_code} {response.reason_phrase}"
            raise ServerRejectedError(response.status_code, detail)
        return response.content
