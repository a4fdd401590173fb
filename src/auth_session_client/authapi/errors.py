"""Errors raised by the auth service client.

Construction-time errors (:class:`InvalidEndpointError`,
:class:`UnsupportedSchemeError`) are fatal to the client being built. All
other errors are raised per call and are never retried by the library.
"""


class AuthClientError(Exception):
    """Base class for all auth client errors."""


class InvalidEndpointError(AuthClientError, ValueError):
    """Raised when the endpoint string cannot be parsed as a URL."""


class UnsupportedSchemeError(AuthClientError, ValueError):
    """Raised when the endpoint scheme is not http or https."""

    def __init__(self, scheme: str):
        super().__init__(f"Endpoint scheme must be http or https, got: {scheme!r}")
        self.scheme = scheme


class TransportError(AuthClientError):
    """Raised when the HTTP transport fails for reasons other than cancellation.

    The underlying ``httpx`` exception is available as ``__cause__``.
    """


class RequestCancelledError(AuthClientError):
    """Raised when the request context is cancelled or its deadline passes."""

    def __init__(self, reason: str):
        super().__init__(f"Request aborted: {reason}")
        self.reason = reason


class ServerRejectedError(AuthClientError):
    """Raised when the service answers with a non-2xx status.

    ``detail`` is the response body, or the status line when the body is
    empty.
    """

    def __init__(self, status_code: int, detail: str):
        super().__init__(detail)
        self.status_code = status_code
        self.detail = detail


class EmptyResponseError(AuthClientError):
    """Raised when a successful response carries no body."""


class DecodeError(AuthClientError):
    """Raised when a response body cannot be decoded."""


class EncodeError(AuthClientError):
    """Raised when request data cannot be serialized."""
