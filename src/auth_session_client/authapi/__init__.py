"""Auth service client package.

Provides an asyncio HTTP client for the session endpoints of an auth
service: creating sessions from credentials, reading them back by token,
and creating impersonated sessions.

Exports:
    AuthClient: Client exposing the session operations.
    Context: Cancellation signal with optional deadline.
    SessionData: Pydantic model of a resolved session.
    Credentials: Factor name to credential mapping.
    AuthClientError and subclasses: Error taxonomy of the client.
    DEFAULT_TIMEOUT: Default HTTP transport timeout.
"""

from . import types
from .client import AuthClient
from .context import CANCELLED, DEADLINE_EXCEEDED, Context
from .endpoint import resolve_endpoint
from .errors import (
    AuthClientError,
    DecodeError,
    EmptyResponseError,
    EncodeError,
    InvalidEndpointError,
    RequestCancelledError,
    ServerRejectedError,
    TransportError,
    UnsupportedSchemeError,
)
from .executor import DEFAULT_TIMEOUT
from .types import Credentials, SessionData

__all__ = [
    "CANCELLED",
    "DEADLINE_EXCEEDED",
    "DEFAULT_TIMEOUT",
    "AuthClient",
    "AuthClientError",
    "Context",
    "Credentials",
    "DecodeError",
    "EmptyResponseError",
    "EncodeError",
    "InvalidEndpointError",
    "RequestCancelledError",
    "ServerRejectedError",
    "SessionData",
    "TransportError",
    "UnsupportedSchemeError",
    "resolve_endpoint",
    "types",
]
