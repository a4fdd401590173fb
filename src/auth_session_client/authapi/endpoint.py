"""Normalization of auth service base URLs into session endpoints."""

from urllib.parse import quote

import httpx

from .errors import InvalidEndpointError, UnsupportedSchemeError

SUPPORTED_SCHEMES = ("http", "https")

SESSION_SEGMENT = "session"


def resolve_endpoint(base_url: str) -> httpx.URL:
    """Resolve a base URL into the canonical session collection URL.

    ``https://example.com`` and ``https://example.com/`` both become
    ``https://example.com/session``; ``https://example.com/api`` becomes
    ``https://example.com/api/session``.

    Args:
        base_url: Base URL of the auth service.

    Returns:
        The session endpoint.

    Raises:
        InvalidEndpointError: If ``base_url`` is not a parseable URL with a host.
        UnsupportedSchemeError: If the scheme is not http or https.
    """
    try:
        parsed = httpx.URL(base_url)
    except (httpx.InvalidURL, TypeError) as exc:
        msg = f"Invalid endpoint URL: {base_url!r}"
        raise InvalidEndpointError(msg) from exc

    if parsed.scheme not in SUPPORTED_SCHEMES:
        raise UnsupportedSchemeError(parsed.scheme)
    if not parsed.host:
        msg = f"Endpoint URL has no host: {base_url!r}"
        raise InvalidEndpointError(msg)

    path = parsed.path or "/"
    if not path.endswith("/"):
        path += "/"
    # Collapse repeated trailing slashes so we never produce "//session"
    path = path.rstrip("/") + "/" + SESSION_SEGMENT

    return parsed.copy_with(path=path)


def session_url(endpoint: httpx.URL, *segments: str) -> httpx.URL:
    """Build ``{endpoint}/{segment}/...`` below the session endpoint.

    Each segment is percent-encoded, dots included, so a token such as
    ``abc/def`` or ``..`` stays a single segment below the endpoint.
    """
    if not segments:
        return endpoint
    # "." and ".." would otherwise be resolved away as dot segments
    suffix = "/".join(
        quote(segment, safe="").replace(".", "%2E") for segment in segments
    )
    return endpoint.copy_with(path=f"{endpoint.path}/{suffix}")
