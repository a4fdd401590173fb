"""Shared fixtures: an in-process auth server answering like the real one.

Each test builds its own server from explicit fixture data, so tests never
share mutable state.
"""

import asyncio
import dataclasses
import json

import httpx
import pytest

from auth_session_client.authapi import AuthClient, SessionData

SERVER_URL = "http://auth.test"

GOOD_CREDENTIALS = {"username": "good-user", "password": "foo"}

GOOD_SESSION = SessionData(
    token="good-session",
    username="foo",
    factors=["password", "google-auth"],
    group_memberships=["staff"],
)

IMPERSONATED_TOKEN = "impersonated-session"


@dataclasses.dataclass
class FixtureAuthServer:
    """Request handler for ``httpx.MockTransport`` backed by fixture data.

    ``credentials`` maps a username to the credentials it accepts and the
    token it issues; ``sessions`` maps a token to its session data.
    """

    credentials: dict[str, tuple[dict[str, str], str]]
    sessions: dict[str, SessionData]
    requests: list[httpx.Request] = dataclasses.field(default_factory=list)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path_bits = request.url.path.split("/")
        if len(path_bits) < 2 or path_bits[1] != "session":  # noqa: PLR2004
            return httpx.Response(404)
        if request.method == "POST":
            return self._post(request, path_bits)
        if request.method == "GET":
            return self._get(path_bits)
        return httpx.Response(405)

    def _post(self, request: httpx.Request, path_bits: list[str]) -> httpx.Response:
        if request.headers.get("Content-Type") != "application/json":
            return httpx.Response(400, text="Bad content-type")
        try:
            body_creds = json.loads(request.content)
        except ValueError as exc:
            return httpx.Response(400, text=f"Error parsing body to JSON: {exc}")

        if len(path_bits) == 2:  # noqa: PLR2004
            known = self.credentials.get(body_creds.get("username", ""))
            if known is None or known[0].get("password") != body_creds.get("password"):
                return httpx.Response(403)
            return httpx.Response(200, text=known[1])

        if path_bits[2] not in self.sessions:
            return httpx.Response(403)
        return httpx.Response(200, text=IMPERSONATED_TOKEN)

    def _get(self, path_bits: list[str]) -> httpx.Response:
        session = self.sessions.get(path_bits[2]) if len(path_bits) > 2 else None  # noqa: PLR2004
        if session is None:
            return httpx.Response(404)
        # The token is not included in the output
        return httpx.Response(200, json=session.model_dump(exclude={"token"}))


async def slow_handler(request: httpx.Request) -> httpx.Response:
    """Answer only after a second, long after any test cancels."""
    await asyncio.sleep(1)
    return httpx.Response(200, text="too-late")


@pytest.fixture
def auth_server() -> FixtureAuthServer:
    """Auth server knowing one user and one session."""
    return FixtureAuthServer(
        credentials={"good-user": (GOOD_CREDENTIALS, GOOD_SESSION.token)},
        sessions={GOOD_SESSION.token: GOOD_SESSION},
    )


@pytest.fixture
async def auth_client(auth_server: FixtureAuthServer):
    """AuthClient talking to the fixture auth server."""
    async with AuthClient(SERVER_URL, transport=httpx.MockTransport(auth_server)) as c:
        yield c


@pytest.fixture
async def slow_client():
    """AuthClient talking to a server that never answers in time."""
    async with AuthClient(SERVER_URL, transport=httpx.MockTransport(slow_handler)) as c:
        yield c
