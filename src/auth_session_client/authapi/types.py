"""Data types exchanged with the auth service.

Pydantic models representing the session document served by the auth
service, plus the credential mapping sent when creating a session.
"""

from collections.abc import Mapping
from typing import TypeAlias

from pydantic import BaseModel, ConfigDict, Field

# n-factor auth: factor name -> credential,
# e.g. {"username": "bob", "password": "foo", "yubikey": "cccbar"}
Credentials: TypeAlias = Mapping[str, str]


class SessionData(BaseModel):
    """Session data as served by ``GET {endpoint}/{token}``.

    The token is not part of the served document; it is filled in from the
    token the caller asked for. Unknown fields are ignored and missing ones
    take empty defaults.
    """

    model_config = ConfigDict(frozen=True)

    token: str = ""
    username: str = ""

    # Factors satisfied when the session was created, in order
    factors: list[str] = Field(default_factory=list)

    # Groups this user is a member of
    group_memberships: list[str] = Field(default_factory=list)
