"""Session state models."""

from dataclasses import dataclass
from enum import Enum


class SessionState(str, Enum):
    """Lifecycle state of the sync controller."""

    INITIALIZING = "initializing"
    ANONYMOUS = "anonymous"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Session:
    """An authenticated user session.

    ``user_id`` is an opaque identifier supplied by the auth provider and is
    the only thing the remote store keys on.
    """

    user_id: str
    email: str | None = None
