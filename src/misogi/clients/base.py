"""Protocols for the remote log store and auth provider."""

from typing import Callable, Protocol, runtime_checkable

from ..models.log import RemoteLogRow
from ..models.session import Session

SessionListener = Callable[[Session | None], None]


@runtime_checkable
class RemoteLogStore(Protocol):
    """Per-record remote mirror of the log document.

    Rows are unique on ``(user_id, date)``. An upsert for an existing key
    replaces the whole row; fields are never merged.
    """

    async def query(self, user_id: str) -> list[RemoteLogRow]:
        """Fetch every row stored for a user.

        Raises:
            RemoteStoreError: If the rows cannot be fetched
        """
        ...

    async def upsert(self, row: RemoteLogRow) -> None:
        """Insert a row or replace the existing row for its key.

        Raises:
            RemoteStoreError: If the write fails
        """
        ...


@runtime_checkable
class AuthProvider(Protocol):
    """Source of user sessions.

    Sign-in and sign-out complete asynchronously; their outcome is only
    observed through listeners registered with ``on_session_change``.
    """

    async def get_current_session(self) -> Session | None:
        """Return the active session, if any."""
        ...

    def on_session_change(self, listener: SessionListener) -> None:
        """Register a callback for sign-in and sign-out events."""
        ...

    async def sign_in(self) -> str | None:
        """Start the sign-in flow.

        Returns:
            A URL the user must visit to finish signing in, or None
        """
        ...

    async def complete_sign_in(self, code: str) -> None:
        """Finish a redirect sign-in with the code handed back to the app."""
        ...

    async def sign_out(self) -> None:
        """End the current session."""
        ...


class ListenerRegistry:
    """Keeps session listeners and notifies them in registration order."""

    def __init__(self):
        self._listeners: list[SessionListener] = []

    def add(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def notify(self, session: Session | None) -> None:
        for listener in list(self._listeners):
            listener(session)
