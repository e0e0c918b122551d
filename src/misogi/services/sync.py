"""Session lifecycle and write-through sync of the log document."""

import asyncio
import logging
from abc import ABC, abstractmethod
from datetime import date

from ..clients.base import AuthProvider, RemoteLogStore
from ..db.repositories import LocalLogStore
from ..exceptions import SyncError
from ..models.log import (
    TARGET,
    Exercise,
    LogDocument,
    LogEntry,
    RemoteLogRow,
    Totals,
    rows_to_document,
)
from ..models.session import Session, SessionState
from ..utils.dates import format_date, is_valid_key, today
from .aggregation import (
    ProgressSummary,
    day_totals,
    progress_summary,
    week_totals,
    year_totals,
)
from .remote_writer import RemoteWriter

logger = logging.getLogger(__name__)


def _valid_amount(amount) -> bool:
    # bool is an int subclass; True must not count as one rep
    return isinstance(amount, int) and not isinstance(amount, bool) and amount > 0


def parse_amount(raw: str | int | None) -> int | None:
    """Parse a typed-in rep count, returning None unless it is a positive integer."""
    if isinstance(raw, int) and not isinstance(raw, bool):
        return raw if raw > 0 else None
    if not isinstance(raw, str):
        return None
    try:
        amount = int(raw.strip())
    except ValueError:
        return None
    return amount if amount > 0 else None


class SyncController(ABC):
    """Owns the in-memory log document and writes every change through.

    The local store is always written before a mutation returns. Subclasses
    decide whether a remote mirror exists and how sessions are handled.
    """

    def __init__(
        self,
        local_store: LocalLogStore,
        document: LogDocument | None = None,
        target: int = TARGET,
    ):
        self.local_store = local_store
        self.document = document or LogDocument()
        self.target = target
        self.state = SessionState.INITIALIZING
        self.session: Session | None = None
        # Serializes mutations and document reloads
        self._lock = asyncio.Lock()

    @property
    def requires_sign_in(self) -> bool:
        """Whether the UI must gate everything behind a sign-in action."""
        return False

    @abstractmethod
    async def start(self) -> None:
        """Resolve the initial session state and load the document."""

    async def _load_local(self) -> None:
        self.document = await self.local_store.load_document()
        logger.info("Loaded %d day(s) from local store", len(self.document))

    async def add_reps(
        self,
        exercise: Exercise | str,
        amount: int,
        day: date | str | None = None,
    ) -> bool:
        """Add reps of one exercise to a date.

        Invalid input (unknown exercise, non-positive or non-integer amount,
        malformed date) is ignored.

        Args:
            exercise: Exercise to increment
            amount: Number of reps, must be a positive integer
            day: Date or ``YYYY-MM-DD`` key, defaults to today

        Returns:
            True if the document was changed
        """
        ex = Exercise.parse(exercise)
        if ex is None:
            logger.debug("Ignoring reps for unknown exercise %r", exercise)
            return False
        if not _valid_amount(amount):
            logger.debug("Ignoring invalid rep amount %r", amount)
            return False

        key = self._key(day)
        if key is None:
            logger.debug("Ignoring reps for invalid date %r", day)
            return False

        async with self._lock:
            entry = self.document.entry_for(key).add(ex, amount)
            self.document = self.document.with_entry(key, entry)

            if not await self.local_store.save_document(self.document):
                logger.warning("Change to %s kept in memory only; it will not survive a restart", key)

            self._mirror(key, entry)

        return True

    async def add_custom_amount(
        self,
        exercise: Exercise | str,
        raw: str | int | None,
        day: date | str | None = None,
    ) -> bool:
        """Add a typed-in amount; anything but a positive integer is ignored."""
        amount = parse_amount(raw)
        if amount is None:
            logger.debug("Ignoring custom amount %r", raw)
            return False
        return await self.add_reps(exercise, amount, day)

    def _key(self, day: date | str | None) -> str | None:
        if day is None:
            return format_date(today())
        if isinstance(day, date):
            return format_date(day)
        if isinstance(day, str) and is_valid_key(day):
            return day
        return None

    def _mirror(self, key: str, entry: LogEntry) -> None:
        """Hook for propagating a changed entry after the local save."""

    async def sign_in(self) -> str | None:
        raise SyncError("No session capability configured")

    async def complete_sign_in(self, code: str) -> None:
        raise SyncError("No session capability configured")

    async def sign_out(self) -> None:
        raise SyncError("No session capability configured")

    async def close(self) -> None:
        """Release resources held by the controller."""

    def day_totals(self, reference: date | str) -> Totals:
        return day_totals(self.document, reference)

    def week_totals(self, reference: date | str) -> Totals:
        return week_totals(self.document, reference)

    def year_totals(self) -> Totals:
        return year_totals(self.document)

    def summary(self, reference: date | str | None = None) -> ProgressSummary:
        """Progress summary for a selected date (default today)."""
        return progress_summary(self.document, reference or today(), target=self.target)


class LocalOnlyController(SyncController):
    """Controller used when no remote or auth capability is configured."""

    async def start(self) -> None:
        await self._load_local()
        self.state = SessionState.ANONYMOUS


class RemoteSyncController(SyncController):
    """Controller that mirrors changes to a remote store for signed-in users.

    Remote reads and writes are best effort. A failed read at sign-in falls
    back to the local cache, and failed writes are only logged by the
    ``RemoteWriter``.
    """

    def __init__(
        self,
        local_store: LocalLogStore,
        remote: RemoteLogStore,
        auth: AuthProvider,
        document: LogDocument | None = None,
        target: int = TARGET,
        timeout: float = 5.0,
    ):
        super().__init__(local_store, document=document, target=target)
        self.remote = remote
        self.auth = auth
        self.timeout = timeout
        self.writer = RemoteWriter(remote, timeout=timeout)
        self._loop: asyncio.AbstractEventLoop | None = None
        self._transitions: set[asyncio.Task] = set()

    @property
    def requires_sign_in(self) -> bool:
        return self.state == SessionState.ANONYMOUS

    async def start(self) -> None:
        self._loop = asyncio.get_running_loop()
        self.auth.on_session_change(self._on_session_change)

        session = await self.auth.get_current_session()
        if session is None:
            await self._load_local()
            self.state = SessionState.ANONYMOUS
            logger.info("No active session; sign-in required")
            return

        await self.handle_session_change(session)

    def _on_session_change(self, session: Session | None) -> None:
        """Auth listener; may be called from any thread."""
        if self._loop is None:
            return

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if running is self._loop:
            self._schedule(session)
        else:
            # Queued ahead of the worker thread's own completion callback, so
            # the awaiting caller sees the task in settle()
            self._loop.call_soon_threadsafe(self._schedule, session)

    def _schedule(self, session: Session | None) -> None:
        task = self._loop.create_task(self.handle_session_change(session))
        self._transitions.add(task)
        task.add_done_callback(self._transitions.discard)

    async def handle_session_change(self, session: Session | None) -> None:
        """Move to the state implied by a new session (or None)."""
        async with self._lock:
            if session is None:
                # The document stays in memory until the next local load
                self.session = None
                self.state = SessionState.ANONYMOUS
                logger.info("Signed out; remote sync stopped")
                return

            self.session = session
            self.state = SessionState.AUTHENTICATED
            await self._load_remote(session)

    async def _load_remote(self, session: Session) -> None:
        try:
            rows = await asyncio.wait_for(self.remote.query(session.user_id), timeout=self.timeout)
        except Exception as e:
            logger.warning("Remote load failed, using local cache: %s", e)
            await self._load_local()
            return

        self.document = rows_to_document(rows)
        logger.info("Loaded %d day(s) from remote for user %s", len(self.document), session.user_id)
        await self.local_store.save_document(self.document)

    def _mirror(self, key: str, entry: LogEntry) -> None:
        if self.state != SessionState.AUTHENTICATED or self.session is None:
            return
        self.writer.submit(RemoteLogRow.from_entry(self.session.user_id, key, entry))

    async def settle(self) -> None:
        """Wait for pending session transitions, whichever thread fired them."""
        while self._transitions:
            await asyncio.gather(*list(self._transitions))

    async def sign_in(self) -> str | None:
        """Start sign-in; the session arrives through the auth listener."""
        url = await self.auth.sign_in()
        await self.settle()
        return url

    async def complete_sign_in(self, code: str) -> None:
        await self.auth.complete_sign_in(code)
        await self.settle()

    async def sign_out(self) -> None:
        await self.auth.sign_out()
        await self.settle()

    async def close(self) -> None:
        await self.settle()
        await self.writer.drain()


def create_controller(
    local_store: LocalLogStore,
    remote: RemoteLogStore | None = None,
    auth: AuthProvider | None = None,
    document: LogDocument | None = None,
    target: int = TARGET,
    timeout: float = 5.0,
) -> SyncController:
    """Pick the controller variant for the configured capabilities."""
    if remote is None or auth is None:
        return LocalOnlyController(local_store, document=document, target=target)
    return RemoteSyncController(
        local_store,
        remote,
        auth,
        document=document,
        target=target,
        timeout=timeout,
    )
