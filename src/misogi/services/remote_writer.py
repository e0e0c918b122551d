"""Detached, best-effort writes to the remote log store."""

import asyncio
import logging

from ..clients.base import RemoteLogStore
from ..exceptions import RemoteStoreError, RemoteTimeoutError
from ..models.log import RemoteLogRow

logger = logging.getLogger(__name__)


class RemoteWriter:
    """Runs remote upserts as detached tasks.

    Contract:
        - ``submit`` returns immediately; the caller never waits on the network.
        - A failed or timed-out upsert is logged and counted, never raised,
          never retried, and never undoes the local change.
        - Tasks are not cancelled by the writer. ``drain`` waits for them.
        - Two submits for the same date are not ordered; the store keeps
          whichever arrives last.
    """

    def __init__(self, store: RemoteLogStore, timeout: float = 5.0):
        self.store = store
        self.timeout = timeout
        self.succeeded = 0
        self.failures = 0
        self._tasks: set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        """Number of upserts still in flight."""
        return len(self._tasks)

    def submit(self, row: RemoteLogRow) -> asyncio.Task:
        """Schedule an upsert without waiting for it."""
        task = asyncio.create_task(
            self._write(row), name=f"remote-upsert:{row.user_id}:{row.date}"
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def _write(self, row: RemoteLogRow) -> bool:
        try:
            try:
                await asyncio.wait_for(self.store.upsert(row), timeout=self.timeout)
            except asyncio.TimeoutError:
                raise RemoteTimeoutError("upsert", self.timeout) from None
        except RemoteStoreError as e:
            self.failures += 1
            logger.warning("Remote sync of %s failed: %s", row.date, e)
            return False
        except Exception:
            self.failures += 1
            logger.exception("Remote sync of %s failed unexpectedly", row.date)
            return False

        self.succeeded += 1
        logger.debug("Synced %s for user %s", row.date, row.user_id)
        return True

    async def drain(self) -> None:
        """Wait for every in-flight upsert to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))
