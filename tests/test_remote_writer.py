"""Tests for fire-and-forget remote writes."""

import asyncio

import pytest

from misogi.models.log import RemoteLogRow
from misogi.services.remote_writer import RemoteWriter


def make_row(date="2026-01-01", pushups=5):
    return RemoteLogRow(user_id="user-1", date=date, pushups=pushups)


class TestRemoteWriter:
    """Tests for RemoteWriter."""

    @pytest.mark.asyncio
    async def test_submit_does_not_block(self, remote_store):
        remote_store.upsert_delay = 0.05
        writer = RemoteWriter(remote_store, timeout=1.0)

        task = writer.submit(make_row())

        assert not task.done()
        assert writer.pending == 1
        assert remote_store.upserts == []

        await writer.drain()
        assert writer.pending == 0
        assert writer.succeeded == 1
        assert len(remote_store.upserts) == 1

    @pytest.mark.asyncio
    async def test_failure_is_swallowed(self, remote_store):
        remote_store.fail_upsert = True
        writer = RemoteWriter(remote_store)

        task = writer.submit(make_row())
        await writer.drain()

        assert task.result() is False
        assert writer.failures == 1

    @pytest.mark.asyncio
    async def test_timeout_counts_as_failure(self, remote_store):
        remote_store.upsert_delay = 1.0
        writer = RemoteWriter(remote_store, timeout=0.01)

        task = writer.submit(make_row())
        await writer.drain()

        assert task.result() is False
        assert writer.failures == 1
        assert remote_store.upserts == []

    @pytest.mark.asyncio
    async def test_unexpected_error_is_swallowed(self):
        class ExplodingStore:
            async def query(self, user_id):
                return []

            async def upsert(self, row):
                raise RuntimeError("boom")

        writer = RemoteWriter(ExplodingStore())
        task = writer.submit(make_row())
        await writer.drain()

        assert task.result() is False
        assert writer.failures == 1

    @pytest.mark.asyncio
    async def test_no_retry(self, remote_store):
        remote_store.fail_upsert = True
        writer = RemoteWriter(remote_store)

        writer.submit(make_row())
        await writer.drain()
        remote_store.fail_upsert = False
        await asyncio.sleep(0.01)

        assert remote_store.upserts == []

    @pytest.mark.asyncio
    async def test_last_arrival_wins(self, remote_store):
        """A slow older write landing late overwrites the newer value."""
        writer = RemoteWriter(remote_store, timeout=1.0)

        remote_store.upsert_delays = [0.05, 0.0]
        writer.submit(make_row(pushups=3))
        writer.submit(make_row(pushups=10))
        await writer.drain()

        assert remote_store.rows[("user-1", "2026-01-01")].pushups == 3
