"""Aggregation and sync services for misogi."""

from ..config import Settings
from ..db.repositories import LocalLogStore
from .sync import LocalOnlyController, RemoteSyncController, SyncController, create_controller


def controller_from_settings(settings: Settings) -> SyncController:
    """Build the local store, optional remote, and matching controller."""
    from ..clients import build_remote

    local_store = LocalLogStore(settings.db_path, key=settings.storage_key)
    remote = build_remote(settings)
    if remote is None:
        return create_controller(local_store, target=settings.target)

    store, auth = remote
    return create_controller(
        local_store,
        remote=store,
        auth=auth,
        target=settings.target,
        timeout=settings.remote_timeout,
    )


__all__ = [
    "controller_from_settings",
    "create_controller",
    "LocalOnlyController",
    "RemoteSyncController",
    "SyncController",
]
