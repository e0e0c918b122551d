"""Runtime configuration read from the environment."""

import os
from dataclasses import dataclass
from pathlib import Path

from .exceptions import ConfigError
from .models.log import STORAGE_KEY, TARGET

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"

DEFAULT_REMOTE_TIMEOUT = 5.0

REMOTE_BACKENDS = ("supabase", "sqlite")


def _float(env: dict, name: str, default: float) -> float:
    raw = env.get(name)
    if raw in (None, ""):
        return default
    try:
        value = float(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


def _int(env: dict, name: str, default: int) -> int:
    raw = env.get(name)
    if raw in (None, ""):
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ConfigError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ConfigError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass
class Settings:
    """Application settings.

    ``remote`` selects the cloud mirror backend. When it is ``None`` the app
    runs local-only and never asks the user to sign in.
    """

    data_dir: Path = DATA_DIR
    storage_key: str = STORAGE_KEY
    target: int = TARGET
    remote: str | None = None
    supabase_url: str | None = None
    supabase_key: str | None = None
    remote_db: Path | None = None
    user_id: str | None = None
    remote_timeout: float = DEFAULT_REMOTE_TIMEOUT
    redirect_url: str | None = None

    @property
    def db_path(self) -> Path:
        return self.data_dir / "misogi.db"

    @property
    def remote_enabled(self) -> bool:
        return self.remote is not None

    def validate(self) -> None:
        """Check that the selected remote backend has what it needs.

        Raises:
            ConfigError: If the configuration is inconsistent
        """
        if self.remote is None:
            return
        if self.remote not in REMOTE_BACKENDS:
            raise ConfigError(
                f"Unknown remote backend {self.remote!r} "
                f"(expected one of: {', '.join(REMOTE_BACKENDS)})"
            )
        if self.remote == "supabase" and not (self.supabase_url and self.supabase_key):
            raise ConfigError("SUPABASE_URL and SUPABASE_KEY are required for the supabase remote")
        if self.remote == "sqlite" and self.remote_db is None:
            raise ConfigError("MISOGI_REMOTE_DB is required for the sqlite remote")

    @classmethod
    def from_env(cls, env: dict | None = None) -> "Settings":
        """Build settings from environment variables."""
        if env is None:
            env = dict(os.environ)

        data_dir = Path(env["MISOGI_DATA_DIR"]) if env.get("MISOGI_DATA_DIR") else DATA_DIR
        remote_db = Path(env["MISOGI_REMOTE_DB"]) if env.get("MISOGI_REMOTE_DB") else None

        settings = cls(
            data_dir=data_dir,
            storage_key=env.get("MISOGI_STORAGE_KEY") or STORAGE_KEY,
            target=_int(env, "MISOGI_TARGET", TARGET),
            remote=(env.get("MISOGI_REMOTE") or "").strip().lower() or None,
            supabase_url=env.get("SUPABASE_URL") or None,
            supabase_key=env.get("SUPABASE_KEY") or None,
            remote_db=remote_db,
            user_id=env.get("MISOGI_USER_ID") or None,
            remote_timeout=_float(env, "MISOGI_REMOTE_TIMEOUT", DEFAULT_REMOTE_TIMEOUT),
            redirect_url=env.get("MISOGI_REDIRECT_URL") or None,
        )
        settings.validate()
        return settings
