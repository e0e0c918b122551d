"""Exception types raised by misogi components."""


class MisogiError(Exception):
    """Base class for misogi errors."""


class ConfigError(MisogiError):
    """Invalid or incomplete configuration."""


class LogStoreError(MisogiError):
    """The local log store could not be read or written."""


class RemoteStoreError(MisogiError):
    """A remote log store call failed."""


class RemoteTimeoutError(RemoteStoreError):
    """A remote log store call did not finish in time."""

    def __init__(self, operation: str, timeout: float):
        super().__init__(f"{operation} timed out after {timeout:.1f}s")
        self.operation = operation
        self.timeout = timeout


class SyncError(MisogiError):
    """The sync controller was asked to do something it cannot do."""
