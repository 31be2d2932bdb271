"""Exceptions raised by the Session Timer core."""


class SessionTimerError(Exception):
    """Base class for recoverable Session Timer errors."""


class StorageReadError(SessionTimerError):
    """Persisted data is malformed or could not be read."""


class StorageWriteError(SessionTimerError):
    """The key-value provider rejected a write; nothing was committed."""


class ConfigError(SessionTimerError):
    """The configuration file is malformed."""
