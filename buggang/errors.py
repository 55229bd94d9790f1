"""
Error taxonomy.

Not-found is never an exception: lookups return None and status/delete
operations return False.
"""


class BugGangError(Exception):
    """Base class for all scheduler errors."""
    pass


class ValidationError(BugGangError):
    """Raised when a task title is empty or whitespace."""
    pass


class NotInitialized(BugGangError):
    """Raised when the adapter is used before initialize() or after close()."""
    pass


class StorageUnavailable(BugGangError):
    """Raised when the database engine cannot be opened."""
    pass


class ConfigError(BugGangError):
    """Raised when configuration is invalid or unreadable."""
    pass
