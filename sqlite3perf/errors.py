"""
Exceptions raised by sqlite3perf.

Every fatal condition is a subclass of Sqlite3PerfError so the CLI can
report it and exit non-zero in one place.
"""


class Sqlite3PerfError(RuntimeError):
    """Base class for fatal benchmark errors."""


class ConfigError(Sqlite3PerfError):
    """Invalid option value or unreadable config file."""


class StoreError(Sqlite3PerfError):
    """The database could not be opened, written or read."""


class RandomnessError(Sqlite3PerfError):
    """The operating system could not supply random bytes."""


class HashMismatchError(Sqlite3PerfError):
    """A stored hash does not match the hash of its stored value."""

    def __init__(self, row_id: int, stored: str, computed: str):
        self.row_id = row_id
        self.stored = stored
        self.computed = computed
        super().__init__(
            f"Hash of original value and persisted hash do not match! "
            f"(ID {row_id}: stored {stored}, computed {computed})"
        )
