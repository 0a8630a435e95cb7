"""
Storage Adapters

Thin wrappers around the database drivers. Every driver error is re-raised
as StoreError so callers only deal with one exception type.

Usage:
    with SQLiteAdapter("./sqlite3perf.db") as adapter:
        adapter.drop_table()
        adapter.create_table()
        adapter.insert(record)
"""

import sqlite3
from abc import ABC, abstractmethod
from typing import Iterator, Tuple, Type

from .errors import ConfigError, StoreError
from .records import Record

TABLE_NAME = "bench"

Row = Tuple[int, str, str]


class StorageAdapter(ABC):
    """Abstract base for the benchmark's relational store."""

    engine = ""
    create_sql = ""

    def __init__(self, db_path: str):
        self.db_path = db_path
        self.conn = None

    # ============================================
    # DRIVER HOOKS
    # ============================================

    @abstractmethod
    def _open(self):
        """Open and return a driver connection in autocommit mode."""
        pass

    @abstractmethod
    def _driver_errors(self) -> Tuple[Type[BaseException], ...]:
        """Exception types raised by the driver."""
        pass

    # ============================================
    # CONNECTION
    # ============================================

    def connect(self):
        if self.conn is None:
            try:
                errors = self._driver_errors()
            except ImportError as e:
                raise StoreError(f"Driver for engine '{self.engine}' is not installed: {e}") from e
            try:
                self.conn = self._open()
            except errors as e:
                raise StoreError(f"Error while opening database '{self.db_path}': {e}") from e
        return self.conn

    def close(self) -> None:
        if self.conn is not None:
            conn, self.conn = self.conn, None
            try:
                conn.close()
            except self._driver_errors() as e:
                raise StoreError(f"Could not close database '{self.db_path}': {e}") from e

    def __enter__(self) -> "StorageAdapter":
        self.connect()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def execute(self, sql: str, params: tuple = (), action: str = "execute statement"):
        conn = self.connect()
        try:
            if params:
                return conn.execute(sql, list(params))
            return conn.execute(sql)
        except self._driver_errors() as e:
            raise StoreError(f"Could not {action}: {e}") from e

    # ============================================
    # TABLE LIFECYCLE
    # ============================================

    def drop_table(self) -> None:
        self.execute(
            f"DROP TABLE IF EXISTS {TABLE_NAME}",
            action=f"delete table '{TABLE_NAME}' for (re-)generation of data",
        )

    def create_table(self) -> None:
        self.execute(self.create_sql, action=f"create table '{TABLE_NAME}'")

    def insert(self, record: Record) -> None:
        self.execute(
            f"INSERT INTO {TABLE_NAME} VALUES (?, ?, ?)",
            record.to_row(),
            action="insert values into database",
        )

    def vacuum(self) -> None:
        self.execute("VACUUM", action="vacuum database file")

    # ============================================
    # SCAN
    # ============================================

    def scan(self) -> Iterator[Row]:
        """Run the full-table query and return a lazy row iterator.

        The query itself executes before this returns, so query errors are
        raised here and row-iteration errors while iterating.
        """
        errors = self._driver_errors()
        try:
            cursor = self.connect().cursor()
            cursor.execute(f"SELECT * FROM {TABLE_NAME}")
        except errors as e:
            raise StoreError(f"Querying table '{TABLE_NAME}' failed: {e}") from e
        return self._iter_rows(cursor)

    def _iter_rows(self, cursor) -> Iterator[Row]:
        errors = self._driver_errors()
        while True:
            try:
                row = cursor.fetchone()
            except errors as e:
                raise StoreError(f"Iterating over rows of '{TABLE_NAME}' failed: {e}") from e
            if row is None:
                break
            yield row
        try:
            cursor.close()
        except errors as e:
            raise StoreError(f"Closing the result set failed: {e}") from e


# ============================================
# SQLITE ADAPTER
# ============================================

class SQLiteAdapter(StorageAdapter):
    """SQLite via the standard library driver."""

    engine = "sqlite"
    create_sql = f"CREATE TABLE {TABLE_NAME} (ID int PRIMARY KEY ASC, rand TEXT, hash TEXT)"

    def _open(self):
        # isolation_level=None: every INSERT commits on its own
        return sqlite3.connect(self.db_path, isolation_level=None)

    def _driver_errors(self):
        return (sqlite3.Error,)


# ============================================
# DUCKDB ADAPTER
# ============================================

class DuckDBAdapter(StorageAdapter):
    """DuckDB; runs the same workload against a columnar store."""

    engine = "duckdb"
    create_sql = f"CREATE TABLE {TABLE_NAME} (ID INTEGER PRIMARY KEY, rand VARCHAR, hash VARCHAR)"

    def _open(self):
        import duckdb
        return duckdb.connect(self.db_path)

    def _driver_errors(self):
        import duckdb
        return (duckdb.Error,)


ADAPTERS = {
    SQLiteAdapter.engine: SQLiteAdapter,
    DuckDBAdapter.engine: DuckDBAdapter,
}


def create_adapter(engine: str, db_path: str) -> StorageAdapter:
    try:
        adapter_cls = ADAPTERS[engine]
    except KeyError:
        raise ConfigError(
            f"Unknown engine '{engine}' (choose from {', '.join(sorted(ADAPTERS))})"
        ) from None
    return adapter_cls(db_path)
