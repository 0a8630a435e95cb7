#!/usr/bin/env python3
"""
Workload Test Base Class

Generate/bench tests shared by every storage engine. Engine specific test
classes inherit from this and implement make_adapter().
"""

import hashlib
from abc import ABC, abstractmethod
from typing import List, Tuple

import pytest

from sqlite3perf.adapters import StorageAdapter
from sqlite3perf.bench import bench
from sqlite3perf.errors import HashMismatchError, StoreError
from sqlite3perf.generator import generate


class WorkloadContract(ABC):
    """
    Abstract base class for engine integration tests.

    Concrete classes must be named Test* to be collected.
    """

    filename = "bench.db"

    # ============================================
    # ABSTRACT METHODS - Must be implemented
    # ============================================

    @abstractmethod
    def make_adapter(self, path: str) -> StorageAdapter:
        """Create a not yet connected adapter for the given file."""
        pass

    # ============================================
    # HELPER METHODS
    # ============================================

    @pytest.fixture
    def path(self, tmp_path):
        return str(tmp_path / self.filename)

    def fetch_rows(self, path: str) -> List[Tuple[int, str, str]]:
        with self.make_adapter(path) as adapter:
            return sorted(adapter.scan())

    def execute(self, path: str, sql: str, params: tuple = ()) -> None:
        with self.make_adapter(path) as adapter:
            adapter.execute(sql, params)

    # ============================================
    # TEST CASES
    # ============================================

    def test_generate_writes_verifiable_rows(self, path, sink):
        result = generate(self.make_adapter(path), 50, sink=sink)

        rows = self.fetch_rows(path)
        assert [row[0] for row in rows] == list(range(50))
        for _, rand, digest in rows:
            assert len(rand) == 16 and rand == rand.lower()
            assert len(digest) == 64 and digest == digest.lower()
            assert hashlib.sha256(bytes.fromhex(rand)).hexdigest() == digest

        assert result.command == "generate"
        assert result.total == 50
        assert result.processed == 50

    def test_generate_twice_does_not_accumulate(self, path, sink):
        generate(self.make_adapter(path), 30, sink=sink)
        generate(self.make_adapter(path), 30, sink=sink)

        rows = self.fetch_rows(path)
        assert [row[0] for row in rows] == list(range(30))

    def test_bench_verifies_generated_rows(self, path, sink):
        generate(self.make_adapter(path), 40, sink=sink)

        result = bench(self.make_adapter(path), sink=sink)

        assert result.command == "bench"
        assert result.processed == 40
        assert result.skipped == 0
        assert result.total == 40
        assert sink.matching("40 rows processed, 0 skipped")
        assert sink.matching("Accessing the first result set")
        assert sink.matching("Time after query")

    def test_bench_aborts_on_corrupted_hash(self, path, sink):
        generate(self.make_adapter(path), 20, sink=sink)
        self.execute(path, "UPDATE bench SET hash = ? WHERE ID = ?", ("0" * 64, 7))

        with pytest.raises(HashMismatchError) as exc_info:
            bench(self.make_adapter(path), sink=sink)

        assert exc_info.value.row_id == 7
        assert exc_info.value.stored == "0" * 64

    def test_bench_skips_row_with_invalid_hex(self, path, sink):
        generate(self.make_adapter(path), 20, sink=sink)
        self.execute(path, "UPDATE bench SET rand = ? WHERE ID = ?", ("not hex at all!!", 3))

        result = bench(self.make_adapter(path), sink=sink)

        assert result.processed == 19
        assert result.skipped == 1
        assert len(sink.matching("Could not decode hex string")) == 1
        assert sink.matching("19 rows processed, 1 skipped")

    def test_generate_zero_and_bench_empty_table(self, path, sink):
        generated = generate(self.make_adapter(path), 0, sink=sink)
        assert generated.processed == 0
        assert generated.seconds_per_record == 0.0
        assert generated.records_per_second == 0.0

        result = bench(self.make_adapter(path), sink=sink)
        assert result.processed == 0
        assert result.seconds_per_record == 0.0
        assert not sink.matching("Accessing the first result set")

    def test_bench_without_table_fails(self, path, sink):
        with pytest.raises(StoreError, match="Querying table 'bench' failed"):
            bench(self.make_adapter(path), sink=sink)

    def test_generate_with_vacuum(self, path, sink):
        result = generate(self.make_adapter(path), 10, vacuum=True, sink=sink)

        assert result.vacuum_seconds is not None
        assert sink.matching("Vacuum took")
        assert len(self.fetch_rows(path)) == 10
