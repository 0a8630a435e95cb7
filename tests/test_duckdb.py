"""
DuckDB Workload Tests

Skipped when duckdb is not installed.
"""

import os
import sys

import pytest

duckdb = pytest.importorskip("duckdb")

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))
from base_test import WorkloadContract

from sqlite3perf.adapters import DuckDBAdapter


@pytest.mark.duckdb
class TestDuckDBWorkload(WorkloadContract):
    """DuckDB implementation of the workload tests."""

    filename = "bench.duckdb"

    def make_adapter(self, path: str) -> DuckDBAdapter:
        return DuckDBAdapter(path)
