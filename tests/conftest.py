"""
Shared pytest fixtures for sqlite3perf tests.
"""

import pytest


def pytest_configure(config):
    """Configure custom markers."""
    config.addinivalue_line("markers", "sqlite: marks tests for SQLite")
    config.addinivalue_line("markers", "duckdb: marks tests for DuckDB")
    config.addinivalue_line("markers", "slow: marks tests as slow")


class CollectingSink:
    """Output sink that keeps log lines in memory."""

    def __init__(self):
        self.lines = []

    def __call__(self, message: str) -> None:
        self.lines.append(message)

    def matching(self, text: str):
        return [line for line in self.lines if text in line]


@pytest.fixture
def sink():
    return CollectingSink()


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """No user config file and no SQLITE3PERF_* variables."""
    monkeypatch.setenv("HOME", str(tmp_path))
    for name in ("DB", "ENGINE", "RECORDS", "INTERVAL", "VACUUM", "OUTPUT"):
        monkeypatch.delenv(f"SQLITE3PERF_{name}", raising=False)
    return tmp_path
