# sqlite3perf Package
"""
Throughput benchmark for relational stores.

Components:
- generator: (Re-)builds the 'bench' table with random value/hash records
- bench: Full-table scan that re-derives and verifies every hash
- progress: Background progress reporter fed by a shared counter
- adapters: Storage adapters (SQLite, DuckDB)
- config: Settings resolution (flags, environment, YAML file)
"""

__version__ = "0.1.0"
