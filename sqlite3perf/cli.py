#!/usr/bin/env python3
"""
sqlite3perf CLI

Fill the database with the 'generate' command, then call 'bench' to see how
fast the records can be read back and verified.

Usage:
    sqlite3perf generate --records=1000000 --interval=2 --vacuum
    sqlite3perf bench
    sqlite3perf --db=bench.duckdb --engine=duckdb generate -r 100000
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .adapters import ADAPTERS, create_adapter
from .bench import bench
from .config import DEFAULT_DB_PATH, resolve_settings
from .errors import Sqlite3PerfError
from .generator import generate
from .progress import stdout_sink
from .results import RunResult, save_result


def build_parser() -> argparse.ArgumentParser:
    # Global options are accepted before and after the command name
    common = argparse.ArgumentParser(add_help=False, argument_default=argparse.SUPPRESS)
    common.add_argument("--config", help="config file (default is $HOME/.sqlite3perf.yaml)")
    common.add_argument("--db", "-d", dest="db_path", help=f"path to database (default {DEFAULT_DB_PATH})")
    common.add_argument("--engine", choices=sorted(ADAPTERS), help="database engine (default sqlite)")
    common.add_argument("--output", dest="output_dir", help="directory to save the run result as JSON")

    parser = argparse.ArgumentParser(
        prog="sqlite3perf",
        description="Small application to judge Python's performance with SQLite3",
        parents=[common],
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    sub = parser.add_subparsers(dest="command")

    gen = sub.add_parser(
        "generate",
        parents=[common],
        help="generate records to benchmark against",
        description="Generate records to benchmark against. Each record consists of an ID, "
                    "an 8 byte hex encoded random value and a SHA256 hash of said value. "
                    "ATTENTION: the 'bench' table is DROPPED before it is (re-)generated!",
    )
    gen.add_argument("--records", "-r", type=int, default=None, help="number of records to generate (default 1000)")
    gen.add_argument("--interval", "-i", type=float, default=None, help="seconds between progress messages (default 2)")
    gen.add_argument("--vacuum", "-v", action="store_true", default=None,
                     help="VACUUM database file after the records were generated")

    bch = sub.add_parser(
        "bench",
        parents=[common],
        help="do a simple benchmark",
        description="Retrieve all records created by 'generate', decode the saved random value, "
                    "hash it with SHA256 and compare with the saved hash.",
    )
    bch.add_argument("--interval", "-i", type=float, default=None, help="seconds between progress messages (default 2)")

    return parser


def run(args: argparse.Namespace) -> RunResult:
    """Run the selected command. Fatal conditions are raised, not printed."""
    flags = {
        name: getattr(args, name, None)
        for name in ("db_path", "engine", "records", "interval", "vacuum", "output_dir")
    }
    settings = resolve_settings(flags, config_file=getattr(args, "config", None))
    adapter = create_adapter(settings.engine, settings.db_path)

    if args.command == "generate":
        result = generate(adapter, settings.records, settings.interval, settings.vacuum, stdout_sink)
    else:
        result = bench(adapter, settings.interval, stdout_sink)

    if settings.output_dir:
        try:
            path = save_result(result, settings.output_dir)
        except OSError as e:
            raise Sqlite3PerfError(f"Could not save result to '{settings.output_dir}': {e}") from e
        print(f"Result saved: {path}")
    return result


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 1

    try:
        run(args)
    except Sqlite3PerfError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
