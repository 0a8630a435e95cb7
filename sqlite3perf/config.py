"""
Settings

Options are resolved in this order: command line flag, environment variable,
YAML config file, built-in default.

Example config (~/.sqlite3perf.yaml):

    db: ./sqlite3perf.db
    engine: sqlite
    records: 100000
    interval: 2
    vacuum: true
    output: benchmarks/
"""

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

import yaml

from .adapters import ADAPTERS
from .errors import ConfigError
from .progress import DEFAULT_INTERVAL

DEFAULT_DB_PATH = "./sqlite3perf.db"
DEFAULT_ENGINE = "sqlite"
DEFAULT_RECORDS = 1000
DEFAULT_CONFIG_FILE = os.path.join("~", ".sqlite3perf.yaml")

ENV_PREFIX = "SQLITE3PERF_"

# option name -> config file key
FILE_KEYS = {
    "db_path": "db",
    "engine": "engine",
    "records": "records",
    "interval": "interval",
    "vacuum": "vacuum",
    "output_dir": "output",
}

ENV_KEYS = {
    "db_path": "DB",
    "engine": "ENGINE",
    "records": "RECORDS",
    "interval": "INTERVAL",
    "vacuum": "VACUUM",
    "output_dir": "OUTPUT",
}


@dataclass
class Settings:
    """Resolved options for one command run."""
    db_path: str = DEFAULT_DB_PATH
    engine: str = DEFAULT_ENGINE
    records: int = DEFAULT_RECORDS
    interval: float = DEFAULT_INTERVAL
    vacuum: bool = False
    output_dir: Optional[str] = None
    config_file: Optional[str] = None

    def validate(self) -> "Settings":
        if self.engine not in ADAPTERS:
            raise ConfigError(f"Unknown engine '{self.engine}' (choose from {', '.join(sorted(ADAPTERS))})")
        if self.records < 0:
            raise ConfigError(f"Number of records must not be negative, got {self.records}")
        # also rejects nan, which fails every comparison
        if not 0 < self.interval < float("inf"):
            raise ConfigError(f"Progress interval must be positive and finite, got {self.interval}")
        return self


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML config file into a dict."""
    try:
        with open(path) as f:
            config = yaml.safe_load(f)
    except OSError as e:
        raise ConfigError(f"Could not read config file '{path}': {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Could not parse config file '{path}': {e}") from e

    if config is None:
        return {}
    if not isinstance(config, dict):
        raise ConfigError(f"Config file '{path}' must contain a mapping")

    unknown = set(config) - set(FILE_KEYS.values())
    if unknown:
        raise ConfigError(f"Unknown keys in config file '{path}': {', '.join(sorted(unknown))}")
    return config


def _to_bool(value) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in ("1", "true", "yes", "on"):
        return True
    if text in ("0", "false", "no", "off", ""):
        return False
    raise ConfigError(f"Invalid boolean value: {value!r}")


def _convert(name: str, value):
    try:
        if name == "records":
            return int(value)
        if name == "interval":
            return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {name}: {value!r}") from None
    if name == "vacuum":
        return _to_bool(value)
    return str(value)


def resolve_settings(
    flags: Mapping[str, Any],
    environ: Optional[Mapping[str, str]] = None,
    config_file: Optional[str] = None,
) -> Settings:
    """Merge flags, environment and config file into Settings.

    `flags` holds only the options given on the command line. Without an
    explicit `config_file`, ~/.sqlite3perf.yaml is read when it exists.
    """
    environ = os.environ if environ is None else environ

    if config_file is None:
        default = os.path.expanduser(DEFAULT_CONFIG_FILE)
        if os.path.isfile(default):
            config_file = default

    file_values: Dict[str, Any] = {}
    if config_file:
        file_values = load_config_file(config_file)
        print(f"Using config file: {config_file}")

    values: Dict[str, Any] = {}
    for name, key in FILE_KEYS.items():
        env_name = ENV_PREFIX + ENV_KEYS[name]
        if flags.get(name) is not None:
            values[name] = flags[name]
        elif environ.get(env_name):
            values[name] = _convert(name, environ[env_name])
        elif file_values.get(key) is not None:
            values[name] = _convert(name, file_values[key])

    return Settings(config_file=config_file, **values).validate()
