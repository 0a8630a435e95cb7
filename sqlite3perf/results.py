"""
Run results and their JSON export.
"""

import json
import os
import time
import uuid
from dataclasses import dataclass, asdict, field
from datetime import datetime
from typing import Any, Dict, Optional


def new_run_id(command: str, engine: str) -> str:
    return f"{command}_{engine}_{int(time.time())}_{uuid.uuid4().hex[:8]}"


@dataclass
class RunResult:
    """Final statistics of a generate or bench run."""
    command: str
    engine: str
    db_path: str

    # Counts
    total: Optional[int]
    processed: int
    skipped: int = 0

    # Timing
    elapsed_seconds: float = 0.0
    loop_seconds: float = 0.0
    seconds_per_record: float = 0.0
    records_per_second: float = 0.0
    vacuum_seconds: Optional[float] = None

    # System
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    run_id: str = ""

    def __post_init__(self):
        if not self.run_id:
            self.run_id = new_run_id(self.command, self.engine)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def rates(count: int, seconds: float):
    """Average seconds per record and records per second, zero when undefined."""
    per_record = seconds / count if count else 0.0
    per_second = count / seconds if count and seconds > 0 else 0.0
    return per_record, per_second


def save_result(result: RunResult, output_dir: str) -> str:
    """Save a run result to JSON."""
    os.makedirs(output_dir, exist_ok=True)

    path = os.path.join(output_dir, f"{result.run_id}.json")
    with open(path, "w") as f:
        json.dump(result.to_dict(), f, indent=2)

    return path
