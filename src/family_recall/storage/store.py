"""Roster and stats persistence (JSON + fcntl.flock + atomic write).

Each key is one JSON document in the data directory. Missing or corrupt
documents read back as the default value; corruption is logged, never
raised.
"""

import fcntl
import json
import os
import tempfile
from pathlib import Path
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from family_recall.models.person import Person
from family_recall.models.stats import OverallStats

logger = structlog.get_logger()

ROSTER_KEY = "people-memorizer-people"
STATS_KEY = "people-memorizer-stats"

_roster_adapter = TypeAdapter(list[Person])


def get_key_path(data_dir: Path, key: str) -> Path:
    return data_dir / f"{key}.json"


def read_key(data_dir: Path, key: str) -> Any | None:
    """Return the decoded document for ``key``, or None if absent or unreadable."""
    path = get_key_path(data_dir, key)
    if not path.exists():
        return None
    try:
        with open(path, encoding="utf-8") as f:
            fcntl.flock(f, fcntl.LOCK_SH)
            data = json.load(f)
            fcntl.flock(f, fcntl.LOCK_UN)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.warning("storage_read_failed", key=key, path=str(path), error=str(e))
        return None
    return data


def write_key(data_dir: Path, key: str, value: Any) -> None:
    path = get_key_path(data_dir, key)
    data_dir.mkdir(parents=True, exist_ok=True)
    lock_path = data_dir / (path.name + ".lock")
    with open(lock_path, "w") as lock_file:
        fcntl.flock(lock_file, fcntl.LOCK_EX)
        with tempfile.NamedTemporaryFile(
            "w", dir=data_dir, delete=False, suffix=".json", encoding="utf-8"
        ) as tmp:
            json.dump(value, tmp, ensure_ascii=False, indent=2)
        os.replace(tmp.name, path)


def delete_key(data_dir: Path, key: str) -> None:
    get_key_path(data_dir, key).unlink(missing_ok=True)


def load_roster(data_dir: Path) -> list[Person]:
    data = read_key(data_dir, ROSTER_KEY)
    if data is None:
        return []
    try:
        return _roster_adapter.validate_python(data)
    except ValidationError as e:
        logger.warning("roster_load_failed", error_count=e.error_count())
        return []


def save_roster(data_dir: Path, people: list[Person]) -> None:
    write_key(data_dir, ROSTER_KEY, _roster_adapter.dump_python(people, mode="json", by_alias=True))
    logger.info("roster_saved", people=len(people))


def load_stats(data_dir: Path) -> OverallStats:
    data = read_key(data_dir, STATS_KEY)
    if data is None:
        return OverallStats()
    try:
        return OverallStats.model_validate(data)
    except ValidationError as e:
        logger.warning("stats_load_failed", error_count=e.error_count())
        return OverallStats()


def save_stats(data_dir: Path, stats: OverallStats) -> None:
    write_key(data_dir, STATS_KEY, stats.model_dump(mode="json", by_alias=True))


def clear_stats(data_dir: Path) -> None:
    delete_key(data_dir, STATS_KEY)
    logger.info("stats_cleared")


def clear_all(data_dir: Path) -> None:
    delete_key(data_dir, ROSTER_KEY)
    delete_key(data_dir, STATS_KEY)
    logger.info("storage_cleared")
