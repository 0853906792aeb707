"""Creation and validation helpers for the workout database."""
from __future__ import annotations

from pathlib import Path
import logging
import sqlite3

from core import DEFAULT_DB_PATH, SCHEMA_PATH

# Minimal set of tables expected to exist in any valid workout database.
REQUIRED_TABLES = [
    "workout_plans",
    "plan_exercises",
    "workout_sessions",
    "exercise_sessions",
]


def init_database(db_path: Path = DEFAULT_DB_PATH, schema_path: Path = SCHEMA_PATH) -> Path:
    """Create ``db_path`` (and any missing tables) from ``schema_path``."""

    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with open(schema_path, "r", encoding="utf-8") as fh:
        script = fh.read()
    with sqlite3.connect(str(db_path)) as conn:
        conn.executescript(script)
    logging.info("Initialised workout database at %s", db_path)
    return db_path


def missing_tables(db_path: Path = DEFAULT_DB_PATH) -> list[str]:
    """Return required tables that ``db_path`` does not contain."""

    with sqlite3.connect(str(db_path)) as conn:
        cur = conn.cursor()
        cur.execute("SELECT name FROM sqlite_master WHERE type='table'")
        present = {row[0] for row in cur.fetchall()}
    return [name for name in REQUIRED_TABLES if name not in present]


def ensure_database(db_path: Path = DEFAULT_DB_PATH) -> Path:
    """Return ``db_path`` after making sure the schema is in place."""

    db_path = Path(db_path)
    if not db_path.exists() or missing_tables(db_path):
        init_database(db_path)
    return db_path
