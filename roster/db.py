from __future__ import annotations

# roster/db.py
import sqlite3
from contextlib import contextmanager
from typing import Iterator
import os
import yaml

# DB path resolution order:
# 1) ROSTER_DB_PATH env var (highest priority)
# 2) test_db_path from config.yaml (when running under test)
# 3) db_path from config.yaml (production default)
# 4) fallback: roster.db at the project root
_PROJECT_ROOT = os.path.dirname(os.path.dirname(__file__))
_ROOT_DB = os.path.join(_PROJECT_ROOT, "roster.db")


def _read_config_yaml() -> dict:
    cfg_path = os.path.join(_PROJECT_ROOT, "config.yaml")
    if not os.path.exists(cfg_path):
        return {}
    try:
        with open(cfg_path, "r", encoding="utf-8") as f:
            cfg = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(cfg, dict):
        return {}
    out = {}
    for k in ("db_path", "test_db_path"):
        v = cfg.get(k)
        if isinstance(v, str) and v.strip():
            out[k] = v.strip()
    return out


def get_db_path() -> str:
    env_path = os.environ.get("ROSTER_DB_PATH")
    cfg = _read_config_yaml()
    is_test = (os.environ.get("APP_ENV") == "test") or (os.environ.get("PYTEST_CURRENT_TEST") is not None)

    if env_path:
        path = env_path
    elif is_test and cfg.get("test_db_path"):
        path = cfg["test_db_path"]
    elif cfg.get("db_path"):
        path = cfg["db_path"]
    else:
        path = _ROOT_DB

    dirn = os.path.dirname(path) or "."
    os.makedirs(dirn, exist_ok=True)
    return path


@contextmanager
def get_conn(db_path: str | None = None) -> Iterator[sqlite3.Connection]:
    """
    Open a SQLite connection; an explicit db_path wins over get_db_path().
    Autocommit mode, foreign_keys on, rows as sqlite3.Row.
    """
    path = db_path or get_db_path()
    conn = sqlite3.connect(
        path,
        check_same_thread=False,
        isolation_level=None,
    )
    try:
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.row_factory = sqlite3.Row
        yield conn
    finally:
        conn.close()
