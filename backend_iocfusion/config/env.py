"""
Environment variable loading for the IOC fusion backend.

- IOCFUSION_SCORING_TABLES: path to a scoring tables JSON file (default: bundled scoring_tables.json)
- IOCFUSION_DB_URL / DATABASE_URL: SQLAlchemy URL for the ioc_history store (PostgreSQL in production)
- IOC_HISTORY_DB_PATH: SQLite file used when no URL is set (default: ioc_history.db)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is backend_iocfusion/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_SCORING_TABLES_PATH = _CONFIG_DIR / "scoring_tables.json"
DEFAULT_HISTORY_DB_PATH = "ioc_history.db"


def load_iocfusion_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides the process env."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def get_scoring_tables_path() -> Path:
    """
    Return the scoring tables file to load.
    Order: IOCFUSION_SCORING_TABLES > bundled default.
    """
    load_iocfusion_env()
    raw = (os.getenv("IOCFUSION_SCORING_TABLES") or "").strip()
    if raw:
        return Path(raw)
    return DEFAULT_SCORING_TABLES_PATH


def scoring_tables_path_is_explicit() -> bool:
    """True when the operator pointed IOCFUSION_SCORING_TABLES at a file."""
    load_iocfusion_env()
    return bool((os.getenv("IOCFUSION_SCORING_TABLES") or "").strip())


def get_history_database_url() -> str:
    """
    Return the SQLAlchemy URL for ioc_history.
    Order: IOCFUSION_DB_URL > DATABASE_URL > sqlite:///IOC_HISTORY_DB_PATH.
    """
    load_iocfusion_env()
    url = (os.getenv("IOCFUSION_DB_URL") or os.getenv("DATABASE_URL") or "").strip()
    if url:
        return url
    path = (os.getenv("IOC_HISTORY_DB_PATH") or "").strip() or DEFAULT_HISTORY_DB_PATH
    return f"sqlite:///{path}"


def mask_database_url(url: str) -> str:
    """Strip credentials and query string for logging."""
    return url.split("?")[0].split("@")[-1].split("//")[-1]
