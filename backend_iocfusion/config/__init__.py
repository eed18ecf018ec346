"""
Configuration for the IOC fusion backend.

Environment (.env via python-dotenv) plus the scoring tables file. Exposes a
single source of truth for the lookup data used by the scoring core.
"""

from backend_iocfusion.config.settings import (  # noqa: F401
    ScoringTables,
    get_scoring_tables,
    load_scoring_tables,
    reset_scoring_tables_for_test,
)

__all__ = [
    "ScoringTables",
    "get_scoring_tables",
    "load_scoring_tables",
    "reset_scoring_tables_for_test",
]
