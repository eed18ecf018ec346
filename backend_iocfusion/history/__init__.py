"""
IOC history: append-only record of verdicts and scores per indicator.

SQLAlchemy-backed; PostgreSQL via DATABASE_URL, SQLite otherwise.
"""

from backend_iocfusion.history.db_ioc_history import (
    SENTINEL_SCORE,
    SENTINEL_VERDICT,
    get_ioc_history,
    history_values,
    init_db,
    log_ioc_history,
    log_scoring_result,
)
from backend_iocfusion.history.models import (
    IocHistoryRecord,
    IocType,
    OwnerContext,
    OwnerType,
)

__all__ = [
    "SENTINEL_SCORE",
    "SENTINEL_VERDICT",
    "get_ioc_history",
    "history_values",
    "init_db",
    "log_ioc_history",
    "log_scoring_result",
    "IocHistoryRecord",
    "IocType",
    "OwnerContext",
    "OwnerType",
]
