"""
Core utilities: cross-cutting exceptions shared by scoring, history, and API.
"""

from backend_iocfusion.core.exceptions import (
    HistoryLogError,
    IocFusionError,
    ScoringTablesError,
)

__all__ = ["HistoryLogError", "IocFusionError", "ScoringTablesError"]
