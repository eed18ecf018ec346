"""
Application-level exceptions.

The scoring core never raises; these cover the edges around it (tables file,
history persistence).
"""

from __future__ import annotations


class IocFusionError(Exception):
    """Base class for errors raised by backend_iocfusion."""


class ScoringTablesError(IocFusionError):
    """An explicitly configured scoring tables file could not be read or parsed."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot load scoring tables from {path}: {reason}")
        self.path = path
        self.reason = reason


class HistoryLogError(IocFusionError):
    """Inserting a row into ioc_history failed. Never retried by this package."""

    def __init__(self, ioc_type: str, ioc_value: str, reason: str) -> None:
        super().__init__(f"Failed to log history for {ioc_type}:{ioc_value}: {reason}")
        self.ioc_type = ioc_type
        self.ioc_value = ioc_value
        self.reason = reason
