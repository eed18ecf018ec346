"""
Conflict detection and overall confidence grading.

Conflict: at least one high-threat signal and at least one low-threat signal.
A conflicted result is always SUSPICIOUS, whatever the weighted band says.
"""

from __future__ import annotations

from typing import Sequence

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.scoring.models import ConfidenceLevel, Verdict


def has_conflicting_signals(normalized_scores: Sequence[float], tables: ScoringTables) -> bool:
    has_high_threat = any(s >= tables.high_threat_min for s in normalized_scores)
    has_low_threat = any(s <= tables.low_threat_max for s in normalized_scores)
    return has_high_threat and has_low_threat


def apply_conflict_override(verdict: Verdict, conflicting: bool) -> Verdict:
    return Verdict.SUSPICIOUS if conflicting else verdict


def grade_confidence(valid_signal_count: int, conflicting: bool) -> ConfidenceLevel:
    """
    HIGH by default; LOW for a single signal (takes precedence);
    MEDIUM for exactly two signals or any conflict.
    """
    if valid_signal_count == 1:
        return ConfidenceLevel.LOW
    if valid_signal_count == 2 or conflicting:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.HIGH
