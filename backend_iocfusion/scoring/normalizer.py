"""Verdict -> base threat score (0-100) from the verdict_scores table."""

from __future__ import annotations

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.scoring.models import Verdict


def normalize_verdict_to_score(verdict: Verdict | str, tables: ScoringTables) -> float:
    """Unrecognized verdicts score as unknown."""
    key = Verdict.parse(verdict).value
    scores = tables.verdict_scores
    return scores.get(key, scores[Verdict.UNKNOWN.value])
