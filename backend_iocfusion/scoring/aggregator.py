"""
Weighted aggregation of valid signals into one 0-100 score and verdict band.

final = round_half_away_from_zero(sum(score * weight) / sum(weight)), clamped 0-100.
A zero total weight yields 0 rather than a division error; this only happens
when the tables configure a zero weight.
"""

from __future__ import annotations

import math
from typing import Iterable

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.scoring.models import Verdict

SCORE_MIN = 0
SCORE_MAX = 100


def round_half_away_from_zero(value: float) -> int:
    """2.5 -> 3, -2.5 -> -3. Python's round() would give 2 (banker's rounding)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def clamp_score(score: float) -> int:
    return int(max(SCORE_MIN, min(SCORE_MAX, score)))


def weighted_average_score(weighted_scores: Iterable[tuple[float, float]]) -> int:
    """Aggregate (normalized_score, effective_weight) pairs into a clamped integer score."""
    weighted_sum = 0.0
    weight_sum = 0.0
    for score, weight in weighted_scores:
        weighted_sum += score * weight
        weight_sum += weight
    if weight_sum > 0:
        final_score = round_half_away_from_zero(weighted_sum / weight_sum)
    else:
        final_score = 0
    return clamp_score(final_score)


def map_score_to_verdict(score: float, tables: ScoringTables) -> Verdict:
    """Band a score: >= malicious_min -> MALICIOUS, >= suspicious_min -> SUSPICIOUS, else BENIGN. Never UNKNOWN."""
    if score >= tables.malicious_min:
        return Verdict.MALICIOUS
    if score >= tables.suspicious_min:
        return Verdict.SUSPICIOUS
    return Verdict.BENIGN
