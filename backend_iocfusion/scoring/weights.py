"""Effective weight of a signal: trust weight x confidence multiplier."""

from __future__ import annotations

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.scoring.models import ConfidenceLevel, TrustLevel


def calculate_effective_weight(
    trust_level: TrustLevel,
    confidence: ConfidenceLevel,
    tables: ScoringTables,
) -> float:
    trust_weight = tables.trust_weights[TrustLevel(trust_level).value]
    confidence_multiplier = tables.confidence_multipliers[ConfidenceLevel(confidence).value]
    return trust_weight * confidence_multiplier
