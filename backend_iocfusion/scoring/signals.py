"""
Signal extraction: provider execution result -> ProviderSignal or nothing.

Only successful results that carry data yield a signal. Pure mapping; never raises.
"""

from __future__ import annotations

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.scoring.models import (
    ConfidenceLevel,
    ExecutionStatus,
    ProviderExecutionResult,
    ProviderSignal,
    Verdict,
)


def map_confidence_to_level(confidence: object, tables: ScoringTables) -> ConfidenceLevel:
    """
    Bucket a provider's 0-100 confidence: >= high_min -> HIGH, >= medium_min -> MEDIUM, else LOW.
    Missing or non-numeric confidence is MEDIUM.
    """
    if confidence is None or isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        return ConfidenceLevel.MEDIUM
    if confidence != confidence:  # NaN
        return ConfidenceLevel.MEDIUM
    if confidence >= tables.confidence_high_min:
        return ConfidenceLevel.HIGH
    if confidence >= tables.confidence_medium_min:
        return ConfidenceLevel.MEDIUM
    return ConfidenceLevel.LOW


def extract_provider_signal(
    result: ProviderExecutionResult,
    tables: ScoringTables,
) -> ProviderSignal | None:
    """Return a signal for a successful result with data; None for timeout, failure, or missing data."""
    if result.status is not ExecutionStatus.SUCCESS or result.data is None:
        return None
    data = result.data
    return ProviderSignal(
        provider=result.provider,
        verdict=Verdict.parse(data.verdict),
        confidence=map_confidence_to_level(data.confidence, tables),
        status=result.status,
    )
