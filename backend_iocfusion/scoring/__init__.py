"""
Scoring package: multi-provider verdict fusion.

Consumes provider execution results, extracts signals, weights them by trust
and confidence, and produces one score, verdict, and confidence grade with a
per-provider breakdown.
"""

from backend_iocfusion.scoring.models import (
    ConfidenceLevel,
    ExecutionStatus,
    NormalizedProviderResponse,
    ProcessedProvider,
    ProviderExecutionResult,
    ProviderSignal,
    ScoringInput,
    ScoringMeta,
    ScoringResult,
    TrustLevel,
    Verdict,
)
from backend_iocfusion.scoring.aggregator import (
    map_score_to_verdict,
    round_half_away_from_zero,
    weighted_average_score,
)
from backend_iocfusion.scoring.conflict import grade_confidence, has_conflicting_signals
from backend_iocfusion.scoring.engine import compute_score
from backend_iocfusion.scoring.normalizer import normalize_verdict_to_score
from backend_iocfusion.scoring.signals import extract_provider_signal, map_confidence_to_level
from backend_iocfusion.scoring.trust import (
    StaticTrustResolver,
    TableTrustResolver,
    TrustResolver,
    trust_resolver_from_tables,
)
from backend_iocfusion.scoring.weights import calculate_effective_weight

__all__ = [
    "ConfidenceLevel",
    "ExecutionStatus",
    "NormalizedProviderResponse",
    "ProcessedProvider",
    "ProviderExecutionResult",
    "ProviderSignal",
    "ScoringInput",
    "ScoringMeta",
    "ScoringResult",
    "TrustLevel",
    "Verdict",
    "map_score_to_verdict",
    "round_half_away_from_zero",
    "weighted_average_score",
    "grade_confidence",
    "has_conflicting_signals",
    "compute_score",
    "normalize_verdict_to_score",
    "extract_provider_signal",
    "map_confidence_to_level",
    "StaticTrustResolver",
    "TableTrustResolver",
    "TrustResolver",
    "trust_resolver_from_tables",
    "calculate_effective_weight",
]
