"""
Verdict fusion: provider execution results -> one ScoringResult.

Steps per call:
1. Count statuses and extract a signal from every successful result with data.
2. Score each signal (verdict table) and weight it (trust x confidence).
3. No signals -> unknown verdict, null score, low confidence.
4. Otherwise weighted average, clamp, band; conflict override; confidence grade.

Pure and synchronous: no I/O, no state kept between calls, never raises on
malformed provider data. Safe to call concurrently.
"""

from __future__ import annotations

from typing import Any

from backend_iocfusion.config.settings import ScoringTables, get_scoring_tables
from backend_iocfusion.fusion_logging import get_logger
from backend_iocfusion.scoring.aggregator import map_score_to_verdict, weighted_average_score
from backend_iocfusion.scoring.conflict import (
    apply_conflict_override,
    grade_confidence,
    has_conflicting_signals,
)
from backend_iocfusion.scoring.models import (
    ConfidenceLevel,
    ExecutionStatus,
    ProcessedProvider,
    ScoringInput,
    ScoringMeta,
    ScoringResult,
    Verdict,
)
from backend_iocfusion.scoring.normalizer import normalize_verdict_to_score
from backend_iocfusion.scoring.signals import extract_provider_signal
from backend_iocfusion.scoring.trust import TrustResolver, trust_resolver_from_tables
from backend_iocfusion.scoring.weights import calculate_effective_weight

logger = get_logger(__name__)


def compute_score(
    scoring_input: ScoringInput | dict[str, Any],
    *,
    tables: ScoringTables | None = None,
    trust_resolver: TrustResolver | None = None,
) -> ScoringResult:
    """
    Fuse provider results into a final score, verdict, and confidence.

    Args:
        scoring_input: ScoringInput, or a {"providers": [...]} dict in wire format.
        tables: Lookup tables; defaults to the process-wide tables.
        trust_resolver: Provider -> trust level; defaults to the policy in the tables.

    Returns:
        ScoringResult with one processed provider per input, in input order.
    """
    if not isinstance(scoring_input, ScoringInput):
        scoring_input = ScoringInput.from_dict(scoring_input)
    tables = tables or get_scoring_tables()
    trust_resolver = trust_resolver or trust_resolver_from_tables(tables)

    successful = failed = timed_out = 0
    processed: list[ProcessedProvider] = []
    valid: list[tuple[float, float]] = []

    for result in scoring_input.providers:
        if result.status is ExecutionStatus.SUCCESS:
            successful += 1
        elif result.status is ExecutionStatus.TIMEOUT:
            timed_out += 1
        else:
            failed += 1

        signal = extract_provider_signal(result, tables)
        if signal is None:
            processed.append(ProcessedProvider(provider=result.provider, status=result.status))
            continue

        trust_level = trust_resolver.resolve(signal.provider)
        normalized_score = normalize_verdict_to_score(signal.verdict, tables)
        effective_weight = calculate_effective_weight(trust_level, signal.confidence, tables)
        valid.append((normalized_score, effective_weight))
        processed.append(
            ProcessedProvider(
                provider=result.provider,
                status=result.status,
                normalized_score=normalized_score,
                effective_weight=effective_weight,
                verdict=signal.verdict,
                confidence=signal.confidence,
            )
        )

    total = len(scoring_input.providers)

    if not valid:
        logger.debug("ioc_score_no_signals", total_providers=total, timed_out=timed_out, failed=failed)
        return ScoringResult(
            final_score=None,
            verdict=Verdict.UNKNOWN,
            confidence=ConfidenceLevel.LOW,
            processed_providers=processed,
            meta=ScoringMeta(
                total_providers=total,
                successful_providers=successful,
                failed_providers=failed,
                timed_out_providers=timed_out,
            ),
        )

    final_score = weighted_average_score(valid)
    conflicting = has_conflicting_signals([score for score, _ in valid], tables)
    verdict = apply_conflict_override(map_score_to_verdict(final_score, tables), conflicting)
    confidence = grade_confidence(len(valid), conflicting)

    logger.debug(
        "ioc_score_computed",
        final_score=final_score,
        verdict=verdict.value,
        confidence=confidence.value,
        valid_signals=len(valid),
        conflicting=conflicting,
    )
    return ScoringResult(
        final_score=final_score,
        verdict=verdict,
        confidence=confidence,
        processed_providers=processed,
        meta=ScoringMeta(
            total_providers=total,
            successful_providers=successful,
            failed_providers=failed,
            timed_out_providers=timed_out,
            single_provider_mode=len(valid) == 1,
            has_conflicting_signals=conflicting,
        ),
    )
