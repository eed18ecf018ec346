"""
Tests for verdict fusion (scoring.engine.compute_score).

Covers the worked scenarios, verdict bands, conflict override, confidence
grading, the zero-signal result, and configurable tables/trust.
"""

from __future__ import annotations

import pytest

from backend_iocfusion.config.settings import build_scoring_tables
from backend_iocfusion.scoring import (
    ConfidenceLevel,
    ExecutionStatus,
    ProviderExecutionResult,
    ScoringInput,
    StaticTrustResolver,
    TrustLevel,
    Verdict,
    compute_score,
)
from helpers import failure, ok, timeout


def _score(*providers):
    return compute_score({"providers": list(providers)})


# --- Worked scenarios ---


def test_malicious_and_benign_conflict_resolves_suspicious():
    """Two medium-trust high-confidence providers disagree: 50, suspicious, medium."""
    result = _score(ok("A", "malicious", 90), ok("B", "benign", 90))
    assert result.final_score == 50
    assert result.verdict is Verdict.SUSPICIOUS
    assert result.confidence is ConfidenceLevel.MEDIUM
    assert result.meta.has_conflicting_signals is True
    assert result.meta.single_provider_mode is False
    weights = [p.effective_weight for p in result.processed_providers]
    assert weights == [pytest.approx(0.7), pytest.approx(0.7)]
    assert [p.normalized_score for p in result.processed_providers] == [100, 0]


def test_single_timeout_is_unknown():
    result = _score(timeout("C"))
    assert result.final_score is None
    assert result.verdict is Verdict.UNKNOWN
    assert result.confidence is ConfidenceLevel.LOW
    assert result.meta.timed_out_providers == 1
    assert result.meta.total_providers == 1
    assert result.meta.single_provider_mode is False
    assert result.meta.has_conflicting_signals is False


def test_single_malicious_provider_is_low_confidence():
    """Single-provider mode forces LOW even for a 95-confidence signal."""
    result = _score(ok("D", "malicious", 95))
    assert result.final_score == 100
    assert result.verdict is Verdict.MALICIOUS
    assert result.confidence is ConfidenceLevel.LOW
    assert result.meta.single_provider_mode is True
    assert result.processed_providers[0].effective_weight == pytest.approx(0.7)
    assert result.processed_providers[0].confidence is ConfidenceLevel.HIGH


# --- Bands and confidence ---


def test_three_agreeing_malicious_is_high_confidence():
    result = _score(ok("a", "malicious", 90), ok("b", "malicious", 80), ok("c", "malicious", 75))
    assert result.final_score == 100
    assert result.verdict is Verdict.MALICIOUS
    assert result.confidence is ConfidenceLevel.HIGH
    assert result.meta.has_conflicting_signals is False


def test_suspicious_band_without_conflict():
    """(60 + 60 + 30) / 3 = 50; 30 is not low threat (<= 29), so no conflict."""
    result = _score(ok("a", "suspicious", 90), ok("b", "suspicious", 90), ok("c", "unknown", 90))
    assert result.final_score == 50
    assert result.verdict is Verdict.SUSPICIOUS
    assert result.confidence is ConfidenceLevel.HIGH
    assert result.meta.has_conflicting_signals is False


def test_benign_band():
    result = _score(ok("a", "benign", 90), ok("b", "benign", 90), ok("c", "unknown", 90))
    assert result.final_score == 10
    assert result.verdict is Verdict.BENIGN
    assert result.confidence is ConfidenceLevel.HIGH


def test_two_agreeing_signals_are_medium_confidence():
    result = _score(ok("a", "benign", 90), ok("b", "benign", 90))
    assert result.final_score == 0
    assert result.verdict is Verdict.BENIGN
    assert result.confidence is ConfidenceLevel.MEDIUM


def test_conflict_overrides_malicious_band():
    """Weighted 75 would be malicious; one benign voice forces suspicious and medium confidence."""
    result = _score(
        ok("a", "malicious", 90),
        ok("b", "malicious", 90),
        ok("c", "malicious", 90),
        ok("d", "benign", 90),
    )
    assert result.final_score == 75
    assert result.verdict is Verdict.SUSPICIOUS
    assert result.confidence is ConfidenceLevel.MEDIUM
    assert result.meta.has_conflicting_signals is True


def test_conflict_overrides_benign_band():
    result = _score(
        ok("a", "benign", 90),
        ok("b", "benign", 90),
        ok("c", "benign", 90),
        ok("d", "malicious", 90),
    )
    assert result.final_score == 25
    assert result.verdict is Verdict.SUSPICIOUS


def test_confidence_levels_change_weights():
    """High-confidence malicious (0.7) vs low-confidence benign (0.35): 100*0.7/1.05 = 66.67 -> 67."""
    result = _score(ok("a", "malicious", 90), ok("b", "benign", 10))
    assert result.final_score == 67
    assert result.processed_providers[1].confidence is ConfidenceLevel.LOW
    assert result.processed_providers[1].effective_weight == pytest.approx(0.35)
    assert result.verdict is Verdict.SUSPICIOUS


# --- Degraded inputs ---


def test_all_providers_failed_or_timed_out():
    result = _score(failure("a"), timeout("b"), failure("c"))
    assert result.final_score is None
    assert result.verdict is Verdict.UNKNOWN
    assert result.confidence is ConfidenceLevel.LOW
    assert result.meta.failed_providers == 2
    assert result.meta.timed_out_providers == 1
    assert result.meta.successful_providers == 0
    for p in result.processed_providers:
        assert p.normalized_score is None
        assert p.effective_weight is None
        assert p.verdict is None
        assert p.confidence is None


def test_empty_provider_list():
    result = compute_score(ScoringInput(providers=[]))
    assert result.final_score is None
    assert result.verdict is Verdict.UNKNOWN
    assert result.processed_providers == []
    assert result.meta.total_providers == 0


def test_success_without_data_counts_as_successful_but_gives_no_signal():
    result = compute_score({"providers": [{"provider": "x", "status": "success", "data": None}]})
    assert result.final_score is None
    assert result.meta.successful_providers == 1
    assert result.processed_providers[0].status is ExecutionStatus.SUCCESS
    assert result.processed_providers[0].normalized_score is None


def test_unrecognized_verdict_scores_as_unknown():
    result = _score(ok("a", "evil-ish", 90))
    p = result.processed_providers[0]
    assert p.verdict is Verdict.UNKNOWN
    assert p.normalized_score == 30
    assert result.final_score == 30
    assert result.verdict is Verdict.SUSPICIOUS


def test_missing_confidence_is_medium():
    result = _score(ok("a", "malicious"), ok("b", "malicious"))
    for p in result.processed_providers:
        assert p.confidence is ConfidenceLevel.MEDIUM
        assert p.effective_weight == pytest.approx(0.525)


def test_string_confidence_is_medium_through_dict_input():
    result = _score(ok("a", "malicious", "90"))
    p = result.processed_providers[0]
    assert p.confidence is ConfidenceLevel.MEDIUM
    assert p.effective_weight == pytest.approx(0.525)


def test_malformed_tags_do_not_raise():
    result = _score(ok("a", "malicious", 90, tags=5))
    assert result.final_score == 100
    assert result.verdict is Verdict.MALICIOUS


def test_non_object_provider_entries_count_as_failures():
    result = compute_score({"providers": [None, ok("a", "benign", 90), 7]})
    assert [p.provider for p in result.processed_providers] == ["", "a", ""]
    assert [p.status for p in result.processed_providers] == [
        ExecutionStatus.FAILURE,
        ExecutionStatus.SUCCESS,
        ExecutionStatus.FAILURE,
    ]
    assert result.meta.total_providers == 3
    assert result.meta.failed_providers == 2
    assert result.final_score == 0
    assert result.verdict is Verdict.BENIGN


def test_non_list_providers_is_zero_signal():
    result = compute_score({"providers": "vt"})
    assert result.final_score is None
    assert result.meta.total_providers == 0


def test_unknown_status_counts_as_failure():
    result = compute_score({"providers": [{"provider": "x", "status": "pending"}]})
    assert result.meta.failed_providers == 1
    assert result.processed_providers[0].status is ExecutionStatus.FAILURE


# --- Invariants ---


def test_breakdown_preserves_input_order_and_counts():
    providers = [
        ok("p1", "benign", 50),
        timeout("p2"),
        ok("p3", "suspicious", 20),
        failure("p4"),
        ok("p5", "malicious"),
    ]
    result = _score(*providers)
    assert [p.provider for p in result.processed_providers] == ["p1", "p2", "p3", "p4", "p5"]
    meta = result.meta
    assert meta.total_providers == 5
    assert meta.total_providers == meta.successful_providers + meta.failed_providers + meta.timed_out_providers
    assert 0 <= result.final_score <= 100


def test_identical_input_gives_identical_output():
    providers = [ok("a", "malicious", 72), ok("b", "suspicious", 41), timeout("c"), ok("d", "benign", 5)]
    first = _score(*providers)
    second = _score(*providers)
    assert first == second
    assert first.to_dict() == second.to_dict()


def test_accepts_dataclass_input():
    scoring_input = ScoringInput(
        providers=[ProviderExecutionResult.from_dict(ok("a", "malicious", 90)), ProviderExecutionResult.from_dict(timeout("b"))]
    )
    result = compute_score(scoring_input)
    assert result.final_score == 100
    assert result.meta.timed_out_providers == 1


def test_to_dict_wire_format():
    out = _score(ok("A", "malicious", 90), timeout("B")).to_dict()
    assert set(out) == {"finalScore", "verdict", "confidence", "processedProviders", "meta"}
    assert out["verdict"] == "malicious"
    assert out["processedProviders"][1] == {
        "provider": "B",
        "status": "timeout",
        "normalizedScore": None,
        "effectiveWeight": None,
        "verdict": None,
        "confidence": None,
    }
    assert out["meta"] == {
        "totalProviders": 2,
        "successfulProviders": 1,
        "failedProviders": 0,
        "timedOutProviders": 1,
        "singleProviderMode": True,
        "hasConflictingSignals": False,
    }


# --- Configurable tables and trust ---


def test_half_point_rounds_away_from_zero():
    """Unit weights, malicious 100 and suspicious 61: 80.5 -> 81 (banker's rounding would give 80)."""
    tables = build_scoring_tables({
        "verdict_scores": {"suspicious": 61},
        "trust_weights": {"medium": 1.0},
        "confidence_multipliers": {"high": 1.0},
    })
    result = compute_score({"providers": [ok("a", "malicious", 90), ok("b", "suspicious", 90)]}, tables=tables)
    assert result.final_score == 81


def test_zero_weight_falls_back_to_zero_score():
    tables = build_scoring_tables({"trust_weights": {"medium": 0}})
    result = compute_score({"providers": [ok("a", "malicious", 90), ok("b", "malicious", 90)]}, tables=tables)
    assert result.final_score == 0
    assert result.verdict is Verdict.BENIGN
    assert [p.effective_weight for p in result.processed_providers] == [0, 0]


def test_provider_trust_table_shifts_score():
    """vt at high trust (1.0) vs other at medium (0.7): 100/1.7 = 58.8 -> 59."""
    tables = build_scoring_tables({"provider_trust": {"vt": "high"}})
    result = compute_score({"providers": [ok("vt", "malicious", 90), ok("other", "benign", 90)]}, tables=tables)
    assert result.final_score == 59
    assert result.verdict is Verdict.SUSPICIOUS
    assert result.processed_providers[0].effective_weight == pytest.approx(1.0)


def test_explicit_trust_resolver_overrides_tables():
    result = compute_score(
        {"providers": [ok("a", "malicious", 90), ok("b", "benign", 90)]},
        trust_resolver=StaticTrustResolver(TrustLevel.LOW),
    )
    assert result.final_score == 50
    assert [p.effective_weight for p in result.processed_providers] == [pytest.approx(0.5), pytest.approx(0.5)]


def test_custom_verdict_thresholds():
    tables = build_scoring_tables({"verdict_thresholds": {"malicious_min": 50}})
    result = compute_score({"providers": [ok("a", "suspicious", 90), ok("b", "suspicious", 90)]}, tables=tables)
    assert result.final_score == 60
    assert result.verdict is Verdict.MALICIOUS
