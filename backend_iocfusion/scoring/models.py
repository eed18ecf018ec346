"""
Data models for scoring input and output.

Provider execution results come in (from the Provider Executor), a
ScoringResult goes out. from_dict is lenient: unrecognized enum values
degrade to safe defaults instead of raising. to_dict emits the camelCase wire
format consumed by API clients.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ExecutionStatus(str, Enum):
    SUCCESS = "success"
    TIMEOUT = "timeout"
    FAILURE = "failure"

    @classmethod
    def parse(cls, value: Any) -> "ExecutionStatus":
        """Anything that is not success or timeout counts as a failure."""
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        return cls.FAILURE


class Verdict(str, Enum):
    BENIGN = "benign"
    SUSPICIOUS = "suspicious"
    MALICIOUS = "malicious"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "Verdict":
        """Missing or unrecognized verdicts become UNKNOWN."""
        if isinstance(value, cls):
            return value
        raw = str(value or "").strip().lower()
        for member in cls:
            if member.value == raw:
                return member
        return cls.UNKNOWN


class ConfidenceLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TrustLevel(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


def _optional_number(value: Any) -> float | None:
    """Numbers pass through; strings, bools and anything else count as missing."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _tag_set(value: Any) -> frozenset[str]:
    if isinstance(value, str):
        return frozenset((value,))
    if isinstance(value, (list, tuple, set, frozenset)):
        return frozenset(str(t) for t in value)
    return frozenset()


@dataclass(frozen=True)
class NormalizedProviderResponse:
    """One provider's answer after the executor normalized it."""

    verdict: Verdict = Verdict.UNKNOWN
    score: float | None = None
    confidence: float | None = None
    """Provider-reported confidence, 0-100; None when the provider did not report one."""
    summary: str | None = None
    tags: frozenset[str] = field(default_factory=frozenset)
    provider_name: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NormalizedProviderResponse":
        return cls(
            verdict=Verdict.parse(data.get("verdict")),
            score=_optional_number(data.get("score")),
            confidence=_optional_number(data.get("confidence")),
            summary=data.get("summary"),
            tags=_tag_set(data.get("tags")),
            provider_name=data.get("provider_name"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider_name": self.provider_name,
            "verdict": self.verdict.value,
            "score": self.score,
            "confidence": self.confidence,
            "summary": self.summary,
            "tags": sorted(self.tags),
        }


@dataclass(frozen=True)
class ProviderExecutionResult:
    """Outcome of calling one provider: success with data, or timeout/failure without."""

    provider: str
    status: ExecutionStatus
    data: NormalizedProviderResponse | None = None

    @classmethod
    def from_dict(cls, raw: Any) -> "ProviderExecutionResult":
        if not isinstance(raw, dict):
            return cls(provider="", status=ExecutionStatus.FAILURE)
        data = raw.get("data")
        if isinstance(data, dict):
            data = NormalizedProviderResponse.from_dict(data)
        elif not isinstance(data, NormalizedProviderResponse):
            data = None
        return cls(
            provider=str(raw.get("provider") or ""),
            status=ExecutionStatus.parse(raw.get("status")),
            data=data,
        )


@dataclass(frozen=True)
class ScoringInput:
    providers: list[ProviderExecutionResult] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "ScoringInput":
        providers = raw.get("providers") or []
        if not isinstance(providers, (list, tuple)):
            providers = []
        return cls(
            providers=[
                p if isinstance(p, ProviderExecutionResult) else ProviderExecutionResult.from_dict(p)
                for p in providers
            ]
        )


@dataclass(frozen=True)
class ProviderSignal:
    """Usable evidence extracted from one successful provider result."""

    provider: str
    verdict: Verdict
    confidence: ConfidenceLevel
    status: ExecutionStatus


@dataclass(frozen=True)
class ProcessedProvider:
    """Per-provider breakdown row; the numeric fields are None when the provider gave no signal."""

    provider: str
    status: ExecutionStatus
    normalized_score: float | None = None
    effective_weight: float | None = None
    verdict: Verdict | None = None
    confidence: ConfidenceLevel | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "provider": self.provider,
            "status": self.status.value,
            "normalizedScore": self.normalized_score,
            "effectiveWeight": self.effective_weight,
            "verdict": self.verdict.value if self.verdict else None,
            "confidence": self.confidence.value if self.confidence else None,
        }


@dataclass(frozen=True)
class ScoringMeta:
    total_providers: int
    successful_providers: int
    failed_providers: int
    timed_out_providers: int
    single_provider_mode: bool = False
    has_conflicting_signals: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalProviders": self.total_providers,
            "successfulProviders": self.successful_providers,
            "failedProviders": self.failed_providers,
            "timedOutProviders": self.timed_out_providers,
            "singleProviderMode": self.single_provider_mode,
            "hasConflictingSignals": self.has_conflicting_signals,
        }


@dataclass(frozen=True)
class ScoringResult:
    """
    Fused verdict for one indicator.

    final_score is None exactly when no provider produced a usable signal.
    processed_providers has one entry per input, in input order.
    """

    final_score: int | None
    verdict: Verdict
    confidence: ConfidenceLevel
    processed_providers: list[ProcessedProvider]
    meta: ScoringMeta

    def to_dict(self) -> dict[str, Any]:
        return {
            "finalScore": self.final_score,
            "verdict": self.verdict.value,
            "confidence": self.confidence.value,
            "processedProviders": [p.to_dict() for p in self.processed_providers],
            "meta": self.meta.to_dict(),
        }
