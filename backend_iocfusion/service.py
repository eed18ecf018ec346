"""
Score an indicator and record the outcome in IOC history.

The score is computed first and is never lost to a storage failure: a
HistoryLogError is logged and reported through history_logged=False, and the
insert is not retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.core.exceptions import HistoryLogError
from backend_iocfusion.fusion_logging import bind_ioc
from backend_iocfusion.history import IocType, OwnerContext, log_scoring_result
from backend_iocfusion.scoring import ScoringInput, ScoringResult, TrustResolver, compute_score


@dataclass
class IocScoreOutcome:
    result: ScoringResult
    history_logged: bool
    """True only when a history row was written for this call."""

    def to_dict(self) -> dict[str, Any]:
        out = self.result.to_dict()
        out["historyLogged"] = self.history_logged
        return out


def score_ioc(
    scoring_input: ScoringInput | dict[str, Any],
    *,
    owner: OwnerContext,
    ioc_type: IocType | str,
    ioc_value: str,
    record_history: bool = True,
    tables: ScoringTables | None = None,
    trust_resolver: TrustResolver | None = None,
) -> IocScoreOutcome:
    """Fuse provider results for one indicator and append the verdict to its history."""
    ioc_type_str = ioc_type.value if isinstance(ioc_type, IocType) else str(ioc_type)
    log = bind_ioc(ioc_type_str, ioc_value)

    result = compute_score(scoring_input, tables=tables, trust_resolver=trust_resolver)
    log.info(
        "ioc_scored",
        final_score=result.final_score,
        verdict=result.verdict.value,
        confidence=result.confidence.value,
        total_providers=result.meta.total_providers,
        has_conflicting_signals=result.meta.has_conflicting_signals,
    )

    if not record_history:
        return IocScoreOutcome(result=result, history_logged=False)

    try:
        log_scoring_result(owner, ioc_type, ioc_value, result)
    except HistoryLogError as e:
        log.error("ioc_history_not_recorded", owner_type=owner.type_value, error=e.reason)
        return IocScoreOutcome(result=result, history_logged=False)
    return IocScoreOutcome(result=result, history_logged=True)
