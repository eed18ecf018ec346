"""
Scoring tables: the lookup data behind verdict fusion.

Base scores per verdict, trust weights, confidence multipliers, confidence-level
cut-offs, verdict bands, and conflict bounds are data, not code. They are read
once per process from scoring_tables.json (or IOCFUSION_SCORING_TABLES) and
shared as an immutable ScoringTables value, so the scoring core stays pure.

Keys missing from the file keep their defaults. Values that are not
non-negative numbers are logged and ignored.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from backend_iocfusion.config.env import (
    get_scoring_tables_path,
    scoring_tables_path_is_explicit,
)
from backend_iocfusion.core.exceptions import ScoringTablesError
from backend_iocfusion.fusion_logging import get_logger

logger = get_logger(__name__)

TRUST_LEVELS = ("high", "medium", "low")

DEFAULT_VERDICT_SCORES = {"malicious": 100, "suspicious": 60, "unknown": 30, "benign": 0}
DEFAULT_TRUST_WEIGHTS = {"high": 1.0, "medium": 0.7, "low": 0.5}
DEFAULT_CONFIDENCE_MULTIPLIERS = {"high": 1.0, "medium": 0.75, "low": 0.5}
DEFAULT_CONFIDENCE_LEVELS = {"high_min": 70, "medium_min": 40}
DEFAULT_VERDICT_THRESHOLDS = {"malicious_min": 70, "suspicious_min": 30}
DEFAULT_CONFLICT = {"high_threat_min": 70, "low_threat_max": 29}
DEFAULT_TRUST_LEVEL = "medium"


def _frozen(mapping: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class ScoringTables:
    """Immutable lookup tables shared by every scoring call."""

    verdict_scores: Mapping[str, float] = field(default_factory=lambda: _frozen(DEFAULT_VERDICT_SCORES))
    trust_weights: Mapping[str, float] = field(default_factory=lambda: _frozen(DEFAULT_TRUST_WEIGHTS))
    confidence_multipliers: Mapping[str, float] = field(
        default_factory=lambda: _frozen(DEFAULT_CONFIDENCE_MULTIPLIERS)
    )
    confidence_high_min: float = DEFAULT_CONFIDENCE_LEVELS["high_min"]
    """Reported provider confidence at or above this is a high-confidence signal."""
    confidence_medium_min: float = DEFAULT_CONFIDENCE_LEVELS["medium_min"]
    malicious_min: float = DEFAULT_VERDICT_THRESHOLDS["malicious_min"]
    suspicious_min: float = DEFAULT_VERDICT_THRESHOLDS["suspicious_min"]
    high_threat_min: float = DEFAULT_CONFLICT["high_threat_min"]
    """A normalized score at or above this counts as high threat for conflict detection."""
    low_threat_max: float = DEFAULT_CONFLICT["low_threat_max"]
    default_trust_level: str = DEFAULT_TRUST_LEVEL
    provider_trust: Mapping[str, str] = field(default_factory=lambda: _frozen({}))
    """Optional per-provider trust levels; empty means every provider gets default_trust_level."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "verdict_scores": dict(self.verdict_scores),
            "trust_weights": dict(self.trust_weights),
            "confidence_multipliers": dict(self.confidence_multipliers),
            "confidence_levels": {
                "high_min": self.confidence_high_min,
                "medium_min": self.confidence_medium_min,
            },
            "verdict_thresholds": {
                "malicious_min": self.malicious_min,
                "suspicious_min": self.suspicious_min,
            },
            "conflict": {
                "high_threat_min": self.high_threat_min,
                "low_threat_max": self.low_threat_max,
            },
            "default_trust_level": self.default_trust_level,
            "provider_trust": dict(self.provider_trust),
        }


def _as_number(value: Any) -> float | None:
    """Return a non-negative int/float, or None when value is not usable."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value if value >= 0 else None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if number != number or number < 0:  # NaN or negative
        return None
    return number


def _merge_section(name: str, defaults: dict[str, Any], raw: Any) -> dict[str, Any]:
    """Overlay raw[key] on defaults for known keys; log and skip anything else."""
    merged = dict(defaults)
    if raw is None:
        return merged
    if not isinstance(raw, dict):
        logger.warning("scoring_tables_section_ignored", section=name, reason="not an object")
        return merged
    for key, value in raw.items():
        if key not in defaults:
            logger.warning("scoring_tables_key_ignored", section=name, key=key)
            continue
        number = _as_number(value)
        if number is None:
            logger.warning("scoring_tables_value_ignored", section=name, key=key, value=value)
            continue
        merged[key] = number
    return merged


def _merge_provider_trust(raw: Any) -> dict[str, str]:
    out: dict[str, str] = {}
    if raw is None:
        return out
    if not isinstance(raw, dict):
        logger.warning("scoring_tables_section_ignored", section="provider_trust", reason="not an object")
        return out
    for provider, level in raw.items():
        level_str = str(level).strip().lower()
        if level_str not in TRUST_LEVELS:
            logger.warning("scoring_tables_value_ignored", section="provider_trust", key=provider, value=level)
            continue
        out[str(provider)] = level_str
    return out


def build_scoring_tables(data: dict[str, Any]) -> ScoringTables:
    """Build ScoringTables from a parsed tables document, falling back to defaults per key."""
    confidence_levels = _merge_section("confidence_levels", DEFAULT_CONFIDENCE_LEVELS, data.get("confidence_levels"))
    thresholds = _merge_section("verdict_thresholds", DEFAULT_VERDICT_THRESHOLDS, data.get("verdict_thresholds"))
    conflict = _merge_section("conflict", DEFAULT_CONFLICT, data.get("conflict"))

    default_trust = str(data.get("default_trust_level") or DEFAULT_TRUST_LEVEL).strip().lower()
    if default_trust not in TRUST_LEVELS:
        logger.warning("scoring_tables_value_ignored", section="default_trust_level", value=default_trust)
        default_trust = DEFAULT_TRUST_LEVEL

    return ScoringTables(
        verdict_scores=_frozen(_merge_section("verdict_scores", DEFAULT_VERDICT_SCORES, data.get("verdict_scores"))),
        trust_weights=_frozen(_merge_section("trust_weights", DEFAULT_TRUST_WEIGHTS, data.get("trust_weights"))),
        confidence_multipliers=_frozen(
            _merge_section("confidence_multipliers", DEFAULT_CONFIDENCE_MULTIPLIERS, data.get("confidence_multipliers"))
        ),
        confidence_high_min=confidence_levels["high_min"],
        confidence_medium_min=confidence_levels["medium_min"],
        malicious_min=thresholds["malicious_min"],
        suspicious_min=thresholds["suspicious_min"],
        high_threat_min=conflict["high_threat_min"],
        low_threat_max=conflict["low_threat_max"],
        default_trust_level=default_trust,
        provider_trust=_frozen(_merge_provider_trust(data.get("provider_trust"))),
    )


def load_scoring_tables(path: Path | None = None, *, explicit: bool | None = None) -> ScoringTables:
    """
    Read a scoring tables JSON file.

    An explicit path (argument or IOCFUSION_SCORING_TABLES) that is missing or
    unparseable raises ScoringTablesError. A missing bundled default only logs
    a warning and returns built-in defaults.
    """
    if path is None:
        path = get_scoring_tables_path()
        if explicit is None:
            explicit = scoring_tables_path_is_explicit()
    elif explicit is None:
        explicit = True
    path = Path(path)

    if not path.is_file():
        if explicit:
            raise ScoringTablesError(str(path), "file not found")
        logger.warning("scoring_tables_missing_using_defaults", path=str(path))
        return ScoringTables()

    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ScoringTablesError(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise ScoringTablesError(str(path), "top-level JSON value must be an object")

    tables = build_scoring_tables(data)
    logger.info("scoring_tables_loaded", path=str(path), providers_with_trust=len(tables.provider_trust))
    return tables


_tables: ScoringTables | None = None


def get_scoring_tables() -> ScoringTables:
    """Return the process-wide ScoringTables, loading them on first use."""
    global _tables
    if _tables is None:
        _tables = load_scoring_tables()
    return _tables


def reset_scoring_tables_for_test() -> None:
    """Drop the cached tables so the next get_scoring_tables() reloads them."""
    global _tables
    _tables = None
