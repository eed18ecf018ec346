"""
Provider trust resolution.

A trust resolver is any callable-like object with resolve(provider) -> TrustLevel.
The default policy trusts every provider at the same level; TableTrustResolver
differentiates providers from a lookup table without touching aggregation.
"""

from __future__ import annotations

from typing import Mapping, Protocol, runtime_checkable

from backend_iocfusion.config.settings import ScoringTables
from backend_iocfusion.scoring.models import TrustLevel


@runtime_checkable
class TrustResolver(Protocol):
    def resolve(self, provider: str) -> TrustLevel: ...


class StaticTrustResolver:
    """Every provider gets the same trust level (MEDIUM unless told otherwise)."""

    def __init__(self, level: TrustLevel = TrustLevel.MEDIUM) -> None:
        self._level = TrustLevel(level)

    def resolve(self, provider: str) -> TrustLevel:
        return self._level

    def __repr__(self) -> str:
        return f"StaticTrustResolver(level={self._level.value!r})"


class TableTrustResolver:
    """Per-provider trust from a mapping; unknown providers get the fallback level."""

    def __init__(
        self,
        table: Mapping[str, TrustLevel | str],
        fallback: TrustLevel = TrustLevel.MEDIUM,
    ) -> None:
        self._table = {str(k).strip().lower(): TrustLevel(v) for k, v in table.items()}
        self._fallback = TrustLevel(fallback)

    def resolve(self, provider: str) -> TrustLevel:
        return self._table.get((provider or "").strip().lower(), self._fallback)

    def __repr__(self) -> str:
        return f"TableTrustResolver(providers={len(self._table)}, fallback={self._fallback.value!r})"


def trust_resolver_from_tables(tables: ScoringTables) -> TrustResolver:
    """Static resolver when no per-provider table is configured, table resolver otherwise."""
    fallback = TrustLevel(tables.default_trust_level)
    if not tables.provider_trust:
        return StaticTrustResolver(fallback)
    return TableTrustResolver(tables.provider_trust, fallback=fallback)
