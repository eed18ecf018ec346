"""
Domain models for IOC history.

Owner context and indicator types used when recording a verdict; no ORM
coupling so callers do not need SQLAlchemy to build them.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any


class IocType(str, Enum):
    IP = "ip"
    DOMAIN = "domain"
    URL = "url"
    HASH = "hash"


class OwnerType(str, Enum):
    USER = "user"
    ORGANIZATION = "organization"
    ANONYMOUS = "anonymous"


@dataclass(frozen=True)
class OwnerContext:
    """Who requested the lookup; stored with every history row."""

    type: OwnerType | str
    id: str

    @property
    def type_value(self) -> str:
        return self.type.value if isinstance(self.type, Enum) else str(self.type)


@dataclass
class IocHistoryRecord:
    """Single row of the ioc_history timeline."""

    id: int
    owner_type: str
    owner_id: str
    ioc_type: str
    ioc_value: str
    verdict: str
    score: int
    created_at: datetime | None
    """Server-assigned UTC insert time."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner_type": self.owner_type,
            "owner_id": self.owner_id,
            "ioc_type": self.ioc_type,
            "ioc_value": self.ioc_value,
            "verdict": self.verdict,
            "score": self.score,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
