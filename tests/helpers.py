"""Provider result builders in Provider Executor wire format."""

from __future__ import annotations

from typing import Any


def ok(provider: str, verdict: str, confidence: Any = None, **extra: Any) -> dict[str, Any]:
    """Successful provider result in executor wire format."""
    data: dict[str, Any] = {"verdict": verdict, **extra}
    if confidence is not None:
        data["confidence"] = confidence
    return {"provider": provider, "status": "success", "data": data}


def timeout(provider: str) -> dict[str, Any]:
    return {"provider": provider, "status": "timeout", "data": None}


def failure(provider: str) -> dict[str, Any]:
    return {"provider": provider, "status": "failure", "data": None}
