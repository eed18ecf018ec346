"""
FastAPI server: verdict fusion over HTTP plus read access to IOC history.

POST /score takes the Provider Executor's results for one indicator and
returns the fused ScoringResult. When the indicator is named, the verdict is
also appended to ioc_history. Scoring tables and the history table are set up
once at startup.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, Literal

from fastapi import FastAPI, HTTPException, Query
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from backend_iocfusion.config import get_scoring_tables
from backend_iocfusion.fusion_logging import get_logger
from backend_iocfusion.history import IocType, OwnerContext, get_ioc_history, init_db
from backend_iocfusion.scoring import ScoringInput, compute_score
from backend_iocfusion.service import score_ioc

logger = get_logger(__name__)


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------


class ProviderResponseBody(BaseModel):
    """Normalized provider answer. verdict is free text; unrecognized values score as unknown."""

    verdict: str | None = Field(None, description="benign | suspicious | malicious | unknown")
    score: float | None = Field(None, description="Provider's own score, informational")
    confidence: float | None = Field(None, ge=0, le=100, strict=True, description="Provider confidence 0-100")
    summary: str | None = None
    tags: list[str] = Field(default_factory=list)
    provider_name: str | None = None


class ProviderResultBody(BaseModel):
    provider: str = Field(..., min_length=1, max_length=128)
    status: Literal["success", "timeout", "failure"]
    data: ProviderResponseBody | None = None


class ScoreRequest(BaseModel):
    """POST /score body. Set ioc_type and ioc_value to record the verdict in history."""

    providers: list[ProviderResultBody] = Field(default_factory=list)
    ioc_type: IocType | None = None
    ioc_value: str | None = Field(None, min_length=1, max_length=2048)
    owner_type: str = Field("anonymous", min_length=1, max_length=32)
    owner_id: str = Field("anonymous", min_length=1, max_length=128)


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Load scoring tables and create the history table before serving."""
    tables = get_scoring_tables()
    init_db()
    logger.info("api_started", provider_trust_entries=len(tables.provider_trust))
    yield
    logger.info("api_stopped")


app = FastAPI(
    title="IOC Fusion API",
    description="Fuses threat-intelligence provider verdicts into one score, verdict, and confidence.",
    version="0.1.0",
    lifespan=lifespan,
)


@app.post("/score")
def score(body: ScoreRequest) -> JSONResponse:
    """
    Fuse provider results. Always returns the scoring result; historyLogged reports
    whether a history row was written (false when no indicator was given or the insert failed).
    """
    scoring_input = ScoringInput.from_dict(body.model_dump())
    if body.ioc_type is None or not body.ioc_value:
        result = compute_score(scoring_input)
        content: dict[str, Any] = result.to_dict()
        content["historyLogged"] = False
        return JSONResponse(status_code=200, content=content)

    outcome = score_ioc(
        scoring_input,
        owner=OwnerContext(type=body.owner_type, id=body.owner_id),
        ioc_type=body.ioc_type,
        ioc_value=body.ioc_value.strip(),
    )
    return JSONResponse(status_code=200, content=outcome.to_dict())


@app.get("/ioc-history/{ioc_type}/{ioc_value:path}")
def ioc_history(
    ioc_type: IocType,
    ioc_value: str,
    limit: int = Query(100, ge=1, le=1000),
) -> list[dict[str, Any]]:
    """Recorded verdicts for one indicator, newest first. 404 when nothing was recorded."""
    records = get_ioc_history(ioc_type, ioc_value, limit=limit)
    if not records:
        raise HTTPException(status_code=404, detail=f"No history for {ioc_type.value} {ioc_value[:64]}")
    return [r.to_dict() for r in records]


@app.get("/scoring-tables")
def scoring_tables() -> dict[str, Any]:
    """Lookup tables currently in effect."""
    return get_scoring_tables().to_dict()


@app.get("/health")
def health() -> dict[str, str]:
    """Liveness probe: API is up."""
    return {"status": "ok"}


@app.exception_handler(HTTPException)
def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
    """Consistent JSON error response for HTTPException."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.detail},
    )
