"""
IOC history logger: SQLAlchemy-backed, append-only verdict/score timeline.

Uses IOCFUSION_DB_URL or DATABASE_URL (PostgreSQL) when set; otherwise falls
back to SQLite (IOC_HISTORY_DB_PATH or ioc_history.db). created_at is assigned
by the database in UTC. verdict and score are NOT NULL: callers holding a
result without a score go through history_values() first.

Inserts are never retried here; a duplicate row would misstate history.
"""

from __future__ import annotations

from contextlib import contextmanager
from datetime import timezone
from typing import Any, Iterator

from sqlalchemy import Column, DateTime, Index, Integer, String, create_engine, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from backend_iocfusion.config.env import get_history_database_url, mask_database_url
from backend_iocfusion.core.exceptions import HistoryLogError
from backend_iocfusion.fusion_logging import get_logger
from backend_iocfusion.history.models import IocHistoryRecord, IocType, OwnerContext
from backend_iocfusion.scoring.models import ScoringResult, Verdict

logger = get_logger(__name__)

Base = declarative_base()

# Written in place of a null final score
SENTINEL_SCORE = 0
SENTINEL_VERDICT = Verdict.UNKNOWN.value


class IocHistory(Base):
    """One row per recorded verdict for an indicator."""

    __tablename__ = "ioc_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_type = Column(String(32), nullable=False)
    owner_id = Column(String(128), nullable=False, index=True)
    ioc_type = Column(String(16), nullable=False)
    ioc_value = Column(String(2048), nullable=False)
    verdict = Column(String(32), nullable=False)
    score = Column(Integer, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())

    __table_args__ = (Index("ix_ioc_history_ioc", "ioc_type", "ioc_value"),)

    def to_record(self) -> IocHistoryRecord:
        created_at = self.created_at
        if created_at is not None and created_at.tzinfo is None:
            # SQLite drops the zone; CURRENT_TIMESTAMP is UTC
            created_at = created_at.replace(tzinfo=timezone.utc)
        return IocHistoryRecord(
            id=self.id,
            owner_type=self.owner_type,
            owner_id=self.owner_id,
            ioc_type=self.ioc_type,
            ioc_value=self.ioc_value,
            verdict=self.verdict,
            score=self.score,
            created_at=created_at,
        )


# -----------------------------------------------------------------------------
# Engine and session
# -----------------------------------------------------------------------------

_engine = None
_SessionLocal: sessionmaker | None = None


def _get_engine():
    """Create or return cached engine."""
    global _engine
    if _engine is None:
        url = get_history_database_url()
        connect_args = {}
        if url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        _engine = create_engine(url, connect_args=connect_args, pool_pre_ping=True)
        logger.info("ioc_history_engine", url=mask_database_url(url))
    return _engine


def _get_session_factory() -> sessionmaker:
    global _SessionLocal
    if _SessionLocal is None:
        _SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=_get_engine())
    return _SessionLocal


@contextmanager
def _session_scope() -> Iterator[Session]:
    """Context manager for a single session. Commits on success, rolls back on error."""
    session = _get_session_factory()()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db() -> None:
    """Create the ioc_history table if it does not exist. Safe to call on every startup."""
    try:
        Base.metadata.create_all(bind=_get_engine())
        logger.info("ioc_history_init_db", url=mask_database_url(get_history_database_url()))
    except SQLAlchemyError as e:
        logger.exception("ioc_history_init_db_failed", error=str(e))
        raise


def reset_engine_for_test() -> None:
    """Clear cached engine and session factory. For tests only; use with a new IOC_HISTORY_DB_PATH."""
    global _engine, _SessionLocal
    if _engine is not None:
        _engine.dispose()
    _engine = None
    _SessionLocal = None


# -----------------------------------------------------------------------------
# Public API
# -----------------------------------------------------------------------------


def _ioc_type_value(ioc_type: IocType | str) -> str:
    return ioc_type.value if isinstance(ioc_type, IocType) else str(ioc_type).strip().lower()


def history_values(result: ScoringResult) -> tuple[str, int]:
    """Return (verdict, score) to store for a result; a null score becomes (unknown, 0)."""
    if result.final_score is None:
        return SENTINEL_VERDICT, SENTINEL_SCORE
    return result.verdict.value, int(result.final_score)


def log_ioc_history(
    owner: OwnerContext,
    ioc_type: IocType | str,
    ioc_value: str,
    verdict: str,
    score: int,
) -> None:
    """
    Append one history row. Raises ValueError for a null verdict/score and
    HistoryLogError when the insert fails. Does not retry.
    """
    if verdict is None or score is None:
        raise ValueError("verdict and score must not be None; use history_values() for unscored results")
    ioc_type_str = _ioc_type_value(ioc_type)
    verdict_str = verdict.value if isinstance(verdict, Verdict) else str(verdict)
    try:
        with _session_scope() as session:
            session.add(
                IocHistory(
                    owner_type=owner.type_value,
                    owner_id=str(owner.id),
                    ioc_type=ioc_type_str,
                    ioc_value=ioc_value,
                    verdict=verdict_str,
                    score=int(score),
                )
            )
        logger.debug("ioc_history_logged", ioc_type=ioc_type_str, verdict=verdict_str, score=int(score))
    except SQLAlchemyError as e:
        logger.exception("ioc_history_insert_failed", ioc_type=ioc_type_str, error=str(e))
        raise HistoryLogError(ioc_type_str, ioc_value, str(e)) from e


def log_scoring_result(
    owner: OwnerContext,
    ioc_type: IocType | str,
    ioc_value: str,
    result: ScoringResult,
) -> None:
    """Record a ScoringResult, substituting the sentinel when it has no score."""
    verdict, score = history_values(result)
    log_ioc_history(owner, ioc_type, ioc_value, verdict, score)


def get_ioc_history(
    ioc_type: IocType | str,
    ioc_value: str,
    *,
    limit: int = 100,
    owner: OwnerContext | None = None,
) -> list[IocHistoryRecord]:
    """Return history rows for one indicator, newest first; optionally only one owner's rows."""
    ioc_type_str = _ioc_type_value(ioc_type)
    try:
        with _session_scope() as session:
            query = session.query(IocHistory).filter(
                IocHistory.ioc_type == ioc_type_str,
                IocHistory.ioc_value == ioc_value,
            )
            if owner is not None:
                query = query.filter(
                    IocHistory.owner_type == owner.type_value,
                    IocHistory.owner_id == str(owner.id),
                )
            rows = query.order_by(IocHistory.created_at.desc(), IocHistory.id.desc()).limit(limit).all()
            return [r.to_record() for r in rows]
    except SQLAlchemyError as e:
        logger.exception("ioc_history_query_failed", ioc_type=ioc_type_str, error=str(e))
        raise


def __getattr__(name: str) -> Any:
    """Lazy engine: expose 'engine' without creating at import time until first access."""
    if name == "engine":
        return _get_engine()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
