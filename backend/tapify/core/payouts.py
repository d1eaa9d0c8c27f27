"""
Payout triggers.

A trigger asks the disbursement provider to execute one payout job. The
provider owns the pending -> paid transition, so nothing here writes job
status; callers re-read the ledger once a trigger (or a whole batch) has
settled.

Two triggers for the same job id must never be outstanding at once. The
in-flight registry below refuses the second one until the first settles.
It is per process and is the only mutable state this module owns.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from threading import Lock
from typing import Any, Iterable

from sqlalchemy.orm import Session

from tapify.core.config import settings
from tapify.core.db import supports_concurrent_sessions
from tapify.core.errors import (
    AlreadyProcessedError,
    NotFoundError,
    PayoutInFlightError,
    PayoutTriggerError,
)
from tapify.core.logging import get_structured_logger
from tapify.core.metrics import PAYOUT_TRIGGERS_IN_FLIGHT, record_payout_trigger
from tapify.crud.payout_jobs import get_payout_job
from tapify.disbursement import DisbursementProvider, get_provider
from tapify.models.payout_jobs import PAYOUT_STATUS_PENDING


logger = get_structured_logger("tapify.payouts")

OUTCOME_PROCESSED = "processed"

_IN_FLIGHT: set[int] = set()
_LOCK = Lock()


def _claim(job_id: int) -> bool:
    with _LOCK:
        if job_id in _IN_FLIGHT:
            return False
        _IN_FLIGHT.add(job_id)
        return True


def _release(job_id: int) -> None:
    with _LOCK:
        _IN_FLIGHT.discard(job_id)


def in_flight_job_ids() -> frozenset[int]:
    with _LOCK:
        return frozenset(_IN_FLIGHT)


def reset_in_flight() -> None:
    with _LOCK:
        _IN_FLIGHT.clear()


def _transfer_summary(receipt: dict[str, Any]) -> Any:
    for key in ("transfers", "transfer_ids", "transferIds", "transfer"):
        if key in receipt:
            return receipt[key]
    return None


def trigger_payout(
    db: Session,
    job_id: int,
    *,
    provider: DisbursementProvider | None = None,
    actor_id: Any = None,
    timeout: float | None = None,
) -> dict[str, Any]:
    """Dispatch one payout job to the provider and return its receipt.

    Jobs unknown locally or no longer pending are refused before any
    provider call. A dispatched call is never cancelled; it runs until the
    provider answers or the timeout expires.
    """
    if not _claim(job_id):
        record_payout_trigger("payout_in_flight")
        logger.warning(
            "payout.duplicate_refused",
            extra={"payout_job_id": job_id, "actor_id": actor_id},
        )
        raise PayoutInFlightError(job_id)

    PAYOUT_TRIGGERS_IN_FLIGHT.inc()
    try:
        job = get_payout_job(db, job_id=job_id)
        if job is None:
            raise NotFoundError(job_id)
        if job.status != PAYOUT_STATUS_PENDING:
            raise AlreadyProcessedError(job_id, job.status)

        logger.info(
            "payout.trigger_started",
            extra={
                "payout_job_id": job_id,
                "retailer_id": job.retailer_id,
                "retailer_cut": job.retailer_cut,
                "actor_id": actor_id,
            },
        )
        receipt = (provider or get_provider()).execute(job_id, timeout=timeout)
    except PayoutTriggerError as exc:
        record_payout_trigger(exc.code)
        logger.warning(
            "payout.failed",
            extra={
                "payout_job_id": job_id,
                "actor_id": actor_id,
                "code": exc.code,
                "error": exc.message,
                "unknown_outcome": getattr(exc, "unknown_outcome", False),
                "retryable": exc.retryable,
            },
        )
        raise
    finally:
        PAYOUT_TRIGGERS_IN_FLIGHT.dec()
        _release(job_id)

    record_payout_trigger(OUTCOME_PROCESSED)
    logger.info(
        "payout.processed",
        extra={
            "payout_job_id": job_id,
            "actor_id": actor_id,
            "transfers": _transfer_summary(receipt),
        },
    )
    return receipt


@dataclass
class TriggerFailure:
    payout_job_id: int
    code: str
    error: str
    unknown_outcome: bool = False
    retryable: bool = True

    @classmethod
    def from_error(cls, job_id: int, exc: PayoutTriggerError) -> "TriggerFailure":
        return cls(
            payout_job_id=job_id,
            code=exc.code,
            error=exc.message,
            unknown_outcome=getattr(exc, "unknown_outcome", False),
            retryable=exc.retryable,
        )


@dataclass
class BatchTriggerResult:
    succeeded: list[int] = field(default_factory=list)
    failed: list[TriggerFailure] = field(default_factory=list)
    receipts: dict[int, dict[str, Any]] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.failed


def _dedupe(job_ids: Iterable[int]) -> list[int]:
    seen: set[int] = set()
    ordered: list[int] = []
    for job_id in job_ids:
        if job_id in seen:
            continue
        seen.add(job_id)
        ordered.append(job_id)
    return ordered


def trigger_all(
    db: Session,
    job_ids: Iterable[int],
    *,
    provider: DisbursementProvider | None = None,
    actor_id: Any = None,
    max_workers: int | None = None,
) -> BatchTriggerResult:
    """Trigger every job id in parallel, best effort.

    One failure never stops the others and nothing is rolled back. The
    result lists each job as succeeded or failed with its error code.
    """
    ordered = _dedupe(job_ids)
    result = BatchTriggerResult()
    if not ordered:
        return result

    provider = provider or get_provider()
    max_workers = max_workers or settings.PAYOUT_BATCH_MAX_WORKERS
    bind = db.get_bind()
    parallel = max_workers > 1 and len(ordered) > 1 and supports_concurrent_sessions(bind)

    def _run(job_id: int) -> dict[str, Any]:
        if not parallel:
            return trigger_payout(db, job_id, provider=provider, actor_id=actor_id)
        with Session(bind=bind, autoflush=False) as session:
            return trigger_payout(session, job_id, provider=provider, actor_id=actor_id)

    def _settle(job_id: int, outcome) -> None:
        try:
            receipt = outcome()
        except PayoutTriggerError as exc:
            result.failed.append(TriggerFailure.from_error(job_id, exc))
        except Exception as exc:
            logger.exception("payout.failed", extra={"payout_job_id": job_id, "actor_id": actor_id})
            result.failed.append(
                TriggerFailure(
                    payout_job_id=job_id,
                    code="internal_error",
                    error=str(exc) or exc.__class__.__name__,
                    retryable=False,
                )
            )
        else:
            result.succeeded.append(job_id)
            result.receipts[job_id] = receipt

    if parallel:
        with ThreadPoolExecutor(
            max_workers=min(max_workers, len(ordered)),
            thread_name_prefix="payout-trigger",
        ) as pool:
            futures = [(job_id, pool.submit(_run, job_id)) for job_id in ordered]
            for job_id, future in futures:
                _settle(job_id, future.result)
    else:
        for job_id in ordered:
            _settle(job_id, lambda job_id=job_id: _run(job_id))

    logger.info(
        "payout.batch_completed",
        extra={
            "actor_id": actor_id,
            "requested": len(ordered),
            "succeeded": len(result.succeeded),
            "failed": len(result.failed),
            "unknown_outcome": [f.payout_job_id for f in result.failed if f.unknown_outcome],
        },
    )
    return result
