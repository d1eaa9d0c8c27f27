"""
Retailer payout ledger.

The ledger is derived, never stored: every call re-reads retailers,
payout jobs, claimed UIDs and recent orders, groups them by retailer in
memory and sums the retailer cuts. The four reads are independent and
run concurrently, each on its own session bound to the caller's engine.
"""

from __future__ import annotations

from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from decimal import Decimal
from time import monotonic
from typing import Any, Callable, Iterable

from sqlalchemy.orm import Session

from tapify.core.config import settings
from tapify.core.db import supports_concurrent_sessions
from tapify.core.errors import InvalidStatusFilterError, LedgerFetchError
from tapify.core.logging import get_structured_logger
from tapify.core.metrics import LEDGER_AGGREGATION_SECONDS
from tapify.core.money import ZERO, format_money, to_decimal
from tapify.crud.orders import list_recent_orders
from tapify.crud.payout_jobs import list_payout_jobs, list_payout_jobs_for_retailer
from tapify.crud.retailers import list_payout_eligible_retailers
from tapify.crud.uids import list_claimed_uids
from tapify.models.orders import Order
from tapify.models.payout_jobs import PAYOUT_STATUS_PAID, PAYOUT_STATUS_PENDING, PayoutJob
from tapify.models.retailers import Retailer
from tapify.models.uids import ClaimedUid


logger = get_structured_logger("tapify.ledger")

STATUS_FILTER_ALL = "all"
STATUS_FILTERS = (PAYOUT_STATUS_PENDING, PAYOUT_STATUS_PAID, STATUS_FILTER_ALL)
DEFAULT_STATUS_FILTER = PAYOUT_STATUS_PENDING


@dataclass
class LedgerSummary:
    pending_earnings: Decimal = ZERO
    paid_earnings: Decimal = ZERO
    total_earnings: Decimal = ZERO
    pending_count: int = 0
    paid_count: int = 0
    total_orders: int = 0
    uid_count: int = 0

    @property
    def pending_display(self) -> str:
        return format_money(self.pending_earnings)

    @property
    def paid_display(self) -> str:
        return format_money(self.paid_earnings)

    @property
    def total_display(self) -> str:
        return format_money(self.total_earnings)


@dataclass
class RetailerLedgerEntry:
    retailer: Retailer
    uids: list[ClaimedUid] = field(default_factory=list)
    payouts: list[PayoutJob] = field(default_factory=list)
    orders: list[Order] = field(default_factory=list)
    summary: LedgerSummary = field(default_factory=LedgerSummary)


@dataclass
class LedgerTotals:
    total_retailers: int
    total_pending: Decimal
    total_paid: Decimal
    total_payouts: int


@dataclass
class RetailerLedger:
    status_filter: str
    retailers: list[RetailerLedgerEntry]
    totals: LedgerTotals


def normalize_status_filter(value: str | None) -> str:
    if value is None:
        return DEFAULT_STATUS_FILTER
    cleaned = str(value).strip().lower()
    if not cleaned:
        return DEFAULT_STATUS_FILTER
    if cleaned not in STATUS_FILTERS:
        raise InvalidStatusFilterError(value, list(STATUS_FILTERS))
    return cleaned


def summarize_payout_jobs(
    jobs: Iterable[PayoutJob],
    *,
    orders: Iterable[Any] = (),
    uids: Iterable[Any] = (),
) -> LedgerSummary:
    pending = ZERO
    paid = ZERO
    pending_count = 0
    paid_count = 0
    for job in jobs:
        if job.status == PAYOUT_STATUS_PENDING:
            pending += to_decimal(job.retailer_cut)
            pending_count += 1
        elif job.status == PAYOUT_STATUS_PAID:
            paid += to_decimal(job.retailer_cut)
            paid_count += 1
    return LedgerSummary(
        pending_earnings=pending,
        paid_earnings=paid,
        total_earnings=pending + paid,
        pending_count=pending_count,
        paid_count=paid_count,
        total_orders=len(list(orders)),
        uid_count=len(list(uids)),
    )


def _group_by_retailer(rows: Iterable[Any]) -> dict[int, list[Any]]:
    grouped: dict[int, list[Any]] = defaultdict(list)
    for row in rows:
        if row.retailer_id is None:
            continue
        grouped[row.retailer_id].append(row)
    return grouped


def _retailer_sort_key(entry: RetailerLedgerEntry) -> tuple:
    name = entry.retailer.name or ""
    return (name.casefold(), name, entry.retailer.id)


def _run_fetches(db: Session, fetches: dict[str, Callable[[Session], list]], max_workers: int) -> dict[str, list]:
    bind = db.get_bind()
    if max_workers <= 1 or not supports_concurrent_sessions(bind):
        results = {}
        for source, fetch in fetches.items():
            try:
                results[source] = fetch(db)
            except Exception as exc:
                logger.exception("ledger.fetch_failed", extra={"source": source})
                raise LedgerFetchError(source) from exc
        return results

    def _isolated(fetch: Callable[[Session], list]) -> list:
        with Session(bind=bind, autoflush=False) as session:
            return fetch(session)

    with ThreadPoolExecutor(max_workers=min(max_workers, len(fetches)), thread_name_prefix="ledger-fetch") as pool:
        futures = {source: pool.submit(_isolated, fetch) for source, fetch in fetches.items()}
        results = {}
        for source, future in futures.items():
            try:
                results[source] = future.result()
            except Exception as exc:
                logger.exception("ledger.fetch_failed", extra={"source": source})
                raise LedgerFetchError(source) from exc
    return results


def aggregate(
    db: Session,
    status_filter: str | None = DEFAULT_STATUS_FILTER,
    *,
    order_limit: int | None = None,
    max_workers: int | None = None,
) -> RetailerLedger:
    """Build the per-retailer payout ledger for one status view.

    ``pending`` and ``paid`` views drop retailers without a matching job;
    ``all`` lists every eligible retailer. Any failed read fails the
    whole call with LedgerFetchError.
    """
    status_filter = normalize_status_filter(status_filter)
    order_limit = order_limit or settings.LEDGER_ORDER_LIMIT
    max_workers = max_workers or settings.LEDGER_FETCH_WORKERS
    job_status = None if status_filter == STATUS_FILTER_ALL else status_filter
    start = monotonic()

    with LEDGER_AGGREGATION_SECONDS.labels(status_filter=status_filter).time():
        fetched = _run_fetches(
            db,
            {
                "retailers": list_payout_eligible_retailers,
                "payout_jobs": lambda session: list_payout_jobs(session, status=job_status),
                "uids": list_claimed_uids,
                "orders": lambda session: list_recent_orders(session, limit=order_limit),
            },
            max_workers,
        )

        jobs = fetched["payout_jobs"]
        jobs_by_retailer = _group_by_retailer(jobs)
        uids_by_retailer = _group_by_retailer(fetched["uids"])
        orders_by_retailer = _group_by_retailer(fetched["orders"])

        entries: list[RetailerLedgerEntry] = []
        for retailer in fetched["retailers"]:
            payouts = jobs_by_retailer.get(retailer.id, [])
            if status_filter != STATUS_FILTER_ALL and not payouts:
                continue
            uids = uids_by_retailer.get(retailer.id, [])
            orders = orders_by_retailer.get(retailer.id, [])
            entries.append(
                RetailerLedgerEntry(
                    retailer=retailer,
                    uids=uids,
                    payouts=payouts,
                    orders=orders,
                    summary=summarize_payout_jobs(payouts, orders=orders, uids=uids),
                )
            )
        entries.sort(key=_retailer_sort_key)

        totals = LedgerTotals(
            total_retailers=len(entries),
            total_pending=sum((entry.summary.pending_earnings for entry in entries), ZERO),
            total_paid=sum((entry.summary.paid_earnings for entry in entries), ZERO),
            total_payouts=len(jobs),
        )

    logger.info(
        "ledger.aggregated",
        extra={
            "status_filter": status_filter,
            "total_retailers": totals.total_retailers,
            "total_payouts": totals.total_payouts,
            "duration_ms": round((monotonic() - start) * 1000.0, 2),
        },
    )
    return RetailerLedger(status_filter=status_filter, retailers=entries, totals=totals)


def summarize_retailer(db: Session, *, retailer_id: int) -> tuple[list[PayoutJob], LedgerSummary]:
    """Every payout job of one retailer with the same summary the ledger shows."""
    jobs = list_payout_jobs_for_retailer(db, retailer_id=retailer_id)
    return jobs, summarize_payout_jobs(jobs)
