import os
from decimal import Decimal

import pytest

os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["SKIP_MIGRATIONS"] = "1"

import tapify.core.ledger as ledger_module  # noqa: E402
from tapify.core.errors import InvalidStatusFilterError, LedgerFetchError  # noqa: E402
from tapify.core.ledger import aggregate, summarize_payout_jobs, summarize_retailer  # noqa: E402
from tapify.models.payout_jobs import PAYOUT_STATUS_PAID, PAYOUT_STATUS_PRIORITY_DISPLAY  # noqa: E402
from tests.factories import (  # noqa: E402
    make_order,
    make_payout_job,
    make_retailer,
    make_uid,
    make_vendor,
    setup_db,
)


def _seed_scenario(db):
    vendor = make_vendor(db)
    retailer = make_retailer(db, name="Corner Cafe")
    for minutes, cut in enumerate((10, 20, 30)):
        make_payout_job(db, retailer=retailer, vendor=vendor, retailer_cut=cut, minutes=minutes)
    for minutes, cut in enumerate((5, 15), start=10):
        make_payout_job(db, retailer=retailer, vendor=vendor, retailer_cut=cut, status=PAYOUT_STATUS_PAID, minutes=minutes)
    return vendor, retailer


def test_all_view_sums_pending_and_paid_cuts():
    SessionLocal = setup_db("ledger_sums")
    with SessionLocal() as db:
        _, retailer = _seed_scenario(db)
        make_uid(db, retailer=retailer)
        make_uid(db, retailer=retailer, is_claimed=False)
        make_order(db, retailer=retailer)

        ledger = aggregate(db, "all")

    assert len(ledger.retailers) == 1
    summary = ledger.retailers[0].summary
    assert summary.pending_earnings == Decimal("60")
    assert summary.paid_earnings == Decimal("20")
    assert summary.total_earnings == Decimal("80")
    assert summary.pending_count == 3
    assert summary.paid_count == 2
    assert summary.uid_count == 1
    assert summary.total_orders == 1
    assert summary.total_display == "$80.00"
    assert ledger.totals.total_pending == Decimal("60")
    assert ledger.totals.total_paid == Decimal("20")
    assert ledger.totals.total_payouts == 5


def test_pending_view_only_counts_pending_jobs():
    SessionLocal = setup_db("ledger_pending")
    with SessionLocal() as db:
        _seed_scenario(db)
        ledger = aggregate(db, "pending")

    entry = ledger.retailers[0]
    assert {job.status for job in entry.payouts} == {"pending"}
    assert entry.summary.pending_earnings == Decimal("60")
    assert entry.summary.paid_earnings == Decimal("0")
    assert ledger.totals.total_payouts == 3


def test_unconverted_retailer_never_appears_even_with_stray_jobs():
    SessionLocal = setup_db("ledger_unconverted")
    with SessionLocal() as db:
        vendor = make_vendor(db)
        stray = make_retailer(db, name="Stray Shop", converted=False)
        make_payout_job(db, retailer=stray, vendor=vendor, retailer_cut=99)
        unfinished = make_retailer(db, name="Half Done", onboarding_completed=False)
        make_payout_job(db, retailer=unfinished, vendor=vendor, retailer_cut=1)

        pending = aggregate(db, "pending")
        everything = aggregate(db, "all")

    assert pending.retailers == []
    assert everything.retailers == []
    assert pending.totals.total_pending == Decimal("0")
    # Jobs are counted before grouping, so stray jobs still show up here.
    assert pending.totals.total_payouts == 2


def test_filtered_views_drop_retailers_without_matching_jobs():
    SessionLocal = setup_db("ledger_drop")
    with SessionLocal() as db:
        vendor = make_vendor(db)
        paid_only = make_retailer(db, name="Paid Only")
        make_payout_job(db, retailer=paid_only, vendor=vendor, retailer_cut=7, status=PAYOUT_STATUS_PAID)
        make_retailer(db, name="No Jobs")
        pending_one = make_retailer(db, name="Pending One")
        make_payout_job(db, retailer=pending_one, vendor=vendor, retailer_cut=3)

        pending_names = [entry.retailer.name for entry in aggregate(db, "pending").retailers]
        paid_names = [entry.retailer.name for entry in aggregate(db, "paid").retailers]
        all_names = [entry.retailer.name for entry in aggregate(db, "all").retailers]

    assert pending_names == ["Pending One"]
    assert paid_names == ["Paid Only"]
    assert all_names == ["No Jobs", "Paid Only", "Pending One"]


def test_non_cash_statuses_are_listed_but_not_summed():
    SessionLocal = setup_db("ledger_noncash")
    with SessionLocal() as db:
        vendor = make_vendor(db)
        retailer = make_retailer(db, name="Display Partner")
        make_payout_job(db, retailer=retailer, vendor=vendor, retailer_cut=0, status=PAYOUT_STATUS_PRIORITY_DISPLAY)
        make_payout_job(db, retailer=retailer, vendor=vendor, retailer_cut=4)

        ledger = aggregate(db, "all")

    entry = ledger.retailers[0]
    assert len(entry.payouts) == 2
    assert entry.summary.total_earnings == entry.summary.pending_earnings + entry.summary.paid_earnings
    assert entry.summary.total_earnings == Decimal("4")


def test_retailers_sort_by_name_regardless_of_case():
    SessionLocal = setup_db("ledger_sort")
    with SessionLocal() as db:
        for name in ("banana Bar", "Apple Annex", "cherry Corner"):
            make_retailer(db, name=name)
        names = [entry.retailer.name for entry in aggregate(db, "all").retailers]

    assert names == ["Apple Annex", "banana Bar", "cherry Corner"]


def test_repeated_aggregation_is_stable():
    SessionLocal = setup_db("ledger_idempotent")
    with SessionLocal() as db:
        _seed_scenario(db)
        first = aggregate(db, "all")
        second = aggregate(db, "all")

    assert first.totals == second.totals
    assert [e.summary for e in first.retailers] == [e.summary for e in second.retailers]


def test_orders_context_is_bounded():
    SessionLocal = setup_db("ledger_orders")
    with SessionLocal() as db:
        retailer = make_retailer(db, name="Busy Shop")
        for minutes in range(5):
            make_order(db, retailer=retailer, minutes=minutes)
        ledger = aggregate(db, "all", order_limit=3)

    assert len(ledger.retailers[0].orders) == 3


def test_sequential_fetch_path_matches_parallel():
    SessionLocal = setup_db("ledger_sequential")
    with SessionLocal() as db:
        _seed_scenario(db)
        parallel = aggregate(db, "all", max_workers=4)
        sequential = aggregate(db, "all", max_workers=1)

    assert parallel.totals == sequential.totals


def test_any_fetch_failure_fails_the_whole_aggregate(monkeypatch):
    SessionLocal = setup_db("ledger_failure")

    def broken(_db):
        raise RuntimeError("uids table unavailable")

    monkeypatch.setattr(ledger_module, "list_claimed_uids", broken)
    with SessionLocal() as db:
        _seed_scenario(db)
        with pytest.raises(LedgerFetchError) as excinfo:
            aggregate(db, "all")

    assert excinfo.value.source == "uids"
    assert excinfo.value.status_code == 500


def test_unknown_status_filter_is_rejected():
    SessionLocal = setup_db("ledger_filter")
    with SessionLocal() as db:
        with pytest.raises(InvalidStatusFilterError):
            aggregate(db, "failed")
        assert aggregate(db, None).status_filter == "pending"
        assert aggregate(db, " PAID ").status_filter == "paid"


def test_summarize_retailer_uses_ledger_formulas():
    SessionLocal = setup_db("ledger_retailer")
    with SessionLocal() as db:
        _, retailer = _seed_scenario(db)
        jobs, summary = summarize_retailer(db, retailer_id=retailer.id)

    assert len(jobs) == 5
    assert summary == summarize_payout_jobs(jobs)
    assert summary.pending_display == "$60.00"
    assert summary.paid_display == "$20.00"
