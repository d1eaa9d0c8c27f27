"""
Error taxonomy for the commission and payout engine.

Every error carries a stable ``code`` and the HTTP status the API should
answer with, so request handlers never have to translate them by hand.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any


@dataclass(eq=False)
class PayoutEngineError(Exception):
    code: str
    message: str
    status_code: int
    details: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        super().__init__(self.message)

    @property
    def retryable(self) -> bool:
        return True

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        payload.update(self.details)
        return payload


# Commission validation


class CommissionValidationError(PayoutEngineError):
    """Rejected commission input. Never partially applied."""


def _echo_value(value: Any) -> Any:
    # JSON responses reject NaN and Infinity.
    if isinstance(value, float) and not math.isfinite(value):
        return str(value)
    return value


class InvalidRangeError(CommissionValidationError):
    def __init__(self, field_name: str, value: Any, *, whole_number: bool = False):
        qualifier = "a whole number " if whole_number else ""
        super().__init__(
            code="invalid_range",
            message=f"{field_name.capitalize()} percent must be {qualifier}between 0 and 100",
            status_code=400,
            details={"field": field_name, "value": _echo_value(value)},
        )
        self.field = field_name
        self.value = value


class OverAllocationError(CommissionValidationError):
    def __init__(self, total: int, breakdown: dict[str, int]):
        super().__init__(
            code="over_allocation",
            message=f"Total percentages ({total}%) exceed 100%",
            status_code=400,
            details={"breakdown": {**breakdown, "total": total}},
        )
        self.total = total
        self.breakdown = breakdown


class SplitTotalError(CommissionValidationError):
    def __init__(self, total: int, breakdown: dict[str, int]):
        super().__init__(
            code="split_total_mismatch",
            message=f"Total must equal 100%, current: {total}%",
            status_code=400,
            details={"breakdown": {**breakdown, "total": total}},
        )
        self.total = total
        self.breakdown = breakdown


class VendorNotFoundError(PayoutEngineError):
    def __init__(self, vendor_id: int):
        super().__init__(
            code="vendor_not_found",
            message="Vendor not found",
            status_code=404,
            details={"vendor_id": vendor_id},
        )


# Ledger


class InvalidStatusFilterError(PayoutEngineError):
    def __init__(self, value: Any, allowed: list[str]):
        super().__init__(
            code="invalid_status_filter",
            message=f"Invalid status filter: {value}",
            status_code=400,
            details={"allowed": allowed},
        )


class RetailerNotFoundError(PayoutEngineError):
    def __init__(self, retailer_id: Any = None):
        super().__init__(
            code="retailer_not_found",
            message="Retailer not found",
            status_code=404,
            details={"retailer_id": retailer_id} if retailer_id is not None else {},
        )


class LedgerFetchError(PayoutEngineError):
    """One of the ledger reads failed; the whole aggregate is discarded."""

    def __init__(self, source: str):
        super().__init__(
            code="ledger_fetch_failed",
            message=f"Failed to fetch {source} for the payout ledger",
            status_code=500,
            details={"source": source},
        )
        self.source = source


# Payout triggers


class PayoutTriggerError(PayoutEngineError):
    job_id: Any = None


class NotFoundError(PayoutTriggerError):
    def __init__(self, job_id: Any):
        super().__init__(
            code="payout_not_found",
            message="Payout job not found",
            status_code=404,
            details={"payout_job_id": job_id},
        )
        self.job_id = job_id


class AlreadyProcessedError(PayoutTriggerError):
    def __init__(self, job_id: Any, status: str | None = "paid"):
        super().__init__(
            code="payout_already_processed",
            message="Payout already processed",
            status_code=409,
            details={"payout_job_id": job_id, "status": status},
        )
        self.job_id = job_id
        self.status = status


class PayoutInFlightError(PayoutTriggerError):
    def __init__(self, job_id: Any):
        super().__init__(
            code="payout_in_flight",
            message="Payout is already being processed",
            status_code=409,
            details={"payout_job_id": job_id},
        )
        self.job_id = job_id


class ProviderError(PayoutTriggerError):
    def __init__(
        self,
        job_id: Any,
        message: str = "Disbursement provider failed",
        *,
        unknown_outcome: bool = False,
        provider_status: int | None = None,
        code: str | None = None,
    ):
        details: dict[str, Any] = {"payout_job_id": job_id, "unknown_outcome": unknown_outcome}
        if provider_status is not None:
            details["provider_status"] = provider_status
        super().__init__(
            code=code or ("unknown_outcome" if unknown_outcome else "provider_error"),
            message=message,
            status_code=504 if unknown_outcome else 502,
            details=details,
        )
        self.job_id = job_id
        self.unknown_outcome = unknown_outcome
        self.provider_status = provider_status

    @property
    def retryable(self) -> bool:
        # An unknown outcome needs a manual status check before any retry.
        return not self.unknown_outcome


class AuthorizationError(PayoutTriggerError):
    def __init__(self, message: str = "Authentication required", *, status_code: int = 401, code: str | None = None):
        super().__init__(
            code=code or ("authentication_required" if status_code == 401 else "admin_required"),
            message=message,
            status_code=status_code,
        )
