"""
Commission policy: the four-way split of a sale between retailer,
sourcer, the platform (tapify) and the vendor.

The vendor share is never set directly. It is always the remainder of
100 after the three configured shares, so a split sums to exactly 100.
Percentages are whole numbers; fractional input is rejected rather than
rounded so that no float drift can creep into the stored split.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any

from tapify.core.config import settings
from tapify.core.errors import InvalidRangeError, OverAllocationError, SplitTotalError


FULL_ALLOCATION = 100
SPLIT_FIELDS = ("retailer", "sourcer", "tapify")


@dataclass(frozen=True)
class CommissionSplit:
    retailer_percent: int
    sourcer_percent: int
    tapify_percent: int
    vendor_percent: int

    @property
    def total(self) -> int:
        return self.retailer_percent + self.sourcer_percent + self.tapify_percent + self.vendor_percent

    def breakdown(self) -> dict[str, str]:
        return {
            "retailer": f"{self.retailer_percent}%",
            "sourcer": f"{self.sourcer_percent}%",
            "tapify": f"{self.tapify_percent}%",
            "vendor": f"{self.vendor_percent}%",
        }

    def as_dict(self) -> dict[str, int]:
        return {
            "retailer_percent": self.retailer_percent,
            "sourcer_percent": self.sourcer_percent,
            "tapify_percent": self.tapify_percent,
            "vendor_percent": self.vendor_percent,
        }


def _coerce_percent(field_name: str, value: Any) -> int:
    if value is None:
        return 0
    if isinstance(value, bool):
        raise InvalidRangeError(field_name, value)
    if isinstance(value, int):
        return value
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidRangeError(field_name, value) from None
    if not parsed.is_finite() or parsed != parsed.to_integral_value():
        raise InvalidRangeError(field_name, value, whole_number=True)
    return int(parsed)


def derive_split(retailer_percent=None, sourcer_percent=None, tapify_percent=None) -> CommissionSplit:
    """Validate the three configured shares and derive the vendor remainder.

    Absent values count as 0. Range is checked per field first, in
    retailer, sourcer, tapify order; only then is the sum checked.
    """
    raw = dict(zip(SPLIT_FIELDS, (retailer_percent, sourcer_percent, tapify_percent)))
    values: dict[str, int] = {}
    for field_name in SPLIT_FIELDS:
        value = _coerce_percent(field_name, raw[field_name])
        if value < 0 or value > FULL_ALLOCATION:
            raise InvalidRangeError(field_name, value)
        values[field_name] = value

    total = sum(values.values())
    if total > FULL_ALLOCATION:
        raise OverAllocationError(total, values)

    return CommissionSplit(
        retailer_percent=values["retailer"],
        sourcer_percent=values["sourcer"],
        tapify_percent=values["tapify"],
        vendor_percent=FULL_ALLOCATION - total,
    )


def is_valid_split(retailer_percent, sourcer_percent, tapify_percent, vendor_percent) -> bool:
    """Total-is-100 check on a stored or displayed four-way split."""
    parts = (retailer_percent, sourcer_percent, tapify_percent, vendor_percent)
    if any(part is None or isinstance(part, bool) for part in parts):
        return False
    try:
        whole = [_coerce_percent("split", part) for part in parts]
    except InvalidRangeError:
        return False
    if any(part < 0 or part > FULL_ALLOCATION for part in whole):
        return False
    return sum(whole) == FULL_ALLOCATION


def validate_split_total(split: CommissionSplit) -> CommissionSplit:
    if not is_valid_split(
        split.retailer_percent,
        split.sourcer_percent,
        split.tapify_percent,
        split.vendor_percent,
    ):
        raise SplitTotalError(
            split.total,
            {
                "retailer": split.retailer_percent,
                "sourcer": split.sourcer_percent,
                "tapify": split.tapify_percent,
                "vendor": split.vendor_percent,
            },
        )
    return split


def default_split() -> CommissionSplit:
    return derive_split(
        settings.DEFAULT_RETAILER_PERCENT,
        settings.DEFAULT_SOURCER_PERCENT,
        settings.DEFAULT_TAPIFY_PERCENT,
    )


def split_for_vendor(vendor) -> CommissionSplit:
    """Stored split for a vendor, or the default split when never configured."""
    stored = (
        vendor.retailer_commission_percent,
        vendor.sourcer_commission_percent,
        vendor.tapify_commission_percent,
        vendor.vendor_commission_percent,
    )
    if all(value is None for value in stored):
        return default_split()
    return CommissionSplit(
        retailer_percent=stored[0] or 0,
        sourcer_percent=stored[1] or 0,
        tapify_percent=stored[2] or 0,
        vendor_percent=stored[3] or 0,
    )
