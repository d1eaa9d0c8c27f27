from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class VendorCommissionUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    vendor_id: int = Field(..., alias="vendorId")
    # Left untyped so fractional or out-of-range input reaches the
    # commission policy and gets its specific error message.
    retailer_percent: Optional[Any] = Field(None, alias="retailerPercent")
    sourcer_percent: Optional[Any] = Field(None, alias="sourcerPercent")
    tapify_percent: Optional[Any] = Field(None, alias="tapifyPercent")


class CommissionVendorRead(BaseModel):
    id: int
    name: str
    retailer_percent: int
    sourcer_percent: int
    tapify_percent: int
    vendor_percent: int


class CommissionUpdateResponse(BaseModel):
    success: bool = True
    vendor: CommissionVendorRead
    breakdown: dict[str, str]


class CommissionRead(BaseModel):
    vendor_id: int
    retailer_percent: int
    sourcer_percent: int
    tapify_percent: int
    vendor_percent: int
    total: int
    is_valid: bool
    breakdown: dict[str, str]
