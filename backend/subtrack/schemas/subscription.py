from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from subtrack.models.subscription import CycleKind


class SubscriptionRecord(BaseModel):
    """The fields of a tracked subscription that the renewal engine reads.

    One-time purchases are flagged with is_one_time; their cycle fields are
    carried but ignored by cost statistics.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    id: UUID | None = None
    name: str = ""
    price: Decimal = Field(default=Decimal("0"), ge=0)
    cycle_kind: CycleKind = CycleKind.MONTHLY
    cycle_duration: int = Field(default=1, ge=1)
    start_date: date
    next_renewal_date: date
    is_active: bool = True
    is_paused: bool = False
    auto_renewal: bool = True
    is_one_time: bool = False


class SubscriptionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    category: str | None = Field(default=None, max_length=100)
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2)
    currency: str = Field(default="CNY", min_length=3, max_length=3)
    cycle_kind: CycleKind = CycleKind.MONTHLY
    cycle_duration: int = Field(default=1, ge=1)
    start_date: date
    auto_renewal: bool = True
    is_one_time: bool = False
    note: str | None = None


class SubscriptionUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, max_length=100)
    price: Decimal | None = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    currency: str | None = Field(default=None, min_length=3, max_length=3)
    cycle_kind: CycleKind | None = None
    cycle_duration: int | None = Field(default=None, ge=1)
    start_date: date | None = None
    is_active: bool | None = None
    note: str | None = None


class SubscriptionResponse(BaseModel):
    id: UUID
    name: str
    category: str | None
    price: Decimal
    currency: str
    cycle_kind: str
    cycle_duration: int
    start_date: date
    next_renewal_date: date
    auto_renewal: bool
    is_active: bool
    is_paused: bool
    is_one_time: bool
    note: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class RenewRequest(BaseModel):
    """Request body for a manual renewal."""

    cycle_count: int = Field(default=1, ge=1, description="Number of cycles to renew for.")
