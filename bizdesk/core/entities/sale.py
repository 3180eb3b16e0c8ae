"""Sale entity for product and service transactions."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field, field_validator

from bizdesk.core.clock import as_utc, utc_now


class SaleType(str, Enum):
    PRODUCT = "product"
    SERVICE = "service"


class PaymentMethod(str, Enum):
    CASH = "cash"
    CARD = "card"
    MOMO = "momo"
    AIRTEL = "airtel"
    TRANSFER = "transfer"


class Sale(BaseModel):
    """A recorded sale. Profit is always revenue minus cost."""

    id: int | None = None
    tenant_id: int
    sale_type: SaleType = SaleType.PRODUCT
    item_name: str = Field(..., min_length=1)
    product_id: int | None = None
    service_id: int | None = None
    client_id: int | None = None
    quantity: int = Field(default=1, ge=1)
    revenue: float = Field(..., ge=0)
    cost: float = Field(default=0.0, ge=0)
    custom_amount: float | None = Field(default=None, ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""
    sold_at: datetime = Field(default_factory=utc_now)
    created_at: datetime = Field(default_factory=utc_now)

    @field_validator("sold_at", "created_at")
    @classmethod
    def _to_utc(cls, value: datetime) -> datetime:
        return as_utc(value)

    @property
    def profit(self) -> float:
        return self.revenue - self.cost
