"""Catalog entities: stocked products and salon-style services."""

from datetime import datetime

from pydantic import BaseModel, Field

from bizdesk.core.clock import utc_now


class Product(BaseModel):
    """A stocked product with cost and selling prices."""

    id: int | None = None
    tenant_id: int
    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    product_type: str | None = None
    cost_price: float = Field(..., ge=0)
    selling_price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    is_package: bool = False
    package_quantity: int | None = Field(default=None, ge=1)
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)

    @property
    def is_low_stock(self) -> bool:
        return self.stock <= self.min_stock

    @property
    def margin(self) -> float:
        return self.selling_price - self.cost_price


class Service(BaseModel):
    """A sellable service with an optional default price."""

    id: int | None = None
    tenant_id: int
    name: str = Field(..., min_length=1)
    category: str | None = None
    default_price: float | None = Field(default=None, ge=0)
    is_active: bool = True
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)
