"""Response DTOs for API endpoints."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from bizdesk.core.clock import utc_now
from bizdesk.core.entities.client import ClientType
from bizdesk.core.entities.reminder import ReminderFrequency, ReminderStatus
from bizdesk.core.entities.sale import PaymentMethod, SaleType


class _FromEntity(BaseModel):
    """Responses built straight from domain entities (properties included)."""

    model_config = ConfigDict(from_attributes=True)


# --- Users ---


class UserResponse(_FromEntity):
    """User (tenant) response DTO."""

    id: int
    name: str
    email: str
    phone: str = ""
    business_name: str | None = None
    created_at: datetime


# --- Reminders ---


class ReminderResponse(_FromEntity):
    """Reminder response DTO."""

    id: int
    tenant_id: int
    title: str
    description: str = ""
    client_id: int | None = None
    due_date: datetime
    frequency: ReminderFrequency
    amount: float | None = None
    status: ReminderStatus
    notify_user: bool
    notify_client: bool
    user_notification_message: str | None = None
    client_notification_message: str | None = None
    advance_notification_days: int = 0
    repeat_until: datetime | None = None
    last_notified: datetime | None = None
    next_due_date: datetime | None = None
    is_overdue: bool = False
    created_at: datetime
    updated_at: datetime


class ReminderListResponse(BaseModel):
    """List of reminders."""

    reminders: list[ReminderResponse]
    total: int


class SweepResponse(BaseModel):
    """Counts from one reminder sweep tick."""

    scanned: int = Field(..., description="Pending reminders examined")
    fired: int = Field(..., description="Reminders with a notification due this tick")
    user_notified: int
    client_notified: int
    notify_failures: int
    errors: int = Field(..., description="Reminders skipped because processing failed")
    started_at: datetime
    duration_ms: float


# --- Clients ---


class ClientResponse(_FromEntity):
    """Client response DTO."""

    id: int
    name: str
    email: str
    phone: str = ""
    business_type: str
    client_type: ClientType
    notes: str = ""
    created_at: datetime
    updated_at: datetime


class ClientListResponse(BaseModel):
    clients: list[ClientResponse]
    total: int


# --- Catalog ---


class ProductResponse(_FromEntity):
    """Product response DTO."""

    id: int
    name: str
    category: str
    product_type: str | None = None
    cost_price: float
    selling_price: float
    stock: int
    min_stock: int
    is_package: bool = False
    package_quantity: int | None = None
    is_low_stock: bool
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    products: list[ProductResponse]
    total: int


class ServiceResponse(_FromEntity):
    """Service response DTO."""

    id: int
    name: str
    category: str | None = None
    default_price: float | None = None
    is_active: bool
    created_at: datetime


class ServiceListResponse(BaseModel):
    services: list[ServiceResponse]
    total: int


# --- Sales ---


class SaleResponse(_FromEntity):
    """Sale response DTO."""

    id: int
    sale_type: SaleType
    item_name: str
    product_id: int | None = None
    service_id: int | None = None
    client_id: int | None = None
    quantity: int
    revenue: float
    cost: float
    profit: float
    custom_amount: float | None = None
    payment_method: PaymentMethod
    notes: str = ""
    sold_at: datetime


class SaleListResponse(BaseModel):
    """List of sales with totals over the returned rows."""

    sales: list[SaleResponse]
    total: int
    total_revenue: float
    total_profit: float


class SalesDeletedResponse(BaseModel):
    deleted: int


# --- Health ---


class ComponentHealthResponse(BaseModel):
    """Health of one dependency."""

    name: str
    available: bool
    latency_ms: float | None = None
    in_use: int | None = Field(default=None, description="Pooled connections checked out")
    error: str | None = None


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str = "1.0.0"
    uptime_seconds: float
    database: ComponentHealthResponse | None = None
    scheduler: ComponentHealthResponse | None = None


# --- Errors ---


class ErrorResponse(BaseModel):
    """Standardized error response DTO.

    Every error response includes:
    - error_code: machine-readable code (e.g. REMINDER_NOT_FOUND)
    - message: human-readable description
    - hint: suggested recovery action
    - path: request path that triggered the error
    """

    error_code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error description")
    hint: str | None = Field(default=None, description="Suggested recovery action")
    detail: str | None = Field(default=None, description="Additional details")
    path: str | None = Field(default=None, description="Request path")
    timestamp: datetime = Field(default_factory=utc_now)
