"""Request DTOs for API endpoints.

Pydantic v2 models for API request validation.
These are the ONLY contracts between API and use cases.
"""

from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from bizdesk.core.entities.client import ClientType
from bizdesk.core.entities.reminder import ReminderFrequency, ReminderStatus, ReminderUpdate
from bizdesk.core.entities.sale import PaymentMethod, SaleType
from bizdesk.core.entities.user import normalize_email


class _EmailFieldModel(BaseModel):
    """Validates and normalizes an optional ``email`` field at the boundary."""

    @field_validator("email", check_fields=False)
    @classmethod
    def _valid_email(cls, value: str | None) -> str | None:
        return normalize_email(value) if value is not None else None


# --- Users ---


class RegisterUserRequest(_EmailFieldModel):
    """Request to register a new user (tenant)."""

    name: str = Field(..., min_length=1, description="Owner name")
    email: str = Field(..., description="Login and notification email")
    phone: str = Field(default="", description="Contact phone number")
    business_name: str | None = Field(default=None, description="Trading name")


class UpdateUserRequest(_EmailFieldModel):
    """Request to update the current user's profile."""

    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    phone: str | None = None
    business_name: str | None = None


# --- Reminders ---


class CreateReminderRequest(BaseModel):
    """Request to create a reminder (schedule)."""

    title: str = Field(..., min_length=1, description="Reminder title")
    description: str = Field(default="", description="Details")
    client_id: int | None = Field(default=None, description="Linked client")
    due_date: datetime = Field(
        ...,
        description="Due time in ISO-8601; naive values are treated as UTC",
        examples=["2026-03-01T09:00:00Z"],
    )
    frequency: ReminderFrequency = Field(default=ReminderFrequency.ONCE)
    amount: float | None = Field(default=None, description="Informational amount")
    notify_user: bool = Field(default=True)
    notify_client: bool = Field(default=False)
    user_notification_message: str | None = None
    client_notification_message: str | None = None
    advance_notification_days: int = Field(
        default=0,
        ge=0,
        description="Send an extra notice this many days before the due date",
    )
    repeat_until: datetime | None = Field(
        default=None, description="Stop recurring after this time"
    )


class UpdateReminderRequest(BaseModel):
    """Partial update of a reminder; only fields sent are applied."""

    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    client_id: int | None = None
    due_date: datetime | None = None
    frequency: ReminderFrequency | None = None
    amount: float | None = None
    status: ReminderStatus | None = Field(
        default=None,
        description="Only pending -> cancelled is allowed here; use /complete to complete",
    )
    notify_user: bool | None = None
    notify_client: bool | None = None
    user_notification_message: str | None = None
    client_notification_message: str | None = None
    advance_notification_days: int | None = Field(default=None, ge=0)
    repeat_until: datetime | None = None

    def to_update(self) -> ReminderUpdate:
        """Convert to the domain partial update, keeping only fields sent."""
        return ReminderUpdate(**self.model_dump(exclude_unset=True))


class CompleteReminderRequest(BaseModel):
    """Request to mark a reminder completed."""

    completion_message: str | None = Field(
        default=None, description="Custom text for the completion notice"
    )
    notify_user: bool = Field(default=False, description="Email the owner")
    notify_client: bool = Field(default=False, description="Email the linked client")


# --- Clients ---


class CreateClientRequest(_EmailFieldModel):
    """Request to create a client."""

    name: str = Field(..., min_length=1)
    email: str
    phone: str = ""
    business_type: str = Field(..., min_length=1, description="Category tag")
    client_type: ClientType = ClientType.OTHER
    notes: str = ""


class UpdateClientRequest(_EmailFieldModel):
    """Request to update a client."""

    name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    phone: str | None = None
    business_type: str | None = Field(default=None, min_length=1)
    client_type: ClientType | None = None
    notes: str | None = None


# --- Catalog ---


class CreateProductRequest(BaseModel):
    """Request to create a product."""

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    product_type: str | None = None
    cost_price: float = Field(..., ge=0)
    selling_price: float = Field(..., ge=0)
    stock: int = Field(default=0, ge=0)
    min_stock: int = Field(default=0, ge=0)
    is_package: bool = False
    package_quantity: int | None = Field(default=None, ge=1)


class UpdateProductRequest(BaseModel):
    """Request to update a product."""

    name: str | None = Field(default=None, min_length=1)
    category: str | None = Field(default=None, min_length=1)
    product_type: str | None = None
    cost_price: float | None = Field(default=None, ge=0)
    selling_price: float | None = Field(default=None, ge=0)
    stock: int | None = Field(default=None, ge=0)
    min_stock: int | None = Field(default=None, ge=0)
    is_package: bool | None = None
    package_quantity: int | None = Field(default=None, ge=1)


class CreateServiceRequest(BaseModel):
    """Request to create a service."""

    name: str = Field(..., min_length=1)
    category: str | None = None
    default_price: float | None = Field(default=None, ge=0)
    is_active: bool = True


class UpdateServiceRequest(BaseModel):
    """Request to update a service."""

    name: str | None = Field(default=None, min_length=1)
    category: str | None = None
    default_price: float | None = Field(default=None, ge=0)
    is_active: bool | None = None


# --- Sales ---


class RecordSaleRequest(BaseModel):
    """Request to record a product or service sale."""

    sale_type: SaleType = SaleType.PRODUCT
    item_name: str | None = Field(
        default=None, description="Defaults to the product or service name"
    )
    product_id: int | None = None
    service_id: int | None = None
    client_id: int | None = None
    quantity: int = Field(default=1, ge=1)
    revenue: float | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    custom_amount: float | None = Field(default=None, ge=0)
    payment_method: PaymentMethod = PaymentMethod.CASH
    notes: str = ""
    sold_at: datetime | None = Field(default=None, description="Defaults to now")


class RecordSalesBulkRequest(BaseModel):
    """Request to record several sales at once."""

    sales: list[RecordSaleRequest] = Field(..., min_length=1, max_length=500)


class UpdateSaleRequest(BaseModel):
    """
    Request to update a sale. Only fields sent are changed.

    Changing the linked item, quantity or custom amount re-prices the sale
    from the catalog unless revenue/cost are sent too.
    """

    sale_type: SaleType | None = None
    item_name: str | None = Field(default=None, min_length=1)
    product_id: int | None = None
    service_id: int | None = None
    client_id: int | None = None
    quantity: int | None = Field(default=None, ge=1)
    revenue: float | None = Field(default=None, ge=0)
    cost: float | None = Field(default=None, ge=0)
    custom_amount: float | None = Field(default=None, ge=0)
    payment_method: PaymentMethod | None = None
    notes: str | None = None
    sold_at: datetime | None = None
