# tikerama/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, computed_field
from pydantic.alias_generators import to_camel
from typing import List, Literal
from decimal import Decimal

from tikerama.utils.format import get_initials, get_relative_time, truncate_text


UserRole = Literal["buyer", "organizer", "admin"]
PaymentProvider = Literal["orange_money", "mtn_momo", "wave"]
PaymentStatus = Literal["idle", "initiating", "pending", "processing", "success", "failed"]
TicketStatus = Literal["valid", "used", "cancelled", "expired"]
EventStatus = Literal["draft", "published", "cancelled", "completed"]

SUMMARY_LENGTH = 120

TERMINAL_PAYMENT_STATUSES = ("success", "failed")
CART_LOCKING_STATUSES = ("initiating", "pending", "processing", "success")


class StorefrontModel(BaseModel):
    """Base for everything exchanged with the storefront: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )


# =====================================================
# IDENTITY
# =====================================================
class User(StorefrontModel):
    id: int | str
    email: str
    username: str = ""
    first_name: str = ""
    last_name: str = ""
    phone: str | None = None
    role: UserRole = "buyer"
    profile_picture: str | None = None
    bio: str | None = None
    is_email_verified: bool | None = None
    is_phone_verified: bool | None = None
    created_at: str | None = None

    @computed_field
    @property
    def initials(self) -> str:
        return get_initials(self.first_name, self.last_name) or self.email[:1].upper()


class LoginResponse(StorefrontModel):
    message: str = ""
    user: User
    access: str
    refresh: str


# =====================================================
# CATALOG
# =====================================================
class TicketType(StorefrontModel):
    id: str
    name: str
    description: str = ""
    price: Decimal
    currency: str = "XOF"
    available: int = 0
    max_per_order: int = Field(..., gt=0)


class Event(StorefrontModel):
    id: int | str
    title: str
    description: str = ""
    short_description: str | None = None
    image_url: str | None = None
    date: str | None = None
    time: str | None = None
    end_date: str | None = None
    venue: str | None = None
    address: str | None = None
    city: str | None = None
    category: str | None = None
    image: str | None = None
    location: str | None = None
    start_date: str | None = None
    ticket_price: Decimal | None = None
    capacity: int | None = None
    organizer: dict | None = None
    ticket_types: List[TicketType] = Field(default_factory=list)
    is_featured: bool | None = None
    is_published: bool | None = None
    status: str | None = None
    created_at: str | None = None

    @property
    def display_date(self) -> str:
        return self.date or self.start_date or ""

    @computed_field(alias="relativeTime")
    @property
    def relative_time(self) -> str | None:
        if not self.display_date:
            return None
        try:
            return get_relative_time(self.display_date)
        except ValueError:
            return None

    @computed_field
    @property
    def summary(self) -> str:
        return self.short_description or truncate_text(self.description, SUMMARY_LENGTH)


# =====================================================
# CART
# =====================================================
class CartItem(StorefrontModel):
    ticket_type_id: str
    ticket_type_name: str
    event_id: str
    event_title: str
    event_date: str
    quantity: int = Field(..., ge=1)
    unit_price: Decimal
    currency: str
    max_per_order: int | None = None

    @computed_field(alias="lineTotal")
    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity


class CartOut(StorefrontModel):
    items: List[CartItem]
    total: Decimal
    currency: str
    item_count: int = 0


class AddItemIn(BaseModel):
    """Schema for putting a ticket type into the cart."""

    event_id: str = Field(..., min_length=1, description="Event id in the catalog")
    ticket_type_id: str = Field(..., min_length=1, description="Ticket type of that event")
    quantity: int = Field(..., gt=0, description="Requested quantity (must be > 0)")


class UpdateQuantityIn(BaseModel):
    """Schema for changing a line quantity; anything below 1 removes the line."""

    quantity: int


# =====================================================
# PAYMENT
# =====================================================
class PaymentDetails(StorefrontModel):
    provider: PaymentProvider
    phone_number: str
    amount: Decimal
    currency: str
    transaction_id: str | None = None
    reference: str | None = None


class PaymentOut(StorefrontModel):
    status: PaymentStatus
    details: PaymentDetails | None = None
    error: str | None = None
    transaction_id: str | None = None
    reference: str | None = None
    last_attempt_time: float | None = None
    can_retry: bool = True
    time_until_retry: float = 0


class InitiatePaymentIn(BaseModel):
    """Schema for starting a mobile-money payment of the current cart."""

    provider: PaymentProvider
    phone_number: str = Field(..., min_length=1)


# =====================================================
# TICKETS & ORDERS
# =====================================================
class Ticket(StorefrontModel):
    id: str
    event_id: str
    event_title: str
    event_date: str
    event_time: str = ""
    venue: str = ""
    ticket_type: str
    ticket_holder: str = ""
    qr_code: str
    status: TicketStatus
    purchase_date: str = ""
    price: Decimal
    currency: str = "XOF"


class Order(StorefrontModel):
    id: str
    user_id: str | None = None
    event_id: str | None = None
    tickets: List[Ticket] = Field(default_factory=list)
    total_amount: Decimal
    currency: str = "XOF"
    payment_provider: PaymentProvider | None = None
    payment_status: Literal["pending", "completed", "failed", "refunded"] = "pending"
    created_at: str | None = None


# =====================================================
# ADMIN
# =====================================================
class DashboardStats(StorefrontModel):
    total_revenue: Decimal = Decimal("0")
    tickets_sold: int = 0
    active_events: int = 0
    pending_payments: int = 0
    revenue_change: float = 0
    sales_change: float = 0


class Sale(StorefrontModel):
    id: str
    order_id: str
    event: str
    buyer: str
    email: str = ""
    ticket_type: str = ""
    quantity: int = 1
    amount: Decimal
    payment_method: str = ""
    status: Literal["success", "pending", "failed"]
    date: str = ""


class SalesSummary(StorefrontModel):
    sales: List[Sale]
    total_revenue: Decimal
    total_orders: int
    successful_orders: int
    pending_orders: int


# =====================================================
# AUTH INPUT / OUTPUT
# =====================================================
class LoginIn(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)


class RegisterIn(BaseModel):
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    password_confirm: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    phone: str | None = None


class OtpRequestIn(BaseModel):
    email: str = Field(..., min_length=3)


class OtpVerifyIn(BaseModel):
    email: str = Field(..., min_length=3)
    otp_code: str = Field(..., min_length=1)


class AuthOut(StorefrontModel):
    user: User | None = None
    is_authenticated: bool
    otp_step: bool = False
    error: str | None = None


class EventPayload(BaseModel):
    """Schema for creating or editing an event (organizer side)."""

    title: str | None = None
    description: str | None = None
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    capacity: int | None = Field(None, ge=0)
    ticket_price: Decimal | None = Field(None, ge=0)
    status: EventStatus | None = None
    image: str | None = None
