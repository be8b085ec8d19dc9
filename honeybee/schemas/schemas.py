# HONEYBEE/backend/honeybee/schemas/schemas.py

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from typing import Optional, List
from datetime import datetime, date


# ---------- COMPANY SCHEMAS ----------
class CompanyRecord(BaseModel):
    id: str
    name: str
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CompanyUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None


# ---------- EMPLOYEE SCHEMAS ----------
class EmployeeSnapshot(BaseModel):
    """What a session holds: the employee row with its company, never the credential"""
    id: str
    name: str
    email: Optional[str] = None
    role: Optional[str] = "employee"
    is_active: Optional[bool] = True
    company_id: str
    companies: Optional[CompanyRecord] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class EmployeeRecord(EmployeeSnapshot):
    """Full employees row as read from the record store"""
    password_hash: Optional[str] = None

    def snapshot(self) -> EmployeeSnapshot:
        return EmployeeSnapshot.model_validate(self.model_dump(exclude={"password_hash"}))


class EmployeeCreate(BaseModel):
    name: str
    email: Optional[str] = None
    password: str
    role: Optional[str] = "employee"


class EmployeeUpdate(BaseModel):
    role: Optional[str] = None
    is_active: Optional[bool] = None
    email: Optional[str] = None


# ---------- AUTH SCHEMAS ----------
class LoginRequest(BaseModel):
    name: str
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str
    employee: EmployeeSnapshot


class CurrentEmployee(BaseModel):
    employee: EmployeeSnapshot
    can_manage_employees: bool


# ---------- INVOICE SCHEMAS ----------
class InvoiceItemRecord(BaseModel):
    id: Optional[str] = None
    description: str
    quantity: int = 1
    unit_price: float = 0
    total: float = 0

    model_config = ConfigDict(from_attributes=True)


class InvoiceRecord(BaseModel):
    id: str
    company_id: Optional[str] = None
    invoice_number: Optional[str] = None
    customer_name: str = ""
    customer_email: Optional[str] = None
    customer_address: Optional[str] = None
    issue_date: Optional[date] = None
    due_date: Optional[date] = None
    status: str = "draft"
    subtotal: float = 0
    tax_amount: float = 0
    total_amount: float = 0
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    items: List[InvoiceItemRecord] = []

    model_config = ConfigDict(from_attributes=True)

    @field_serializer('created_at')
    def serialize_datetime(self, value: Optional[datetime]) -> Optional[str]:
        return value.isoformat() if value else None


class InvoiceItemCreate(BaseModel):
    description: str
    quantity: int = 1
    unit_price: float


class InvoiceCreate(BaseModel):
    customer_name: str
    customer_email: str
    customer_address: Optional[str] = None
    due_date: date
    status: Optional[str] = "draft"
    tax_amount: float = 0
    notes: Optional[str] = None
    items: List[InvoiceItemCreate] = []


class InvoiceStatusUpdate(BaseModel):
    status: str


# ---------- PAYMENT SCHEMAS ----------
class PaymentRecord(BaseModel):
    id: str
    company_id: Optional[str] = None
    payment_number: Optional[str] = None
    customer_name: str = ""
    invoice_id: Optional[str] = None
    amount: float = 0
    payment_method: Optional[str] = "bank_transfer"
    status: str = "completed"
    payment_date: Optional[date] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentCreate(BaseModel):
    customer_name: str
    amount: float
    invoice_id: Optional[str] = None
    payment_method: Optional[str] = "bank_transfer"
    status: Optional[str] = "completed"
    payment_date: Optional[date] = None
    reference_number: Optional[str] = None
    notes: Optional[str] = None


# ---------- PRODUCT SCHEMAS ----------
class ProductRecord(BaseModel):
    id: str
    company_id: Optional[str] = None
    name: str = ""
    sku: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price: float = 0
    stock: int = 0
    status: Optional[str] = "active"

    model_config = ConfigDict(from_attributes=True)


class ProductCreate(BaseModel):
    name: str
    sku: str
    category: str
    description: Optional[str] = None
    price: float = 0
    stock: int = 0
    status: Optional[str] = None


class ProductUpdate(BaseModel):
    name: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    stock: Optional[int] = None
    status: Optional[str] = None


# ---------- CUSTOMER SCHEMAS ----------
class CustomerSummary(BaseModel):
    name: str
    email: Optional[str] = None
    invoice_count: int
    total_value: float
    last_invoice: Optional[date] = None


# ---------- ANALYTICS SCHEMAS ----------
class RevenuePoint(BaseModel):
    month: str
    year: int
    month_num: int
    revenue: float
    target: float
    growth: int


class CustomerSegment(BaseModel):
    name: str
    value: int
    customers: int
    total: float


class ProductPerformance(BaseModel):
    name: str
    sales: int
    margin: int


class InvoiceStatusCount(BaseModel):
    status: str
    name: str
    count: int
    amount: float


class MonthlyTotal(BaseModel):
    period: str
    month: str
    amount: float


class Kpis(BaseModel):
    total_revenue: float
    invoice_count: int
    paid_invoice_count: int
    pending_invoice_count: int
    payment_count: int
    customer_count: int
    conversion_rate: float
    average_order_value: float
    customer_lifetime_value: float


class GrowthIndicator(BaseModel):
    name: str
    value: int


class AnalyticsSnapshot(BaseModel):
    time_range: str
    reference_date: date
    monthly_revenue: List[RevenuePoint]
    customer_segments: List[CustomerSegment]
    product_performance: List[ProductPerformance]
    invoice_status: List[InvoiceStatusCount]
    kpis: Kpis
    growth: List[GrowthIndicator] = Field(default_factory=list)
