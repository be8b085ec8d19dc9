# HONEYBEE/backend/honeybee/services/billing_service.py : invoices, payments, products and customers

import logging
from datetime import date
from typing import List, Optional

from honeybee.constants import (
    INVOICE_NUMBER_PREFIX,
    INVOICE_STATUSES,
    LOW_STOCK_THRESHOLD,
    PAYMENT_METHODS,
    PAYMENT_NUMBER_PREFIX,
    PAYMENT_STATUSES,
    PRODUCT_STATUSES,
)
from honeybee.errors import NotFound, ValidationError
from honeybee.schemas import schemas
from honeybee.store.record_store import RecordStore

logger = logging.getLogger(__name__)


def next_number(prefix: str, existing: int) -> str:
    return f"{prefix}-{existing + 1:05d}"


def product_status(stock: int, requested: Optional[str] = None) -> str:
    """Explicit inactive wins; otherwise low stock is derived from the stock level"""
    if requested == "inactive":
        return "inactive"
    if stock <= LOW_STOCK_THRESHOLD:
        return "low-stock"
    return "active"


class BillingService:
    """Company-scoped billing records"""

    def __init__(self, store: RecordStore, company_id: str):
        self.store = store
        self.company_id = company_id

    def _scope(self, **filters):
        return {"company_id": self.company_id, **filters}

    # ========== Company ==========

    def get_company(self) -> schemas.CompanyRecord:
        company = self.store.find_one("companies", {"id": self.company_id})
        if company is None:
            raise NotFound("Company not found")
        return company

    def update_company(self, patch: schemas.CompanyUpdate) -> schemas.CompanyRecord:
        changes = patch.model_dump(exclude_unset=True)
        if "name" in changes and not (changes["name"] or "").strip():
            raise ValidationError("Please fill in the company name.")
        if changes:
            self.store.update("companies", self.company_id, changes)
        return self.get_company()

    # ========== Invoices ==========

    def list_invoices(self, status: Optional[str] = None) -> List[schemas.InvoiceRecord]:
        filters = self._scope(status=status) if status else self._scope()
        return self.store.find("invoices", filters, order_by="-created_at")

    def get_invoice(self, invoice_id: str) -> schemas.InvoiceRecord:
        invoice = self.store.find_one("invoices", self._scope(id=invoice_id), join=["items"])
        if invoice is None:
            raise NotFound("Invoice not found")
        return invoice

    def create_invoice(self, payload: schemas.InvoiceCreate) -> schemas.InvoiceRecord:
        if not payload.customer_name.strip() or not payload.customer_email.strip():
            raise ValidationError("Customer name and email are required")
        invoice_status = payload.status or "draft"
        if invoice_status not in INVOICE_STATUSES:
            raise ValidationError(f"Unknown invoice status: {invoice_status}")
        if payload.tax_amount < 0:
            raise ValidationError("Tax amount cannot be negative")

        items = []
        for item in payload.items:
            if not item.description.strip():
                raise ValidationError("Every item needs a description")
            if item.quantity <= 0 or item.unit_price < 0:
                raise ValidationError("Item quantity must be positive and price not negative")
            items.append({
                "description": item.description,
                "quantity": item.quantity,
                "unit_price": item.unit_price,
                "total": round(item.quantity * item.unit_price, 2),
            })
        subtotal = round(sum(item["total"] for item in items), 2)

        existing = len(self.store.find("invoices", self._scope()))
        invoice = self.store.insert(
            "invoices",
            {
                "company_id": self.company_id,
                "invoice_number": next_number(INVOICE_NUMBER_PREFIX, existing),
                "customer_name": payload.customer_name,
                "customer_email": payload.customer_email,
                "customer_address": payload.customer_address,
                "due_date": payload.due_date,
                "status": invoice_status,
                "subtotal": subtotal,
                "tax_amount": payload.tax_amount,
                "total_amount": round(subtotal + payload.tax_amount, 2),
                "notes": payload.notes,
                "items": items,
            },
            join=["items"],
        )
        logger.info(f"Invoice {invoice.invoice_number} created for company {self.company_id}")
        return invoice

    def update_invoice_status(self, invoice_id: str, invoice_status: str) -> schemas.InvoiceRecord:
        if invoice_status not in INVOICE_STATUSES:
            raise ValidationError(f"Unknown invoice status: {invoice_status}")
        self.get_invoice(invoice_id)
        self.store.update("invoices", invoice_id, {"status": invoice_status})
        return self.get_invoice(invoice_id)

    # ========== Payments ==========

    def list_payments(self) -> List[schemas.PaymentRecord]:
        return self.store.find("payments", self._scope(), order_by=["-payment_date", "-created_at"])

    def create_payment(self, payload: schemas.PaymentCreate, today: date) -> schemas.PaymentRecord:
        if not payload.customer_name.strip():
            raise ValidationError("Customer name is required")
        if payload.amount <= 0:
            raise ValidationError("Payment amount must be positive")
        method = payload.payment_method or "bank_transfer"
        if method not in PAYMENT_METHODS:
            raise ValidationError(f"Unknown payment method: {method}")
        payment_status = payload.status or "completed"
        if payment_status not in PAYMENT_STATUSES:
            raise ValidationError(f"Unknown payment status: {payment_status}")
        if payload.invoice_id:
            self.get_invoice(payload.invoice_id)

        existing = len(self.store.find("payments", self._scope()))
        payment = self.store.insert("payments", {
            "company_id": self.company_id,
            "payment_number": next_number(PAYMENT_NUMBER_PREFIX, existing),
            "customer_name": payload.customer_name,
            "invoice_id": payload.invoice_id,
            "amount": payload.amount,
            "payment_method": method,
            "status": payment_status,
            "payment_date": payload.payment_date or today,
            "reference_number": payload.reference_number,
            "notes": payload.notes,
        })
        logger.info(f"Payment {payment.payment_number} recorded for company {self.company_id}")
        return payment

    # ========== Products ==========

    def list_products(self) -> List[schemas.ProductRecord]:
        return self.store.find("products", self._scope(), order_by="name")

    def get_product(self, product_id: str) -> schemas.ProductRecord:
        product = self.store.find_one("products", self._scope(id=product_id))
        if product is None:
            raise NotFound("Product not found")
        return product

    def create_product(self, payload: schemas.ProductCreate) -> schemas.ProductRecord:
        if not payload.name.strip() or not payload.sku.strip() or not payload.category.strip():
            raise ValidationError("Name, SKU and category are required")
        if payload.price < 0 or payload.stock < 0:
            raise ValidationError("Price and stock cannot be negative")
        if payload.status and payload.status not in PRODUCT_STATUSES:
            raise ValidationError(f"Unknown product status: {payload.status}")

        return self.store.insert("products", {
            "company_id": self.company_id,
            "name": payload.name,
            "sku": payload.sku,
            "category": payload.category,
            "description": payload.description,
            "price": payload.price,
            "stock": payload.stock,
            "status": product_status(payload.stock, payload.status),
        })

    def update_product(self, product_id: str, patch: schemas.ProductUpdate) -> schemas.ProductRecord:
        product = self.get_product(product_id)
        changes = {k: v for k, v in patch.model_dump(exclude_unset=True).items() if v is not None}
        if changes.get("price", 0) < 0 or changes.get("stock", 0) < 0:
            raise ValidationError("Price and stock cannot be negative")
        if "status" in changes and changes["status"] not in PRODUCT_STATUSES:
            raise ValidationError(f"Unknown product status: {changes['status']}")
        if "stock" in changes or "status" in changes:
            changes["status"] = product_status(
                changes.get("stock", product.stock),
                changes.get("status", product.status),
            )
        if changes:
            self.store.update("products", product_id, changes)
        return self.get_product(product_id)

    def delete_product(self, product_id: str) -> None:
        self.get_product(product_id)
        self.store.delete("products", product_id)

    # ========== Customers ==========

    def list_customers(self) -> List[schemas.CustomerSummary]:
        """Customers are the distinct names found on invoices"""
        customers = {}
        for invoice in self.store.find("invoices", self._scope(), order_by="created_at"):
            entry = customers.setdefault(invoice.customer_name, {
                "name": invoice.customer_name,
                "email": invoice.customer_email,
                "invoice_count": 0,
                "total_value": 0.0,
                "last_invoice": None,
            })
            entry["invoice_count"] += 1
            entry["total_value"] += invoice.total_amount
            entry["email"] = invoice.customer_email or entry["email"]
            issued = invoice.issue_date or (invoice.created_at.date() if invoice.created_at else None)
            if issued and (entry["last_invoice"] is None or issued > entry["last_invoice"]):
                entry["last_invoice"] = issued

        return sorted(
            (schemas.CustomerSummary(**{**c, "total_value": round(c["total_value"], 2)}) for c in customers.values()),
            key=lambda c: (-c.total_value, c.name),
        )
