# HONEYBEE/backend/scripts/seed_data.py : demo data generator

#!/usr/bin/env python
"""Generates a demo company with employees, products, invoices and payments"""

import random
import sys
import os
from datetime import date, datetime, timedelta
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from honeybee.auth import hash_password
from honeybee.constants import INVOICE_NUMBER_PREFIX, PAYMENT_NUMBER_PREFIX
from honeybee.database import SessionLocal, create_tables
from honeybee.models import models
from honeybee.services.billing_service import next_number, product_status

CUSTOMERS = [
    ("Acme Corp", "billing@acme.example"),
    ("Globex", "accounts@globex.example"),
    ("Initech", "finance@initech.example"),
    ("Umbrella Ltd", "ap@umbrella.example"),
    ("Stark Industries", "pay@stark.example"),
    ("Wayne Enterprises", "invoices@wayne.example"),
    ("Jane Doe", "jane@doe.example"),
    ("John Smith", "john@smith.example"),
]

PRODUCTS = [
    ("Web Hosting", "HOST-01", "Services", 49.0, 120),
    ("Consulting Hour", "CONS-01", "Services", 150.0, 500),
    ("Support Plan", "SUPP-01", "Services", 299.0, 40),
    ("USB Keyboard", "HW-KB-01", "Hardware", 35.0, 8),
    ("Monitor 27\"", "HW-MN-27", "Hardware", 320.0, 15),
]

METHODS = ["bank_transfer", "card", "cash", "check"]


def generate_test_data():
    """Creates the demo company and six months of activity"""
    create_tables()
    db = SessionLocal()

    company = models.Company(name="HoneyBee Demo", email="hello@honeybee.example")
    db.add(company)
    db.commit()
    db.refresh(company)

    for name, role in [("admin", "admin"), ("manager", "manager"), ("employee", "employee")]:
        db.add(models.Employee(
            name=name,
            email=f"{name}@honeybee.example",
            password_hash=hash_password("demo123"),
            role=role,
            is_active=True,
            company_id=company.id
        ))

    for name, sku, category, price, stock in PRODUCTS:
        db.add(models.Product(
            company_id=company.id,
            name=name,
            sku=sku,
            category=category,
            price=price,
            stock=stock,
            status=product_status(stock)
        ))
    db.commit()

    invoice_count = 0
    payment_count = 0
    for days_ago in range(180, -1, -3):
        created = datetime.utcnow() - timedelta(days=days_ago)
        customer_name, customer_email = random.choice(CUSTOMERS)
        product_name, _, _, price, _ = random.choice(PRODUCTS)
        quantity = random.randint(1, 5)
        subtotal = round(price * quantity, 2)
        tax = round(subtotal * 0.1, 2)
        invoice_status = random.choice(["paid", "paid", "sent", "overdue", "draft"])

        invoice = models.Invoice(
            company_id=company.id,
            invoice_number=next_number(INVOICE_NUMBER_PREFIX, invoice_count),
            customer_name=customer_name,
            customer_email=customer_email,
            issue_date=created.date(),
            due_date=created.date() + timedelta(days=30),
            status=invoice_status,
            subtotal=subtotal,
            tax_amount=tax,
            total_amount=round(subtotal + tax, 2),
            created_at=created,
            items=[models.InvoiceItem(
                description=product_name,
                quantity=quantity,
                unit_price=price,
                total=subtotal
            )]
        )
        db.add(invoice)
        db.flush()
        invoice_count += 1

        if invoice_status == "paid":
            payment_day = min(created.date() + timedelta(days=random.randint(0, 10)), date.today())
            db.add(models.Payment(
                company_id=company.id,
                payment_number=next_number(PAYMENT_NUMBER_PREFIX, payment_count),
                customer_name=customer_name,
                invoice_id=invoice.id,
                amount=invoice.total_amount,
                payment_method=random.choice(METHODS),
                status="completed",
                payment_date=payment_day,
                created_at=created
            ))
            payment_count += 1

    db.commit()
    db.close()
    print("✅ Demo data generated!")
    print(f"🧾 {invoice_count} invoices, 💳 {payment_count} payments")
    print("👤 Demo employees: admin / manager / employee, password demo123")


if __name__ == "__main__":
    generate_test_data()
