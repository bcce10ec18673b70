# app/db/schema.py

from sqlalchemy import (
    MetaData, Table, Column, Integer, String,
    Numeric, DateTime, ForeignKey, CheckConstraint
)

metadata = MetaData()

customers = Table(
    "customers",
    metadata,
    Column("customer_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(100), nullable=False),
    Column("identification_number", String(50), nullable=False, unique=True),
    Column("address", String(255), nullable=True),
    Column("phone", String(50), nullable=True),
    Column("email", String(100), nullable=True, unique=True),
)

platforms = Table(
    "platforms",
    metadata,
    Column("platform_id", Integer, primary_key=True, autoincrement=True),
    Column("name", String(50), nullable=False, unique=True),
)

invoices = Table(
    "invoices",
    metadata,
    Column("invoice_id", Integer, primary_key=True, autoincrement=True),
    Column("invoice_number", String(50), nullable=False, unique=True),
    Column("billing_period", String(20)),
    Column("amount_billed", Numeric(12, 2), nullable=False),
    Column("customer_id", Integer, ForeignKey("customers.customer_id"), nullable=False),
    CheckConstraint("amount_billed >= 0", name="ck_invoices_amount_billed_nonneg"),
)

transactions = Table(
    "transactions",
    metadata,
    Column("transaction_id", String(20), primary_key=True),
    Column("transaction_datetime", DateTime, nullable=False),
    Column("transaction_amount", Numeric(12, 2), nullable=False),
    Column("amount_paid", Numeric(12, 2), nullable=False),
    Column("transaction_status", String(30)),
    Column("customer_id", Integer, ForeignKey("customers.customer_id"), nullable=False),
    Column("invoice_id", Integer, ForeignKey("invoices.invoice_id")),
    Column("platform_id", Integer, ForeignKey("platforms.platform_id")),
    CheckConstraint("amount_paid >= 0", name="ck_transactions_amount_paid_nonneg"),
)
