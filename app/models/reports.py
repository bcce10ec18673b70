# app/models/reports.py

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class TotalPaidItem(BaseModel):
    customer_id: int
    name: str
    identification_number: str
    total_paid: Decimal


class PendingInvoiceItem(BaseModel):
    invoice_id: int
    invoice_number: str
    billing_period: Optional[str] = None
    amount_billed: Decimal
    total_paid: Decimal
    balance: Decimal
    customer_id: int
    customer_name: str
    identification_number: str


class PlatformTransactionItem(BaseModel):
    transaction_id: str
    transaction_datetime: datetime
    transaction_amount: Decimal
    amount_paid: Decimal
    transaction_status: Optional[str] = None
    customer_id: Optional[int] = None
    customer_name: Optional[str] = None
    invoice_id: Optional[int] = None
    invoice_number: Optional[str] = None


class SeedResponse(BaseModel):
    success: bool
    message: str
    customers: int
    platforms: int
    invoices: int
    transactions: int
    rows_with_errors: int
