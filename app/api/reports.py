# app/api/reports.py

from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy import func, select

from app.api.deps import get_database
from app.db.engine import Database
from app.db.schema import customers, invoices, platforms, transactions
from app.models.reports import (
    PendingInvoiceItem,
    PlatformTransactionItem,
    TotalPaidItem,
)

router = APIRouter(prefix="/api/reports", tags=["reports"])


@router.get("/total_paid_by_customer", response_model=List[TotalPaidItem])
def total_paid_by_customer(db: Database = Depends(get_database)) -> List[TotalPaidItem]:
    """
    Sum of amount_paid per customer. Customers without transactions show 0.
    """
    total_paid = func.coalesce(func.sum(transactions.c.amount_paid), 0).label("total_paid")

    stmt = (
        select(
            customers.c.customer_id,
            customers.c.name,
            customers.c.identification_number,
            total_paid,
        )
        .select_from(
            customers.outerjoin(
                transactions,
                transactions.c.customer_id == customers.c.customer_id,
            )
        )
        .group_by(
            customers.c.customer_id,
            customers.c.name,
            customers.c.identification_number,
        )
        .order_by(total_paid.desc(), customers.c.customer_id)
    )

    return [TotalPaidItem(**row) for row in db.fetch_all(stmt)]


@router.get("/pending_invoices", response_model=List[PendingInvoiceItem])
def pending_invoices(db: Database = Depends(get_database)) -> List[PendingInvoiceItem]:
    """
    Invoices whose balance (amount_billed - sum of amount_paid) is still
    positive, largest balance first.
    """
    paid_expr = func.coalesce(func.sum(transactions.c.amount_paid), 0)
    balance_expr = invoices.c.amount_billed - paid_expr

    stmt = (
        select(
            invoices.c.invoice_id,
            invoices.c.invoice_number,
            invoices.c.billing_period,
            invoices.c.amount_billed,
            paid_expr.label("total_paid"),
            balance_expr.label("balance"),
            customers.c.customer_id,
            customers.c.name.label("customer_name"),
            customers.c.identification_number,
        )
        .select_from(
            invoices.join(
                customers,
                customers.c.customer_id == invoices.c.customer_id,
            ).outerjoin(
                transactions,
                transactions.c.invoice_id == invoices.c.invoice_id,
            )
        )
        .group_by(
            invoices.c.invoice_id,
            invoices.c.invoice_number,
            invoices.c.billing_period,
            invoices.c.amount_billed,
            customers.c.customer_id,
            customers.c.name,
            customers.c.identification_number,
        )
        .having(balance_expr > 0)
        .order_by(balance_expr.desc(), invoices.c.invoice_id)
    )

    return [PendingInvoiceItem(**row) for row in db.fetch_all(stmt)]


@router.get(
    "/transactions_by_platform/{platform}",
    response_model=List[PlatformTransactionItem],
)
def transactions_by_platform(
    platform: str,
    db: Database = Depends(get_database),
) -> List[PlatformTransactionItem]:
    """
    Transactions made through the named platform (exact match), newest first.
    """
    stmt = (
        select(
            transactions.c.transaction_id,
            transactions.c.transaction_datetime,
            transactions.c.transaction_amount,
            transactions.c.amount_paid,
            transactions.c.transaction_status,
            customers.c.customer_id,
            customers.c.name.label("customer_name"),
            invoices.c.invoice_id,
            invoices.c.invoice_number,
        )
        .select_from(
            transactions.outerjoin(
                platforms,
                platforms.c.platform_id == transactions.c.platform_id,
            )
            .outerjoin(
                customers,
                customers.c.customer_id == transactions.c.customer_id,
            )
            .outerjoin(
                invoices,
                invoices.c.invoice_id == transactions.c.invoice_id,
            )
        )
        .where(platforms.c.name == platform)
        .order_by(transactions.c.transaction_datetime.desc())
    )

    return [PlatformTransactionItem(**row) for row in db.fetch_all(stmt)]
