from datetime import datetime
from decimal import Decimal

import pytest
from sqlalchemy import insert

from app.db.schema import customers, invoices, platforms, transactions


@pytest.fixture
def billing_data(database):
    database.execute(insert(platforms).values(platform_id=1, name="Nequi"))
    database.execute(insert(platforms).values(platform_id=2, name="Daviplata"))

    for cid, name in ((1, "Ana Gomez"), (2, "Carlos Ruiz"), (3, "Miguel Herrera")):
        database.execute(
            insert(customers).values(
                customer_id=cid, name=name, identification_number=f"100{cid}"
            )
        )

    for iid, number, billed, cid in (
        (1, "FAC7068", 1000, 1),
        (2, "FAC7125", 500, 2),
        (3, "FAC7390", 300, 1),
    ):
        database.execute(
            insert(invoices).values(
                invoice_id=iid,
                invoice_number=number,
                billing_period="2024-06",
                amount_billed=billed,
                customer_id=cid,
            )
        )

    for tid, when, amount, paid, status, cid, iid, pid in (
        ("TXN001", datetime(2024, 6, 1, 15, 0), 1000, 1000, "Completada", 1, 1, 1),
        ("TXN002", datetime(2024, 6, 3, 10, 30), 500, 200, "Pendiente", 2, 2, 2),
        ("TXN003", datetime(2024, 6, 5, 9, 0), 500, 100, "Pendiente", 2, 2, 1),
    ):
        database.execute(
            insert(transactions).values(
                transaction_id=tid,
                transaction_datetime=when,
                transaction_amount=amount,
                amount_paid=paid,
                transaction_status=status,
                customer_id=cid,
                invoice_id=iid,
                platform_id=pid,
            )
        )


def test_total_paid_includes_customers_without_transactions(client, billing_data):
    response = client.get("/api/reports/total_paid_by_customer")
    assert response.status_code == 200
    rows = response.json()

    assert [row["customer_id"] for row in rows] == [1, 2, 3]
    totals = {row["customer_id"]: Decimal(str(row["total_paid"])) for row in rows}
    assert totals == {1: Decimal("1000"), 2: Decimal("300"), 3: Decimal("0")}
    assert rows[2]["name"] == "Miguel Herrera"
    assert rows[2]["identification_number"] == "1003"


def test_total_paid_on_empty_database(client):
    assert client.get("/api/reports/total_paid_by_customer").json() == []


def test_pending_invoices_only_positive_balances(client, billing_data):
    rows = client.get("/api/reports/pending_invoices").json()

    # FAC7068 is fully paid
    assert [row["invoice_number"] for row in rows] == ["FAC7390", "FAC7125"]

    unpaid = rows[0]
    assert Decimal(str(unpaid["balance"])) == Decimal("300")
    assert Decimal(str(unpaid["total_paid"])) == Decimal("0")
    assert unpaid["customer_name"] == "Ana Gomez"

    partly_paid = rows[1]
    assert Decimal(str(partly_paid["amount_billed"])) == Decimal("500")
    assert Decimal(str(partly_paid["total_paid"])) == Decimal("300")
    assert Decimal(str(partly_paid["balance"])) == Decimal("200")
    assert partly_paid["identification_number"] == "1002"

    for row in rows:
        assert Decimal(str(row["balance"])) > 0


def test_transactions_by_platform_newest_first(client, billing_data):
    rows = client.get("/api/reports/transactions_by_platform/Nequi").json()

    assert [row["transaction_id"] for row in rows] == ["TXN003", "TXN001"]
    assert rows[0]["customer_name"] == "Carlos Ruiz"
    assert rows[0]["invoice_number"] == "FAC7125"
    assert rows[0]["transaction_datetime"].startswith("2024-06-05T09:00")


def test_transactions_by_platform_is_exact_match(client, billing_data):
    assert client.get("/api/reports/transactions_by_platform/nequi").json() == []
    assert client.get("/api/reports/transactions_by_platform/Neq").json() == []


def test_transactions_by_unknown_platform_is_empty(client, billing_data):
    response = client.get("/api/reports/transactions_by_platform/PayPal")
    assert response.status_code == 200
    assert response.json() == []
