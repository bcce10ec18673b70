# app/db/seed.py
"""
Load the CSV fixture files into the database.

Expected files in the data directory, each with a header row naming the
table columns:

    platforms.csv     platform_id, name
    customers.csv     customer_id, name, identification_number, address, phone, email
    invoices.csv      invoice_id, invoice_number, billing_period, amount_billed, customer_id
    transactions.csv  transaction_id, transaction_datetime, transaction_amount,
                      amount_paid, transaction_status, customer_id, invoice_id, platform_id

Loading replaces the contents of all four tables in one transaction, so
running it twice leaves the same data behind.
"""

import csv
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Callable, Dict, List, Optional

from app.db.engine import Database
from app.db.schema import customers, invoices, platforms, transactions

logger = logging.getLogger(__name__)

SEED_FILES = {
    "platforms": "platforms.csv",
    "customers": "customers.csv",
    "invoices": "invoices.csv",
    "transactions": "transactions.csv",
}

MAX_ERROR_EXAMPLES = 5


class SeedError(Exception):
    pass


# ---- Helpers ----

def parse_money(value: Optional[str]) -> Decimal:
    value = (value or "").strip().replace(",", "")
    if value == "":
        return Decimal("0")
    try:
        return Decimal(value)
    except InvalidOperation:
        raise ValueError(f"invalid amount: {value!r}")


def parse_datetime(value: Optional[str]) -> datetime:
    value = (value or "").strip()
    for fmt in ("%Y-%m-%d %H:%M:%S", "%Y-%m-%d %H:%M", "%Y-%m-%d"):
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    raise ValueError(f"invalid datetime: {value!r}")


def parse_int(value: Optional[str]) -> Optional[int]:
    value = (value or "").strip()
    if not value:
        return None
    return int(value)


def clean_text(value: Optional[str]) -> Optional[str]:
    value = (value or "").strip()
    return value or None


def required_text(value: Optional[str], column: str) -> str:
    value = clean_text(value)
    if value is None:
        raise ValueError(f"{column} is required")
    return value


# ---- Row parsers ----

def _platform_row(row: dict) -> dict:
    return {
        "platform_id": parse_int(row["platform_id"]),
        "name": required_text(row["name"], "name"),
    }


def _customer_row(row: dict) -> dict:
    return {
        "customer_id": parse_int(row["customer_id"]),
        "name": required_text(row["name"], "name"),
        "identification_number": required_text(row["identification_number"], "identification_number"),
        "address": clean_text(row.get("address")),
        "phone": clean_text(row.get("phone")),
        "email": clean_text(row.get("email")),
    }


def _invoice_row(row: dict) -> dict:
    return {
        "invoice_id": parse_int(row["invoice_id"]),
        "invoice_number": required_text(row["invoice_number"], "invoice_number"),
        "billing_period": clean_text(row.get("billing_period")),
        "amount_billed": parse_money(row["amount_billed"]),
        "customer_id": parse_int(row["customer_id"]),
    }


def _transaction_row(row: dict) -> dict:
    return {
        "transaction_id": required_text(row["transaction_id"], "transaction_id"),
        "transaction_datetime": parse_datetime(row["transaction_datetime"]),
        "transaction_amount": parse_money(row["transaction_amount"]),
        "amount_paid": parse_money(row["amount_paid"]),
        "transaction_status": clean_text(row.get("transaction_status")),
        "customer_id": parse_int(row["customer_id"]),
        "invoice_id": parse_int(row.get("invoice_id")),
        "platform_id": parse_int(row.get("platform_id")),
    }


ROW_PARSERS: Dict[str, Callable[[dict], dict]] = {
    "platforms": _platform_row,
    "customers": _customer_row,
    "invoices": _invoice_row,
    "transactions": _transaction_row,
}


def parse_seed_file(path: Path, parse_row: Callable[[dict], dict], stats: dict) -> List[dict]:
    records = []

    with open(path, newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        for line_number, row in enumerate(reader, start=2):
            stats["n_rows"] += 1
            try:
                records.append(parse_row(row))
            except (KeyError, ValueError) as e:
                stats["n_errors"] += 1
                if len(stats["error_examples"]) < MAX_ERROR_EXAMPLES:
                    stats["error_examples"].append(
                        {
                            "file": path.name,
                            "line": line_number,
                            "error": repr(e),
                        }
                    )

    return records


def parse_seed_data(data_dir) -> tuple:
    """
    Parse every seed file in data_dir.

    Returns (records, stats) where records maps table name to parsed rows.
    Rows that fail to parse are skipped and counted in stats.
    """
    data_dir = Path(data_dir)
    stats = {"n_rows": 0, "n_errors": 0, "error_examples": []}
    records = {}

    for table_name, file_name in SEED_FILES.items():
        path = data_dir / file_name
        if not path.is_file():
            raise SeedError(f"Seed file not found: {path}")
        records[table_name] = parse_seed_file(path, ROW_PARSERS[table_name], stats)
        stats[f"n_{table_name}"] = len(records[table_name])

    return records, stats


def load_into_db(db: Database, records: dict) -> None:
    with db.transaction() as conn:
        # children first on delete, parents first on insert
        conn.execute(transactions.delete())
        conn.execute(invoices.delete())
        conn.execute(customers.delete())
        conn.execute(platforms.delete())

        for table in (platforms, customers, invoices, transactions):
            rows = records.get(table.name) or []
            if rows:
                conn.execute(table.insert(), rows)


def run_seed(db: Database, data_dir) -> dict:
    records, stats = parse_seed_data(data_dir)
    load_into_db(db, records)

    logger.info(
        "Seed complete: %s customers, %s platforms, %s invoices, %s transactions",
        stats["n_customers"],
        stats["n_platforms"],
        stats["n_invoices"],
        stats["n_transactions"],
    )
    if stats["n_errors"]:
        logger.warning("Seed skipped %s rows with errors", stats["n_errors"])
        for ex in stats["error_examples"]:
            logger.warning("%s line %s: %s", ex["file"], ex["line"], ex["error"])

    return stats


def make_seeder(db: Database, data_dir) -> Callable[[], dict]:
    """Zero-argument seed callable bound to a database and data directory."""

    def seeder() -> dict:
        return run_seed(db, data_dir)

    return seeder
