# app/api/customers.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy import delete, func, insert, select, update

from app.api.deps import get_database
from app.db.engine import Database, DatabaseError
from app.db.schema import customers
from app.errors import ConflictError, NotFoundError
from app.models.customers import (
    CustomerCreate,
    CustomerOut,
    CustomerPage,
    CustomerUpdate,
    DeleteResponse,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/customers", tags=["customers"])

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 102
# largest page or limit accepted; keeps LIMIT and OFFSET inside a signed 64-bit int
MAX_PAGING_VALUE = 2**31 - 1


def parse_positive_int(value: Optional[str], default: int) -> int:
    """
    Parse a query-string integer, falling back to default when the value is
    missing, not a number, below 1 or above MAX_PAGING_VALUE.
    """
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if 1 <= parsed <= MAX_PAGING_VALUE else default


def _select_customer(customer_id: int):
    return select(customers).where(customers.c.customer_id == customer_id)


@router.get("", response_model=CustomerPage)
def list_customers(
    page: Optional[str] = Query(default=None, description="Page number, 1-based"),
    limit: Optional[str] = Query(default=None, description="Page size"),
    db: Database = Depends(get_database),
) -> CustomerPage:
    """
    Return one page of customers ordered by id.

    total is the number of rows on this page; total_count is the size of the
    whole table.
    """
    page_num = parse_positive_int(page, DEFAULT_PAGE)
    page_size = parse_positive_int(limit, DEFAULT_LIMIT)
    offset = (page_num - 1) * page_size

    stmt = (
        select(customers)
        .order_by(customers.c.customer_id)
        .limit(page_size)
        .offset(offset)
    )
    rows = db.fetch_all(stmt)

    count_stmt = select(func.count()).select_from(customers)
    total_count = db.scalar(count_stmt)

    return CustomerPage(
        data=[CustomerOut(**row) for row in rows],
        page=page_num,
        limit=page_size,
        total=len(rows),
        total_count=total_count,
    )


@router.get("/{customer_id}", response_model=CustomerOut)
def get_customer(customer_id: int, db: Database = Depends(get_database)) -> CustomerOut:
    row = db.fetch_one(_select_customer(customer_id))

    if row is None:
        raise NotFoundError("Customer not found")

    return CustomerOut(**row)


@router.post("", response_model=CustomerOut, status_code=status.HTTP_201_CREATED)
def create_customer(
    payload: CustomerCreate,
    db: Database = Depends(get_database),
) -> CustomerOut:
    values = payload.model_dump()

    try:
        result = db.execute(insert(customers).values(**values))
    except DatabaseError as exc:
        if exc.is_duplicate:
            raise ConflictError("Duplicate entry (identification or email)")
        raise

    logger.info("Created customer %s", result.insert_id)
    return CustomerOut(customer_id=result.insert_id, **values)


@router.put("/{customer_id}", response_model=CustomerOut)
def update_customer(
    customer_id: int,
    payload: CustomerUpdate,
    db: Database = Depends(get_database),
) -> CustomerOut:
    """
    Update only the supplied fields; anything left out keeps its stored value.
    """
    changes = payload.changes()

    # COALESCE(new, current) per column, so a missing value never overwrites
    stmt = (
        update(customers)
        .where(customers.c.customer_id == customer_id)
        .values(
            {
                column: func.coalesce(changes.get(column), customers.c[column])
                for column in ("name", "identification_number", "address", "phone", "email")
            }
        )
    )

    try:
        result = db.execute(stmt)
    except DatabaseError as exc:
        if exc.is_duplicate:
            raise ConflictError("Duplicate entry")
        raise

    if result.affected_rows == 0:
        raise NotFoundError("Customer not found")

    row = db.fetch_one(_select_customer(customer_id))
    if row is None:
        # deleted between the update and the re-read
        raise NotFoundError("Customer not found")

    logger.info("Updated customer %s (%s)", customer_id, ", ".join(sorted(changes)) or "no changes")
    return CustomerOut(**row)


@router.delete("/{customer_id}", response_model=DeleteResponse)
def delete_customer(customer_id: int, db: Database = Depends(get_database)) -> DeleteResponse:
    result = db.execute(delete(customers).where(customers.c.customer_id == customer_id))

    if result.affected_rows == 0:
        raise NotFoundError("Customer not found")

    logger.info("Deleted customer %s", customer_id)
    return DeleteResponse(success=True, message="Customer deleted successfully")
