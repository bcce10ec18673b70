# app/api/seed.py

import logging
from typing import Callable

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.api.deps import get_seeder
from app.models.reports import SeedResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["seed"])


@router.post("/seed", response_model=SeedResponse)
def seed(seeder: Callable[[], dict] = Depends(get_seeder)):
    """
    Replace the database contents with the fixture data.

    Unlike the other routes, a failure here returns the underlying message in
    "detail"; this endpoint is meant for operators loading test data.
    """
    try:
        stats = seeder()
    except Exception as e:
        logger.exception("Error during data seeding")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Seed failed", "detail": str(e)},
        )

    return SeedResponse(
        success=True,
        message="Data seeding completed successfully",
        customers=stats.get("n_customers", 0),
        platforms=stats.get("n_platforms", 0),
        invoices=stats.get("n_invoices", 0),
        transactions=stats.get("n_transactions", 0),
        rows_with_errors=stats.get("n_errors", 0),
    )
