# app/main.py

import logging
from pathlib import Path
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.api.customers import router as customers_router
from app.api.reports import router as reports_router
from app.api.seed import router as seed_router
from app.config import Settings, load_settings
from app.db.engine import Database
from app.db.seed import make_seeder
from app.errors import register_exception_handlers
from app.middleware import BodySizeLimitMiddleware, UnhandledErrorMiddleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    seeder: Optional[Callable[[], dict]] = None,
) -> FastAPI:
    settings = settings or load_settings()
    configure_logging(settings.log_level)
    database = database or Database.from_settings(settings)
    seeder = seeder or make_seeder(database, settings.seed_data_dir)

    app = FastAPI(
        title="Customer Billing API",
        version="0.1.0",
    )
    app.state.settings = settings
    app.state.database = database
    app.state.seeder = seeder

    register_exception_handlers(app)

    # added last is outermost: CORS wraps the 413 and 500 responses too
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health_check():
        return {
            "status": "ok",
            "database": "ok" if database.ping() else "unavailable",
        }

    app.include_router(customers_router)
    app.include_router(reports_router)
    app.include_router(seed_router)

    # mounted last so /api/* and /health win
    static_dir = Path(settings.static_dir)
    if static_dir.is_dir():
        app.mount("/", StaticFiles(directory=static_dir, html=True), name="static")
    else:
        logger.info("Static directory %s not found; not serving static files", static_dir)

    return app


def main() -> None:
    import uvicorn

    settings = load_settings()
    application = create_app(settings)
    logger.info("Customer Billing API listening on http://%s:%s", settings.host, settings.port)
    uvicorn.run(application, host=settings.host, port=settings.port)


app = create_app()


if __name__ == "__main__":
    main()
