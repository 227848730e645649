import logging
from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm.api import auth_routes, customer_routes
from crm.core.config import Settings, get_settings
from crm.core.errors import register_exception_handlers
from crm.core.logging import setup_logging
from crm.db import build_engine, build_sessionmaker, create_db_and_tables

log = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    engine = app.state.engine
    log.info("Starting DB setup...")
    # A failure here propagates and aborts startup before any request is served.
    await create_db_and_tables(engine)
    log.info("DB schema ready (%s)", engine.url.render_as_string(hide_password=True))
    yield
    await engine.dispose()


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level)
    if settings.jwt_secret == "change-me":
        log.warning("JWT_SECRET is not set; using the insecure default secret")

    app = FastAPI(title="CRM API", version="1.0.0", lifespan=lifespan)

    app.state.settings = settings
    app.state.engine = build_engine(settings)
    app.state.sessionmaker = build_sessionmaker(app.state.engine)

    register_exception_handlers(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_routes.router)
    app.include_router(customer_routes.router)
    return app


def run() -> None:
    settings = get_settings()
    uvicorn.run(
        "crm.main:create_app",
        factory=True,
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
