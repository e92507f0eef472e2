import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from devevent.core.config import get_cors_origins
from devevent.core.logging_config import setup_logging
from devevent.database.db import ConnectionManager
from devevent.routes import bookings, events, health

setup_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("DevEvent API starting")
    yield
    app.state.connections.dispose()


def create_app(connections: ConnectionManager | None = None) -> FastAPI:
    app = FastAPI(title="DevEvent API", lifespan=lifespan)

    # The database is connected lazily on first use
    app.state.connections = connections or ConnectionManager()

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include the routers
    app.include_router(health.router)
    app.include_router(events.router)
    app.include_router(bookings.router)

    return app


app = create_app()
