"""UserHub API — FastAPI application plus Socket.IO server.

Invariants:
    - Routes and socket events registered explicitly (no auto-discovery)
    - Global error handlers map UserHubError → envelope responses
    - CORS configured from settings (not hardcoded)
    - DatabaseSessionManager created in lifespan, stored on app.state, disposed on shutdown
    - asgi_app (Socket.IO in front of FastAPI) is what uvicorn serves

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - A failed startup ping only warns: the server comes up and DB calls fail per request
    - socketio.ASGIApp forwards non-socket traffic (and lifespan) to FastAPI
"""

import logging
from contextlib import asynccontextmanager

import socketio
import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from userhub.api.error_handlers import register_error_handlers
from userhub.api.events.user_events import UserEventHandlers
from userhub.api.routes import health, users
from userhub.config import get_settings
from userhub.infrastructure.database import DatabaseSessionManager
from userhub.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db_manager = DatabaseSessionManager(
        settings.resolved_database_url(),
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
        pool_timeout=settings.database_pool_timeout,
    )
    app.state.db_manager = db_manager
    if not await db_manager.health_check():
        logger.warning(
            "Database connection failed. Server will start but database "
            "operations will fail.",
        )
    elif settings.database_create_tables:
        await db_manager.create_tables()
    logger.info(f"UserHub API started on port {settings.port}")
    yield
    logger.info("UserHub API shutting down")
    await db_manager.close()
    app.state.db_manager = None


app = FastAPI(title="UserHub API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    logger.info(
        f"{request.method} {request.url.path}",
        extra={"method": request.method, "path": request.url.path},
    )
    return await call_next(request)


app.include_router(health.router)
app.include_router(users.router)

register_error_handlers(app)


# ─── SOCKET.IO ──────────────────────────────────────────────────

sio = socketio.AsyncServer(
    async_mode="asgi", cors_allowed_origins=settings.socket_cors_origin,
)


def _socket_session():
    """Session for one socket event, from the manager the lifespan installed."""
    db_manager = getattr(app.state, "db_manager", None)
    if db_manager is None:
        raise RuntimeError("Database not initialized")
    return db_manager.session()


UserEventHandlers(sio, _socket_session).register()

asgi_app = socketio.ASGIApp(sio, other_asgi_app=app)


def run() -> None:
    """Console entry point: serve asgi_app with uvicorn."""
    uvicorn.run(
        "userhub.main:asgi_app", host=settings.host, port=settings.port,
    )


if __name__ == "__main__":
    run()
