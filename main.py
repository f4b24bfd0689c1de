"""Main FastAPI application"""
import logging
import logging.config
from contextlib import asynccontextmanager
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# --- slowapi imports ---
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

import config
from models.resource_kind import ALL_KINDS
from routes import build_record_router

# --- Unified Logging Configuration with Rich ---
LOGGING_CONFIG = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(name)s - %(message)s",
            "datefmt": "%Y-%m-%d %H:%M:%S",
        },
    },
    "handlers": {
        "default": {
            "class": "rich.logging.RichHandler",
            "formatter": "default",
            "level": "DEBUG",
            "rich_tracebacks": True,
            "show_time": True,
            "show_path": False,
            "log_time_format": "%Y-%m-%d %H:%M:%S",
            "markup": False,
        },
    },
    "loggers": {
        "uvicorn": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.error": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "uvicorn.access": {
            "handlers": ["default"],
            "level": "INFO",
            "propagate": False,
        },
        "": {  # Root logger for our application
            "handlers": ["default"],
            "level": config.LOG_LEVEL,
            "propagate": False,
        },
    },
}

logging.config.dictConfig(LOGGING_CONFIG)

logger = logging.getLogger(__name__)

WRITE_METHODS = {"POST", "PUT", "PATCH"}

if not config.MONGODB_URI:
    logger.error("MONGODB_URI environment variable not set! Database connection will fail.")


# --- Middleware for Form Size Limit ---
class LimitFormSizeMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        if request.method in WRITE_METHODS:
            content_length_header = request.headers.get("content-length")
            if content_length_header:
                try:
                    content_length = int(content_length_header)
                except ValueError:
                    logger.warning("Submission rejected: Invalid Content-Length header.")
                    return Response("Invalid Content-Length header.", status_code=400)
                if content_length > config.MAX_FORM_SIZE:
                    logger.warning(f"Submission rejected: body size {content_length} exceeds limit {config.MAX_FORM_SIZE}.")
                    return Response(f"Maximum form size ({config.MAX_FORM_SIZE} bytes) exceeded.", status_code=413)
        return await call_next(request)


def create_app(database: Optional[AsyncIOMotorDatabase] = None) -> FastAPI:
    """
    Builds the application.

    When `database` is given it is used as-is and no MongoDB connection is
    opened; otherwise the lifespan connects using MONGODB_URI.
    """
    # Application state to hold the database client and handle
    app_state: Dict[str, Any] = {"db_client": None, "db": database}

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app_state["db"] is None:
            logger.info(f"Connecting to MongoDB at {config.MONGODB_URI}...")
            try:
                app_state["db_client"] = AsyncIOMotorClient(config.MONGODB_URI)
                await app_state["db_client"].admin.command("ping")
                app_state["db"] = app_state["db_client"][config.DB_NAME]
                logger.info(f"Successfully connected to MongoDB database: {config.DB_NAME}")
            except Exception as e:
                logger.error(f"Failed to connect to MongoDB: {e}")
                if app_state["db_client"] is not None:
                    app_state["db_client"].close()
                app_state["db_client"] = None
                app_state["db"] = None
        else:
            logger.info("Using injected database handle.")

        yield  # Application runs here

        if app_state.get("db_client"):
            logger.info("Closing MongoDB connection...")
            app_state["db_client"].close()
            app_state["db_client"] = None
            app_state["db"] = None
            logger.info("MongoDB connection closed.")

    app = FastAPI(
        title="Finance Records API",
        description="Read, update and delete single expense and income records.",
        version="0.1.0",
        lifespan=lifespan,
    )

    # --- Rate Limiter ---
    app.state.limiter = Limiter(
        key_func=get_remote_address,
        default_limits=[config.DEFAULT_RATE_LIMIT],
        enabled=config.RATE_LIMIT_ENABLED,
    )
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    # --- Middleware (last added runs first) ---
    app.add_middleware(SlowAPIMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_middleware(LimitFormSizeMiddleware)

    for kind in ALL_KINDS:
        app.include_router(build_record_router(kind))

    @app.get("/health", summary="Health Check")
    async def health():
        return {"status": "ok", "database": app_state["db"] is not None}

    # Make app state accessible via middleware
    @app.middleware("http")
    async def add_app_config_to_request(request: Request, call_next):
        """Adds the database handle to the request state."""
        request.state.db = app_state.get("db")
        return await call_next(request)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
