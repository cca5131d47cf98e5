"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from tradejournal.config import settings
from tradejournal.database import create_db_and_tables
from tradejournal.errors import (
    ChatBackendError,
    InvalidChatInput,
    InvalidTradeInput,
    JournalError,
    RecordNotFound,
    StoreError,
)
from tradejournal.utils.logging import setup_logging
from tradejournal.api import auth, sessions, trades, dashboard, chat, system

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    setup_logging()
    create_db_and_tables()
    yield


app = FastAPI(
    title="Trade Journal",
    description="Trading journal with session analytics and an AI chat assistant",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Status per error class; the first isinstance match wins
_ERROR_STATUS: list[tuple[type[JournalError], int]] = [
    (RecordNotFound, 404),
    (InvalidTradeInput, 422),
    (InvalidChatInput, 422),
    (ChatBackendError, 502),
    (StoreError, 503),
]


@app.exception_handler(JournalError)
async def journal_error_handler(request: Request, exc: JournalError):
    status_code = next((code for cls, code in _ERROR_STATUS if isinstance(exc, cls)), 500)
    detail = exc.public_message if isinstance(exc, ChatBackendError) else exc.message
    if status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed: {exc.code} {exc.message}")
    return JSONResponse(status_code=status_code, content={"detail": detail, "code": exc.code})


# Mount routers
app.include_router(auth.router)
app.include_router(sessions.router)
app.include_router(trades.router)
app.include_router(dashboard.router)
app.include_router(chat.router)
app.include_router(system.router)
