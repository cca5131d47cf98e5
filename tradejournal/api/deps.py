"""Shared API dependencies."""

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlmodel import Session, select

from tradejournal.config import settings
from tradejournal.database import get_session
from tradejournal.models.trading_session import TradingSession
from tradejournal.models.user import User
from tradejournal.services.auth import decode_access_token
from tradejournal.services.chat import ChatOrchestrator
from tradejournal.services.chat_context import ChatContextBuilder
from tradejournal.services.store import JournalStore
from tradejournal.services.text_backend import HttpTextBackend, TextBackend

bearer_scheme = HTTPBearer()


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User:
    """Validate JWT and return the current user."""
    username = decode_access_token(credentials.credentials)
    if username is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    user = session.exec(select(User).where(User.username == username)).first()
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found or inactive",
        )
    return user


def get_store(session: Session = Depends(get_session)) -> JournalStore:
    return JournalStore(session)


def get_text_backend() -> TextBackend:
    return HttpTextBackend.from_settings()


def get_orchestrator(
    store: JournalStore = Depends(get_store),
    backend: TextBackend = Depends(get_text_backend),
) -> ChatOrchestrator:
    return ChatOrchestrator(
        store,
        backend,
        context_builder=ChatContextBuilder(
            store,
            recent_sessions=settings.context_recent_sessions,
            recent_trades=settings.context_recent_trades,
        ),
        assistant_name=settings.assistant_name,
        summary_max_tokens=settings.summary_max_tokens,
    )


def get_owned_session(
    session_id: int,
    user: User = Depends(get_current_user),
    store: JournalStore = Depends(get_store),
) -> TradingSession:
    """The path's trading session, if it belongs to the current user."""
    record = store.get_session(session_id, user_id=user.id)
    if record is None:
        raise HTTPException(status_code=404, detail="Session not found")
    return record
