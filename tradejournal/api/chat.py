"""Chat API — assistant messages, chat-driven session switching, greeting."""

from datetime import datetime

from fastapi import APIRouter, Depends

from tradejournal.api.deps import get_current_user, get_orchestrator
from tradejournal.models.user import User
from tradejournal.schemas.chat import ChatReply, ChatRequest, Greeting
from tradejournal.services.chat import ChatOrchestrator, greeting

router = APIRouter(prefix="/api/chat", tags=["chat"])


@router.post("", response_model=ChatReply)
async def send_message(
    body: ChatRequest,
    user: User = Depends(get_current_user),
    orchestrator: ChatOrchestrator = Depends(get_orchestrator),
):
    """Reply to a chat message, or acknowledge a session switch.

    The client is expected to wait for one reply before sending the next
    message; nothing here serializes concurrent messages.
    """
    return await orchestrator.handle_message(body.message, user.id, body.session_id)


@router.get("/greeting", response_model=Greeting)
def get_greeting(user: User = Depends(get_current_user)):
    return Greeting(message=greeting(datetime.now(), user.username))
