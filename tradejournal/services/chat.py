"""Chat orchestration — session switching, assistant replies and session summaries.

``ChatOrchestrator`` is stateless: everything it needs (store, text backend,
resolver, router, context builder) is injected, and it never changes what the
client is looking at. A successful switch is returned as a "switched" reply
carrying the resolved session; the client does the actual switch.
"""

import json
import logging
from datetime import datetime

from tradejournal.config import settings
from tradejournal.errors import InvalidChatInput, RecordNotFound
from tradejournal.models.trade import EntrySide
from tradejournal.schemas.chat import ChatReply
from tradejournal.services.chat_context import ChatContext, ChatContextBuilder
from tradejournal.services.intent import IntentRouter
from tradejournal.services.resolver import SessionResolver
from tradejournal.services.statistics import compute_session_stats
from tradejournal.services.store import JournalStore
from tradejournal.services.text_backend import TextBackend
from tradejournal.utils.formatting import format_currency

logger = logging.getLogger(__name__)

SWITCH_ACK = (
    '✅ Switched to "{name}" session! '
    "You can now view and analyze the trades from this session."
)

HOLIDAY_GREETINGS = {
    (12, 25): "🎄 Merry Christmas! ",
    (1, 1): "🎉 Happy New Year! ",
    (10, 31): "🎃 Happy Halloween! ",
}


def greeting(now: datetime, user_name: str | None = None) -> str:
    """Time-of-day greeting, with a holiday prefix on a few dates."""
    if now.hour < 12:
        time_greeting = "Good morning"
    elif now.hour < 17:
        time_greeting = "Good afternoon"
    else:
        time_greeting = "Good evening"
    holiday = HOLIDAY_GREETINGS.get((now.month, now.day), "")
    name = f" {user_name}" if user_name else ""
    return f"{holiday}{time_greeting}{name}! How's your trading going today?"


class ChatOrchestrator:
    def __init__(
        self,
        store: JournalStore,
        backend: TextBackend,
        resolver: SessionResolver | None = None,
        router: IntentRouter | None = None,
        context_builder: ChatContextBuilder | None = None,
        assistant_name: str = "Sydney",
        summary_max_tokens: int | None = None,
    ):
        self.store = store
        self.backend = backend
        self.resolver = resolver or SessionResolver(store)
        self.router = router or IntentRouter()
        self.context_builder = context_builder or ChatContextBuilder(store)
        self.assistant_name = assistant_name
        self.summary_max_tokens = summary_max_tokens or settings.summary_max_tokens

    async def handle_message(
        self, text: str, user_id: int, current_session_id: int | None = None
    ) -> ChatReply:
        """Answer one chat message.

        A recognised switch command naming an existing session returns a
        "switched" reply. Everything else, including a switch command whose
        session cannot be found, goes to the text backend with the user's
        literal message. ChatBackendError from the backend propagates.
        """
        message = text.strip()
        if not message:
            raise InvalidChatInput("Message must not be empty")

        intent = self.router.classify(message)
        if intent.is_switch:
            match = self.resolver.find(intent.session_name_fragment, user_id)
            if match is not None:
                logger.info(f"User {user_id} switched to session {match.id} via chat")
                return ChatReply(
                    kind="switched",
                    message=SWITCH_ACK.format(name=match.name),
                    session_id=match.id,
                    session_name=match.name,
                )
            logger.info(
                f"No session matches '{intent.session_name_fragment}'; answering as a question"
            )

        context = self.context_builder.build(user_id, current_session_id)
        prompt = self.build_chat_prompt(context, message)
        reply = await self.backend.complete(prompt)
        return ChatReply(kind="reply", message=reply)

    def build_chat_prompt(self, context: ChatContext, message: str) -> str:
        return "\n".join(
            [
                f"You are {self.assistant_name}, an AI trading assistant for a personal "
                "trading journal. You are helpful, friendly, and knowledgeable about trading.",
                "",
                context.render(),
                "",
                "You can:",
                "1. Analyze their trading performance and provide insights",
                "2. Answer questions about specific trades or sessions",
                "3. Provide psychological feedback on trading patterns",
                "4. Chat freely about anything (jokes, general questions, etc.)",
                "5. Help with trading education and tips",
                "6. Detect risky behavior patterns",
                "",
                "Be conversational, helpful, and provide actionable advice. Format your "
                "responses clearly and use specific data from their trading history when "
                "relevant.",
                "",
                f"Current date: {context.generated_at.date().isoformat()}",
                "",
                f"User message: {message}",
            ]
        )

    async def summarize_session(self, session_id: int, user_id: int) -> str:
        """AI-written performance summary of one of the user's sessions."""
        session = self.store.get_session(session_id, user_id=user_id)
        if session is None:
            raise RecordNotFound("Session", session_id)
        trades = self.store.list_trades(session.id)
        stats = compute_session_stats(trades, session.initial_capital)

        trade_rows = [
            {
                "entry_side": EntrySide(t.entry_side).value,
                "margin": t.margin,
                "roi": round(t.roi, 2),
                "profit_loss": t.profit_loss,
                "comments": t.comments,
                "created_at": t.created_at.isoformat(),
            }
            for t in trades
        ]
        prompt = "\n".join(
            [
                f"You are {self.assistant_name}, an AI trading analyst. Generate a "
                "comprehensive summary for this trading session.",
                "",
                "Session Details:",
                f"- Name: {session.name}",
                f"- Initial Capital: {format_currency(session.initial_capital)}",
                f"- Current Capital: {format_currency(stats.current_capital)}",
                f"- Created: {session.created_at.date().isoformat()}",
                "",
                "Trading Performance:",
                f"- Total Trades: {stats.total_trades}",
                f"- Net P/L: {format_currency(stats.net_profit_loss)}",
                f"- Win Rate: {stats.win_rate:.1f}%",
                f"- Winning Trades: {stats.winning_trades}",
                f"- Losing Trades: {stats.losing_trades}",
                f"- Total Margin Used: {format_currency(stats.total_margin_used)}",
                f"- Average ROI: {stats.average_roi:.2f}%",
                "",
                "Individual Trades:",
                json.dumps(trade_rows, indent=2),
                "",
                "Please provide:",
                "1. A concise performance summary",
                "2. Key insights and patterns",
                "3. Areas for improvement",
                "4. Psychological observations about trading behavior",
                "5. Specific recommendations for future sessions",
                "",
                "Keep the summary professional, actionable, and under 500 words. Write in a "
                f"friendly, helpful tone as {self.assistant_name}.",
            ]
        )
        logger.info(f"Requesting summary for session {session.id} ({len(trades)} trades)")
        return await self.backend.complete(prompt, max_tokens=self.summary_max_tokens)
