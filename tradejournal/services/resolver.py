"""Session name resolution for chat-driven session switching."""

import logging

from tradejournal.models.trading_session import TradingSession
from tradejournal.services.store import JournalStore

logger = logging.getLogger(__name__)


class SessionResolver:
    """Case-insensitive substring lookup of a session name within one user's sessions.

    When several sessions match, the first one in the store's order for the
    search (newest first) wins. There is no ranking by match quality.
    """

    def __init__(self, store: JournalStore):
        self.store = store

    def find(self, name_fragment: str, user_id: int) -> TradingSession | None:
        fragment = name_fragment.strip()
        if not fragment:
            return None
        matches = self.store.search_sessions(user_id, fragment)
        if not matches:
            logger.debug(f"No session matching '{fragment}' for user {user_id}")
            return None
        if len(matches) > 1:
            logger.debug(
                f"{len(matches)} sessions match '{fragment}' for user {user_id}; "
                f"using '{matches[0].name}'"
            )
        return matches[0]

    def resolve(self, name_fragment: str, user_id: int) -> int | None:
        """Session id for the fragment, or None when nothing matches."""
        match = self.find(name_fragment, user_id)
        return match.id if match is not None else None
