"""Error taxonomy for the journal service layer.

The API maps each class to an HTTP status in ``tradejournal.main``. The
statistics engine never raises any of these.
"""


class JournalError(Exception):
    code = "JOURNAL_ERROR"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class StoreError(JournalError):
    code = "STORE_ERROR"


class StoreReadError(StoreError):
    code = "STORE_READ_FAILED"


class StoreWriteError(StoreError):
    code = "STORE_WRITE_FAILED"


class RecordNotFound(JournalError):
    code = "RECORD_NOT_FOUND"

    def __init__(self, kind: str, record_id: object) -> None:
        super().__init__(f"{kind} not found")
        self.kind = kind
        self.record_id = record_id


class InvalidTradeInput(JournalError, ValueError):
    code = "INVALID_TRADE_INPUT"

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field


class InvalidChatInput(JournalError, ValueError):
    code = "INVALID_CHAT_INPUT"


class ChatBackendError(JournalError):
    """Any failure of the text-completion call. Never retried."""

    code = "CHAT_BACKEND_FAILED"
    public_message = "Failed to get a response from the assistant"
