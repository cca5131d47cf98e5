"""Text-completion backend client.

The assistant's replies come from an external completion service that takes a
single prompt string and answers with a single text string. One request per
call: no streaming, no retries. Every failure mode is reported as
ChatBackendError so callers never have to know about aiohttp.
"""

import abc
import asyncio
import json
import logging

import aiohttp

from tradejournal.config import settings
from tradejournal.errors import ChatBackendError

logger = logging.getLogger(__name__)


class TextBackend(abc.ABC):
    @abc.abstractmethod
    async def complete(self, prompt: str, max_tokens: int | None = None) -> str:
        """Return the completion for prompt, or raise ChatBackendError."""


class HttpTextBackend(TextBackend):
    """POSTs ``{"prompt", "temperature", "max_tokens"}`` and reads the reply text.

    Accepts either ``{"text": "..."}`` or a completions-style
    ``{"choices": [{"text": "..."}]}`` body.
    """

    def __init__(
        self,
        url: str,
        api_key: str = "",
        timeout: float = 30.0,
        temperature: float = 0.7,
        max_tokens: int = 1000,
    ):
        self.url = url
        self.api_key = api_key
        self.timeout = timeout
        self.temperature = temperature
        self.max_tokens = max_tokens

    @classmethod
    def from_settings(cls) -> "HttpTextBackend":
        return cls(
            url=settings.chat_backend_url,
            api_key=settings.chat_backend_api_key,
            timeout=settings.chat_timeout_seconds,
            temperature=settings.chat_temperature,
            max_tokens=settings.chat_max_tokens,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def complete(self, prompt: str, max_tokens: int | None = None) -> str:
        body = {
            "prompt": prompt,
            "temperature": self.temperature,
            "max_tokens": max_tokens or self.max_tokens,
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    self.url,
                    json=body,
                    headers=self._headers(),
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as resp:
                    raw = await resp.read()
                    if resp.status >= 400:
                        logger.error(
                            f"Text backend HTTP {resp.status}: "
                            f"{raw[:200].decode('utf-8', errors='replace')}"
                        )
                        raise ChatBackendError(f"Text backend returned HTTP {resp.status}")
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Text backend request failed: {e!r}")
            raise ChatBackendError("Text backend unreachable") from e

        return _extract_text(raw)


def _extract_text(raw: bytes) -> str:
    try:
        payload = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error(f"Text backend sent a body that is not JSON: {raw[:200]!r}")
        raise ChatBackendError("Malformed text backend response") from e

    reply = None
    if isinstance(payload, dict):
        reply = payload.get("text")
        choices = payload.get("choices")
        if reply is None and isinstance(choices, list) and choices and isinstance(choices[0], dict):
            reply = choices[0].get("text")

    if not isinstance(reply, str) or not reply.strip():
        logger.error(f"Text backend response has no text: {raw[:200]!r}")
        raise ChatBackendError("Malformed text backend response")
    return reply
