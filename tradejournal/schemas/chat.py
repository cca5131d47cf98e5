"""Pydantic schemas for the chat API."""

from typing import Literal

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    session_id: int | None = None  # session the client is currently viewing


class ChatReply(BaseModel):
    kind: Literal["switched", "reply"]
    message: str
    session_id: int | None = None
    session_name: str | None = None


class SessionSummary(BaseModel):
    session_id: int
    summary: str


class Greeting(BaseModel):
    message: str
