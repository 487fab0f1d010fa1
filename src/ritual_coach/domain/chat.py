"""Models for the chat proxy."""

from dataclasses import dataclass
from typing import Literal

from pydantic import BaseModel, Field


class ChatMessage(BaseModel):
    """One turn of a conversation."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1)


@dataclass(frozen=True)
class ChatReply:
    """Reply text returned by a chat provider."""

    content: str
    usage: dict[str, int] | None = None
