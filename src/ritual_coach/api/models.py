"""Pydantic request models for the HTTP API."""

from typing import Literal

from pydantic import BaseModel, Field

from ritual_coach.domain.chat import ChatMessage


class AgentRequest(BaseModel):
    """Chat proxy request payload."""

    message: str
    conversation_history: list[ChatMessage] = Field(default_factory=list)


class NavigationRequest(BaseModel):
    """Move the active step pointer."""

    action: Literal["next", "previous", "goto"]
    index: int | None = None
