"""Chat proxy that forwards conversations to an LLM provider."""

import logging
from dataclasses import dataclass
from typing import Protocol

from ritual_coach.domain.chat import ChatMessage, ChatReply

_logger = logging.getLogger(__name__)


class ChatClient(Protocol):
    """Interface for LLM chat completion providers."""

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str | None,
        messages: list[dict[str, str]],
    ) -> ChatReply:
        """Return the assistant reply for a conversation."""


@dataclass
class ChatService:
    """Builds provider requests from a message and its history."""

    client: ChatClient
    model: str
    system_prompt: str | None = None

    async def reply(
        self, message: str, history: list[ChatMessage] | None = None
    ) -> ChatReply:
        """Send the conversation plus the new message and return the reply."""
        if not message.strip():
            raise ValueError("Message is required")
        messages = [
            {"role": turn.role, "content": turn.content} for turn in history or []
        ]
        messages.append({"role": "user", "content": message})
        reply = await self.client.complete(
            model=self.model,
            system_prompt=self.system_prompt,
            messages=messages,
        )
        _logger.info("Chat reply: model=%s turns=%s", self.model, len(messages))
        return reply
