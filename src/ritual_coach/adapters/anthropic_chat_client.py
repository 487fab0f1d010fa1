"""Anthropic Messages API client for the chat proxy."""

from dataclasses import dataclass

import httpx

from ritual_coach.domain.chat import ChatReply
from ritual_coach.services.chat import ChatClient

ANTHROPIC_VERSION = "2023-06-01"


@dataclass
class HttpxAnthropicChatClient(ChatClient):
    """HTTPX-backed client for the Anthropic Messages API."""

    api_key: str
    base_url: str
    http_client: httpx.AsyncClient
    max_tokens: int = 1024

    @classmethod
    def create(
        cls, api_key: str, base_url: str, max_tokens: int = 1024
    ) -> "HttpxAnthropicChatClient":
        """Create a client with a managed httpx session."""
        return cls(
            api_key=api_key,
            base_url=base_url,
            http_client=httpx.AsyncClient(),
            max_tokens=max_tokens,
        )

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str | None,
        messages: list[dict[str, str]],
    ) -> ChatReply:
        """Send the conversation and join the text blocks of the reply."""
        payload: dict[str, object] = {
            "model": model,
            "max_tokens": self.max_tokens,
            "messages": messages,
        }
        if system_prompt:
            payload["system"] = system_prompt
        response = await self.http_client.post(
            f"{self.base_url}/v1/messages",
            headers={
                "x-api-key": self.api_key,
                "anthropic-version": ANTHROPIC_VERSION,
            },
            json=payload,
            timeout=30,
        )
        response.raise_for_status()
        data = response.json()
        content = "".join(
            str(block.get("text", ""))
            for block in data.get("content", [])
            if block.get("type") == "text"
        )
        usage = data.get("usage")
        return ChatReply(
            content=content,
            usage=(
                {
                    key: value
                    for key, value in usage.items()
                    if isinstance(value, int)
                }
                if isinstance(usage, dict)
                else None
            ),
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
