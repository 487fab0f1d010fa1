"""OpenAI Chat Completions client for the chat proxy."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from ritual_coach.domain.chat import ChatReply
from ritual_coach.services.chat import ChatClient


@dataclass
class OpenAIChatClient(ChatClient):
    """Chat client backed by the OpenAI SDK."""

    client: AsyncOpenAI

    @classmethod
    def create(cls, api_key: str) -> "OpenAIChatClient":
        """Create an OpenAI chat client."""
        return cls(client=AsyncOpenAI(api_key=api_key))

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str | None,
        messages: list[dict[str, str]],
    ) -> ChatReply:
        """Call Chat Completions and return the first choice."""
        request_messages: list[dict[str, str]] = []
        if system_prompt:
            request_messages.append({"role": "system", "content": system_prompt})
        request_messages.extend(messages)

        completion = await self.client.chat.completions.create(
            model=model, messages=request_messages
        )
        if not completion.choices:
            raise RuntimeError("OpenAI returned no choices")
        content = completion.choices[0].message.content or ""
        usage = None
        if completion.usage is not None:
            usage = {
                "input_tokens": completion.usage.prompt_tokens,
                "output_tokens": completion.usage.completion_tokens,
            }
        return ChatReply(content=content, usage=usage)

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
