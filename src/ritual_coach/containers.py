"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from ritual_coach.adapters.anthropic_chat_client import HttpxAnthropicChatClient
from ritual_coach.adapters.json_file_store import JsonFileKeyValueStore
from ritual_coach.adapters.openai_chat_client import OpenAIChatClient
from ritual_coach.adapters.supabase_kv_store import SupabaseKeyValueStore
from ritual_coach.config import Settings
from ritual_coach.services.chat import ChatService
from ritual_coach.services.kv_store import InMemoryKeyValueStore, KeyValueStore
from ritual_coach.services.sessions import RitualSessionService
from ritual_coach.services.storage import RitualStorage, zoned_clock


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    store: KeyValueStore
    storage: RitualStorage
    session_service: RitualSessionService
    chat_service: ChatService | None
    close_resources: Callable[[], Awaitable[None]]


def build_store(settings: Settings) -> KeyValueStore:
    """Create the key-value store selected by settings."""
    if settings.storage_backend == "memory":
        return InMemoryKeyValueStore()
    if settings.storage_backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseKeyValueStore(client, table=settings.supabase_table)
    return JsonFileKeyValueStore(Path(settings.storage_path))


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    store = build_store(resolved_settings)
    storage = RitualStorage(store, clock=zoned_clock(resolved_settings.timezone))
    session_service = RitualSessionService(storage)

    chat_service: ChatService | None = None
    openai_client: OpenAIChatClient | None = None
    anthropic_client: HttpxAnthropicChatClient | None = None
    if resolved_settings.chat_provider == "anthropic":
        if resolved_settings.anthropic_api_key:
            anthropic_client = HttpxAnthropicChatClient.create(
                api_key=resolved_settings.anthropic_api_key,
                base_url=resolved_settings.anthropic_base_url,
                max_tokens=resolved_settings.anthropic_max_tokens,
            )
            chat_service = ChatService(
                client=anthropic_client,
                model=resolved_settings.anthropic_model,
                system_prompt=resolved_settings.agent_system_prompt,
            )
    elif resolved_settings.openai_api_key:
        openai_client = OpenAIChatClient.create(resolved_settings.openai_api_key)
        chat_service = ChatService(
            client=openai_client,
            model=resolved_settings.openai_model,
            system_prompt=resolved_settings.agent_system_prompt,
        )

    async def close_resources() -> None:
        if openai_client is not None:
            await openai_client.close()
        if anthropic_client is not None:
            await anthropic_client.close()

    return AppContainer(
        settings=resolved_settings,
        store=store,
        storage=storage,
        session_service=session_service,
        chat_service=chat_service,
        close_resources=close_resources,
    )
