"""Shared test fixtures."""

from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta

import pytest

from ritual_coach.config import Settings
from ritual_coach.containers import AppContainer
from ritual_coach.domain.chat import ChatReply
from ritual_coach.domain.models import RitualStep
from ritual_coach.domain.timer import TimerState
from ritual_coach.services.chat import ChatClient, ChatService
from ritual_coach.services.kv_store import InMemoryKeyValueStore
from ritual_coach.services.sessions import RitualSessionService
from ritual_coach.services.storage import RitualStorage
from ritual_coach.services.timer import BaseTimerListener


@dataclass
class FixedClock:
    """Clock returning a settable aware datetime."""

    now: datetime = field(default_factory=lambda: datetime(2024, 1, 1, 9, tzinfo=UTC))

    def __call__(self) -> datetime:
        return self.now

    def set_day(self, year: int, month: int, day: int) -> None:
        self.now = datetime(year, month, day, 9, tzinfo=UTC)

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


@dataclass
class ManualMsClock:
    """Millisecond clock advanced by hand."""

    value: int = 0

    def __call__(self) -> int:
        return self.value

    def advance(self, milliseconds: int) -> None:
        self.value += milliseconds


@dataclass
class RecordingTimerListener(BaseTimerListener):
    """Listener that records every event name."""

    events: list[str] = field(default_factory=list)
    ticks: list[TimerState] = field(default_factory=list)

    def on_tick(self, state: TimerState) -> None:
        self.events.append("tick")
        self.ticks.append(state)

    def on_complete(self) -> None:
        self.events.append("complete")

    def on_start(self) -> None:
        self.events.append("start")

    def on_pause(self) -> None:
        self.events.append("pause")

    def on_resume(self) -> None:
        self.events.append("resume")

    def on_reset(self) -> None:
        self.events.append("reset")


@dataclass
class CountingStorage(RitualStorage):
    """Storage that counts ritual completion calls."""

    completions: list[tuple[int, int | None]] = field(default_factory=list)

    def mark_ritual_completed(
        self, total_steps: int, duration: int | None = None
    ) -> None:
        self.completions.append((total_steps, duration))
        super().mark_ritual_completed(total_steps, duration)


@dataclass
class FakeChatClient(ChatClient):
    """Chat client that records requests and returns a fixed reply."""

    content: str = "Om Namah Shivaya"
    requests: list[dict[str, object]] = field(default_factory=list)
    error: Exception | None = None

    async def complete(
        self,
        *,
        model: str,
        system_prompt: str | None,
        messages: list[dict[str, str]],
    ) -> ChatReply:
        self.requests.append(
            {"model": model, "system_prompt": system_prompt, "messages": messages}
        )
        if self.error is not None:
            raise self.error
        return ChatReply(content=self.content, usage={"output_tokens": 3})


def make_steps() -> list[RitualStep]:
    return [
        RitualStep(id="A", title="Sankalpa", description="Intention", duration_minutes=5),
        RitualStep(id="B", title="Puja", description="Worship", duration_minutes=10),
        RitualStep(id="C", title="Arati", description="Light", duration_minutes=5),
    ]


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def storage(store: InMemoryKeyValueStore, clock: FixedClock) -> RitualStorage:
    return RitualStorage(store, clock=clock)


@pytest.fixture
def steps() -> list[RitualStep]:
    return make_steps()


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep exported settings such as ANTHROPIC_API_KEY out of tests."""
    for name in Settings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        storage_backend="memory",
        chat_provider="openai",
        openai_api_key="sk-test-key",
        anthropic_api_key=None,
        _env_file=None,
    )


@pytest.fixture
def chat_client() -> FakeChatClient:
    return FakeChatClient()


@pytest.fixture
def container(
    settings: Settings,
    store: InMemoryKeyValueStore,
    storage: RitualStorage,
    chat_client: FakeChatClient,
) -> AppContainer:
    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        store=store,
        storage=storage,
        session_service=RitualSessionService(storage),
        chat_service=ChatService(client=chat_client, model="test-model"),
        close_resources=close_resources,
    )
