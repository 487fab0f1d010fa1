"""Configuration health report for the front end."""

from dataclasses import dataclass, field

from ritual_coach.config import Settings

_PLACEHOLDER_KEYS = {"your_openai_api_key_here", "your_anthropic_api_key_here"}


@dataclass(frozen=True)
class ProviderStatus:
    """Whether a provider is configured and its key looks valid."""

    configured: bool
    has_valid_key: bool


@dataclass
class EnvironmentStatus:
    """Summary of missing or invalid settings."""

    providers: dict[str, ProviderStatus] = field(default_factory=dict)
    missing_vars: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.missing_vars and not self.errors


def check_environment(settings: Settings) -> EnvironmentStatus:
    """Validate the settings needed by the selected backends."""
    status = EnvironmentStatus()

    openai_key = settings.openai_api_key
    status.providers["openai"] = ProviderStatus(
        configured=bool(openai_key),
        has_valid_key=_looks_valid(openai_key, "sk-"),
    )
    anthropic_key = settings.anthropic_api_key
    status.providers["anthropic"] = ProviderStatus(
        configured=bool(anthropic_key),
        has_valid_key=_looks_valid(anthropic_key, "sk-ant-"),
    )
    status.providers["supabase"] = ProviderStatus(
        configured=bool(settings.supabase_url and settings.supabase_service_key),
        has_valid_key=bool(settings.supabase_service_key),
    )

    selected_key = "OPENAI_API_KEY"
    selected = status.providers["openai"]
    if settings.chat_provider == "anthropic":
        selected_key = "ANTHROPIC_API_KEY"
        selected = status.providers["anthropic"]
    if not selected.configured:
        status.missing_vars.append(selected_key)
    elif not selected.has_valid_key:
        status.errors.append(f"{selected_key} is not a valid key")

    if settings.storage_backend == "supabase":
        if not settings.supabase_url:
            status.missing_vars.append("SUPABASE_URL")
        if not settings.supabase_service_key:
            status.missing_vars.append("SUPABASE_SERVICE_KEY")
    return status


def _looks_valid(key: str | None, prefix: str) -> bool:
    if not key or key in _PLACEHOLDER_KEYS:
        return False
    return key.startswith(prefix)
