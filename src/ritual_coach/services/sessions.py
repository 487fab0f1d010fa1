"""Ritual session bookkeeping for the API."""

from dataclasses import dataclass, field

from ritual_coach.domain.models import TraditionFlow
from ritual_coach.services.progress import RitualProgressTracker
from ritual_coach.services.storage import RitualStorage
from ritual_coach.services.traditions import get_tradition_flow

DEFAULT_TRADITION = "andhra_smarta"
DEFAULT_REGION = "south"


@dataclass
class RitualSessionService:
    """Keeps one progress tracker per flow and calendar day."""

    storage: RitualStorage
    _tracker: RitualProgressTracker | None = field(default=None, init=False)
    _tracker_key: tuple[str, str] | None = field(default=None, init=False)

    def current_flow(self) -> TraditionFlow:
        """Return the flow for the stored profile, or the default flow."""
        profile = self.storage.get_profile()
        if profile is None:
            return get_tradition_flow(DEFAULT_TRADITION, DEFAULT_REGION)
        return get_tradition_flow(profile.tradition, profile.region)

    def tracker(self) -> RitualProgressTracker:
        """Return today's tracker, rebuilding it when the flow or day changes."""
        flow = self.current_flow()
        key = (flow.name, self.storage.today())
        if self._tracker is None or self._tracker_key != key:
            self._tracker = RitualProgressTracker(flow.steps, self.storage)
            self._tracker_key = key
        return self._tracker

    def discard(self) -> None:
        """Forget the cached tracker so the next call reloads from storage."""
        self._tracker = None
        self._tracker_key = None
