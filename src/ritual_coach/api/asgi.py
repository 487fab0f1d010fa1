"""ASGI entrypoint for the ritual coach API."""

from ritual_coach.api.app import create_app
from ritual_coach.containers import build_container

app = create_app(build_container())
