"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import asdict

from fastapi import FastAPI, HTTPException, Request, Response, status
from fastapi.responses import JSONResponse

from ritual_coach.api.models import AgentRequest, NavigationRequest
from ritual_coach.app_logging import configure_logging
from ritual_coach.containers import AppContainer
from ritual_coach.domain.models import Region, RitualProfile, Tradition
from ritual_coach.domain.progress import CorruptRecordError
from ritual_coach.services.env_status import check_environment
from ritual_coach.services.progress import RitualProgressTracker
from ritual_coach.services.timer import RitualTimer
from ritual_coach.services.traditions import (
    get_dietary_guidelines,
    get_regional_variations,
    get_tradition_flow,
)


def create_app(container: AppContainer) -> FastAPI:  # noqa: C901, PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    @app.exception_handler(CorruptRecordError)
    async def corrupt_record_handler(
        request: Request, exc: CorruptRecordError
    ) -> JSONResponse:
        logger.error("Corrupt stored record: key=%s", exc.key)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Stored record is corrupt", "key": exc.key},
        )

    def _container(request: Request) -> AppContainer:
        return request.app.state.container

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/api/env-status")
    async def env_status(request: Request) -> dict[str, object]:
        """Report which providers are configured."""
        report = check_environment(_container(request).settings)
        return {
            "is_valid": report.is_valid,
            "status": {
                name: asdict(provider) for name, provider in report.providers.items()
            },
            "missing_vars": report.missing_vars,
            "errors": report.errors,
        }

    @app.get("/api/profile")
    async def get_profile(request: Request) -> dict[str, object]:
        """Return the stored profile."""
        profile = _container(request).storage.get_profile()
        if profile is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return profile.model_dump()

    @app.put("/api/profile")
    async def put_profile(profile: RitualProfile, request: Request) -> dict[str, object]:
        """Replace the stored profile."""
        state_container = _container(request)
        state_container.storage.save_profile(profile)
        state_container.session_service.discard()
        logger.info(
            "Profile saved: tradition=%s region=%s", profile.tradition, profile.region
        )
        return profile.model_dump()

    @app.get("/api/traditions/{tradition}/flow")
    async def tradition_flow(
        tradition: Tradition, region: Region = "south"
    ) -> dict[str, object]:
        """Return the step flow and guidance for a tradition."""
        flow = get_tradition_flow(tradition, region)
        estimated = sum(step.estimated_minutes for step in flow.steps)
        return {
            "flow": asdict(flow),
            "estimated_minutes": estimated,
            "estimated_label": RitualTimer.format_minutes(estimated),
            "regional_variations": get_regional_variations(tradition, region),
            "dietary_guidelines": get_dietary_guidelines(tradition),
        }

    @app.get("/api/progress/today")
    async def todays_progress(request: Request) -> dict[str, object]:
        """Return today's progress record."""
        storage = _container(request).storage
        progress = storage.get_todays_progress()
        if progress is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return progress.model_dump(by_alias=True)

    @app.get("/api/progress/{day}")
    async def daily_progress(day: str, request: Request) -> dict[str, object]:
        """Return the progress record for an ISO date."""
        progress = _container(request).storage.get_daily_progress(day)
        if progress is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        return progress.model_dump(by_alias=True)

    @app.delete("/api/progress")
    async def clear_progress(request: Request) -> dict[str, str]:
        """Remove every stored ritual record."""
        state_container = _container(request)
        state_container.storage.clear_all_progress()
        state_container.session_service.discard()
        return {"status": "ok"}

    @app.get("/api/ritual/state")
    async def ritual_state(request: Request) -> dict[str, object]:
        """Return the tracker snapshot for today's ritual."""
        tracker = _container(request).session_service.tracker()
        return _tracker_payload(tracker)

    @app.post("/api/ritual/start")
    async def start_ritual(request: Request) -> dict[str, object]:
        """Start today's ritual session."""
        tracker = _container(request).session_service.tracker()
        tracker.start_ritual()
        return _tracker_payload(tracker)

    @app.post("/api/ritual/steps/{step_id}/complete")
    async def complete_step(step_id: str, request: Request) -> dict[str, object]:
        """Mark a step completed."""
        tracker = _container(request).session_service.tracker()
        if tracker.get_step_by_id(step_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        changed = tracker.mark_step_completed(step_id)
        return {"changed": changed, "state": _tracker_payload(tracker)}

    @app.post("/api/ritual/steps/{step_id}/incomplete")
    async def uncomplete_step(step_id: str, request: Request) -> dict[str, object]:
        """Mark a step not completed."""
        tracker = _container(request).session_service.tracker()
        if tracker.get_step_by_id(step_id) is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
        changed = tracker.mark_step_incomplete(step_id)
        return {"changed": changed, "state": _tracker_payload(tracker)}

    @app.post("/api/ritual/navigate")
    async def navigate(
        payload: NavigationRequest, request: Request
    ) -> dict[str, object]:
        """Move the active step pointer."""
        tracker = _container(request).session_service.tracker()
        if payload.action == "next":
            moved = tracker.go_to_next_step()
        elif payload.action == "previous":
            moved = tracker.go_to_previous_step()
        else:
            if payload.index is None:
                raise HTTPException(
                    status_code=status.HTTP_400_BAD_REQUEST,
                    detail="index is required for goto",
                )
            moved = tracker.go_to_step(payload.index)
        return {"moved": moved, "state": _tracker_payload(tracker)}

    @app.get("/api/streak")
    async def streak(request: Request) -> dict[str, object]:
        """Return the completion streak."""
        return _container(request).storage.get_streak().model_dump(by_alias=True)

    @app.get("/api/stats/weekly")
    async def weekly_stats(request: Request) -> dict[str, object]:
        """Return the last seven days of progress."""
        days = _container(request).storage.get_weekly_progress()
        return {"days": [day.model_dump(by_alias=True) for day in days]}

    @app.get("/api/stats/monthly")
    async def monthly_stats(request: Request) -> dict[str, object]:
        """Return month-to-date completion stats."""
        return asdict(_container(request).storage.get_monthly_stats())

    @app.get("/api/export")
    async def export_progress(request: Request) -> Response:
        """Return every stored record for backup."""
        exported = _container(request).storage.export_progress()
        return Response(content=exported, media_type="application/json")

    @app.post("/api/agent")
    async def agent(payload: AgentRequest, request: Request) -> dict[str, object]:
        """Forward a conversation to the configured chat provider."""
        chat_service = _container(request).chat_service
        if chat_service is None:
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="Chat provider is not configured",
            )
        try:
            reply = await chat_service.reply(
                payload.message, payload.conversation_history
            )
        except ValueError as exc:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)
            ) from exc
        except Exception as exc:
            logger.exception("Chat provider request failed")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail="Failed to process request",
            ) from exc
        return {"success": True, "response": reply.content, "usage": reply.usage}

    return app


def _tracker_payload(tracker: RitualProgressTracker) -> dict[str, object]:
    state = tracker.get_state()
    current = tracker.get_current_step()
    return {
        "current_step_index": state.current_step_index,
        "current_step_id": current.id if current else None,
        "completed_steps": sorted(state.completed_steps),
        "is_completed": state.is_completed,
        "total_steps": state.total_steps,
        "estimated_time_remaining": state.estimated_time_remaining,
        "actual_time_spent": state.actual_time_spent,
        "progress_percentage": tracker.get_progress_percentage(),
        "time_stats": asdict(tracker.get_time_stats()),
        "steps": [
            {
                "id": step.id,
                "title": step.title,
                "duration_minutes": step.duration_minutes,
                "status": tracker.get_step_progress(step.id),
            }
            for step in tracker.get_all_steps()
        ],
    }
