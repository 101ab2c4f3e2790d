"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from nutritrack.api.meals import router as meals_router
from nutritrack.api.reminders import router as reminders_router
from nutritrack.api.users import router as users_router
from nutritrack.app_logging import configure_logging
from nutritrack.containers import AppContainer
from nutritrack.services.meals import InvalidMealError
from nutritrack.services.reminders import InvalidReminderError
from nutritrack.services.users import (
    InvalidGoalsError,
    InvalidPushTokenError,
    InvalidTimezoneError,
)

_VALIDATION_ERRORS = (
    InvalidGoalsError,
    InvalidMealError,
    InvalidPushTokenError,
    InvalidReminderError,
    InvalidTimezoneError,
)


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        state_container: AppContainer = app.state.container
        if state_container.settings.reminders_enabled:
            state_container.reminder_scheduler.start()
        else:
            logger.info("Reminder scheduler disabled")
        yield
        await state_container.reminder_scheduler.stop()
        await state_container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container

    async def validation_error(request: Request, exc: Exception) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)}
        )

    for error in _VALIDATION_ERRORS:
        app.add_exception_handler(error, validation_error)

    app.include_router(users_router)
    app.include_router(meals_router)
    app.include_router(reminders_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    return app
