"""Push notification dispatch."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

_logger = logging.getLogger(__name__)

_EXPO_TOKEN_PATTERN = re.compile(r"^Expo(nent)?PushToken\[.+\]$")

DEFAULT_TITLE = "Meal Reminder"

# Expo ticket error for an uninstalled app; the token will never work again.
DEVICE_NOT_REGISTERED = "DeviceNotRegistered"


class PushClient(Protocol):
    """Interface for the push notification gateway."""

    async def send(
        self, token: str, title: str, body: str, data: dict[str, object]
    ) -> dict[str, object]:
        """Send one notification and return the gateway ticket."""


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a single push dispatch."""

    ok: bool
    error: str | None = None
    ticket_id: str | None = None

    @property
    def device_gone(self) -> bool:
        """Return True when the gateway reports the token as permanently dead."""
        return self.error == DEVICE_NOT_REGISTERED


def is_expo_push_token(token: str) -> bool:
    """Return True for ExponentPushToken[...] / ExpoPushToken[...] strings."""
    return bool(_EXPO_TOKEN_PATTERN.match(token))


@dataclass
class PushDispatcher:
    """Delegates notifications to the push gateway and reports the outcome.

    Never raises. A failed result means nothing should be recorded as sent,
    so the next scheduler tick retries.
    """

    client: PushClient

    async def dispatch(
        self, token: str, body: str, title: str = DEFAULT_TITLE
    ) -> DispatchResult:
        """Send a notification to a device token."""
        if not is_expo_push_token(token):
            _logger.warning("Skipping push to invalid token")
            return DispatchResult(ok=False, error="InvalidPushToken")
        try:
            ticket = await self.client.send(token, title, body, {"message": body})
        except Exception as exc:
            _logger.warning("Push dispatch failed: %s", exc)
            return DispatchResult(ok=False, error=type(exc).__name__)

        if ticket.get("status") != "ok":
            details = ticket.get("details")
            error = details.get("error") if isinstance(details, dict) else None
            _logger.warning(
                "Push gateway rejected notification: %s",
                ticket.get("message") or error,
            )
            return DispatchResult(ok=False, error=str(error or "PushRejected"))
        ticket_id = ticket.get("id")
        return DispatchResult(ok=True, ticket_id=str(ticket_id) if ticket_id else None)
