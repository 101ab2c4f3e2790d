"""Expo push notification gateway client."""

from dataclasses import dataclass

import httpx

from nutritrack.services.push import PushClient

EXPO_PUSH_URL = "https://exp.host/--/api/v2/push/send"


@dataclass
class HttpxExpoPushClient(PushClient):
    """Expo push client implemented with httpx."""

    http_client: httpx.AsyncClient
    push_url: str = EXPO_PUSH_URL
    access_token: str | None = None
    timeout_seconds: float = 10

    @classmethod
    def create(
        cls,
        push_url: str = EXPO_PUSH_URL,
        access_token: str | None = None,
        timeout_seconds: float = 10,
    ) -> "HttpxExpoPushClient":
        """Create a push client with a managed httpx session."""
        return cls(
            http_client=httpx.AsyncClient(),
            push_url=push_url,
            access_token=access_token,
            timeout_seconds=timeout_seconds,
        )

    async def send(
        self, token: str, title: str, body: str, data: dict[str, object]
    ) -> dict[str, object]:
        """Send one notification and return its push ticket."""
        headers = {"Accept": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        payload = [
            {
                "to": token,
                "sound": "default",
                "title": title,
                "body": body,
                "data": data,
            }
        ]
        response = await self.http_client.post(
            self.push_url,
            json=payload,
            headers=headers,
            timeout=self.timeout_seconds,
        )
        response.raise_for_status()
        tickets = response.json().get("data") or []
        if not tickets:
            raise RuntimeError("Expo returned no push ticket")
        return tickets[0]

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.http_client.aclose()
