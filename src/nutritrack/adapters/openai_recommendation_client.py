"""OpenAI Responses API client for meal recommendations."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from nutritrack.services.recommendations import RecommendationClient


@dataclass
class OpenAIRecommendationClient(RecommendationClient):
    """Recommendation client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    store: bool = False

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float, store: bool = False
    ) -> "OpenAIRecommendationClient":
        """Create an OpenAI client with a bounded request timeout."""
        return cls(
            client=AsyncOpenAI(api_key=api_key, timeout=timeout_seconds, max_retries=0),
            store=store,
        )

    async def generate(self, *, model: str, prompt: str) -> str:
        """Call OpenAI Responses API and return the output text."""
        response = await self.client.responses.create(
            model=model,
            input=prompt,
            store=self.store,
        )
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
