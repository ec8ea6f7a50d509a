"""OpenAI Responses API client for meal recognition."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from food_tracker.services.recognition import RecognitionClient


@dataclass
class OpenAIRecognitionClient(RecognitionClient):
    """Recognition client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    reasoning_effort: str | None = None
    store: bool = False

    @classmethod
    def create(
        cls,
        api_key: str,
        *,
        reasoning_effort: str | None = None,
        store: bool = False,
        timeout_seconds: float = 60.0,
    ) -> "OpenAIRecognitionClient":
        """Create an OpenAI client with a managed httpx session."""
        http_client = httpx.AsyncClient(timeout=timeout_seconds)
        return cls(
            client=AsyncOpenAI(api_key=api_key, http_client=http_client),
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def recognize(
        self,
        *,
        model: str,
        image_data_url: str,
        prompt: str,
    ) -> str:
        """Call OpenAI Responses API and return the raw output text."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": [
                {
                    "role": "user",
                    "content": [
                        {"type": "input_text", "text": prompt},
                        {"type": "input_image", "image_url": image_data_url},
                    ],
                }
            ],
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP client session."""
        await self.client.close()
