"""OpenAI Responses API client for report generation."""

from dataclasses import dataclass

import httpx
from openai import AsyncOpenAI

from wellness_tracker.services.reports import ReportClient


@dataclass
class OpenAIReportClient(ReportClient):
    """Report client backed by OpenAI Responses API."""

    client: AsyncOpenAI

    @classmethod
    def create(
        cls, api_key: str, timeout_seconds: float = 60.0
    ) -> "OpenAIReportClient":
        """Create a client with a managed httpx session and no SDK retries."""
        http_client = httpx.AsyncClient(timeout=timeout_seconds)
        return cls(
            client=AsyncOpenAI(
                api_key=api_key, http_client=http_client, max_retries=0
            )
        )

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        reasoning_effort: str | None,
        store: bool,
    ) -> str:
        """Send prompt as a single user input and return the output text."""
        request_payload: dict[str, object] = {
            "model": model,
            "input": prompt,
            "store": store,
        }
        if reasoning_effort:
            request_payload["reasoning"] = {"effort": reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise RuntimeError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.client.close()
