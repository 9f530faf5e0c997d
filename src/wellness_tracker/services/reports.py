"""Weekly report generation through a text-completion provider."""

import logging
import re
from dataclasses import dataclass
from typing import Protocol

from wellness_tracker.domain.errors import GenerationError

_FENCE = re.compile(r"```[a-zA-Z]*[ \t]*\n(?P<body>.*?)\n?```", re.DOTALL)

_logger = logging.getLogger(__name__)


class ReportClient(Protocol):
    """Interface for single request/response text completion."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        reasoning_effort: str | None,
        store: bool,
    ) -> str:
        """Return the generated text for prompt."""


@dataclass
class ReportService:
    """Service that issues one generation request per call."""

    client: ReportClient
    model: str
    reasoning_effort: str | None
    store: bool

    async def generate(self, prompt: str) -> str:
        """Generate report HTML, raising ``GenerationError`` on any failure."""
        try:
            text = await self.client.complete(
                model=self.model,
                prompt=prompt,
                reasoning_effort=self.reasoning_effort,
                store=self.store,
            )
        except Exception as exc:
            _logger.exception("Report generation failed: model=%s", self.model)
            raise GenerationError("Report generation failed") from exc
        content = _strip_code_fence(text or "")
        if not content:
            _logger.warning("Empty report content: model=%s", self.model)
            raise GenerationError("Report generation returned no content")
        return content


def _strip_code_fence(text: str) -> str:
    """Return the body of the first Markdown code fence, or the whole answer."""
    stripped = text.strip()
    match = _FENCE.search(stripped)
    if match:
        return match.group("body").strip()
    return stripped
