"""Tests for report generation."""

import asyncio

import httpx
import pytest

from wellness_tracker.adapters.openai_report_client import OpenAIReportClient
from wellness_tracker.domain.errors import GenerationError
from wellness_tracker.services.reports import ReportService
from tests.conftest import REPORT_HTML, FakeReportClient


class _FakeResponses:
    def __init__(self, output_text: str) -> None:
        self.output_text = output_text
        self.last_payload: dict[str, object] | None = None

    async def create(self, **kwargs):  # type: ignore[no-untyped-def]
        self.last_payload = kwargs
        return type("Resp", (), {"output_text": self.output_text})()


class _FakeOpenAI:
    def __init__(self, output_text: str = "<h3>Informe</h3>") -> None:
        self.responses = _FakeResponses(output_text)


def _service(client: FakeReportClient) -> ReportService:
    return ReportService(
        client=client, model="gpt-5.2", reasoning_effort="low", store=False
    )


def test_generate_returns_content() -> None:
    client = FakeReportClient()

    content = asyncio.run(_service(client).generate("prompt"))

    assert content == REPORT_HTML
    assert client.prompts == ["prompt"]


def test_generate_strips_code_fence() -> None:
    client = FakeReportClient(payload="```html\n<h3>Hola</h3>\n```")

    content = asyncio.run(_service(client).generate("prompt"))

    assert content == "<h3>Hola</h3>"


def test_provider_failure_raises_generation_error() -> None:
    client = FakeReportClient(error=httpx.ConnectError("offline"))

    with pytest.raises(GenerationError):
        asyncio.run(_service(client).generate("prompt"))

    assert len(client.prompts) == 1


def test_blank_output_raises_generation_error() -> None:
    client = FakeReportClient(payload="   ")

    with pytest.raises(GenerationError):
        asyncio.run(_service(client).generate("prompt"))


def test_openai_client_sends_single_input() -> None:
    fake = _FakeOpenAI()
    client = OpenAIReportClient(client=fake)  # type: ignore[arg-type]

    text = asyncio.run(
        client.complete(
            model="gpt-5.2", prompt="Resume mi semana", reasoning_effort="low", store=False
        )
    )

    assert text == "<h3>Informe</h3>"
    assert fake.responses.last_payload == {
        "model": "gpt-5.2",
        "input": "Resume mi semana",
        "store": False,
        "reasoning": {"effort": "low"},
    }


def test_openai_client_omits_empty_reasoning() -> None:
    fake = _FakeOpenAI()
    client = OpenAIReportClient(client=fake)  # type: ignore[arg-type]

    asyncio.run(
        client.complete(model="m", prompt="p", reasoning_effort=None, store=True)
    )

    assert "reasoning" not in fake.responses.last_payload  # type: ignore[operator]


def test_openai_client_rejects_empty_output() -> None:
    client = OpenAIReportClient(client=_FakeOpenAI(output_text=""))  # type: ignore[arg-type]

    with pytest.raises(RuntimeError):
        asyncio.run(
            client.complete(model="m", prompt="p", reasoning_effort=None, store=False)
        )


def test_openai_client_create_and_close() -> None:
    client = OpenAIReportClient.create("openai-key", timeout_seconds=5)

    asyncio.run(client.close())


def test_generate_extracts_fenced_block_after_preamble() -> None:
    client = FakeReportClient(
        payload="Aquí tienes tu informe:\n```html\n<h3>Hola</h3>\n```\n¡Ánimo!"
    )

    content = asyncio.run(_service(client).generate("prompt"))

    assert content == "<h3>Hola</h3>"
