"""Shared test fixtures."""

import asyncio
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from wellness_tracker.config import Settings
from wellness_tracker.domain.errors import PersistenceError
from wellness_tracker.domain.models import ProfileDraft, UserProfile
from wellness_tracker.services.export import Color, DocumentCanvas, ReportExporter
from wellness_tracker.services.reports import ReportClient, ReportService
from wellness_tracker.services.state import PersistentState, StateStore
from wellness_tracker.services.tracker import TrackingController

REPORT_HTML = (
    "<h3>¡Tu Informe Semanal de Bienestar y Progreso!</h3>"
    "<p>Gran semana.</p>"
    "<h4>1. Datos del Usuario</h4><table><tr><td>Dato</td><td>Valor</td></tr></table>"
    "<h4>2. Análisis Diario</h4><h5>Jueves</h5><p>Peso estable.</p>"
    "<h4>3. Resumen General y Recomendaciones</h4><ul><li>Dormir más</li></ul>"
)


@dataclass
class InMemoryStateStore(StateStore):
    """In-memory state store for tests."""

    values: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def clear(self, key: str) -> None:
        self.values.pop(key, None)


@dataclass
class FailingStateStore(StateStore):
    """State store whose every operation fails."""

    def get(self, key: str) -> str | None:
        raise PersistenceError("read failed")

    def set(self, key: str, value: str) -> None:
        raise PersistenceError("write failed")

    def clear(self, key: str) -> None:
        raise OSError("disk gone")


@dataclass
class FakeReportClient(ReportClient):
    """Fake report client returning a fixed payload."""

    payload: str = REPORT_HTML
    error: Exception | None = None
    prompts: list[str] = field(default_factory=list)
    gate: asyncio.Event | None = None

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        reasoning_effort: str | None,
        store: bool,
    ) -> str:
        self.prompts.append(prompt)
        if self.gate is not None:
            await self.gate.wait()
        if self.error is not None:
            raise self.error
        return self.payload


@dataclass
class RecordingCanvas(DocumentCanvas):
    """Canvas that records drawing calls and paginates by text length."""

    width: float = 210.0
    height: float = 297.0
    row_height: float = 7.0
    chars_per_page: int = 400
    pages: int = 1
    current_page: int = 1
    cursor_y: float = 0.0
    block_height: float = 20.0
    calls: list[tuple[object, ...]] = field(default_factory=list)
    saved_to: Path | None = None

    def page_size(self) -> tuple[float, float]:
        return self.width, self.height

    def text(  # noqa: PLR0913
        self,
        x: float,
        y: float,
        text: str,
        *,
        size: float,
        color: Color,
        style: str = "",
        align: str = "left",
    ) -> None:
        self.calls.append(("text", self.current_page, x, y, text, align))

    def table(
        self,
        x: float,
        y: float,
        width: float,
        head: tuple[str, str],
        rows: list[tuple[str, str]],
    ) -> float:
        self.calls.append(("table", self.current_page, x, y, head, rows))
        return y + self.row_height * (len(rows) + 1)

    def fill_rect(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        self.calls.append(("rect", self.current_page, x, y, width, height, color))

    def flow_html(self, x: float, y: float | None, width: float, html: str) -> None:
        self.calls.append(("html", self.current_page, x, y, html))
        self.pages += len(html) // self.chars_per_page
        self.current_page = self.pages
        start = self.cursor_y if y is None else y
        self.cursor_y = start + self.block_height

    def position(self) -> tuple[int, float]:
        return self.current_page, self.cursor_y

    def page_count(self) -> int:
        return self.pages

    def select_page(self, page: int) -> None:
        self.calls.append(("page", page))
        self.current_page = page

    def save(self, path: Path) -> None:
        self.calls.append(("save", path))
        self.saved_to = path

    def texts(self) -> list[tuple[object, ...]]:
        return [call for call in self.calls if call[0] == "text"]


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        state_dir=str(tmp_path / "state"),
        report_dir=str(tmp_path / "reports"),
    )


@pytest.fixture
def profile() -> UserProfile:
    return UserProfile(
        name="Ana María",
        age=34,
        objective="Perder grasa",
        initial_weight=80,
        weight_goal=70,
    )


@pytest.fixture
def state_store() -> InMemoryStateStore:
    return InMemoryStateStore()


@pytest.fixture
def report_client() -> FakeReportClient:
    return FakeReportClient()


@pytest.fixture
def canvases() -> list[RecordingCanvas]:
    return []


@pytest.fixture
def exporter(tmp_path: Path, canvases: list[RecordingCanvas]) -> ReportExporter:
    def factory() -> RecordingCanvas:
        canvas = RecordingCanvas()
        canvases.append(canvas)
        return canvas

    return ReportExporter(canvas_factory=factory, output_dir=tmp_path / "reports")


@pytest.fixture
def controller(
    state_store: InMemoryStateStore,
    report_client: FakeReportClient,
    exporter: ReportExporter,
) -> TrackingController:
    reports = ReportService(
        client=report_client, model="gpt-5.2", reasoning_effort="low", store=False
    )
    return TrackingController.restore(PersistentState(state_store), reports, exporter)


@pytest.fixture
def tracking(
    controller: TrackingController, profile: UserProfile
) -> TrackingController:
    """Controller with a saved profile, on the tracker view."""
    controller.update_profile_draft(**ProfileDraft.from_profile(profile).model_dump())
    controller.save_profile()
    return controller
