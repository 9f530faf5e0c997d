"""PDF export of the weekly report.

Export runs in two phases. ``layout`` draws the title, profile table,
progress bar, status sentence and report body, each block starting at the
bottom of the previous one plus a fixed gap, and lets the canvas paginate the
body. The body is flowed one numbered section at a time and the start of each
section is recorded in the layout. ``finalize`` runs once the page count is
known and stamps the footer on every page.
"""

import logging
import re
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Literal, Protocol

from wellness_tracker.domain.models import Summary, UserProfile, WeeklyLog
from wellness_tracker.domain.progress import progress_view
from wellness_tracker.services.prompts import format_number, split_report_sections

Color = tuple[int, int, int]

TITLE = "Informe Semanal de Bienestar y Progreso"
PROGRESS_HEADING = "Progreso hacia tu Meta"
TABLE_HEAD = ("Dato", "Valor")

MARGIN_X = 14.0
CONTENT_WIDTH = 180.0
TITLE_Y = 22.0
TABLE_Y = 30.0
BAR_HEIGHT = 8.0
FOOTER_OFFSET = 10.0
PAGE_LABEL_INSET = 20.0

TITLE_COLOR: Color = (40, 40, 40)
STATUS_COLOR: Color = (80, 80, 80)
FOOTER_COLOR: Color = (150, 150, 150)
TRACK_COLOR: Color = (230, 230, 230)
FILL_COLOR: Color = (34, 139, 230)

_WHITESPACE = re.compile(r"\s")

_logger = logging.getLogger(__name__)


class DocumentCanvas(Protocol):
    """Primitive drawing operations of a paginated document."""

    def page_size(self) -> tuple[float, float]:
        """Return page width and height."""

    def text(  # noqa: PLR0913
        self,
        x: float,
        y: float,
        text: str,
        *,
        size: float,
        color: Color,
        style: str = "",
        align: Literal["left", "center"] = "left",
    ) -> None:
        """Draw a single line of text with its baseline at y."""

    def table(
        self,
        x: float,
        y: float,
        width: float,
        head: tuple[str, str],
        rows: list[tuple[str, str]],
    ) -> float:
        """Draw a two-column table and return its bottom edge."""

    def fill_rect(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        """Draw a filled rectangle."""

    def flow_html(self, x: float, y: float | None, width: float, html: str) -> None:
        """Flow rich text from (x, y), adding pages as needed.

        A ``None`` y continues below the previously flowed text.
        """

    def position(self) -> tuple[int, float]:
        """Return the current page and vertical cursor."""

    def page_count(self) -> int:
        """Return the number of pages laid out so far."""

    def select_page(self, page: int) -> None:
        """Make a 1-based page current for further drawing."""

    def save(self, path: Path) -> None:
        """Write the document to path."""


@dataclass(frozen=True)
class SectionAnchor:
    """Where a report section starts in the document."""

    name: str
    page: int
    y: float


@dataclass(frozen=True)
class DocumentLayout:
    """Vertical position of every block and the resulting page count."""

    title_y: float
    table_top: float
    table_bottom: float
    progress_heading_y: float
    bar_y: float
    status_y: float
    body_y: float
    progress: float
    page_count: int
    sections: tuple[SectionAnchor, ...] = ()


@dataclass(frozen=True)
class ExportResult:
    """Location and shape of an exported document."""

    path: Path
    page_count: int
    layout: DocumentLayout


def export_filename(name: str) -> str:
    """Return the download file name for a user."""
    slug = _WHITESPACE.sub("_", name)
    return f"resumen_fitness_{slug}.pdf"


def profile_rows(profile: UserProfile) -> list[tuple[str, str]]:
    """Return the label/value rows of the profile table."""
    return [
        ("Nombre", profile.name),
        ("Edad", str(profile.age)),
        ("Objetivo Principal", profile.objective),
        ("Peso Inicial", f"{format_number(profile.initial_weight)} kg"),
        ("Peso Meta", f"{format_number(profile.weight_goal)} kg"),
    ]


def footer_lines(name: str, today: date, page: int, total: int) -> tuple[str, str]:
    """Return the centered and right-hand footer text of a page."""
    return (
        f"Informe generado para {name} el {today.strftime('%d/%m/%Y')}",
        f"Página {page} de {total}",
    )


@dataclass
class ReportExporter:
    """Render profile, progress and the generated report into a PDF."""

    canvas_factory: Callable[[], DocumentCanvas]
    output_dir: Path

    def export(
        self,
        profile: UserProfile,
        week: WeeklyLog,
        summary: Summary,
        today: date,
    ) -> ExportResult:
        """Lay out, finalize and save the document."""
        canvas = self.canvas_factory()
        layout = self.layout(canvas, profile, week, summary)
        self.finalize(canvas, layout, profile.name, today)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        path = self.output_dir / export_filename(profile.name)
        canvas.save(path)
        _logger.info("Exported report: path=%s pages=%s", path, layout.page_count)
        return ExportResult(path=path, page_count=layout.page_count, layout=layout)

    def layout(
        self,
        canvas: DocumentCanvas,
        profile: UserProfile,
        week: WeeklyLog,
        summary: Summary,
    ) -> DocumentLayout:
        """Draw all primary content and measure the page count."""
        canvas.text(MARGIN_X, TITLE_Y, TITLE, size=18, color=TITLE_COLOR)

        table_bottom = canvas.table(
            MARGIN_X, TABLE_Y, CONTENT_WIDTH, TABLE_HEAD, profile_rows(profile)
        )

        view = progress_view(profile, week)
        heading_y = table_bottom + 10
        canvas.text(
            MARGIN_X, heading_y, PROGRESS_HEADING, size=10, color=TITLE_COLOR
        )
        bar_y = table_bottom + 12
        canvas.fill_rect(MARGIN_X, bar_y, CONTENT_WIDTH, BAR_HEIGHT, TRACK_COLOR)
        fill_width = CONTENT_WIDTH * view.progress / 100
        if fill_width > 0:
            canvas.fill_rect(MARGIN_X, bar_y, fill_width, BAR_HEIGHT, FILL_COLOR)
        status_y = table_bottom + 25
        canvas.text(MARGIN_X, status_y, view.status, size=10, color=STATUS_COLOR)

        body_y = table_bottom + 30 + 5
        sections = self._flow_report(canvas, body_y, summary.content)

        return DocumentLayout(
            title_y=TITLE_Y,
            table_top=TABLE_Y,
            table_bottom=table_bottom,
            progress_heading_y=heading_y,
            bar_y=bar_y,
            status_y=status_y,
            body_y=body_y,
            progress=view.progress,
            page_count=canvas.page_count(),
            sections=sections,
        )

    def _flow_report(
        self, canvas: DocumentCanvas, body_y: float, content: str
    ) -> tuple[SectionAnchor, ...]:
        anchors: list[SectionAnchor] = []
        start: float | None = body_y
        for name, html in split_report_sections(content).blocks():
            if not html:
                continue
            page, cursor = canvas.position()
            y = cursor if start is None else start
            anchors.append(SectionAnchor(name=name, page=page, y=y))
            canvas.flow_html(MARGIN_X, start, CONTENT_WIDTH, html)
            start = None
        return tuple(anchors)

    def finalize(
        self, canvas: DocumentCanvas, layout: DocumentLayout, name: str, today: date
    ) -> None:
        """Stamp "page i of N" footers once the total is known."""
        width, height = canvas.page_size()
        footer_y = height - FOOTER_OFFSET
        for page in range(1, layout.page_count + 1):
            canvas.select_page(page)
            generated, numbering = footer_lines(name, today, page, layout.page_count)
            canvas.text(
                width / 2,
                footer_y,
                generated,
                size=8,
                color=FOOTER_COLOR,
                style="I",
                align="center",
            )
            canvas.text(
                width - PAGE_LABEL_INSET,
                footer_y,
                numbering,
                size=8,
                color=FOOTER_COLOR,
            )
