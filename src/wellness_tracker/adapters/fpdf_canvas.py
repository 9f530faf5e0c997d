"""fpdf2 implementation of the document canvas."""

from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from fpdf import FPDF
from fpdf.fonts import FontFace

from wellness_tracker.services.export import Color, DocumentCanvas

FONT_FAMILY = "helvetica"
HEAD_FILL: Color = (22, 72, 99)
ROW_FILL: Color = (245, 245, 245)
BODY_COLOR: Color = (0, 0, 0)

# Core PDF fonts only cover latin-1.
_REPLACEMENTS = {
    "—": "-",
    "–": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "…": "...",
    "•": "-",
    "\u00a0": " ",
}


def to_latin1(text: str) -> str:
    """Map text onto the latin-1 range supported by core fonts."""
    for source, target in _REPLACEMENTS.items():
        text = text.replace(source, target)
    return text.encode("latin-1", "replace").decode("latin-1")


@dataclass
class FpdfCanvas(DocumentCanvas):
    """A4 portrait canvas in millimetres."""

    pdf: FPDF

    @classmethod
    def create(
        cls,
        margin_left: float = 14,
        margin_right: float = 16,
        bottom_margin: float = 20,
    ) -> "FpdfCanvas":
        """Create a canvas with one blank page."""
        pdf = FPDF(orientation="portrait", unit="mm", format="A4")
        pdf.set_margins(left=margin_left, top=14, right=margin_right)
        pdf.set_auto_page_break(auto=True, margin=bottom_margin)
        pdf.add_page()
        return cls(pdf=pdf)

    def page_size(self) -> tuple[float, float]:
        return self.pdf.w, self.pdf.h

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
        pdf = self.pdf
        pdf.set_font(FONT_FAMILY, style=style, size=size)
        pdf.set_text_color(*color)
        content = to_latin1(text)
        if align == "center":
            x -= pdf.get_string_width(content) / 2
        pdf.text(x, y, content)

    def table(
        self,
        x: float,
        y: float,
        width: float,
        head: tuple[str, str],
        rows: list[tuple[str, str]],
    ) -> float:
        pdf = self.pdf
        pdf.set_xy(x, y)
        pdf.set_font(FONT_FAMILY, size=10)
        pdf.set_text_color(*BODY_COLOR)
        label_style = FontFace(emphasis="BOLD")
        with pdf.table(
            width=width,
            align="LEFT",
            col_widths=(1, 2),
            headings_style=FontFace(
                emphasis="BOLD", color=(255, 255, 255), fill_color=HEAD_FILL
            ),
            cell_fill_color=ROW_FILL,
            cell_fill_mode="ROWS",
        ) as table:
            heading = table.row()
            for title in head:
                heading.cell(to_latin1(title))
            for label, value in rows:
                row = table.row()
                row.cell(to_latin1(label), style=label_style)
                row.cell(to_latin1(value))
        return pdf.y

    def fill_rect(
        self, x: float, y: float, width: float, height: float, color: Color
    ) -> None:
        self.pdf.set_fill_color(*color)
        self.pdf.rect(x, y, width, height, style="F")

    def flow_html(self, x: float, y: float | None, width: float, html: str) -> None:
        pdf = self.pdf
        pdf.set_left_margin(x)
        pdf.set_right_margin(pdf.w - x - width)
        if y is None:
            pdf.set_x(x)
        else:
            pdf.set_xy(x, y)
        pdf.set_font(FONT_FAMILY, size=10)
        pdf.set_text_color(*BODY_COLOR)
        pdf.write_html(to_latin1(html))

    def position(self) -> tuple[int, float]:
        return self.pdf.page, self.pdf.y

    def page_count(self) -> int:
        return self.pdf.pages_count

    def select_page(self, page: int) -> None:
        if not 1 <= page <= self.pdf.pages_count:
            raise IndexError(f"Page out of range: {page}")
        self.pdf.page = page

    def save(self, path: Path) -> None:
        self.pdf.output(str(path))
