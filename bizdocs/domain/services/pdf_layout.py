# bizdocs/domain/services/pdf_layout.py
"""
Page geometry and the drawing surface shared by every document composer.

Coordinates are millimetres measured from the *top-left* corner of the page,
with ``y`` growing downwards like a cursor moving through the document.
Text ``y`` values are baselines. ``PageCanvas`` converts to ReportLab's
bottom-left point space internally.

One ``PageCanvas`` belongs to exactly one export call; nothing here is
shared between exports.
"""

from __future__ import annotations

import io
import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfgen import canvas

logger = logging.getLogger("pdf_layout")

# ---------------------------------------------------------------------------
# Geometry (mm), A4 portrait
# ---------------------------------------------------------------------------
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0

MARGIN = 12.0              # standard page margin
MARGIN_LARGE = 20.0        # letterhead documents (challan, letter)
SECTION_GAP = 8.0
ROW_GAP = 5.0
HEADER_TOP = 42.0          # band reserved for the header
FOOTER_RESERVE = 18.0      # band reserved for the footer
CONTENT_TOP = HEADER_TOP + 5   # where body content resumes on a new page
CONTENT_BOTTOM = PAGE_HEIGHT - FOOTER_RESERVE

LOGO_WIDTH = 30.0
LOGO_HEIGHT = 18.0

# ---------------------------------------------------------------------------
# Colours / fonts
# ---------------------------------------------------------------------------
COLOR_PRIMARY = colors.Color(0, 0, 139 / 255)
COLOR_SECONDARY = colors.Color(128 / 255, 128 / 255, 128 / 255)
COLOR_TEXT = colors.black
COLOR_WHITE = colors.white
COLOR_LIGHT_GRAY = colors.Color(240 / 255, 240 / 255, 240 / 255)

FONT_TITLE = 18
FONT_HEADER = 16
FONT_SUBHEADER = 14
FONT_BODY = 10
FONT_SMALL = 9
FONT_TINY = 8

_FONTS = {
    (False, False): "Helvetica",
    (True, False): "Helvetica-Bold",
    (False, True): "Helvetica-Oblique",
    (True, True): "Helvetica-BoldOblique",
}


def font_name(bold: bool = False, italic: bool = False) -> str:
    return _FONTS[(bold, italic)]


def line_height(size: float) -> float:
    """Leading in mm for a font size in points (1.15 x size)."""
    return size * 1.15 * 25.4 / 72


# ---------------------------------------------------------------------------
# Canvas
# ---------------------------------------------------------------------------

class PageCanvas:
    """
    Drawing surface for one PDF export.

    Besides drawing, it keeps ``page_texts``: for every page, the strings
    drawn on it in order. Layout code and tests use it to check which
    content landed on which page.
    """

    def __init__(self, *, title: str = "", author: str = "", subject: str = ""):
        self.width = PAGE_WIDTH
        self.height = PAGE_HEIGHT
        self._buf = io.BytesIO()
        self._canvas = canvas.Canvas(self._buf, pagesize=A4)
        if title:
            self._canvas.setTitle(title)
        if author:
            self._canvas.setAuthor(author)
        if subject:
            self._canvas.setSubject(subject)
        self.page_texts: list[list[str]] = [[]]
        self._finished = False

    # ---- pages ----

    @property
    def page_number(self) -> int:
        """1-based index of the page currently being drawn."""
        return len(self.page_texts)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)

    def new_page(self) -> None:
        self._canvas.showPage()
        self.page_texts.append([])

    def finish(self) -> bytes:
        """Close the document and return the PDF bytes."""
        if not self._finished:
            self._canvas.save()
            self._finished = True
        return self._buf.getvalue()

    # ---- measuring ----

    def string_width(self, value: str, size: float = FONT_BODY, *, bold: bool = False, italic: bool = False) -> float:
        return pdfmetrics.stringWidth(value, font_name(bold, italic), size) / mm

    def wrap(
        self,
        value: str,
        width: float,
        size: float = FONT_BODY,
        *,
        bold: bool = False,
        italic: bool = False,
    ) -> list[str]:
        """Split ``value`` into lines no wider than ``width`` mm.

        Explicit newlines are kept; blank lines survive as ``""``.
        A single word wider than ``width`` stays on its own line.
        """
        lines: list[str] = []
        for paragraph in (value or "").split("\n"):
            if not paragraph.strip():
                lines.append("")
                continue
            lines.extend(simpleSplit(paragraph, font_name(bold, italic), size, width * mm) or [""])
        return lines

    # ---- drawing ----

    def _y(self, y: float) -> float:
        return (self.height - y) * mm

    def text(
        self,
        x: float,
        y: float,
        value: str,
        *,
        size: float = FONT_BODY,
        bold: bool = False,
        italic: bool = False,
        color=COLOR_TEXT,
        align: str = "left",
    ) -> None:
        value = "" if value is None else str(value)
        c = self._canvas
        c.setFont(font_name(bold, italic), size)
        c.setFillColor(color)
        if align == "center":
            c.drawCentredString(x * mm, self._y(y), value)
        elif align == "right":
            c.drawRightString(x * mm, self._y(y), value)
        else:
            c.drawString(x * mm, self._y(y), value)
        if value:
            self.page_texts[-1].append(value)

    def lines(self, x: float, y: float, values: list[str], *, leading: float, **kwargs) -> float:
        """Draw stacked lines from baseline ``y``; return the baseline after the last one."""
        for value in values:
            self.text(x, y, value, **kwargs)
            y += leading
        return y

    def line(self, x1: float, y1: float, x2: float, y2: float, *, width: float = 0.5, color=COLOR_TEXT) -> None:
        c = self._canvas
        c.setStrokeColor(color)
        c.setLineWidth(width)
        c.line(x1 * mm, self._y(y1), x2 * mm, self._y(y2))

    def rect(
        self,
        x: float,
        y: float,
        w: float,
        h: float,
        *,
        fill=None,
        stroke: bool = True,
        width: float = 0.3,
        stroke_color=COLOR_TEXT,
    ) -> None:
        """Rectangle whose *top*-left corner is (x, y)."""
        c = self._canvas
        c.setLineWidth(width)
        c.setStrokeColor(stroke_color)
        if fill is not None:
            c.setFillColor(fill)
        c.rect(x * mm, self._y(y + h), w * mm, h * mm, stroke=int(stroke), fill=int(fill is not None))

    def image(self, path: str, x: float, y: float, w: float, h: float) -> bool:
        """Draw an image file; a missing or broken file is logged and skipped."""
        try:
            reader = ImageReader(path)
            self._canvas.drawImage(
                reader, x * mm, self._y(y + h), w * mm, h * mm,
                mask="auto", preserveAspectRatio=True,
            )
        except Exception as exc:
            logger.warning("Logo loading error (%s): %s", path, exc)
            return False
        return True


# ---------------------------------------------------------------------------
# Page decorations + space reservation
# ---------------------------------------------------------------------------

@dataclass
class PageDecorator:
    """
    The header/footer pair of one export.

    ``decorate()`` paints the current page; ``new_page()`` starts a page,
    paints it and returns the Y where body content resumes.
    """

    canvas: PageCanvas
    draw_header: Callable[[], float]
    draw_footer: Callable[[], None]
    content_top: float = CONTENT_TOP

    def decorate(self) -> float:
        header_end = self.draw_header()
        self.draw_footer()
        return header_end

    def new_page(self) -> float:
        self.canvas.new_page()
        header_end = self.decorate()
        return max(header_end, self.content_top)


def ensure_space(
    canvas: PageCanvas,
    cursor: float,
    required: float,
    on_new_page: Callable[[], float],
    *,
    footer_reserve: float = FOOTER_RESERVE,
) -> float:
    """
    Reserve ``required`` mm below ``cursor`` or move to a fresh page.

    If the space left above the footer band is smaller than ``required``,
    ``on_new_page`` is called once and its return value (the post-header
    offset) is returned. Otherwise ``cursor`` comes back unchanged.
    """
    remaining = canvas.height - cursor - footer_reserve
    if remaining < required:
        return on_new_page()
    return cursor


def flow_lines(
    canvas: PageCanvas,
    x: float,
    y: float,
    values: list[str],
    *,
    leading: float,
    bottom: float,
    on_new_page: Callable[[], float],
    **text_kwargs,
) -> float:
    """
    Draw lines one by one, breaking to a new page whenever the next line
    would cross ``bottom``. Each line is atomic. Returns the cursor after
    the last line.
    """
    for value in values:
        if y > bottom:
            y = on_new_page()
        canvas.text(x, y, value, **text_kwargs)
        y += leading
    return y


def company_filename(kind_label: str, reference: str, company_name: str, *, timestamp: Optional[str] = None) -> str:
    """
    ``Invoice_INV-7_SURYA_POWER.pdf``; without a reference number:
    ``Invoice_draft_SURYA_POWER_20261019143000.pdf``.
    """
    company_part = re.sub(r"[^A-Za-z0-9]", "_", (company_name or "").strip()) or "document"
    ref = re.sub(r"[\\/:*?\"<>|\s]+", "-", (reference or "").strip())
    if ref:
        return f"{kind_label}_{ref}_{company_part}.pdf"
    stamp = timestamp or datetime.now().strftime("%Y%m%d%H%M%S")
    return f"{kind_label}_draft_{company_part}_{stamp}.pdf"
