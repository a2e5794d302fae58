# bizdocs/domain/services/pdf_table.py
"""
Flowing table: a grid of rows that continues across as many pages as needed.

Rules:
- a row is measured before it is drawn (wrapped text -> taller row)
- a row that would cross ``bottom`` moves, whole, to a new page
- every page the table touches starts with the column header row
- the header is never left alone at the bottom of a page
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from bizdocs.domain.models.enums import EmptyTablePolicy
from bizdocs.domain.services.pdf_layout import (
    COLOR_PRIMARY,
    COLOR_TEXT,
    COLOR_WHITE,
    CONTENT_BOTTOM,
    FONT_SMALL,
    MARGIN,
    PageCanvas,
)
from bizdocs.domain.services.validation import DocumentValidationError

logger = logging.getLogger("pdf_table")


@dataclass(frozen=True)
class ColumnSpec:
    label: str
    width: float                  # relative; scaled to the table width
    align: str = "left"


@dataclass(frozen=True)
class TableMetrics:
    font_size: float = FONT_SMALL
    line_height: float = 4.0
    padding: float = 2.0
    header_height: float = 8.0
    min_row_height: float = 8.0
    grid_width: float = 0.2


@dataclass
class TableResult:
    final_y: float
    row_pages: list[int] = field(default_factory=list)      # page of each data row
    header_pages: list[int] = field(default_factory=list)   # pages where the header row was drawn
    page_breaks: int = 0

    @property
    def pages(self) -> list[int]:
        return sorted(set(self.row_pages) | set(self.header_pages))


def scale_widths(columns: Sequence[ColumnSpec], total_width: float) -> list[float]:
    weight = sum(col.width for col in columns) or 1
    return [total_width * col.width / weight for col in columns]


def measure_row(
    canvas: PageCanvas,
    cells: Sequence[str],
    widths: Sequence[float],
    metrics: TableMetrics,
) -> tuple[list[list[str]], float]:
    """Wrap every cell to its column and return ``(lines_per_cell, row_height)``."""
    inner = [max(w - 2 * metrics.padding, 1.0) for w in widths]
    wrapped = [canvas.wrap(str(cell), width, metrics.font_size) or [""] for cell, width in zip(cells, inner)]
    line_count = max(len(lines) for lines in wrapped) if wrapped else 1
    height = max(metrics.min_row_height, line_count * metrics.line_height + 2 * metrics.padding)
    return wrapped, height


def _cell_x(x: float, width: float, align: str, padding: float) -> float:
    if align == "center":
        return x + width / 2
    if align == "right":
        return x + width - padding
    return x + padding


def _draw_header_row(
    canvas: PageCanvas,
    columns: Sequence[ColumnSpec],
    widths: Sequence[float],
    x: float,
    y: float,
    metrics: TableMetrics,
) -> float:
    cx = x
    for col, width in zip(columns, widths):
        canvas.rect(cx, y, width, metrics.header_height, fill=COLOR_PRIMARY, width=metrics.grid_width)
        canvas.text(
            cx + width / 2, y + metrics.header_height / 2 + 1.2, col.label,
            size=metrics.font_size, bold=True, color=COLOR_WHITE, align="center",
        )
        cx += width
    return y + metrics.header_height


def _draw_row(
    canvas: PageCanvas,
    columns: Sequence[ColumnSpec],
    widths: Sequence[float],
    lines_per_cell: list[list[str]],
    x: float,
    y: float,
    height: float,
    metrics: TableMetrics,
) -> float:
    cx = x
    for col, width, lines in zip(columns, widths, lines_per_cell):
        canvas.rect(cx, y, width, height, width=metrics.grid_width)
        tx = _cell_x(cx, width, col.align, metrics.padding)
        baseline = y + metrics.padding + metrics.line_height - 1.0
        for line in lines:
            canvas.text(tx, baseline, line, size=metrics.font_size, color=COLOR_TEXT, align=col.align)
            baseline += metrics.line_height
        cx += width
    return y + height


def draw_flowing_table(
    canvas: PageCanvas,
    columns: Sequence[ColumnSpec],
    rows: Sequence[Sequence[object]],
    start_y: float,
    on_page_break: Callable[[], float],
    *,
    x: float = MARGIN,
    width: Optional[float] = None,
    bottom: float = CONTENT_BOTTOM,
    metrics: TableMetrics = TableMetrics(),
    empty_policy: EmptyTablePolicy = EmptyTablePolicy.PLACEHOLDER,
) -> TableResult:
    """
    Draw ``rows`` under a header of ``columns`` starting at ``start_y``.

    ``on_page_break`` must start a new page (decorations included) and return
    the Y where content resumes. Returns the cursor below the last row plus
    the page each row landed on.
    """
    width = width if width is not None else canvas.width - 2 * x
    widths = scale_widths(columns, width)

    body = [["" if cell is None else str(cell) for cell in row] for row in rows]
    if not body:
        if EmptyTablePolicy(empty_policy) is EmptyTablePolicy.REJECT:
            raise DocumentValidationError(
                "At least one item is required",
                {"items": "At least one item is required"},
            )
        body = [[""] * len(columns)]

    result = TableResult(final_y=start_y)
    y = start_y
    need_header = True
    fresh_page = False

    for cells in body:
        lines_per_cell, height = measure_row(canvas, cells, widths, metrics)
        block = height + (metrics.header_height if need_header else 0)

        if y + block > bottom and not fresh_page:
            y = on_page_break()
            result.page_breaks += 1
            need_header = True
            fresh_page = True
            logger.debug("Table continues on page %d", canvas.page_number)
        elif y + block > bottom:
            logger.warning("Row taller than a page (%.1f mm); drawing it clipped", height)

        if need_header:
            y = _draw_header_row(canvas, columns, widths, x, y, metrics)
            result.header_pages.append(canvas.page_number)
            need_header = False

        y = _draw_row(canvas, columns, widths, lines_per_cell, x, y, height, metrics)
        result.row_pages.append(canvas.page_number)
        fresh_page = False

    result.final_y = y
    return result
