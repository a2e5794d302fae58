from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from bizdocs.domain.models.enums import EmptyTablePolicy, TaxMode

logger = logging.getLogger("export")


@dataclass(frozen=True)
class ExportOptions:
    """Knobs for one export call. Defaults match the stock documents."""

    tax_mode: Optional[TaxMode] = None          # invoice only; None -> the invoice's own mode
    logo_path: Optional[str] = None
    footer_text: Optional[str] = None           # None -> the document kind's stock caption
    show_page_number: bool = True
    empty_items_policy: EmptyTablePolicy = EmptyTablePolicy.PLACEHOLDER

    @classmethod
    def from_settings(cls, settings=None, **overrides) -> "ExportOptions":
        if settings is None:
            from bizdocs.core.config import settings
        try:
            policy = EmptyTablePolicy(settings.EMPTY_ITEMS_POLICY.strip().lower())
        except ValueError:
            logger.warning("Unknown EMPTY_ITEMS_POLICY %r, using placeholder", settings.EMPTY_ITEMS_POLICY)
            policy = EmptyTablePolicy.PLACEHOLDER
        values = {
            "logo_path": settings.LOGO_PATH or None,
            "show_page_number": settings.FOOTER_PAGE_NUMBERS,
            "empty_items_policy": policy,
        }
        values.update(overrides)
        return cls(**values)


@dataclass
class RenderedDocument:
    """A finished PDF plus what was drawn on each page."""

    filename: str
    content: bytes
    page_texts: list[list[str]] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.page_texts)

    def save(self, directory: str | Path) -> Path:
        path = Path(directory)
        path.mkdir(parents=True, exist_ok=True)
        target = path / self.filename
        target.write_bytes(self.content)
        logger.info("Saved %s (%d pages, %d bytes)", target, self.page_count, len(self.content))
        return target
