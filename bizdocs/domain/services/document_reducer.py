# bizdocs/domain/services/document_reducer.py
"""
Pure edits on immutable documents.

Every edit is an action applied with :func:`reduce_document`, which returns a
new document and leaves the input untouched:

    doc = reduce_document(doc, AddItem())
    doc = reduce_document(doc, SetItemField(0, "quantity", "10"))

The result is re-validated, so numeric fields are coerced and line amounts
recomputed. ``updated_at`` always moves forward.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping, Optional, Union

from bizdocs.domain.models.documents import (
    BaseDocument,
    Challan,
    ChallanItem,
    Invoice,
    LineItem,
    TransportDetails,
    advance_timestamp,
)

logger = logging.getLogger("document_reducer")

IMMUTABLE_FIELDS = frozenset({"id", "kind", "created_at", "updated_at"})


# ---------------------------------------------------------------------------
# Actions
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SetField:
    name: str
    value: Any


@dataclass(frozen=True)
class SetItemField:
    index: int
    name: str
    value: Any


@dataclass(frozen=True)
class AddItem:
    values: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoveItem:
    index: int


@dataclass(frozen=True)
class SetTransportField:
    name: str
    value: Any


Action = Union[SetField, SetItemField, AddItem, RemoveItem, SetTransportField]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _item_model(document: BaseDocument) -> type:
    if isinstance(document, Invoice):
        return LineItem
    if isinstance(document, Challan):
        return ChallanItem
    raise ValueError(f"{document.kind.value} documents have no items")


def _check_index(items: list, index: int) -> None:
    if not 0 <= index < len(items):
        raise IndexError(f"item index {index} out of range (0..{len(items) - 1})")


def _apply(document: BaseDocument, action: Action) -> dict[str, Any]:
    """Return the field updates ``action`` makes to ``document``."""
    if isinstance(action, SetField):
        if action.name in IMMUTABLE_FIELDS:
            raise ValueError(f"{action.name} cannot be changed")
        if action.name not in type(document).model_fields:
            raise ValueError(f"Unknown field {action.name!r} for {document.kind.value}")
        return {action.name: action.value}

    if isinstance(action, SetTransportField):
        if not isinstance(document, Challan):
            raise ValueError("Transport details only exist on challans")
        if action.name not in TransportDetails.model_fields:
            raise ValueError(f"Unknown transport field {action.name!r}")
        transport = document.transport_details.model_dump()
        transport[action.name] = action.value
        return {"transport_details": transport}

    item_model = _item_model(document)
    items = [item.model_dump() for item in document.items]

    if isinstance(action, SetItemField):
        _check_index(items, action.index)
        if action.name not in item_model.model_fields:
            raise ValueError(f"Unknown item field {action.name!r}")
        items[action.index][action.name] = action.value
    elif isinstance(action, AddItem):
        unknown = set(action.values) - set(item_model.model_fields)
        if unknown:
            raise ValueError(f"Unknown item fields: {', '.join(sorted(unknown))}")
        items.append(item_model(**action.values).model_dump())
    elif isinstance(action, RemoveItem):
        _check_index(items, action.index)
        del items[action.index]
    else:
        raise TypeError(f"Unsupported action {type(action).__name__}")

    return {"items": items}


# ---------------------------------------------------------------------------
# Reducer
# ---------------------------------------------------------------------------

def reduce_document(document: BaseDocument, action: Action, *, now: Optional[datetime] = None) -> BaseDocument:
    """
    Apply ``action`` and return the new document.

    Raises:
        ValueError: the action targets an immutable or unknown field, or a
                    field the document kind does not have.
        IndexError: an item index is out of range.
    """
    updates = _apply(document, action)
    data = document.model_dump()
    data.update(updates)
    data["updated_at"] = advance_timestamp(document.updated_at, now)

    updated = type(document).model_validate(data)
    logger.debug("Applied %s to %s %s", type(action).__name__, document.kind.value, document.id)
    return updated
