from dataclasses import dataclass
from typing import Optional

from cell_classifier import CellKind, classify
from cell_coercion import coerce_cell_value

EMPTY_PLACEHOLDER = "-"
EMPTY_LIST_PLACEHOLDER = "[]"
DEFAULT_CHECKBOX_LABEL = "Mark"


@dataclass(frozen=True)
class CellFragment:
    """Paintable description of one cell; the surface decides on markup."""

    kind: CellKind
    text: str
    css_class: str
    title: Optional[str] = None
    href: Optional[str] = None
    handler_name: Optional[str] = None
    row_index: Optional[int] = None
    has_checkbox: bool = False
    checkbox_checked: bool = False
    checkbox_label: Optional[str] = None


def render_cell(cell, row_index: Optional[int] = None, checked: Optional[bool] = None) -> CellFragment:
    cell = coerce_cell_value(cell)
    info = classify(cell)
    kind = info.kind

    if kind is CellKind.EMPTY:
        return CellFragment(kind, EMPTY_PLACEHOLDER, "table-library-null")

    if kind is CellKind.LINK:
        return CellFragment(kind, info.textual, "table-library-url", href=cell.target)

    if kind is CellKind.ACTION:
        is_checked = cell.checkbox_checked if checked is None else checked
        return CellFragment(
            kind,
            info.textual,
            "table-library-action-cell has-checkbox"
            if cell.has_checkbox
            else "table-library-action-cell",
            handler_name=cell.handler_name,
            row_index=row_index,
            has_checkbox=cell.has_checkbox,
            checkbox_checked=cell.has_checkbox and is_checked,
            checkbox_label=(cell.checkbox_label or DEFAULT_CHECKBOX_LABEL)
            if cell.has_checkbox
            else None,
        )

    if kind is CellKind.LIST:
        if len(cell) == 0:
            return CellFragment(kind, EMPTY_LIST_PLACEHOLDER, "table-library-empty")
        return CellFragment(
            kind, f"[{info.textual}]", "table-library-array", title=info.textual
        )

    if kind is CellKind.DATETIME:
        return CellFragment(kind, info.textual, "table-library-date")

    if kind is CellKind.BOOLEAN:
        state = "true" if info.textual == "Yes" else "false"
        return CellFragment(kind, info.textual, f"table-library-boolean {state}")

    if kind is CellKind.NUMBER:
        return CellFragment(kind, info.textual, "table-library-number")

    if kind is CellKind.OBJECT:
        return CellFragment(kind, info.textual, "table-library-object")

    return CellFragment(kind, info.textual, "table-library-text", title=info.textual)
