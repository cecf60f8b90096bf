from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class LinkCell:
    target: str
    label: Optional[str] = None


@dataclass(frozen=True)
class ActionCell:
    handler_name: Optional[str] = None
    label: Optional[str] = None
    has_checkbox: bool = False
    checkbox_checked: bool = False
    checkbox_label: Optional[str] = None


def coerce_cell_value(value: Any) -> Any:
    """Turn raw ``{"type": "url" | "button", ...}`` mappings into cell variants.

    Every other value is returned untouched.
    """
    if not isinstance(value, dict):
        return value

    kind = value.get("type")
    if kind == "url":
        target = value.get("value")
        return LinkCell(
            target="" if target is None else str(target),
            label=value.get("placeholder") or None,
        )

    if kind == "button":
        return ActionCell(
            handler_name=value.get("function") or None,
            label=value.get("placeholder") or None,
            has_checkbox=bool(value.get("checkbox")),
            checkbox_checked=bool(value.get("checkboxValue")),
            checkbox_label=value.get("checkboxLabel") or None,
        )

    return value


def coerce_rows(rows):
    return [[coerce_cell_value(cell) for cell in row] for row in rows]
