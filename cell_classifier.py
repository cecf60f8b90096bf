import dataclasses
import datetime as dt
import json
import math
from dataclasses import dataclass
from enum import Enum

import numpy as np
import pandas as pd

from cell_coercion import ActionCell, LinkCell, coerce_cell_value

DISPLAY_LIST_SEPARATOR = ", "
EXPORT_LIST_SEPARATOR = "; "

DATE_ONLY_FORMAT = "%d %b %Y"
DATE_TIME_FORMAT = "%d %b %Y, %I:%M %p"


class CellKind(Enum):
    EMPTY = "empty"
    BOOLEAN = "boolean"
    NUMBER = "number"
    DATETIME = "datetime"
    LIST = "list"
    LINK = "link"
    ACTION = "action"
    OBJECT = "object"
    TEXT = "text"


@dataclass(frozen=True)
class Classification:
    textual: str
    kind: CellKind


_EMPTY = Classification("", CellKind.EMPTY)


def is_number(value) -> bool:
    if isinstance(value, (bool, np.bool_)):
        return False
    return isinstance(value, (int, float, np.integer, np.floating))


def is_numeric(value) -> bool:
    """True for real numbers that can take part in arithmetic (NaN excluded)."""
    if not is_number(value):
        return False
    return not math.isnan(float(value))


def number_text(value) -> str:
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    raw = value
    value = float(value)
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer() and abs(value) < 1e21:
        return str(int(value))
    if isinstance(raw, np.floating) and not isinstance(raw, float):
        # shortest text at the scalar's own precision
        return str(raw)
    return repr(value)


def _to_datetime(value):
    """Normalise supported date-time values; None means an invalid instant."""
    if value is pd.NaT:
        return None
    if isinstance(value, np.datetime64):
        if np.isnat(value):
            return None
        return pd.Timestamp(value).to_pydatetime()
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    if isinstance(value, dt.datetime):
        return value
    return dt.datetime(value.year, value.month, value.day)


def format_datetime(value) -> str:
    moment = _to_datetime(value)
    if moment is None:
        return ""
    in_utc = moment.astimezone(dt.timezone.utc) if moment.tzinfo else moment
    if in_utc.hour == 0 and in_utc.minute == 0 and in_utc.second == 0:
        return moment.strftime(DATE_ONLY_FORMAT)
    return moment.strftime(DATE_TIME_FORMAT)


def _element_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if is_number(value):
        return number_text(value)
    return str(value)


def _object_text(value) -> str:
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        value = dataclasses.asdict(value)
    return json.dumps(value, indent=2, ensure_ascii=False, default=str)


def _is_missing(value) -> bool:
    if value is None or value is pd.NA or value is pd.NaT:
        return True
    return isinstance(value, np.datetime64) and np.isnat(value)


def classify(cell, export: bool = False) -> Classification:
    cell = coerce_cell_value(cell)

    if _is_missing(cell):
        return _EMPTY

    if isinstance(cell, LinkCell):
        return Classification(cell.label or "Open", CellKind.LINK)

    if isinstance(cell, ActionCell):
        return Classification(cell.label or "Action", CellKind.ACTION)

    if isinstance(cell, (list, tuple, np.ndarray)):
        if isinstance(cell, np.ndarray):
            cell = cell.tolist()
        sep = EXPORT_LIST_SEPARATOR if export else DISPLAY_LIST_SEPARATOR
        return Classification(sep.join(_element_text(v) for v in cell), CellKind.LIST)

    if isinstance(cell, (dt.date, np.datetime64)):
        text = format_datetime(cell)
        if not text:
            return _EMPTY
        return Classification(text, CellKind.DATETIME)

    if isinstance(cell, (bool, np.bool_)):
        return Classification("Yes" if cell else "No", CellKind.BOOLEAN)

    if is_number(cell):
        return Classification(number_text(cell), CellKind.NUMBER)

    if isinstance(cell, dict) or (
        dataclasses.is_dataclass(cell) and not isinstance(cell, type)
    ):
        return Classification(_object_text(cell), CellKind.OBJECT)

    return Classification(str(cell), CellKind.TEXT)


def display_text(cell) -> str:
    return classify(cell).textual


def export_text(cell) -> str:
    return classify(cell, export=True).textual
