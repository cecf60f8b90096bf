import datetime as dt
from dataclasses import dataclass

import numpy as np
import pandas as pd
import pytest

from cell_classifier import (
    CellKind,
    Classification,
    classify,
    display_text,
    export_text,
    is_numeric,
    number_text,
)
from cell_coercion import ActionCell, LinkCell


@dataclass
class Point:
    x: int
    y: int


@pytest.mark.parametrize(
    "cell, textual, kind",
    [
        (None, "", CellKind.EMPTY),
        (pd.NA, "", CellKind.EMPTY),
        (pd.NaT, "", CellKind.EMPTY),
        (np.datetime64("NaT"), "", CellKind.EMPTY),
        (True, "Yes", CellKind.BOOLEAN),
        (False, "No", CellKind.BOOLEAN),
        (np.bool_(True), "Yes", CellKind.BOOLEAN),
        (30, "30", CellKind.NUMBER),
        (2.5, "2.5", CellKind.NUMBER),
        (26.0, "26", CellKind.NUMBER),
        (np.int64(7), "7", CellKind.NUMBER),
        (float("nan"), "NaN", CellKind.NUMBER),
        (float("inf"), "Infinity", CellKind.NUMBER),
        ("hello", "hello", CellKind.TEXT),
        (["a", "b"], "a, b", CellKind.LIST),
        ([], "", CellKind.LIST),
        ((1, None, True), "1, , true", CellKind.LIST),
    ],
)
def test_classify_primitives(cell, textual, kind):
    result = classify(cell)
    assert result.textual == textual
    assert result.kind is kind


def test_link_uses_placeholder_not_target():
    result = classify({"type": "url", "value": "https://x", "placeholder": "Open"})
    assert result.textual == "Open"
    assert result.kind is CellKind.LINK


def test_link_without_placeholder_defaults_to_open():
    assert classify(LinkCell("https://x")).textual == "Open"


def test_button_defaults_to_action_label():
    assert classify({"type": "button", "function": "go"}).textual == "Action"
    assert classify(ActionCell("go", "Run")).textual == "Run"
    assert classify(ActionCell("go")).kind is CellKind.ACTION


def test_list_export_uses_semicolons():
    assert display_text(["a", "b", "c"]) == "a, b, c"
    assert export_text(["a", "b", "c"]) == "a; b; c"


def test_numpy_array_is_a_list():
    cell = np.array(["a", "b"])
    assert classify(cell) == Classification("a, b", CellKind.LIST)
    assert export_text(cell) == "a; b"
    assert display_text(np.array([1, 2.5])) == "1, 2.5"


def test_float32_keeps_its_own_short_text():
    assert classify(np.float32(2.1)).textual == "2.1"
    assert number_text(np.float32(0.1)) == "0.1"
    assert number_text(np.float32(3)) == "3"


def test_date_only_when_midnight():
    result = classify(dt.datetime(2024, 1, 5))
    assert result.kind is CellKind.DATETIME
    assert result.textual == "05 Jan 2024"


def test_plain_date_is_date_only():
    assert display_text(dt.date(2023, 12, 31)) == "31 Dec 2023"


def test_datetime_with_time_uses_twelve_hour_clock():
    assert display_text(dt.datetime(2024, 1, 5, 14, 30)) == "05 Jan 2024, 02:30 PM"


def test_aware_datetime_checks_midnight_in_utc():
    ist = dt.timezone(dt.timedelta(hours=5, minutes=30))
    # 05:30 local is midnight UTC
    assert display_text(dt.datetime(2024, 1, 5, 5, 30, tzinfo=ist)) == "05 Jan 2024"
    assert display_text(dt.datetime(2024, 1, 5, 0, 0, tzinfo=ist)) == "05 Jan 2024, 12:00 AM"


def test_pandas_timestamp_is_datetime():
    result = classify(pd.Timestamp("2024-03-01 09:15"))
    assert result.kind is CellKind.DATETIME
    assert result.textual == "01 Mar 2024, 09:15 AM"


def test_mapping_is_pretty_printed_object():
    result = classify({"a": 1, "b": [1, 2]})
    assert result.kind is CellKind.OBJECT
    assert result.textual == '{\n  "a": 1,\n  "b": [\n    1,\n    2\n  ]\n}'


def test_dataclass_is_object():
    result = classify(Point(1, 2))
    assert result.kind is CellKind.OBJECT
    assert '"x": 1' in result.textual


def test_classification_is_idempotent():
    for cell in [None, 1, "x", ["a"], {"k": "v"}, dt.datetime(2024, 1, 1, 1)]:
        assert classify(cell) == classify(cell)


@pytest.mark.parametrize(
    "value, expected",
    [
        (1, True),
        (1.5, True),
        (np.float32(2), True),
        (float("nan"), False),
        (True, False),
        ("3", False),
        (None, False),
    ],
)
def test_is_numeric(value, expected):
    assert is_numeric(value) is expected
