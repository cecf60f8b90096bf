import logging

from modification_engine import apply_modifications, apply_rule, modify_cell

HEADINGS = ["Name", "Age"]


def test_heading_rule_applies_to_column():
    rows = [["Al", 25]]
    out = apply_modifications(rows, HEADINGS, {"Age": lambda v, *_: v + 1})
    assert out == [["Al", 26]]
    assert rows == [["Al", 25]]


def test_coordinate_rule_applies_after_heading_rule():
    rules = {
        "Age": lambda v, *_: v + 1,
        "0,1": lambda v, *_: v * 10,
    }
    out = apply_modifications([["Al", 25], ["Bob", 30]], HEADINGS, rules)
    assert out == [["Al", 260], ["Bob", 31]]


def test_tuple_coordinate_key():
    out = apply_modifications([["Al", 25]], HEADINGS, {(0, 0): lambda v, *_: v.upper()})
    assert out == [["AL", 25]]


def test_rule_receives_row_and_indexes():
    seen = []

    def rule(cell, row, r, c):
        seen.append((cell, list(row), r, c))
        return cell

    apply_modifications([["Al", 25]], HEADINGS, {"Name": rule})
    assert seen == [("Al", ["Al", 25], 0, 0)]


def test_failing_rule_keeps_value_and_logs(caplog):
    def boom(*_):
        raise RuntimeError("bad")

    with caplog.at_level(logging.ERROR, logger="modification_engine"):
        out = apply_modifications([["Al", 25], ["Bob", 30]], HEADINGS, {"Age": boom})

    assert out == [["Al", 25], ["Bob", 30]]
    assert "Error modifying Age[0,1]" in caplog.text
    assert "Error modifying Age[1,1]" in caplog.text


def test_coordinate_rule_runs_after_failed_heading_rule():
    def boom(*_):
        raise ValueError("nope")

    value = modify_cell(5, [5], 0, 0, "n", {"n": boom, "0,0": lambda v, *_: v + 1})
    assert value == 6


def test_non_callable_rules_are_ignored():
    out = apply_modifications([["Al", 25]], HEADINGS, {"Age": 3, "0,0": "x"})
    assert out == [["Al", 25]]


def test_apply_rule_outcome():
    ok = apply_rule(lambda v, *_: v * 2, 2, [], 0, 0)
    assert ok.ok and ok.value == 4
    failed = apply_rule(lambda *_: 1 / 0, 2, [], 0, 0)
    assert not failed.ok
    assert failed.value == 2
    assert isinstance(failed.error, ZeroDivisionError)


def test_no_rules_copies_rows():
    rows = [["a"]]
    out = apply_modifications(rows, ["h"], {})
    assert out == rows
    assert out[0] is not rows[0]
