import logging
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional

logger = logging.getLogger(__name__)

Rule = Callable[[Any, list, int, int], Any]


@dataclass(frozen=True)
class RuleOutcome:
    value: Any
    error: Optional[BaseException] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def apply_rule(rule: Rule, cell, row, row_index: int, col_index: int) -> RuleOutcome:
    try:
        return RuleOutcome(rule(cell, row, row_index, col_index))
    except Exception as exc:
        return RuleOutcome(cell, exc)


def _coordinate_rule(rules: Mapping, row_index: int, col_index: int):
    rule = rules.get(f"{row_index},{col_index}")
    if rule is None:
        rule = rules.get((row_index, col_index))
    return rule


def modify_cell(cell, row, row_index: int, col_index: int, heading, rules: Mapping):
    value = cell
    for source, rule in (
        ("heading", rules.get(heading) if heading is not None else None),
        ("coordinate", _coordinate_rule(rules, row_index, col_index)),
    ):
        if not callable(rule):
            continue
        outcome = apply_rule(rule, value, row, row_index, col_index)
        if not outcome.ok:
            logger.error(
                "Error modifying %s[%d,%d] (%s rule): %s",
                heading,
                row_index,
                col_index,
                source,
                outcome.error,
                exc_info=outcome.error,
            )
        value = outcome.value
    return value


def apply_modifications(rows, headings, rules: Optional[Mapping]):
    """Return new rows with heading rules, then coordinate rules, applied per cell."""
    if not rules:
        return [list(row) for row in rows]

    modified = []
    for row_index, row in enumerate(rows):
        modified.append(
            [
                modify_cell(
                    cell,
                    row,
                    row_index,
                    col_index,
                    headings[col_index] if col_index < len(headings) else None,
                    rules,
                )
                for col_index, cell in enumerate(row)
            ]
        )
    logger.debug("Applied %d modification rules to %d rows", len(rules), len(rows))
    return modified
