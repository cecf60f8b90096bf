import logging
from dataclasses import dataclass
from typing import List

logger = logging.getLogger(__name__)


@dataclass
class Projection:
    headings: List[str]
    rows: List[list]


def _as_specifier_list(specifiers) -> list:
    if specifiers is None:
        return []
    if isinstance(specifiers, (str, int)):
        return [specifiers]
    return list(specifiers)


def resolve_hidden_indices(headings, specifiers) -> set[int]:
    """Map column indexes and heading labels to the set of positions to drop.

    Labels resolve to the first matching heading; unknown labels and
    out-of-range indexes are ignored.
    """
    hidden: set[int] = set()
    for item in _as_specifier_list(specifiers):
        if isinstance(item, bool):
            continue
        if isinstance(item, int):
            if 0 <= item < len(headings):
                hidden.add(item)
            continue
        try:
            hidden.add(list(headings).index(item))
        except ValueError:
            logger.debug("Ignoring unknown hidden column %r", item)
    return hidden


def normalize_rows(headings, rows) -> List[list]:
    width = len(headings)
    normalized = []
    for idx, row in enumerate(rows):
        row = list(row)
        if len(row) != width:
            logger.warning(
                "Row %d has %d cells for %d headings; %s",
                idx,
                len(row),
                width,
                "padding" if len(row) < width else "truncating",
            )
            row = row[:width] + [None] * (width - len(row))
        normalized.append(row)
    return normalized


def project(headings, rows, specifiers) -> Projection:
    hidden = resolve_hidden_indices(headings, specifiers)
    if not hidden:
        return Projection(list(headings), [list(row) for row in rows])

    keep = [i for i in range(len(headings)) if i not in hidden]
    return Projection(
        [headings[i] for i in keep],
        [[row[i] for i in keep] for row in rows],
    )
