import csv
import io

import pandas as pd

from cell_classifier import export_text

DEFAULT_FILENAME = "table-data.csv"
ENCODING = "utf-8"


def export_rows(rows) -> list[list[str]]:
    return [[export_text(cell) for cell in row] for row in rows]


def to_csv(headings, rows, include_headers: bool = True) -> bytes:
    """Serialise rows as fully quoted CSV, one ``\\n``-terminated line per row."""
    headings = [str(h) for h in headings]
    if not headings:
        return b""

    frame = pd.DataFrame(export_rows(rows), columns=headings, dtype=object)
    buf = io.StringIO()
    frame.to_csv(
        buf,
        index=False,
        header=include_headers,
        quoting=csv.QUOTE_ALL,
        lineterminator="\n",
    )
    return buf.getvalue().encode(ENCODING)


def export_filename(download_config) -> str:
    filename = getattr(download_config, "filename", None)
    return filename or DEFAULT_FILENAME
