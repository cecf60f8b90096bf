import locale
import logging
import sys

from file_type_handler import FileTypeHandler, write_blob
from smart_table import SmartTable
from table_config import TableConfig, load_download_defaults
from text_grid import TextGrid

try:
    from _version import __version__
except Exception:
    __version__ = "0.0.0"


USAGE = """smarttable - filter, sort, aggregate and export tabular data

Usage:
  smarttable PATH [options]
  smarttable -v

Options:
  -x, --hide COL         hide a column (index or heading); repeatable
  -s, --sort COL         press the sort toggle of a column; repeatable
  -f, --filter COL=TEXT  keep rows whose COL contains TEXT; repeatable
  -m, --metric COL=NAME  show sum, avg, max or min of COL; repeatable
  -o, --output FILE      export the filtered rows as CSV
  --no-headers           omit the header line from the export
  --verbose              log debug output
"""

_VALUE_FLAGS = {
    "-x": "hide",
    "--hide": "hide",
    "-s": "sort",
    "--sort": "sort",
    "-f": "filter",
    "--filter": "filter",
    "-m": "metric",
    "--metric": "metric",
    "-o": "output",
    "--output": "output",
}


class UsageError(Exception):
    pass


def _parse_args(args: list[str]) -> dict:
    opts = {
        "path": None,
        "hide": [],
        "sort": [],
        "filter": [],
        "metric": [],
        "output": None,
        "include_headers": True,
        "verbose": False,
    }
    i = 0
    while i < len(args):
        arg = args[i]
        if arg in _VALUE_FLAGS:
            if i + 1 >= len(args):
                raise UsageError(f"{arg} needs a value")
            key = _VALUE_FLAGS[arg]
            value = args[i + 1]
            if key == "output":
                opts["output"] = value
            else:
                opts[key].append(value)
            i += 2
            continue
        if arg == "--no-headers":
            opts["include_headers"] = False
        elif arg == "--verbose":
            opts["verbose"] = True
        elif arg.startswith("-"):
            raise UsageError(f"Unknown option {arg}")
        elif opts["path"] is None:
            opts["path"] = arg
        else:
            raise UsageError(f"Unexpected argument {arg}")
        i += 1

    if opts["path"] is None:
        raise UsageError("PATH is required")
    return opts


def _split_pair(text: str) -> tuple[str, str]:
    if "=" not in text:
        raise UsageError(f"Expected COL=VALUE, got '{text}'")
    col, value = text.split("=", 1)
    return col.strip(), value


def _hide_specifier(text: str):
    return int(text) if text.isdigit() else text


def _resolve_column(headings: list, text: str) -> int:
    if text.isdigit() and int(text) < len(headings):
        return int(text)
    if text in headings:
        return headings.index(text)
    raise UsageError(f"Unknown column '{text}'")


def run(opts: dict, out=None) -> int:
    out = out or sys.stdout
    dataset = FileTypeHandler(opts["path"]).load()

    config = TableConfig.from_options(
        {
            "headings": dataset.headings,
            "data": dataset.rows,
            "hideColumns": [_hide_specifier(h) for h in opts["hide"]],
        },
        defaults=load_download_defaults(),
    )
    config.download.include_headers = opts["include_headers"]

    table = SmartTable(config, commit_view=lambda _triad: None, persist_blob=write_blob)
    headings = table.headings

    for col in opts["sort"]:
        table.sort_by_column(_resolve_column(headings, col))

    filters = {}
    for pair in opts["filter"]:
        col, text = _split_pair(pair)
        filters[_resolve_column(headings, col)] = text
    if filters:
        table.apply_filters(filters)

    for pair in opts["metric"]:
        col, metric = _split_pair(pair)
        try:
            table.select_metric(_resolve_column(headings, col), metric)
        except ValueError as exc:
            raise UsageError(str(exc)) from None

    grid = TextGrid(headings)
    lines = grid.render(
        table.get_filtered_data(),
        sort_icons={c: table.sort_icon(c) for c in range(len(headings))},
        metric_labels={c: table.metric_label(c) for c in range(len(headings))},
    )
    for line in lines:
        print(line, file=out)
    print(
        f"{len(table.get_filtered_data())} of {len(table.view.processed)} rows",
        file=out,
    )

    if opts["output"]:
        table.download(opts["output"])
        print(f"Saved {opts['output']}", file=out)
    return 0


def main():
    args = sys.argv[1:]

    if "-v" in args or "-V" in args:
        print(__version__)
        return

    if "-h" in args or "--help" in args or not args:
        print(USAGE)
        return

    try:
        opts = _parse_args(args)
    except UsageError as exc:
        print(f"smarttable: {exc}", file=sys.stderr)
        sys.exit(2)

    logging.basicConfig(
        level=logging.DEBUG if opts["verbose"] else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logging.getLogger(__name__).warning("Could not apply the environment collation locale")

    try:
        rc = run(opts)
    except UsageError as exc:
        print(f"smarttable: {exc}", file=sys.stderr)
        sys.exit(2)
    sys.exit(rc)


if __name__ == "__main__":
    main()
