from cell_renderer import render_cell


class TextGrid:
    """Plain-text painter for a table's displayed rows."""

    MAX_COL_WIDTH = 40
    ELLIPSIS = "…"

    def __init__(self, headings, max_col_width: int | None = None):
        self.headings = [str(h) for h in headings]
        if max_col_width is not None:
            self.MAX_COL_WIDTH = max_col_width

    @staticmethod
    def cell_text(cell) -> str:
        # multi-line objects collapse onto one line
        return " ".join(render_cell(cell).text.split())

    def get_col_width(self, col_idx, rows, header_extra=None) -> int:
        if col_idx < 0 or col_idx >= len(self.headings):
            return self.MAX_COL_WIDTH
        max_len = len(self.headings[col_idx])
        if header_extra:
            max_len = max(max_len, len(header_extra.get(col_idx, "")))
        for row in rows:
            max_len = max(max_len, len(self.cell_text(row[col_idx])))
        return min(self.MAX_COL_WIDTH, max_len)

    def _fit(self, text: str, width: int) -> str:
        if len(text) <= width:
            return text.ljust(width)
        if width <= 1:
            return text[:width]
        return text[: width - 1] + self.ELLIPSIS

    def render(self, rows, sort_icons=None, metric_labels=None) -> list[str]:
        sort_icons = sort_icons or {}
        metric_labels = {k: v for k, v in (metric_labels or {}).items() if v}

        titles = {
            c: f"{h} {sort_icons[c]}" if c in sort_icons else h
            for c, h in enumerate(self.headings)
        }
        widths = []
        for c in range(len(self.headings)):
            w = self.get_col_width(c, rows, metric_labels)
            widths.append(min(self.MAX_COL_WIDTH, max(w, len(titles[c]))))

        row_w = max(3, len(str(max(len(rows) - 1, 0))) + 1)
        lines = []

        header = " " * row_w + " " + " ".join(
            self._fit(titles[c], widths[c]) for c in range(len(widths))
        )
        lines.append(header.rstrip())
        if metric_labels:
            line = " " * row_w + " " + " ".join(
                self._fit(metric_labels.get(c, ""), widths[c]) for c in range(len(widths))
            )
            lines.append(line.rstrip())
        lines.append("-" * len(header.rstrip()))

        for r, row in enumerate(rows):
            cells = " ".join(
                self._fit(self.cell_text(row[c]), widths[c]) for c in range(len(widths))
            )
            lines.append(f"{str(r).rjust(row_w)} {cells}".rstrip())
        return lines
