import logging
from dataclasses import dataclass
from typing import Callable, Optional

from aggregation import MetricBoard, numeric_columns
from cell_coercion import ActionCell, coerce_rows
from cell_renderer import CellFragment, render_cell
from column_projector import normalize_rows, project
from csv_exporter import export_filename, to_csv
from handler_registry import CHECKBOX_SUFFIX, HandlerRegistry
from modification_engine import apply_modifications
from table_config import TableConfig
from view_state import SortDirection, ViewState, ViewTriad

logger = logging.getLogger(__name__)

SORT_ICONS = {
    None: "⇅",
    SortDirection.ASCENDING: "↑",
    SortDirection.DESCENDING: "↓",
}


@dataclass(frozen=True)
class DownloadButton:
    placement: str
    element_id: str
    text: str
    css_class: str
    custom_html: Optional[str] = None


class SmartTable:
    """One table instance: runs the pipeline and notifies its surface.

    ``commit_view`` receives the :class:`ViewTriad` after every change and
    ``persist_blob`` receives the CSV bytes and filename on download.
    """

    def __init__(
        self,
        config: Optional[TableConfig] = None,
        handlers: Optional[HandlerRegistry] = None,
        commit_view: Optional[Callable[[ViewTriad], None]] = None,
        persist_blob: Optional[Callable[[bytes, str], None]] = None,
    ):
        self.config = config or TableConfig()
        self.handlers = handlers or HandlerRegistry()
        self.commit_view = commit_view
        self.persist_blob = persist_blob

        self.headings: list = []
        self.view = ViewState()
        self.metrics = MetricBoard()
        self.filters: dict[int, str] = {}
        self.checked: dict[int, bool] = {}
        self.mounted = False

        self.initialize()

    # ---------- pipeline ----------
    def initialize(self):
        raw = normalize_rows(self.config.headings, self.config.data)
        projection = project(self.config.headings, raw, self.config.hide_columns)
        rows = apply_modifications(
            projection.rows, projection.headings, self.config.modify_config
        )
        rows = coerce_rows(rows)

        self.headings = projection.headings
        self.view.initialize(rows)
        self.filters = {}
        self.metrics.clear()
        self.checked = self._seed_checked(rows)
        logger.debug(
            "Table %s initialised with %d rows x %d columns",
            self.config.table_id,
            len(rows),
            len(self.headings),
        )

        if self.commit_view is None:
            logger.error("SmartTable %s: container not found", self.config.table_id)
            self.mounted = False
            return
        self.mounted = True
        self._commit()

    def update_data(self, data):
        self.config.data = [list(row) for row in data]
        self.initialize()

    def _seed_checked(self, rows) -> dict[int, bool]:
        checked = {}
        for idx, row in enumerate(rows):
            for cell in row:
                if isinstance(cell, ActionCell) and cell.has_checkbox:
                    checked[idx] = cell.checkbox_checked
                    break
        return checked

    def _commit(self):
        if self.mounted and self.commit_view is not None:
            self.commit_view(self.view.triad)

    # ---------- sort / filter / metrics ----------
    def sort_by_column(self, column: int):
        state = self.view.sort(column)
        self.metrics.refresh(self.view.filtered)
        self._commit()
        return state

    def sort_icon(self, column: int) -> str:
        state = self.view.sort_state
        if state.column != column:
            return SORT_ICONS[None]
        return SORT_ICONS[state.direction]

    def apply_filters(self, predicates):
        self.filters = {
            int(col): str(text)
            for col, text in (
                predicates.items() if isinstance(predicates, dict) else enumerate(predicates or [])
            )
            if text
        }
        filtered = self.view.filter(self.filters)
        self.metrics.refresh(filtered)
        self._commit()
        return filtered

    def numeric_columns(self) -> list[int]:
        return numeric_columns(self.view.processed)

    def is_numeric_column(self, column: int) -> bool:
        return column in self.numeric_columns()

    def select_metric(self, column: int, metric):
        return self.metrics.select(column, metric, self.view.filtered)

    def metric_label(self, column: int) -> str:
        return self.metrics.label(column)

    # ---------- rendering ----------
    def render_row(self, displayed_index: int) -> list[CellFragment]:
        row = self.view.displayed[displayed_index]
        idx = self.view.processed_index(row)
        return [render_cell(cell, idx, self.checked.get(idx)) for cell in row]

    # ---------- actions ----------
    def _action_at(self, displayed_index: int, column: int):
        row = self.view.displayed[displayed_index]
        cell = row[column]
        if not isinstance(cell, ActionCell):
            raise ValueError(f"Cell [{displayed_index},{column}] is not an action cell")
        return row, self.view.processed_index(row), cell

    def click_action(self, displayed_index: int, column: int) -> bool:
        row, idx, cell = self._action_at(displayed_index, column)
        found = self.handlers.invoke(cell.handler_name, row, idx)
        if cell.has_checkbox:
            self.checked[idx] = True
        return found

    def toggle_checkbox(self, displayed_index: int, column: int, checked: bool) -> bool:
        row, idx, cell = self._action_at(displayed_index, column)
        self.checked[idx] = bool(checked)
        if not cell.handler_name:
            return False
        return self.handlers.invoke(
            cell.handler_name + CHECKBOX_SUFFIX, row, idx, bool(checked)
        )

    def get_checked_rows(self) -> list[dict]:
        return [
            {"index": idx, "data": self.view.processed[idx]}
            for idx in sorted(self.checked)
            if self.checked[idx]
        ]

    # ---------- data access ----------
    def get_data(self):
        return self.config.data

    def get_filtered_data(self):
        return self.view.filtered

    # ---------- export ----------
    def download_button(self) -> Optional[DownloadButton]:
        download = self.config.download
        placement = download.placement
        if placement is None:
            return None
        return DownloadButton(
            placement=placement,
            element_id=f"{self.config.table_id}-download-{placement}",
            text=download.button_text,
            css_class=download.button_class,
            custom_html=download.custom_html,
        )

    def export_csv(self, include_headers: Optional[bool] = None) -> bytes:
        if include_headers is None:
            include_headers = self.config.download.include_headers
        return to_csv(self.headings, self.view.filtered, include_headers)

    def download(self, filename: Optional[str] = None) -> bytes:
        data = self.export_csv()
        filename = filename or export_filename(self.config.download)
        if self.persist_blob is None:
            logger.warning("No blob writer configured; %s not saved", filename)
        else:
            self.persist_blob(data, filename)
        return data
