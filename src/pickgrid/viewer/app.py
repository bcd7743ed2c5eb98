"""Viewer window: filter bar, row-pin checklist, column tags, and the grid."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Sequence

from PyQt6.QtGui import QAction, QFont
from PyQt6.QtWidgets import (
    QApplication,
    QHBoxLayout,
    QLabel,
    QMainWindow,
    QMessageBox,
    QVBoxLayout,
    QWidget,
)

from pickgrid.config import get_int_setting, get_str_setting, load_config
from pickgrid.engine.columns import Column, GroupColumn, LeafColumn, columns_from_rows, field_extractor
from pickgrid.engine.matching import Item
from pickgrid.viewer.filter_bar import FilterBar
from pickgrid.viewer.grid_widget import GridWidget
from pickgrid.viewer.select_widgets import ChecklistSelect, TagSelect

SAMPLE_ROWS: list[dict[str, Any]] = [
    {"id": "1", "name": "Jhon", "email": "jhon@gmail.com"},
    {"id": "2", "name": "Foo", "email": "foo@gmail.com"},
    {"id": "3", "name": "Dojo", "email": "dojo@gmail.com"},
]


def sample_columns() -> list[Column]:
    return [
        GroupColumn(
            id="person",
            name="person",
            text=lambda row: f"{row['name']} {row['email']}",
            enable_resizing=True,
            children=[
                LeafColumn(id="name", name="name", text=field_extractor("name"), size=200),
                LeafColumn(id="email", name="email", text=field_extractor("email"), size=400),
            ],
        ),
    ]


def row_items(rows: Sequence[dict[str, Any]], columns: Sequence[Column]) -> list[Item]:
    """One selectable item per row: id from row['id'] (or position), name from the first text column."""
    leaves = [c for c in _iter_leaves(columns) if c.text is not None]
    items = []
    for i, row in enumerate(rows):
        row_id = _row_key(row, i)
        name = str(leaves[0].text(row)) if leaves else row_id
        items.append(Item(id=row_id, name=name or row_id))
    return items


def _row_key(row: dict[str, Any], position: int) -> str:
    return str(row.get("id", position))


def _iter_leaves(columns: Sequence[Column]):
    for column in columns:
        if isinstance(column, GroupColumn):
            yield from _iter_leaves(column.children)
        else:
            yield column


def run_viewer(
    rows: Sequence[dict[str, Any]] | None = None,
    columns: Sequence[Column] | None = None,
) -> None:
    """Create QApplication and main window; run event loop."""
    app = QApplication(sys.argv)
    app.setApplicationName("pickgrid")
    if rows is None:
        rows = SAMPLE_ROWS
        columns = columns or sample_columns()
    win = ViewerMainWindow(rows=rows, columns=columns or columns_from_rows(rows))
    win.show()
    sys.exit(app.exec())


class ViewerMainWindow(QMainWindow):
    """Main window: selectors on top, filter bar, grid below."""

    def __init__(
        self,
        rows: Sequence[dict[str, Any]],
        columns: Sequence[Column],
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._rows = list(rows)
        self._columns = list(columns)
        self._pinned_ids: list[str] = []
        self._config = load_config(Path.cwd())
        self.setWindowTitle("pickgrid")
        font_size = get_int_setting(self._config, "viewer.font_size", 10)
        if font_size:
            self.setFont(QFont(self.font().family(), int(font_size)))
        self._setup_menu()
        self._setup_central()
        self._status_bar = self.statusBar()
        self._grid.pageChanged.connect(self._on_page_changed)
        self._grid.rowsEdited.connect(self._on_rows_edited)
        self._grid.refresh()

    def _setup_menu(self) -> None:
        menubar = self.menuBar()
        file_menu = menubar.addMenu("&File")
        exit_act = QAction("E&xit", self)
        exit_act.setShortcut("Ctrl+Q")
        exit_act.triggered.connect(self.close)
        file_menu.addAction(exit_act)

        help_menu = menubar.addMenu("&Help")
        syntax_act = QAction("&Filter syntax", self)
        syntax_act.triggered.connect(self._filter_help)
        help_menu.addAction(syntax_act)

    def _filter_help(self) -> None:
        QMessageBox.information(
            self,
            "Filter syntax",
            "term                 match any column\n"
            "column:term          match columns named 'column'\n"
            "term;a:x;b:y         combine with ';' (all must match)\n\n"
            "Only the first free-text term is used.",
        )

    def _setup_central(self) -> None:
        cfg = self._config
        central = QWidget(self)
        layout = QVBoxLayout(central)
        layout.setContentsMargins(4, 4, 4, 4)

        self._grid = GridWidget(
            self._columns,
            self._rows,
            page_size=get_int_setting(cfg, "grid.page_size", 10),
            default_size=get_int_setting(cfg, "grid.default_column_size", 256),
            pinned_row_color=get_str_setting(cfg, "viewer.pinned_row_color", "#fef3c7"),
            parent=central,
        )
        flat = self._grid.model.flat

        pin_select = ChecklistSelect(
            row_items(self._rows, self._columns),
            max_displayed=get_int_setting(cfg, "select.max_displayed", 3),
            placeholder="Pin rows",
            count_label="pinned",
            search_placeholder=get_str_setting(cfg, "select.search_placeholder", "Search kinds"),
            parent=central,
        )
        pin_select.selectionChanged.connect(self._on_pinned_rows_changed)

        column_select = TagSelect(
            [Item(id=leaf.id, name=leaf.name) for leaf in flat.leaves],
            max_visible=get_int_setting(cfg, "select.max_visible", 3),
            search_placeholder=get_str_setting(cfg, "select.search_placeholder", "Search kinds"),
            parent=central,
        )
        column_select.selectionChanged.connect(self._grid.set_visible_columns)

        selectors = QHBoxLayout()
        selectors.addWidget(QLabel("Pinned:", central))
        selectors.addWidget(pin_select)
        selectors.addWidget(QLabel("Columns:", central))
        selectors.addWidget(column_select, 1)
        layout.addLayout(selectors)

        search = FilterBar(central)
        search.filterChanged.connect(self._grid.set_filter_text)
        layout.addWidget(search)
        layout.addWidget(self._grid)

        self.setCentralWidget(central)
        self.resize(900, 600)

    def _pin_predicate(self):
        """Row-pin test for the checked rows; rows are matched by identity within self._rows."""
        pinned = set(self._pinned_ids)
        if not pinned:
            return None
        keys = {id(row): _row_key(row, i) for i, row in enumerate(self._rows)}
        return lambda row: keys.get(id(row)) in pinned

    def _on_pinned_rows_changed(self, ids: list[str]) -> None:
        self._pinned_ids = list(ids)
        self._grid.set_pin_row(self._pin_predicate())

    def _on_rows_edited(self) -> None:
        # Edited rows are new objects, so the pin lookup is rebuilt
        self._rows = list(self._grid.model.source_rows)
        if self._pinned_ids:
            self._grid.set_pin_row(self._pin_predicate())

    def _on_page_changed(self, page_index: int, page_count: int) -> None:
        self._status_bar.showMessage(f"Page {page_index + 1} of {page_count}")
