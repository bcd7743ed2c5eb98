"""Data grid: filtered, sorted, paged rows with pinned rows and pinned columns first."""

from __future__ import annotations

from typing import Any, Callable, Sequence

from PyQt6.QtCore import Qt, QTimer, pyqtSignal
from PyQt6.QtGui import QBrush, QColor
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QVBoxLayout,
    QWidget,
)

from pickgrid.engine.columns import Column, header_rows
from pickgrid.engine.grid import GridModel, GridView
from pickgrid.engine.layout import resize_leaf


def _header_path(rows: list[list[tuple[str, int]]], index: int) -> list[str]:
    """Names covering leaf `index` (declaration order), outermost first, placeholders skipped."""
    path: list[str] = []
    for row in rows:
        start = 0
        for name, span in row:
            if start <= index < start + span:
                if name:
                    path.append(name)
                break
            start += span
    return path


class GridWidget(QWidget):
    """Table over a GridModel. Call set_filter_text() to apply a filter query."""

    pageChanged = pyqtSignal(int, int)  # page index, page count
    rowsEdited = pyqtSignal()  # a cell edit replaced a row; see model.source_rows

    def __init__(
        self,
        columns: Sequence[Column],
        rows: Sequence[Any],
        pin_row: Callable[[Any], bool] | None = None,
        page_size: int | None = 10,
        default_size: int = 256,
        pinned_row_color: str = "#fef3c7",
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._columns = list(columns)
        self._rows = list(rows)
        self._page_size = page_size
        self._default_size = default_size
        self._model = GridModel(columns, rows, pin_row=pin_row, page_size=page_size, default_size=default_size)
        self._hidden: set[str] = set()
        self._pinned_brush = QBrush(QColor(pinned_row_color))
        self._filter_text = ""
        self._sort_by: str | None = None
        self._descending = False
        self._page_index = 0
        self._sizes: dict[str, int] = {}
        self._view: GridView | None = None
        self._adjusting = False

        rows_by_depth = header_rows(columns)
        declared = [leaf.id for leaf in self._model.flat.leaves]
        self._tooltips = {
            leaf_id: " / ".join(_header_path(rows_by_depth, i)) for i, leaf_id in enumerate(declared)
        }

        self._table = QTableWidget(self)
        self._table.setEditTriggers(
            QTableWidget.EditTrigger.DoubleClicked | QTableWidget.EditTrigger.EditKeyPressed
        )
        self._table.itemChanged.connect(self._on_item_changed)
        header = self._table.horizontalHeader()
        header.setSectionsClickable(True)
        header.sectionClicked.connect(self._on_header_clicked)
        header.sectionResized.connect(self._on_section_resized)

        self._prev = QPushButton("Prev", self)
        self._prev.clicked.connect(lambda: self.set_page(self._page_index - 1))
        self._next = QPushButton("Next", self)
        self._next.clicked.connect(lambda: self.set_page(self._page_index + 1))
        self._page_label = QLabel(self)

        pager = QHBoxLayout()
        pager.addWidget(self._prev)
        pager.addWidget(self._next)
        pager.addStretch(1)
        pager.addWidget(self._page_label)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._table)
        layout.addLayout(pager)
        self.refresh()

    @property
    def model(self) -> GridModel:
        return self._model

    def set_filter_text(self, text: str) -> None:
        self._filter_text = text or ""
        self._page_index = 0
        self.refresh()

    def set_page(self, page_index: int) -> None:
        self._page_index = page_index
        self.refresh()

    def set_pin_row(self, pin_row: Callable[[Any], bool] | None) -> None:
        """Replace the row-pin predicate; the model is rebuilt from the original rows."""
        self._model = GridModel(
            self._columns,
            self._rows,
            pin_row=pin_row,
            page_size=self._page_size,
            default_size=self._default_size,
        )
        self.refresh()

    def set_visible_columns(self, leaf_ids: Sequence[str]) -> None:
        """Show only these leaf columns; an empty selection shows every column."""
        visible = set(leaf_ids)
        self._hidden = {leaf.id for leaf in self._model.flat.leaves if visible and leaf.id not in visible}
        self._apply_hidden()

    def _apply_hidden(self) -> None:
        if self._view is None:
            return
        for col, leaf_id in enumerate(self._view.column_ids):
            self._table.setColumnHidden(col, leaf_id in self._hidden)

    def refresh(self) -> None:
        """Recompute the view from the model and redraw the table."""
        view = self._model.view(
            raw_filter=self._filter_text,
            sort_by=self._sort_by,
            descending=self._descending,
            page_index=self._page_index,
            sizes=self._sizes,
        )
        self._view = view
        self._page_index = view.page_index
        self._adjusting = True
        try:
            self._fill_table(view)
        finally:
            self._adjusting = False
        self._apply_hidden()
        self._page_label.setText(f"Page {view.page_index + 1} of {view.page_count}")
        self._prev.setEnabled(view.page_index > 0)
        self._next.setEnabled(view.page_index < view.page_count - 1)
        self.pageChanged.emit(view.page_index, view.page_count)

    def _fill_table(self, view: GridView) -> None:
        flat = self._model.flat
        table = self._table
        table.clear()
        table.setColumnCount(len(view.column_ids))
        table.setRowCount(len(view.rows))
        for col, leaf_id in enumerate(view.column_ids):
            leaf = flat.leaf(leaf_id)
            header_item = QTableWidgetItem(leaf.name)
            tooltip = self._tooltips.get(leaf_id, leaf.name)
            if leaf_id in view.offsets:
                font = header_item.font()
                font.setBold(True)
                header_item.setFont(font)
                tooltip = f"{tooltip} (pinned, left {view.offsets[leaf_id]}px)"
            header_item.setToolTip(tooltip)
            table.setHorizontalHeaderItem(col, header_item)
            table.setColumnWidth(col, view.sizes[leaf_id])

        for r, row in enumerate(view.rows):
            pinned = view.pinned_row_flags[r]
            for col, leaf_id in enumerate(view.column_ids):
                value = self._model.cell_text(row, leaf_id)
                if value is None and isinstance(row, dict):
                    value = row.get(leaf_id)
                if isinstance(value, (list, tuple)):
                    value = ", ".join(str(v) for v in value)
                item = QTableWidgetItem("" if value is None else str(value))
                if not self._model.is_editable(leaf_id):
                    item.setFlags(item.flags() & ~Qt.ItemFlag.ItemIsEditable)
                if pinned:
                    item.setBackground(self._pinned_brush)
                table.setItem(r, col, item)

        header = table.horizontalHeader()
        if self._sort_by in view.column_ids:
            order = Qt.SortOrder.DescendingOrder if self._descending else Qt.SortOrder.AscendingOrder
            header.setSortIndicatorShown(True)
            header.setSortIndicator(view.column_ids.index(self._sort_by), order)
        else:
            header.setSortIndicatorShown(False)

    def _on_item_changed(self, item: QTableWidgetItem) -> None:
        """Store an edited cell in the model; the current page is kept."""
        if self._adjusting or self._view is None:
            return
        leaf_id = self._leaf_id_at(item.column())
        if leaf_id is None or not 0 <= item.row() < len(self._view.rows):
            return
        position = self._model.row_position(self._view.rows[item.row()])
        if position is None:
            return
        self._model = self._model.update_cell(position, leaf_id, item.text())
        self._rows = self._model.source_rows
        # Redraw after the editor has committed; refresh() clears the table
        QTimer.singleShot(0, self._after_edit)

    def _after_edit(self) -> None:
        self.refresh()
        self.rowsEdited.emit()

    def _leaf_id_at(self, section: int) -> str | None:
        if self._view is None or not 0 <= section < len(self._view.column_ids):
            return None
        return self._view.column_ids[section]

    def _on_header_clicked(self, section: int) -> None:
        """Cycle sorting on a column: ascending, descending, off."""
        leaf_id = self._leaf_id_at(section)
        if leaf_id is None or not self._model.flat.leaf(leaf_id).filterable:
            return
        if self._sort_by != leaf_id:
            self._sort_by, self._descending = leaf_id, False
        elif not self._descending:
            self._descending = True
        else:
            self._sort_by, self._descending = None, False
        self.refresh()

    def _on_section_resized(self, section: int, old_size: int, new_size: int) -> None:
        if self._adjusting:
            return
        leaf_id = self._leaf_id_at(section)
        if leaf_id is None:
            return
        width = resize_leaf(self._model.flat.leaf(leaf_id), new_size)
        self._sizes[leaf_id] = width
        if width != new_size:
            self._adjusting = True
            try:
                self._table.setColumnWidth(section, width)
            finally:
                self._adjusting = False
