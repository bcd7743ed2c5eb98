"""Multi-select widgets: a checklist dropdown and a tag-style selector with badges."""

from __future__ import annotations

from typing import Sequence

from PyQt6.QtCore import QPoint, Qt, pyqtSignal
from PyQt6.QtWidgets import (
    QFrame,
    QHBoxLayout,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from pickgrid.engine.matching import Item, rank_items
from pickgrid.engine.selection import (
    push,
    remove,
    replace,
    summarize_selection,
    toggle,
    unselected_items,
    visible_badges,
)

ID_ROLE = Qt.ItemDataRole.UserRole


class SearchPopup(QFrame):
    """
    Popup with a search field over a ranked item list.

    With checkable=True each row carries a check box reflecting `selected`;
    otherwise rows are plain and activating one emits itemChosen.
    """

    itemChosen = pyqtSignal(str)  # item id
    itemToggled = pyqtSignal(str)  # item id

    def __init__(
        self,
        items: Sequence[Item],
        selected: Sequence[str] = (),
        checkable: bool = False,
        placeholder: str = "Search kinds",
        parent=None,
    ) -> None:
        super().__init__(parent, Qt.WindowType.Popup)
        self.setFrameShape(QFrame.Shape.StyledPanel)
        self.setAttribute(Qt.WidgetAttribute.WA_DeleteOnClose)
        self._items = list(items)
        self._selected = list(selected)
        self._checkable = checkable
        self._populating = False

        self._search = QLineEdit(self)
        self._search.setPlaceholderText(placeholder)
        self._search.textChanged.connect(self._populate)
        self._search.returnPressed.connect(self._activate_current)
        self._list = QListWidget(self)
        self._list.itemClicked.connect(self._on_item_clicked)
        self._list.itemChanged.connect(self._on_item_changed)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(4, 4, 4, 4)
        layout.addWidget(self._search)
        layout.addWidget(self._list)
        self.setMinimumWidth(240)
        self._populate("")

    def set_selected(self, selected: Sequence[str]) -> None:
        self._selected = list(selected)
        self._populate(self._search.text())

    def popup_below(self, anchor: QWidget) -> None:
        self.move(anchor.mapToGlobal(QPoint(0, anchor.height())))
        self.show()
        self._search.setFocus()

    def _populate(self, probe: str) -> None:
        self._populating = True
        self._list.clear()
        for item in rank_items(self._items, probe):
            row = QListWidgetItem(item.name)
            row.setData(ID_ROLE, item.id)
            if self._checkable:
                row.setFlags(row.flags() | Qt.ItemFlag.ItemIsUserCheckable)
                checked = item.id in self._selected
                row.setCheckState(Qt.CheckState.Checked if checked else Qt.CheckState.Unchecked)
            self._list.addItem(row)
        if self._list.count():
            self._list.setCurrentRow(0)
        self._populating = False

    def _activate_current(self) -> None:
        row = self._list.currentItem()
        if row is not None:
            self._emit_for(row)

    def _on_item_clicked(self, row: QListWidgetItem) -> None:
        if not self._checkable:
            self._emit_for(row)

    def _on_item_changed(self, row: QListWidgetItem) -> None:
        if self._checkable and not self._populating:
            self.itemToggled.emit(row.data(ID_ROLE))

    def _emit_for(self, row: QListWidgetItem) -> None:
        item_id = row.data(ID_ROLE)
        if self._checkable:
            self.itemToggled.emit(item_id)
        else:
            self.itemChosen.emit(item_id)


class ChecklistSelect(QWidget):
    """Button summarizing the selection; opens a searchable checklist popup."""

    selectionChanged = pyqtSignal(list)  # list[str] of ids

    def __init__(
        self,
        items: Sequence[Item],
        selected: Sequence[str] = (),
        max_displayed: int = 3,
        placeholder: str = "Select kinds",
        search_placeholder: str = "Search kinds",
        count_label: str | None = None,
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._items = list(items)
        self._selected = list(selected)
        self._max_displayed = max_displayed
        self._placeholder = placeholder
        self._search_placeholder = search_placeholder
        self._count_label = count_label
        self._popup: SearchPopup | None = None  # the open popup; deleted on close

        self._button = QPushButton(self)
        self._button.setMinimumWidth(128)
        self._button.clicked.connect(self._open_popup)
        layout = QHBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._button)
        self._refresh_button()

    def selected(self) -> list[str]:
        return list(self._selected)

    def set_selected(self, ids: Sequence[str]) -> None:
        self._selected = list(ids)
        self._refresh_button()
        if self._popup is not None:
            self._popup.set_selected(self._selected)
        self.selectionChanged.emit(self.selected())

    def _refresh_button(self) -> None:
        summary = summarize_selection(
            self._items, self._selected, self._max_displayed, self._placeholder, self._count_label
        )
        text = summary.label
        if summary.more_label:
            text = f"{text}  {summary.more_label}"
        self._button.setText(text)
        self._button.setToolTip(summary.tooltip or "")

    def _open_popup(self) -> None:
        if self._popup is not None:
            self._popup.close()
        popup = SearchPopup(
            self._items,
            self._selected,
            checkable=True,
            placeholder=self._search_placeholder,
            parent=self,
        )
        popup.itemToggled.connect(lambda item_id: self.set_selected(toggle(self._selected, item_id)))
        popup.destroyed.connect(lambda *_: self._forget_popup(popup))
        self._popup = popup
        popup.popup_below(self._button)

    def _forget_popup(self, popup: SearchPopup) -> None:
        if self._popup is popup:
            self._popup = None


class TagSelect(QWidget):
    """
    Selected items as removable badges plus a "+" button for adding more.

    Clicking a badge offers the unselected items to swap in its place. Past
    max_visible badges the rest collapse behind a "…" button.
    """

    selectionChanged = pyqtSignal(list)  # list[str] of ids

    def __init__(
        self,
        items: Sequence[Item],
        selected: Sequence[str] = (),
        max_visible: int = 3,
        search_placeholder: str = "Search kinds",
        parent=None,
    ) -> None:
        super().__init__(parent)
        self._items = list(items)
        self._selected = list(selected)
        self._max_visible = max_visible
        self._search_placeholder = search_placeholder
        self._show_all = False
        self._layout = QHBoxLayout(self)
        self._layout.setContentsMargins(0, 0, 0, 0)
        self._rebuild()

    def selected(self) -> list[str]:
        return list(self._selected)

    def set_selected(self, ids: Sequence[str]) -> None:
        self._selected = list(ids)
        if len(self._selected) < self._max_visible:
            self._show_all = False
        self._rebuild()
        self.selectionChanged.emit(self.selected())

    def _clear_layout(self) -> None:
        while self._layout.count():
            child = self._layout.takeAt(0).widget()
            if child is not None:
                child.deleteLater()

    def _rebuild(self) -> None:
        self._clear_layout()
        layout = visible_badges(self._items, self._selected, self._max_visible, self._show_all)
        for item in layout.badges:
            self._layout.addWidget(self._make_badge(item))
        if layout.show_more:
            more = QToolButton(self)
            more.setText("…")
            more.setToolTip(layout.overflow_tooltip)
            more.clicked.connect(lambda: self._set_show_all(True))
            self._layout.addWidget(more)
        if layout.show_less:
            less = QPushButton("Show less", self)
            less.clicked.connect(lambda: self._set_show_all(False))
            self._layout.addWidget(less)
        if layout.can_add:
            add = QToolButton(self)
            add.setText("+")
            add.clicked.connect(lambda: self._open_popup(add, None))
            self._layout.addWidget(add)
        self._layout.addStretch(1)

    def _make_badge(self, item: Item) -> QWidget:
        badge = QWidget(self)
        row = QHBoxLayout(badge)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(0)
        name = QPushButton(item.name, badge)
        name.clicked.connect(lambda: self._open_popup(name, item.id))
        close = QToolButton(badge)
        close.setText("×")
        close.setToolTip(f"Remove {item.name}")
        close.clicked.connect(lambda: self.set_selected(remove(self._selected, item.id)))
        row.addWidget(name)
        row.addWidget(close)
        return badge

    def _set_show_all(self, show_all: bool) -> None:
        self._show_all = show_all
        self._rebuild()

    def _open_popup(self, anchor: QWidget, replacing: str | None) -> None:
        """Offer unselected items; the chosen one is appended, or swapped in for `replacing`."""
        popup = SearchPopup(
            unselected_items(self._items, self._selected),
            placeholder=self._search_placeholder,
            parent=self,
        )

        def chosen(item_id: str) -> None:
            # The badges are rebuilt below, so the popup's anchor goes away
            popup.close()
            if replacing is None:
                self.set_selected(push(self._selected, item_id))
            else:
                self.set_selected(replace(self._selected, replacing, item_id))

        popup.itemChosen.connect(chosen)
        popup.popup_below(anchor)
