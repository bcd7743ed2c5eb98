"""Debounced filter query input for the grid."""

from __future__ import annotations

from PyQt6.QtCore import QTimer, pyqtSignal
from PyQt6.QtWidgets import QLineEdit, QSizePolicy, QVBoxLayout, QWidget

from pickgrid.engine.filter_query import describe_filter, parse_filter

DEBOUNCE_MS = 200


class FilterBar(QWidget):
    """Single-line filter query. Emits filterChanged(text) once typing pauses, or at once on Enter.

    The tooltip shows how the current text parses, so users can check what a
    query like "gmail;name:jo" will match before it is applied.
    """

    filterChanged = pyqtSignal(str)

    def __init__(self, parent: QWidget | None = None, debounce_ms: int = DEBOUNCE_MS) -> None:
        super().__init__(parent)
        self._emitted: str | None = None
        self._edit = QLineEdit(self)
        self._edit.setPlaceholderText("Filter: text;column:text;…")
        self._edit.setClearButtonEnabled(True)
        self._edit.setToolTip(describe_filter(parse_filter("")))
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(debounce_ms)
        self._timer.timeout.connect(self._emit_filter)
        self._edit.textChanged.connect(self._on_text_changed)
        self._edit.returnPressed.connect(self._emit_filter)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self._edit)
        self.setSizePolicy(QSizePolicy.Policy.Expanding, QSizePolicy.Policy.Fixed)

    def filter_text(self) -> str:
        return self._edit.text()

    def set_filter_text(self, text: str) -> None:
        """Replace the query and apply it without waiting for the debounce."""
        self._edit.setText(text)
        self._emit_filter()

    def _on_text_changed(self, text: str) -> None:
        self._edit.setToolTip(describe_filter(parse_filter(text)))
        self._timer.start()

    def _emit_filter(self) -> None:
        self._timer.stop()
        text = self.filter_text()
        if text == self._emitted:
            return
        self._emitted = text
        self.filterChanged.emit(text)
