# ui/widgets/pagination_bar.py
from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QIntValidator
from PySide6.QtWidgets import QWidget, QHBoxLayout, QPushButton, QLabel, QLineEdit

from core.pagination import ELLIPSIS, PaginationController


class PaginationBar(QWidget):
    """Page buttons plus a "go to page" box, rebuilt whenever the source changes."""

    def __init__(self, controller: PaginationController, parent=None):
        super().__init__(parent)
        self.controller = controller

        root = QHBoxLayout(self)
        root.setContentsMargins(8, 4, 8, 4)
        root.setSpacing(4)

        self._buttons_row = QHBoxLayout()
        self._buttons_row.setSpacing(4)
        root.addStretch(1)
        root.addLayout(self._buttons_row)
        root.addSpacing(16)

        self.jump_edit = QLineEdit()
        self.jump_edit.setPlaceholderText("Page")
        self.jump_edit.setFixedWidth(60)
        self.jump_edit.setValidator(QIntValidator(1, 999999, self))
        self.btn_go = QPushButton("Go")

        root.addWidget(self.jump_edit)
        root.addWidget(self.btn_go)
        root.addStretch(1)

        self.jump_edit.textEdited.connect(self.controller.set_jump_text)
        self.jump_edit.returnPressed.connect(self._on_jump)
        self.btn_go.clicked.connect(self._on_jump)

        self.controller.source.changed.connect(self.rebuild)
        self.setObjectName("PaginationBar")
        self._apply_styles()
        self.rebuild()

    def rebuild(self):
        while self._buttons_row.count():
            item = self._buttons_row.takeAt(0)
            w = item.widget()
            if w is not None:
                w.deleteLater()

        total = self.controller.total_pages
        self.setVisible(total > 1)
        current = self.controller.current_page

        for entry in self.controller.buttons():
            if entry == ELLIPSIS:
                lbl = QLabel(ELLIPSIS)
                lbl.setAlignment(Qt.AlignmentFlag.AlignCenter)
                self._buttons_row.addWidget(lbl)
                continue

            btn = QPushButton(str(entry))
            btn.setObjectName("PageButton")
            btn.setCheckable(True)
            btn.setChecked(entry == current)
            btn.setFixedWidth(36)
            btn.clicked.connect(lambda _checked=False, p=entry: self.controller.paginate(p))
            self._buttons_row.addWidget(btn)

        self.jump_edit.setText(self.controller.jump_text)

    def _on_jump(self):
        self.controller.set_jump_text(self.jump_edit.text())
        if self.controller.jump():
            self.jump_edit.clear()

    def _apply_styles(self):
        self.setStyleSheet("""
        QPushButton#PageButton { background: #1c1917; border: 1px solid #44403c; border-radius: 8px; padding: 4px 0; color: #f5f5f4; }
        QPushButton#PageButton:hover { border-color: #f97316; }
        QPushButton#PageButton:checked { background: #f97316; border-color: #f97316; color: #0c0a09; }
        QLabel { color: #a8a29e; }
        """)
