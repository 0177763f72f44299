from __future__ import annotations

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import QFrame, QLabel, QHBoxLayout, QVBoxLayout, QToolButton

from core.state import Notification


def _colors(kind: str) -> tuple[str, str, str]:
    """
    Returns (bg, border, text).
    """
    kind = (kind or "info").lower()
    if kind == "success":
        return "#052e1a", "#16a34a", "#f5f5f4"
    if kind == "warning":
        return "#2a1a05", "#f59e0b", "#f5f5f4"
    if kind == "error":
        return "#2a0a0a", "#ef4444", "#f5f5f4"
    return "#1c1917", "#f97316", "#f5f5f4"


class MessagePanel(QFrame):
    """
    Inline panel showing the pending notification, if any.
    It stays until the user closes it or a newer notification replaces it.
    """
    dismissed = Signal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("MessagePanel")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)

        root = QHBoxLayout(self)
        root.setContentsMargins(12, 10, 10, 10)
        root.setSpacing(10)

        text_col = QVBoxLayout()
        text_col.setSpacing(2)
        self.lbl_title = QLabel("")
        self.lbl_title.setObjectName("MessageTitle")
        self.lbl_message = QLabel("")
        self.lbl_message.setWordWrap(True)
        self.lbl_message.setTextInteractionFlags(Qt.TextSelectableByMouse)
        text_col.addWidget(self.lbl_title)
        text_col.addWidget(self.lbl_message)

        self.btn_close = QToolButton()
        self.btn_close.setText("✕")
        self.btn_close.setToolTip("Dismiss")
        self.btn_close.setCursor(Qt.CursorShape.PointingHandCursor)
        self.btn_close.clicked.connect(self.dismissed.emit)

        root.addLayout(text_col, 1)
        root.addWidget(self.btn_close, 0, Qt.AlignmentFlag.AlignTop)

        self.hide()

    def show_notification(self, notification: Notification | None):
        if notification is None:
            self.hide()
            return

        bg, border, text = _colors(notification.notify_type)
        self.setStyleSheet(f"""
        QFrame#MessagePanel {{ background: {bg}; border: 1px solid {border}; border-radius: 12px; }}
        QLabel {{ color: {text}; font-size: 12px; }}
        QLabel#MessageTitle {{ font-weight: 600; }}
        QToolButton {{ border: none; background: transparent; color: {text}; padding: 2px 6px; }}
        QToolButton:hover {{ background: rgba(255,255,255,0.06); border-radius: 6px; }}
        """)

        self.lbl_title.setText(notification.title)
        self.lbl_message.setText(notification.message)
        self.show()
