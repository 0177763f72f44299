# ui/delegates/actions_delegate.py
from __future__ import annotations
from PySide6.QtCore import Qt, QRect, QEvent, Signal
from PySide6.QtGui import QPainter
from PySide6.QtWidgets import QStyledItemDelegate, QStyleOptionButton, QApplication, QStyle

from ui.models.track_table_model import ACTIONS_COLUMN

BTN_W, BTN_H, GAP = 64, 24, 6

def _button_rects(rect: QRect) -> tuple[QRect, QRect]:
    y = rect.center().y() - BTN_H // 2
    play = QRect(rect.left() + 8, y, BTN_W, BTN_H)
    delete = QRect(play.right() + GAP, y, BTN_W, BTN_H)
    return play, delete

class ActionsDelegate(QStyledItemDelegate):
    playClicked = Signal(object)     # Track
    deleteClicked = Signal(object)   # Track

    def paint(self, painter: QPainter, option, index):
        super().paint(painter, option, index)

        for btn_rect, text in zip(_button_rects(option.rect), ("Play", "Delete")):
            opt = QStyleOptionButton()
            opt.rect = btn_rect
            opt.text = text
            opt.state = QStyle.State_Enabled
            QApplication.style().drawControl(QStyle.CE_PushButton, opt, painter)

    def editorEvent(self, event, model, option, index):
        if index.column() != ACTIONS_COLUMN:
            return False
        if event.type() == QEvent.MouseButtonRelease and event.button() == Qt.LeftButton:
            track = index.data(Qt.UserRole)
            if track is None:
                return False

            play_rect, delete_rect = _button_rects(option.rect)
            pos = event.position().toPoint()
            if play_rect.contains(pos):
                self.playClicked.emit(track)
                return True
            if delete_rect.contains(pos):
                self.deleteClicked.emit(track)
                return True
        return False
