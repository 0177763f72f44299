# ui/models/track_table_model.py
from __future__ import annotations
from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from core.utils import format_time
from db.models import Track

COLUMNS = ["Title", "Artist", "Album", "Genre", "Length", "Actions"]
ACTIONS_COLUMN = 5

class TrackTableModel(QAbstractTableModel):
    def __init__(self, rows=()):
        super().__init__()
        self._rows: list[Track] = list(rows)

    def set_rows(self, rows):
        self.beginResetModel()
        self._rows = list(rows)
        self.endResetModel()

    def rowCount(self, parent=QModelIndex()) -> int:
        return len(self._rows)

    def columnCount(self, parent=QModelIndex()) -> int:
        return len(COLUMNS)

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if role != Qt.DisplayRole or orientation != Qt.Horizontal:
            return None
        return COLUMNS[section]

    def data(self, index: QModelIndex, role=Qt.DisplayRole):
        if not index.isValid():
            return None
        track = self._rows[index.row()]
        col = index.column()

        if role == Qt.DisplayRole:
            if col == 0:
                return track.title
            if col == 1:
                return track.artist
            if col == 2:
                return track.album
            if col == 3:
                return track.genre
            if col == 4:
                return format_time(track.length)
            return ""
        if role == Qt.UserRole:
            return track
        return None

    def track_at(self, row: int) -> Track | None:
        if row < 0 or row >= len(self._rows):
            return None
        return self._rows[row]

    def row_for_track_id(self, track_id: int) -> int:
        for i, t in enumerate(self._rows):
            if t.id == track_id:
                return i
        return -1
