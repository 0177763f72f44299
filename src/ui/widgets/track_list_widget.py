# ui/widgets/track_list_widget.py
from __future__ import annotations

from PySide6.QtCore import Signal, Qt, QItemSelectionModel
from PySide6.QtWidgets import QWidget, QVBoxLayout, QTableView, QMenu, QLabel

from ui.models.track_table_model import TrackTableModel, ACTIONS_COLUMN
from ui.delegates.actions_delegate import ActionsDelegate
from core.track_source import SourceMode, TrackSource


class TrackListWidget(QWidget):
    playTrack = Signal(object)     # Track
    deleteTrack = Signal(object)   # Track

    def __init__(self, track_source: TrackSource):
        super().__init__()
        self.track_source = track_source

        self.lbl_caption = QLabel("")
        self.lbl_caption.setObjectName("TrackCaption")

        self.table = QTableView()
        self.model = TrackTableModel([])
        self.table.setModel(self.model)

        self.table.setSelectionBehavior(QTableView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QTableView.SelectionMode.SingleSelection)
        self.table.verticalHeader().setVisible(False)
        self.table.setShowGrid(False)
        self.table.setAlternatingRowColors(True)

        self.table.setColumnWidth(0, 280)
        self.table.setColumnWidth(1, 180)
        self.table.setColumnWidth(2, 180)
        self.table.setColumnWidth(3, 110)
        self.table.setColumnWidth(4, 70)
        self.table.horizontalHeader().setStretchLastSection(True)
        self.table.setObjectName("TrackTable")

        self.table.verticalHeader().setDefaultSectionSize(30)

        self._apply_styles()

        # Play / Delete buttons in the last column
        self.actions = ActionsDelegate(self.table)
        self.actions.playClicked.connect(self.playTrack.emit)
        self.actions.deleteClicked.connect(self.deleteTrack.emit)
        self.table.setItemDelegateForColumn(ACTIONS_COLUMN, self.actions)

        # Double click -> play
        self.table.doubleClicked.connect(self._on_double_click)

        # Right-click context menu
        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._on_context_menu)

        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.lbl_caption)
        layout.addWidget(self.table)

        self.track_source.changed.connect(self.refresh)

    def refresh(self):
        src = self.track_source
        self.model.set_rows(src.visible_tracks)

        if src.mode is SourceMode.SEARCH:
            if src.count == 0:
                self.lbl_caption.setText(f'No tracks match "{src.search_query}"')
            else:
                self.lbl_caption.setText(f'{src.count} result(s) for "{src.search_query}"')
        elif src.count == 0:
            self.lbl_caption.setText("Your library is empty. Add some tracks to get started.")
        else:
            self.lbl_caption.setText(f"{src.count} track(s) in library")

    # -------------------------
    # UI Events
    # -------------------------
    def _on_double_click(self, index):
        if not index.isValid():
            return
        track = self.model.track_at(index.row())
        if track is not None:
            self.playTrack.emit(track)

    def _on_context_menu(self, pos):
        idx = self.table.indexAt(pos)
        if not idx.isValid():
            return

        track = self.model.track_at(idx.row())
        if track is None:
            return

        menu = QMenu(self)
        act_play = menu.addAction("Play")
        act_delete = menu.addAction("Delete from library")

        chosen = menu.exec(self.table.viewport().mapToGlobal(pos))
        if chosen == act_play:
            self.playTrack.emit(track)
        elif chosen == act_delete:
            self.deleteTrack.emit(track)

    def set_now_playing(self, track):
        if track is None:
            self.table.clearSelection()
            return

        row = self.model.row_for_track_id(track.id)
        if row < 0:
            return  # not on this page

        idx = self.model.index(row, 0)
        sm = self.table.selectionModel()
        if sm is None:
            return

        sm.setCurrentIndex(idx, QItemSelectionModel.ClearAndSelect | QItemSelectionModel.Rows)
        self.table.scrollTo(idx, QTableView.ScrollHint.EnsureVisible)

    def _apply_styles(self):
        self.setStyleSheet("""
        QTableView#TrackTable {
            background-color: #0c0a09;
            alternate-background-color: #141210;
            border: none;
            color: #f5f5f4;
            selection-background-color: rgba(249, 115, 22, 0.18);
            selection-color: #f5f5f4;
        }
        QHeaderView::section {
            background-color: #0c0a09; color: #a8a29e; padding: 4px 6px;
            border: none; border-bottom: 1px solid #292524; font-size: 11px;
        }
        QTableView::item { padding: 4px 6px; }
        QLabel#TrackCaption { color: #a8a29e; font-size: 11px; padding: 4px 6px; }
        """)
