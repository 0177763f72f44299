from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QLabel, QFileDialog,
    QPushButton, QProgressBar, QLineEdit, QHBoxLayout, QCheckBox
)
from PySide6.QtGui import QShortcut, QKeySequence
from PySide6.QtWidgets import QToolButton
from PySide6.QtWidgets import QStyle

from core.config import AUDIO_EXTENSIONS
from core.coordinator import LibraryCoordinator
from core.track_source import SourceMode
from ui.player_bar import PlayerBar
from ui.widgets.message_panel import MessagePanel
from ui.widgets.pagination_bar import PaginationBar
from ui.widgets.track_list_widget import TrackListWidget

AUDIO_FILTER = "Audio files ({})".format(" ".join(f"*{ext}" for ext in AUDIO_EXTENSIONS))


class MainWindow(QMainWindow):
    def __init__(self, app_state, coordinator: LibraryCoordinator):
        super().__init__()
        self.setWindowTitle("PyPlaylist")
        self.resize(1000, 640)
        self.app_state = app_state
        self.coordinator = coordinator

        # --- Shortcuts ---
        QShortcut(QKeySequence("Ctrl+Space"), self, activated=self.coordinator.playback.toggle_play_pause)
        QShortcut(QKeySequence("Ctrl+F"), self, activated=lambda: self.search_box.setFocus())

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        # --- Notification slot ---
        self.message_panel = MessagePanel(self)
        self.message_panel.dismissed.connect(self.coordinator.dismiss_notification)
        self.app_state.notification_changed.connect(self.message_panel.show_notification)
        self.layout.addWidget(self.message_panel)

        # --- Controls ---
        controls = QHBoxLayout()

        self.btn_add_files = QPushButton("Add Tracks")
        self.btn_add_files.clicked.connect(self.add_files)
        controls.addWidget(self.btn_add_files)

        self.btn_add_folder = QPushButton("Add Folder")
        self.btn_add_folder.clicked.connect(self.add_folder)
        controls.addWidget(self.btn_add_folder)

        self.btn_random = QPushButton("Play Random")
        self.btn_random.clicked.connect(self.coordinator.play_random)
        controls.addWidget(self.btn_random)

        self.chk_auto_play = QCheckBox("Auto Play Next")
        self.chk_auto_play.setChecked(self.coordinator.playback.auto_play_next)
        self.chk_auto_play.toggled.connect(self.coordinator.set_auto_play_next)
        controls.addWidget(self.chk_auto_play)

        controls.addStretch(1)

        self.btn_data_dir = QToolButton()
        self.btn_data_dir.setIcon(self.style().standardIcon(QStyle.StandardPixmap.SP_DirOpenIcon))
        self.btn_data_dir.setToolTip("Open data directory")
        self.btn_data_dir.clicked.connect(self.coordinator.open_data_dir)
        controls.addWidget(self.btn_data_dir)

        self.layout.addLayout(controls)

        # --- Search row ---
        search_row = QHBoxLayout()

        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search title / artist / album / genre...")
        self.search_box.returnPressed.connect(self.run_search)
        search_row.addWidget(self.search_box, stretch=1)

        self.btn_search = QPushButton("Search")
        self.btn_search.clicked.connect(self.run_search)
        search_row.addWidget(self.btn_search)

        self.btn_back = QPushButton("Back")
        self.btn_back.setToolTip("Back to library")
        self.btn_back.clicked.connect(self.back_to_library)
        search_row.addWidget(self.btn_back)

        self.layout.addLayout(search_row)

        # --- Tracks + pages ---
        self.track_list = TrackListWidget(self.coordinator.track_source)
        self.track_list.playTrack.connect(self.coordinator.play_track)
        self.track_list.deleteTrack.connect(self.delete_track)
        self.layout.addWidget(self.track_list, 1)

        self.pagination_bar = PaginationBar(self.coordinator.pagination, self)
        self.layout.addWidget(self.pagination_bar)

        # --- Import progress (hidden when idle) ---
        self.scan_row = QWidget()
        scan_layout = QHBoxLayout(self.scan_row)
        scan_layout.setContentsMargins(8, 6, 8, 6)
        scan_layout.setSpacing(10)

        self.scan_label = QLabel("Importing…")
        self.scan_label.setObjectName("ScanLabel")

        self.progress_bar = QProgressBar()
        self.progress_bar.setObjectName("ScanProgress")
        self.progress_bar.setTextVisible(False)
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setValue(0)

        scan_layout.addWidget(self.scan_label)
        scan_layout.addWidget(self.progress_bar, 1)

        self.layout.addWidget(self.scan_row)
        self.scan_row.setVisible(False)
        self.scan_row.setObjectName("ScanRow")

        # --- PlayerBar ---
        self.player_bar = PlayerBar(self.coordinator.playback, self)
        self.layout.addWidget(self.player_bar)

        # --- Coordinator signals ---
        imports = self.coordinator.imports
        imports.busyChanged.connect(self._on_import_busy)
        imports.progressChanged.connect(self._on_import_progress)
        self.coordinator.playback.trackChanged.connect(self.track_list.set_now_playing)
        self.coordinator.track_source.changed.connect(self._on_source_changed)

        self._on_source_changed()

        self.setStyleSheet(self.styleSheet() + """
            QWidget#ScanRow { background: #0c0a09; border-top: 1px solid #292524; }
            QLabel#ScanLabel { color: #a8a29e; font-size: 11px; }
            QProgressBar#ScanProgress { background: #1c1917; border: 1px solid #44403c; border-radius: 5px; height: 10px; }
            QProgressBar#ScanProgress::chunk {
                border-radius: 5px;
                background: qlineargradient(x1:0, y1:0, x2:1, y2:0, stop:0 #f97316, stop:1 #fdba74);
            }
            QToolButton { border: 1px solid transparent; background: transparent; padding: 6px; border-radius: 8px; }
            QToolButton:hover { background: #1c1917; border-color: #44403c; }
            QToolButton:pressed { background: #292524; }
            """)

    # ------------------ search ------------------
    def run_search(self):
        self.coordinator.search(self.search_box.text())

    def back_to_library(self):
        self.search_box.clear()
        self.coordinator.show_library()

    def _on_source_changed(self):
        self.btn_back.setEnabled(self.coordinator.track_source.mode is SourceMode.SEARCH)
        self.track_list.set_now_playing(self.coordinator.playback.current_track)

    # ------------------ imports ------------------
    def add_files(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Add Tracks", "", AUDIO_FILTER)
        if paths:
            self.coordinator.add_files(paths)

    def add_folder(self):
        path = QFileDialog.getExistingDirectory(self, "Add Folder")
        if path:
            self.coordinator.add_folder(path)

    def _on_import_busy(self, busy: bool):
        self.scan_row.setVisible(busy)
        if busy:
            self.statusBar().showMessage("Importing…")
        else:
            self.statusBar().clearMessage()

    def _on_import_progress(self, percent: float, file_name: str):
        percent = max(0, min(100, int(percent)))
        self.progress_bar.setValue(percent)
        if file_name:
            self.scan_label.setText(f"Importing… {file_name} ({percent}%)")
        else:
            self.scan_label.setText("Importing…")

    # ------------------ track actions ------------------
    def delete_track(self, track):
        self.statusBar().showMessage(f"Removing \"{track.title}\" from the library…", 2500)
        self.coordinator.delete_track(track.id)
