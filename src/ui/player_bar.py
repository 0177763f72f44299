# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QIcon, QPixmap, QPainter
from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QToolButton, QSlider
from PySide6.QtCore import QByteArray
from PySide6.QtSvg import QSvgRenderer

from core.playback import PlaybackSession
from core.utils import format_time

# seek slider works in hundredths of a second
SLIDER_SCALE = 100

def _svg_icon(path_d: str, size: int = 20, color: str = "#f5f5f4") -> QIcon:
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
      <path d="{path_d}" fill="{color}"/>
    </svg>
    """.strip()

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    return QIcon(pm)


SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"
SVG_STOP = "M6 6h12v12H6z"
SVG_VOLUME = "M3 9v6h4l5 5V4L7 9H3zm13.5 3A4.5 4.5 0 0 0 14 7.97v8.05A4.5 4.5 0 0 0 16.5 12z"

class PlayerBar(QWidget):
    def __init__(self, session: PlaybackSession, parent=None):
        super().__init__(parent)
        self.session = session

        root = QHBoxLayout(self)
        root.setContentsMargins(8, 6, 8, 6)
        root.setSpacing(10)

        # --- buttons ---
        self.btn_play = QToolButton()
        self.btn_play.setObjectName("BtnPlay")
        self.btn_play.setIconSize(QSize(22, 22))
        self.btn_play.setToolTip("Play/Pause")

        self.btn_stop = QToolButton()
        self.btn_stop.setObjectName("BtnStop")
        self.btn_stop.setIconSize(QSize(20, 20))
        self.btn_stop.setToolTip("Stop")

        self._icons = {
            "play": _svg_icon(SVG_PLAY, 22),
            "pause": _svg_icon(SVG_PAUSE, 22),
            "stop": _svg_icon(SVG_STOP, 20),
            "volume": _svg_icon(SVG_VOLUME, 18),
        }
        self.btn_play.setIcon(self._icons["play"])
        self.btn_stop.setIcon(self._icons["stop"])

        # --- labels ---
        self.lbl_title = QLabel("Nothing playing")
        self.lbl_title.setMinimumWidth(220)
        self.lbl_title.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.lbl_title.setObjectName("NowPlaying")

        self.lbl_time = QLabel("0:00 / 0:00")
        self.lbl_time.setObjectName("TimeLabel")

        # --- seek slider ---
        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.setSingleStep(SLIDER_SCALE)
        self.slider.setPageStep(5 * SLIDER_SCALE)

        # --- volume ---
        self.lbl_volume = QLabel()
        self.lbl_volume.setPixmap(self._icons["volume"].pixmap(18, 18))
        self.volume_slider = QSlider(Qt.Orientation.Horizontal)
        self.volume_slider.setObjectName("VolumeSlider")
        self.volume_slider.setRange(0, 100)
        self.volume_slider.setFixedWidth(110)
        self.volume_slider.setValue(int(round(session.volume * 100)))

        root.addWidget(self.btn_play)
        root.addWidget(self.btn_stop)
        root.addSpacing(6)
        root.addWidget(self.lbl_title, 1)
        root.addWidget(self.slider, 3)
        root.addWidget(self.lbl_time)
        root.addSpacing(6)
        root.addWidget(self.lbl_volume)
        root.addWidget(self.volume_slider)

        # --- signals ---
        self.btn_play.clicked.connect(self.session.toggle_play_pause)
        self.btn_stop.clicked.connect(self.session.stop)

        self.slider.sliderPressed.connect(self.session.seek_down)
        self.slider.sliderMoved.connect(self._on_slider_moved)
        self.slider.sliderReleased.connect(self.session.seek_up)

        self.volume_slider.sliderPressed.connect(self.session.volume_down)
        self.volume_slider.valueChanged.connect(self._on_volume_moved)
        self.volume_slider.sliderReleased.connect(self.session.volume_up)

        self.session.trackChanged.connect(self._on_track_changed)
        self.session.timeChanged.connect(self._on_time)
        self.session.changed.connect(self._refresh)

        self.setObjectName("PlayerBar")
        self._apply_styles()
        self._refresh()

    # --- slider handling ---
    def _on_slider_moved(self, value: int):
        self.session.seek_change(value / SLIDER_SCALE)

    def _on_volume_moved(self, value: int):
        self.session.volume_change(value / 100.0)

    # --- session updates ---
    def _on_track_changed(self, track):
        if track:
            self.lbl_title.setText(f"{track.artist} - {track.title}")
        else:
            self.lbl_title.setText("Nothing playing")
            self.slider.setValue(0)
        self._refresh()

    def _on_time(self, seconds: float):
        if not self.slider.isSliderDown() or self.session.is_seeking:
            self.slider.setValue(int(seconds * SLIDER_SCALE))
        self._update_time_label(seconds)

    def _update_time_label(self, seconds: float):
        self.lbl_time.setText(f"{format_time(seconds)} / {format_time(self.session.duration)}")

    def _refresh(self):
        s = self.session
        has_track = s.current_track is not None

        self.slider.setEnabled(has_track)
        self.btn_play.setEnabled(has_track)
        self.btn_stop.setEnabled(has_track)
        self.slider.setRange(0, int(s.duration * SLIDER_SCALE))
        self._update_time_label(s.current_time)

        playing = s.is_playing
        self.btn_play.setIcon(self._icons["pause"] if playing else self._icons["play"])
        self.btn_play.setToolTip("Pause" if playing else "Play")

        if not self.volume_slider.isSliderDown():
            self.volume_slider.blockSignals(True)
            self.volume_slider.setValue(int(round(s.volume * 100)))
            self.volume_slider.blockSignals(False)

    def _apply_styles(self):
        self.setStyleSheet("""
        QWidget#PlayerBar { background-color: #0c0a09; border-top: 1px solid #292524; }

        QToolButton { border: 1px solid transparent; background: transparent; padding: 6px; border-radius: 10px; }
        QToolButton:hover { background: #1c1917; border-color: #44403c; }
        QToolButton#BtnPlay { background: #1c1917; border: 1px solid #44403c; border-radius: 999px; padding: 8px; }
        QToolButton#BtnPlay:hover { border-color: #f97316; }

        QSlider::groove:horizontal { height: 4px; background: #292524; border-radius: 2px; }
        QSlider::handle:horizontal { width: 12px; height: 12px; margin: -4px 0; border-radius: 6px; background: #f97316; }
        QSlider::sub-page:horizontal { background: #f97316; border-radius: 2px; }

        QLabel { color: #a8a29e; font-size: 11px; }
        QLabel#NowPlaying { color: #f5f5f4; font-size: 12px; }
        """)
