# src/player/player.py
from __future__ import annotations

import logging
import os

from PySide6.QtCore import QObject, Signal, QUrl
from PySide6.QtMultimedia import QMediaPlayer, QAudioOutput

from core.config import DEFAULT_VOLUME
from core.errors import AttachFailure

logger = logging.getLogger(__name__)


def resolve_source(path: str) -> QUrl:
    """Turn a library path into a playable URL, or raise AttachFailure."""
    if not path:
        raise AttachFailure("Track has no file path.")
    if not os.path.isfile(path):
        raise AttachFailure(f"File not found: {path}")
    return QUrl.fromLocalFile(os.path.abspath(path))


class Player(QObject):
    """
    The single shared media element. Only the playback session drives it;
    it reports back through signals (all times in seconds).
    """
    mediaReady = Signal(float)        # duration
    durationChanged = Signal(float)
    timeUpdated = Signal(float)
    playingChanged = Signal(bool)
    volumeChanged = Signal(float)
    ended = Signal()
    failed = Signal(str)

    def __init__(self, volume: float = DEFAULT_VOLUME):
        super().__init__()

        self.audio = QAudioOutput()
        self.media = QMediaPlayer()
        self.media.setAudioOutput(self.audio)

        self.set_volume(volume)
        self._ready_emitted = False

        self.media.positionChanged.connect(lambda ms: self.timeUpdated.emit(ms / 1000.0))
        self.media.durationChanged.connect(lambda ms: self.durationChanged.emit(ms / 1000.0))
        self.media.playbackStateChanged.connect(self._on_qt_state_changed)
        self.media.mediaStatusChanged.connect(self._on_qt_media_status)
        self.media.errorOccurred.connect(self._on_qt_error)
        self.audio.volumeChanged.connect(lambda v: self.volumeChanged.emit(float(v)))

    # ----------------------------
    # Qt backend handlers
    # ----------------------------

    def _on_qt_state_changed(self, state: QMediaPlayer.PlaybackState) -> None:
        self.playingChanged.emit(state == QMediaPlayer.PlaybackState.PlayingState)

    def _on_qt_media_status(self, status: QMediaPlayer.MediaStatus) -> None:
        if status in (QMediaPlayer.MediaStatus.LoadedMedia, QMediaPlayer.MediaStatus.BufferedMedia):
            if not self._ready_emitted:
                self._ready_emitted = True
                self.mediaReady.emit(self.media.duration() / 1000.0)
        elif status == QMediaPlayer.MediaStatus.EndOfMedia:
            self.ended.emit()
        elif status == QMediaPlayer.MediaStatus.InvalidMedia:
            self.failed.emit(self.media.errorString() or "Invalid media")

    def _on_qt_error(self, error, error_string: str) -> None:
        if error == QMediaPlayer.Error.NoError:
            return
        logger.warning("media error %s: %s", error, error_string)
        self.failed.emit(error_string or str(error))

    # ----------------------------
    # Public API
    # ----------------------------

    def load(self, path: str) -> None:
        url = resolve_source(path)
        self._ready_emitted = False
        self.media.setSource(url)

    def clear_source(self) -> None:
        self._ready_emitted = False
        self.media.setSource(QUrl())

    def play(self) -> None:
        self.media.play()

    def pause(self) -> None:
        self.media.pause()

    def stop(self) -> None:
        self.media.stop()

    def is_playing(self) -> bool:
        return self.media.playbackState() == QMediaPlayer.PlaybackState.PlayingState

    def set_position(self, seconds: float) -> None:
        self.media.setPosition(max(0, int(round(float(seconds) * 1000))))

    def set_volume(self, volume_0_to_1: float) -> None:
        v = min(1.0, max(0.0, float(volume_0_to_1)))
        self.audio.setVolume(v)
