# core/playback.py
from __future__ import annotations

import logging
import random
from enum import Enum, auto
from typing import Callable, Optional, Sequence

from PySide6.QtCore import QObject, Signal

from core.config import DEFAULT_VOLUME
from core.errors import AttachFailure
from db.models import Track

logger = logging.getLogger(__name__)


class PlaybackState(Enum):
    IDLE = auto()
    LOADING = auto()
    PLAYING = auto()
    PAUSED = auto()
    ENDED = auto()


def next_in_ordering(ordering: Sequence[Track], current: Track) -> Optional[Track]:
    """
    Track after `current` in the visible ordering, or None at the end.
    A track that is no longer visible (page changed) continues from the top.
    """
    ids = [t.id for t in ordering]
    idx = ids.index(current.id) if current.id in ids else -1
    if idx < len(ordering) - 1:
        return ordering[idx + 1]
    return None


class PlaybackSession(QObject):
    """
    Owns the single active track and drives the shared media element.

    IDLE -> LOADING -> PLAYING <-> PAUSED -> ENDED -> (LOADING | IDLE).
    PLAYING/PAUSED always mirror the element's own state.
    """
    changed = Signal()               # state/track/duration/volume
    trackChanged = Signal(object)    # Track | None
    timeChanged = Signal(float)      # displayed position
    failed = Signal(object)          # AttachFailure

    def __init__(
        self,
        element,
        ordering: Callable[[], Sequence[Track]] | None = None,
        volume: float = DEFAULT_VOLUME,
        auto_play_next: bool = True,
        parent=None,
    ):
        super().__init__(parent)
        self.element = element
        self._ordering = ordering or (lambda: [])

        self.state = PlaybackState.IDLE
        self.current_track: Track | None = None
        self.current_time = 0.0
        self.duration = 0.0
        self.is_seeking = False
        self.is_adjusting_volume = False
        self.auto_play_next = auto_play_next
        self.volume = min(1.0, max(0.0, float(volume)))

        self.element.set_volume(self.volume)

        self.element.mediaReady.connect(self.on_media_ready)
        self.element.durationChanged.connect(self.on_duration_changed)
        self.element.timeUpdated.connect(self.on_time_update)
        self.element.playingChanged.connect(self.on_playing_changed)
        self.element.volumeChanged.connect(self.on_element_volume)
        self.element.ended.connect(self.on_ended)
        self.element.failed.connect(self.on_element_failed)

    @property
    def is_playing(self) -> bool:
        # while loading, follow the element so a toggle shows up at once
        if self.state is PlaybackState.LOADING:
            return self.element.is_playing()
        return self.state is PlaybackState.PLAYING

    def set_auto_play_next(self, enabled: bool) -> None:
        self.auto_play_next = bool(enabled)
        self.changed.emit()

    # ----------------------------
    # track selection
    # ----------------------------
    def select_track(self, track: Track) -> None:
        logger.info("Playing track %s: %s", track.id, track.path)
        self.current_track = track
        self.state = PlaybackState.LOADING
        self.current_time = 0.0
        self.duration = float(track.length)
        self.is_seeking = False

        try:
            self.element.load(track.path)
        except AttachFailure as e:
            self._to_idle()
            self.failed.emit(e)
            return

        self.element.play()
        self.trackChanged.emit(track)
        self.timeChanged.emit(0.0)
        self.changed.emit()

    def play_random(self, candidates: Sequence[Track]) -> Optional[Track]:
        if not candidates:
            return None
        track = random.choice(list(candidates))
        self.select_track(track)
        return track

    def stop(self) -> None:
        if self.current_track is not None or self.state is not PlaybackState.IDLE:
            self._to_idle()

    def on_track_deleted(self, track_id: int) -> bool:
        if self.current_track is None or self.current_track.id != track_id:
            return False
        self._to_idle()
        return True

    def _to_idle(self) -> None:
        self.element.stop()
        self.element.clear_source()
        self.state = PlaybackState.IDLE
        self.current_track = None
        self.current_time = 0.0
        self.duration = 0.0
        self.is_seeking = False
        self.trackChanged.emit(None)
        self.timeChanged.emit(0.0)
        self.changed.emit()

    def _sync_from_element(self) -> None:
        if self.state in (PlaybackState.PLAYING, PlaybackState.PAUSED):
            self.state = PlaybackState.PLAYING if self.element.is_playing() else PlaybackState.PAUSED

    # ----------------------------
    # play / pause
    # ----------------------------
    def toggle_play_pause(self) -> None:
        if self.current_track is None:
            return
        if self.element.is_playing():
            self.element.pause()
        else:
            self.element.play()
        self._sync_from_element()
        self.changed.emit()

    # ----------------------------
    # seeking
    # ----------------------------
    def seek_down(self) -> None:
        if self.current_track is None:
            return
        self.is_seeking = True

    def seek_change(self, seconds: float) -> None:
        if self.current_track is None:
            return
        value = max(0.0, float(seconds))
        if self.duration > 0:
            value = min(value, self.duration)
        self.current_time = round(value, 2)
        self.timeChanged.emit(self.current_time)

    def seek_up(self) -> None:
        if self.current_track is None:
            self.is_seeking = False
            return
        self.element.set_position(self.current_time)
        self.element.play()
        self.is_seeking = False
        self._sync_from_element()
        self.changed.emit()

    # ----------------------------
    # volume
    # ----------------------------
    def volume_down(self) -> None:
        self.is_adjusting_volume = True

    def volume_change(self, volume: float) -> None:
        v = min(1.0, max(0.0, float(volume)))
        self.volume = round(v, 2)
        self.element.set_volume(self.volume)
        self.changed.emit()

    def volume_up(self) -> None:
        self.is_adjusting_volume = False

    # ----------------------------
    # element events
    # ----------------------------
    def on_media_ready(self, duration: float) -> None:
        if self.state is not PlaybackState.LOADING:
            return
        if duration and duration > 0:
            self.duration = float(duration)
        self.state = PlaybackState.PLAYING if self.element.is_playing() else PlaybackState.PAUSED
        self.changed.emit()

    def on_duration_changed(self, duration: float) -> None:
        if self.current_track is None or not duration or duration <= 0:
            return
        self.duration = float(duration)
        self.changed.emit()

    def on_time_update(self, seconds: float) -> None:
        if self.is_seeking or self.current_track is None:
            return
        self.current_time = max(0.0, float(seconds))
        self.timeChanged.emit(self.current_time)

    def on_playing_changed(self, _playing: bool) -> None:
        if self.state in (PlaybackState.LOADING, PlaybackState.PLAYING, PlaybackState.PAUSED):
            self._sync_from_element()
            self.changed.emit()

    def on_element_volume(self, volume: float) -> None:
        if self.is_adjusting_volume:
            return
        self.volume = min(1.0, max(0.0, float(volume)))

    def on_ended(self) -> None:
        if self.current_track is None:
            return
        self.state = PlaybackState.ENDED

        nxt = None
        if self.auto_play_next:
            nxt = next_in_ordering(list(self._ordering()), self.current_track)

        if nxt is not None:
            self.select_track(nxt)
        else:
            self._to_idle()

    def on_element_failed(self, message: str) -> None:
        if self.current_track is None:
            return
        error = AttachFailure(f"Cannot play '{self.current_track.title}': {message}")
        self._to_idle()
        self.failed.emit(error)
