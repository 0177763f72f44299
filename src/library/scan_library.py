# src/library/scan_library.py
from __future__ import annotations

import os
import logging

from mutagen import File as MutagenFile
from mutagen import MutagenError

from core.config import AUDIO_EXTENSIONS
from core.errors import ImportFailure
from core.models import FsTrack

logger = logging.getLogger(__name__)

UNKNOWN_TITLE = "Unknown Track"
UNKNOWN_ARTIST = "Unknown Artist"
UNKNOWN_ALBUM = "Unknown Album"
UNKNOWN_GENRE = "Unknown Genre"


def is_audio_path(path: str) -> bool:
    return os.path.splitext(path)[1].lower() in AUDIO_EXTENSIONS


def iter_audio_paths(folder: str) -> list[str]:
    """Recursively collect audio files below `folder`, in a stable order."""
    if not folder or not os.path.isdir(folder):
        raise ImportFailure(f"Not a directory: {folder}")

    paths: list[str] = []
    for dirpath, dirnames, filenames in os.walk(folder):
        dirnames.sort()
        for fn in sorted(filenames):
            if is_audio_path(fn):
                paths.append(os.path.join(dirpath, fn))
    return paths

def _first(easy, key: str) -> str | None:
    v = easy.get(key) if easy is not None else None
    if not v:
        return None
    if isinstance(v, list):
        return (str(v[0]).strip() if v else None) or None
    s = str(v).strip()
    return s or None

def read_track_metadata(path: str) -> FsTrack:
    if not os.path.isfile(path):
        raise ImportFailure(f"Path is not a file: {path}")

    try:
        audio = MutagenFile(path, easy=True)
    except (MutagenError, OSError) as e:
        raise ImportFailure(f"Failed to read file: {e}") from e

    if audio is None:
        raise ImportFailure("Unsupported or unreadable audio file")

    length = 0
    try:
        if getattr(audio, "info", None) and getattr(audio.info, "length", None):
            length = int(audio.info.length)
    except (TypeError, ValueError):
        length = 0

    tags = audio.tags
    return FsTrack(
        path=path,
        title=_first(tags, "title") or UNKNOWN_TITLE,
        artist=_first(tags, "artist") or UNKNOWN_ARTIST,
        album=_first(tags, "album") or UNKNOWN_ALBUM,
        genre=_first(tags, "genre") or UNKNOWN_GENRE,
        length=max(0, length),
    )
