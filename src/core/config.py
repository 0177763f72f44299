# core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

APP_NAME = "PyPlaylist"
DB_FILE_NAME = "db.sqlite3"

PAGE_SIZE = 10
DEFAULT_VOLUME = 0.7

AUDIO_EXTENSIONS = (".mp3", ".flac", ".wav", ".ogg", ".m4a", ".aac", ".wma")


def default_app_data_dir() -> str:
    from PySide6.QtCore import QStandardPaths

    return QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)


@dataclass(frozen=True)
class AppConfig:
    app_data_dir: str
    page_size: int = PAGE_SIZE
    default_volume: float = DEFAULT_VOLUME
    auto_play_next: bool = True
    log_level: str = "INFO"
    debug_schema: bool = False

    @property
    def db_path(self) -> str:
        return os.path.join(self.app_data_dir, DB_FILE_NAME)

    @staticmethod
    def from_env(environ=None) -> "AppConfig":
        env = os.environ if environ is None else environ
        data_dir = env.get("PYPLAYLIST_DATA_DIR") or default_app_data_dir()
        return AppConfig(
            app_data_dir=data_dir,
            log_level=(env.get("PYPLAYLIST_LOG_LEVEL") or "INFO").upper(),
            debug_schema=env.get("PYPLAYLIST_DEBUG_SCHEMA") == "1",
        )
