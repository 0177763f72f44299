import logging
import os
import sqlite3
from typing import List, Optional

from core.config import DB_FILE_NAME
from core.models import FsTrack
from core.utils import prepare_input
from db.models import Track

logger = logging.getLogger(__name__)

CURRENT_DB_VERSION = 2

TRACK_COLUMNS = "id, title, artist, album, genre, length, path"


def connect(sqlite_path: str) -> sqlite3.Connection:
    db = sqlite3.connect(sqlite_path)
    db.row_factory = sqlite3.Row
    db.create_function("prepare_input", 1, prepare_input, deterministic=True)
    return db


def initialize_database(app_data_dir: str) -> sqlite3.Connection:
    os.makedirs(app_data_dir, exist_ok=True)
    sqlite_path = os.path.join(app_data_dir, DB_FILE_NAME)
    logger.info("Database file path: %s", sqlite_path)

    db = connect(sqlite_path)

    existing_version = db.execute("PRAGMA user_version").fetchone()[0]
    upgrade_database_if_needed(db, existing_version)

    return db

def upgrade_database_if_needed(db: sqlite3.Connection, existing_version: int):
    logger.info("Existing database version: %s", existing_version)

    if existing_version >= CURRENT_DB_VERSION:
        return

    if existing_version <= 0:
        logger.info("Migrate database version 1...")
        db.execute("PRAGMA journal_mode=WAL")
        db.execute("PRAGMA user_version=1")
        db.executescript("""
            CREATE TABLE IF NOT EXISTS tracks (
                id INTEGER PRIMARY KEY,
                title TEXT,
                artist TEXT,
                album TEXT,
                genre TEXT,
                length INTEGER,
                path TEXT NOT NULL UNIQUE
            );
        """)
        db.commit()

    if existing_version <= 1:
        logger.info("Migrate database version 2...")
        db.execute("PRAGMA user_version=2")
        db.executescript("""
            ALTER TABLE tracks ADD COLUMN title_lower TEXT;
            ALTER TABLE tracks ADD COLUMN artist_lower TEXT;
            ALTER TABLE tracks ADD COLUMN album_lower TEXT;
            ALTER TABLE tracks ADD COLUMN genre_lower TEXT;
            UPDATE tracks SET
                title_lower = prepare_input(COALESCE(title, '')),
                artist_lower = prepare_input(COALESCE(artist, '')),
                album_lower = prepare_input(COALESCE(album, '')),
                genre_lower = prepare_input(COALESCE(genre, ''));
            CREATE INDEX idx_tracks_title_lower ON tracks(title_lower);
            CREATE INDEX idx_tracks_artist_lower ON tracks(artist_lower);
        """)
        db.commit()

# -------------------------------
# READ TRACKS
# -------------------------------
def get_track_count(db: sqlite3.Connection) -> int:
    return int(db.execute("SELECT COUNT(*) FROM tracks").fetchone()[0])


def get_tracks_page(db: sqlite3.Connection, page: int, page_size: int) -> List[Track]:
    """1-indexed page, ordered by insertion (id)."""
    page = max(1, int(page))
    page_size = max(1, int(page_size))
    rows = db.execute(
        f"SELECT {TRACK_COLUMNS} FROM tracks ORDER BY id ASC LIMIT ? OFFSET ?",
        (page_size, (page - 1) * page_size),
    ).fetchall()
    return [Track.from_row(row) for row in rows]


def search_tracks(db: sqlite3.Connection, query: str) -> List[Track]:
    q = prepare_input(query or "")
    if not q:
        return []

    like = f"%{q}%"
    rows = db.execute(f"""
        SELECT {TRACK_COLUMNS}
        FROM tracks
        WHERE title_lower LIKE ? OR artist_lower LIKE ? OR album_lower LIKE ? OR genre_lower LIKE ?
        ORDER BY title_lower ASC, id ASC
    """, (like, like, like, like)).fetchall()
    return [Track.from_row(row) for row in rows]


def get_random_track(db: sqlite3.Connection) -> Optional[Track]:
    row = db.execute(
        f"SELECT {TRACK_COLUMNS} FROM tracks ORDER BY RANDOM() LIMIT 1"
    ).fetchone()
    return Track.from_row(row) if row else None

# -------------------------------
# WRITE TRACKS
# -------------------------------
def add_track(db: sqlite3.Connection, track: FsTrack) -> bool:
    """Insert a track; returns False when the path is already in the library."""
    cursor = db.execute("""
        INSERT OR IGNORE INTO tracks (
            title, artist, album, genre, length, path,
            title_lower, artist_lower, album_lower, genre_lower
        ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """, (
        track.title,
        track.artist,
        track.album,
        track.genre,
        int(track.length),
        track.path,
        prepare_input(track.title),
        prepare_input(track.artist),
        prepare_input(track.album),
        prepare_input(track.genre),
    ))
    db.commit()
    return cursor.rowcount > 0


def delete_track(db: sqlite3.Connection, track_id: int) -> bool:
    cursor = db.execute("DELETE FROM tracks WHERE id = ?", (int(track_id),))
    db.commit()
    return cursor.rowcount > 0
