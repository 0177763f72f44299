from __future__ import annotations

from dataclasses import dataclass
import sqlite3


@dataclass(frozen=True)
class Track:
    id: int
    title: str
    artist: str
    album: str
    genre: str
    length: int
    path: str

    @staticmethod
    def from_row(row: sqlite3.Row) -> "Track":
        return Track(
            id=int(row["id"]),
            title=row["title"] or "",
            artist=row["artist"] or "",
            album=row["album"] or "",
            genre=row["genre"] or "",
            length=max(0, int(row["length"] or 0)),
            path=row["path"],
        )
