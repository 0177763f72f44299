# core/models.py
from __future__ import annotations
from dataclasses import dataclass

@dataclass(frozen=True)
class ImportProgress:
    job_id: int
    progress_percent: float   # 0..100
    file_name: str

@dataclass(frozen=True)
class ImportSummary:
    text: str

@dataclass(frozen=True)
class ImportResult:
    job_id: int
    summary: ImportSummary | None = None
    error: Exception | None = None   # ImportFailure on partial/total failure

    @property
    def ok(self) -> bool:
        return self.error is None

@dataclass(frozen=True)
class FsTrack:
    path: str
    title: str
    artist: str
    album: str
    genre: str
    length: int     # whole seconds
