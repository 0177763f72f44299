"""
Tests for LibraryBackend and the folder/tag scanning it relies on.
"""
import wave

import pytest

from core import backend as backend_module
from core.backend import LibraryBackend, file_error_line, format_import_report
from core.errors import DeleteFailure, FetchFailure, ImportFailure
from core.models import FsTrack
from library.scan_library import (
    UNKNOWN_ARTIST, UNKNOWN_TITLE, is_audio_path, iter_audio_paths, read_track_metadata,
)


def touch(path):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(b"")
    return path


@pytest.fixture
def fake_tags(monkeypatch):
    """Tag reading without real audio: titles come from the file name."""
    broken = set()

    def read(path):
        if path in broken:
            raise ImportFailure("Unsupported or unreadable audio file")
        name = path.rsplit("/", 1)[-1].rsplit(".", 1)[0]
        return FsTrack(path=path, title=name, artist="A", album="B", genre="C", length=60)

    monkeypatch.setattr(backend_module, "read_track_metadata", read)
    return broken


class TestReports:

    def test_summary_line(self):
        assert format_import_report(3, 1, []) == "Imported 3 file(s), skipped 1 already in the library."

    def test_errors_come_first(self):
        report = format_import_report(1, 0, [file_error_line("/x.mp3", "bad")])
        assert report.splitlines() == [
            "Failed to add file '/x.mp3': bad",
            "Imported 1 file(s), skipped 0 already in the library.",
        ]


class TestQueries:

    def test_count_and_page(self, library_backend, fake_tags):
        library_backend.ingest_file("/m/one.mp3")
        library_backend.ingest_file("/m/two.mp3")
        assert library_backend.get_track_count() == 2
        assert [t.title for t in library_backend.get_tracks_page(1, 10)] == ["one", "two"]
        assert [t.title for t in library_backend.search_tracks("TWO")] == ["two"]

    def test_database_errors_become_fetch_failures(self, temp_dir):
        broken = LibraryBackend(str(temp_dir / "empty.sqlite3"))
        with pytest.raises(FetchFailure):
            broken.get_track_count()
        with pytest.raises(FetchFailure):
            broken.search_tracks("x")


class TestDelete:

    def test_delete(self, library_backend, fake_tags):
        library_backend.ingest_file("/m/one.mp3")
        library_backend.delete_track(1)
        assert library_backend.get_track_count() == 0

    def test_unknown_id(self, library_backend):
        with pytest.raises(DeleteFailure):
            library_backend.delete_track(42)


class TestIngest:

    def test_ingest_file_reports_duplicates(self, library_backend, fake_tags):
        assert library_backend.ingest_file("/m/one.mp3")
        assert not library_backend.ingest_file("/m/one.mp3")

    def test_ingest_files_runs_the_whole_batch(self, library_backend, fake_tags):
        fake_tags.add("/m/bad.mp3")
        library_backend.ingest_file("/m/old.mp3")
        events = []

        def on_progress(event):
            events.append(event)

        with library_backend.progress_stream.subscribe(on_progress):
            with pytest.raises(ImportFailure) as exc:
                library_backend.ingest_files(["/m/old.mp3", "/m/bad.mp3", "/m/new.mp3"], job_id=3)

        assert exc.value.message.splitlines() == [
            "Failed to add file '/m/bad.mp3': Unsupported or unreadable audio file",
            "Imported 1 file(s), skipped 1 already in the library.",
        ]
        assert [e.file_name for e in events] == ["old.mp3", "bad.mp3", "new.mp3"]
        assert [round(e.progress_percent) for e in events] == [33, 67, 100]
        assert library_backend.get_track_count() == 2

    def test_ingest_folder(self, library_backend, fake_tags, temp_dir):
        root = temp_dir / "music"
        touch(root / "b.mp3")
        touch(root / "a.flac")
        touch(root / "cover.jpg")
        touch(root / "sub" / "c.OGG")

        events = []

        def on_progress(event):
            events.append(event)

        with library_backend.progress_stream.subscribe(on_progress):
            report = library_backend.ingest_folder(str(root), job_id=7)

        assert report == "Imported 3 file(s), skipped 0 already in the library."
        assert [e.file_name for e in events] == ["a.flac", "b.mp3", "c.OGG"]
        assert [round(e.progress_percent) for e in events] == [33, 67, 100]
        assert {e.job_id for e in events} == {7}

    def test_ingest_folder_partial_failure(self, library_backend, fake_tags, temp_dir):
        root = temp_dir / "music"
        good = touch(root / "a.mp3")
        bad = touch(root / "b.mp3")
        fake_tags.add(str(bad))

        with pytest.raises(ImportFailure) as exc:
            library_backend.ingest_folder(str(root))

        assert f"Failed to add file '{bad}'" in exc.value.message
        assert "Imported 1 file(s)" in exc.value.message
        assert [t.path for t in library_backend.get_tracks_page(1, 10)] == [str(good)]

    def test_ingest_missing_folder(self, library_backend, temp_dir):
        with pytest.raises(ImportFailure):
            library_backend.ingest_folder(str(temp_dir / "nope"))


class TestScanning:

    @pytest.mark.parametrize("name,expected", [
        ("song.mp3", True),
        ("SONG.FLAC", True),
        ("a.m4a", True),
        ("a.wma", True),
        ("cover.jpg", False),
        ("notes", False),
    ])
    def test_is_audio_path(self, name, expected):
        assert is_audio_path(name) is expected

    def test_iter_audio_paths_lists_files_before_subfolders(self, temp_dir):
        touch(temp_dir / "z.mp3")
        touch(temp_dir / "a" / "b.wav")
        touch(temp_dir / "readme.txt")
        assert iter_audio_paths(str(temp_dir)) == [
            str(temp_dir / "z.mp3"),
            str(temp_dir / "a" / "b.wav"),
        ]

    def test_missing_file(self, temp_dir):
        with pytest.raises(ImportFailure):
            read_track_metadata(str(temp_dir / "missing.mp3"))

    def test_garbage_file(self, temp_dir):
        path = temp_dir / "junk.mp3"
        path.write_bytes(b"this is not audio" * 10)
        with pytest.raises(ImportFailure):
            read_track_metadata(str(path))

    def test_untagged_wav_gets_defaults(self, temp_dir):
        path = temp_dir / "tone.wav"
        with wave.open(str(path), "wb") as w:
            w.setnchannels(1)
            w.setsampwidth(2)
            w.setframerate(8000)
            w.writeframes(b"\x00\x00" * 16000)

        track = read_track_metadata(str(path))
        assert track.title == UNKNOWN_TITLE
        assert track.artist == UNKNOWN_ARTIST
        assert track.length == 2
