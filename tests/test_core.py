"""Tests for the relocation engine."""

from pathlib import Path

from conftest import touch
from plexnamer.models import MediaFile, TvShowEpisode
from plexnamer.rename import core
from plexnamer.utils import (
    MESSAGE_FAILED_RENAME,
    STATUS_FAIL,
    STATUS_LOCKED,
    STATUS_MISSING,
    STATUS_MOVED,
    STATUS_OK,
    STATUS_SKIP,
    file_util,
)
from plexnamer.utils.messages import MessageLevel


class TestPlanRelocation:
    """Destination computation."""

    def test_regular_file(self, show, add_episode, settings):
        episode, media_file = add_episode("incoming/raw.S01E02.mkv", 1, 2, "Pilot")
        plan = core.plan_relocation(show, media_file, settings)
        assert plan.source_path == media_file.path
        assert plan.destination_path == show.path / "Season 1" / "Show - S01E02 - Pilot.mkv"
        assert plan.affected_records == [episode.id]
        assert plan.disc is False

    def test_unreferenced_file(self, show, settings, tmp_path):
        assert core.plan_relocation(show, MediaFile.from_path(tmp_path / "a.mkv"), settings) is None


class TestRelocateMediaFile:
    """Single file moves."""

    def test_moves_and_updates_record(self, show, add_episode, settings, messages):
        episode, media_file = add_episode("incoming/raw.S01E02.mkv", 1, 2, "Pilot")
        dest = show.path / "Season 1" / "Show - S01E02 - Pilot.mkv"

        result = core.relocate_media_file(show, media_file, settings, messages)

        assert result.success and result.moved
        assert result.status == STATUS_MOVED
        assert dest.exists()
        assert not media_file.path.exists()
        assert episode.media_files[0].path == dest
        assert episode.path == dest.parent
        assert not (show.path / "incoming").exists()
        assert messages.messages == []

    def test_idempotent(self, show, add_episode, settings, monkeypatch):
        """A second run finds the file in place and touches nothing on disk."""
        episode, media_file = add_episode("raw.S01E02.mkv", 1, 2, "Pilot")
        core.relocate_media_file(show, media_file, settings)
        moved_file = episode.media_files[0]

        def fail(*args, **kwargs):
            raise AssertionError("no filesystem operation expected")

        monkeypatch.setattr(file_util, "probe_file", fail)
        monkeypatch.setattr(file_util, "move_file_safe", fail)
        result = core.relocate_media_file(show, moved_file, settings)

        assert result.success
        assert result.moved is False
        assert result.status == STATUS_OK
        assert episode.media_files == [moved_file]
        assert moved_file.path.exists()

    def test_multi_episode_fan_out(self, show, settings):
        """All three records sharing the file point at the new location."""
        media_file = MediaFile.from_path(touch(show.path / "raw.S01E01E02E03.mkv"))
        episodes = []
        for number, title in ((1, "A"), (2, "B"), (3, "C")):
            episode = TvShowEpisode(1, number, title, path=media_file.folder)
            episode.add_media_file(media_file)
            show.add_episode(episode)
            episodes.append(episode)
        dest = show.path / "Season 1" / "Show - S01E01 - A S01E02 - B S01E03 - C.mkv"

        result = core.relocate_media_file(show, media_file, settings)

        assert result.success
        assert sorted(result.affected_records) == sorted(e.id for e in episodes)
        assert dest.exists()
        for episode in episodes:
            assert [mf.path for mf in episode.media_files] == [dest]
            assert episode.path == dest.parent
        assert show.find_episode_ids_by_file(media_file) == []

    def test_locked_file(self, show, add_episode, settings, messages, monkeypatch, no_sleep):
        """Five failed probes leave the file and every record untouched."""
        episode, media_file = add_episode("raw.S01E02.mkv", 1, 2, "Pilot")
        attempts = []

        def locked(path):
            attempts.append(path)
            raise PermissionError("in use")

        monkeypatch.setattr(file_util, "rename_in_place", locked)
        result = core.relocate_media_file(show, media_file, settings, messages)

        assert result.success is False
        assert result.status == STATUS_LOCKED
        assert len(attempts) == 5
        assert media_file.path.exists()
        assert episode.media_files == [media_file]
        assert episode.path == media_file.folder
        assert not (show.path / "Season 1").exists()

        [message] = messages.messages
        assert message.level == MessageLevel.ERROR
        assert message.key == MESSAGE_FAILED_RENAME

    def test_vanished_file(self, show, settings, messages):
        """A file that disappeared is dropped from its records and counts as done."""
        media_file = MediaFile.from_path(show.path / "gone.S01E02.mkv")
        episode = TvShowEpisode(1, 2, "Pilot", media_files=[media_file])
        show.add_episode(episode)

        result = core.relocate_media_file(show, media_file, settings, messages)

        assert result.success
        assert result.status == STATUS_MISSING
        assert episode.media_files == []
        assert messages.messages == []

    def test_destination_taken(self, show, add_episode, settings, messages):
        """A move failure is reported and nothing is overwritten."""
        episode, media_file = add_episode("raw.S01E02.mkv", 1, 2, "Pilot")
        existing = touch(show.path / "Season 1" / "Show - S01E02 - Pilot.mkv", "old")

        result = core.relocate_media_file(show, media_file, settings, messages)

        assert result.success is False
        assert result.status == STATUS_FAIL
        assert "already exists" in result.error
        assert existing.read_text() == "old"
        assert media_file.path.exists()
        assert episode.media_files == [media_file]
        assert len(messages.errors()) == 1

    def test_unreferenced_file_skipped(self, show, settings, tmp_path):
        media_file = MediaFile.from_path(touch(tmp_path / "stray.mkv"))
        result = core.relocate_media_file(show, media_file, settings)
        assert result.success
        assert result.status == STATUS_SKIP
        assert media_file.path.exists()


class TestDiscRelocation:
    """DVD and Blu-ray folder structures."""

    def _disc_episode(self, show, folder):
        ifo = MediaFile.from_path(touch(show.path / folder / "VIDEO_TS.IFO"))
        vob = MediaFile.from_path(touch(show.path / folder / "VTS_01_1.VOB"))
        episode = TvShowEpisode(1, 3, "Third", path=ifo.folder, disc=True, media_files=[ifo, vob])
        show.add_episode(episode)
        return episode, ifo

    def test_moves_episode_folder(self, show, settings):
        episode, ifo = self._disc_episode(show, "incoming/Show S01E03/VIDEO_TS")
        dest = show.path / "Season 1" / "Show - S01E03 - Third"

        result = core.relocate_media_file(show, ifo, settings)

        assert result.success and result.moved
        assert (dest / "VIDEO_TS" / "VIDEO_TS.IFO").exists()
        assert (dest / "VIDEO_TS" / "VTS_01_1.VOB").exists()
        assert [mf.path for mf in episode.media_files] == [
            dest / "VIDEO_TS" / "VIDEO_TS.IFO",
            dest / "VIDEO_TS" / "VTS_01_1.VOB",
        ]
        assert episode.path == dest
        assert not (show.path / "incoming").exists()

    def test_second_run_is_noop(self, show, settings):
        episode, ifo = self._disc_episode(show, "incoming/Show S01E03/VIDEO_TS")
        core.relocate_media_file(show, ifo, settings)

        result = core.relocate_media_file(show, episode.media_files[0], settings)
        assert result.success
        assert result.moved is False

    def test_wrong_structure(self, show, settings, messages):
        """Disc files outside VIDEO_TS/BDMV are refused."""
        episode, ifo = self._disc_episode(show, "incoming/Show S01E03")

        result = core.relocate_media_file(show, ifo, settings, messages)

        assert result.success is False
        assert "VIDEO_TS" in result.error
        assert ifo.path.exists()
        assert not (show.path / "Season 1").exists()
        assert len(messages.errors()) == 1

    def test_bluray_episode_folder(self, show, settings):
        """A BDMV structure moves as a whole, stream files included."""
        index = MediaFile.from_path(touch(show.path / "incoming" / "Show S01E04" / "BDMV" / "index.bdmv"))
        touch(show.path / "incoming" / "Show S01E04" / "BDMV" / "STREAM" / "00001.m2ts")
        episode = TvShowEpisode(1, 4, "Fourth", path=index.folder, disc=True, media_files=[index])
        show.add_episode(episode)
        dest = show.path / "Season 1" / "Show - S01E04 - Fourth"

        result = core.relocate_media_file(show, index, settings)

        assert result.success and result.moved
        assert result.destination_path == dest / "BDMV" / "index.bdmv"
        assert (dest / "BDMV" / "STREAM" / "00001.m2ts").exists()
        assert episode.media_files[0].path == dest / "BDMV" / "index.bdmv"
        assert episode.path == dest

    def test_disc_folder_in_show_root(self, show, settings, messages):
        """Without an episode folder of its own the show folder is never moved."""
        episode, ifo = self._disc_episode(show, "VIDEO_TS")

        result = core.relocate_media_file(show, ifo, settings, messages)

        assert result.success is False
        assert result.status == STATUS_FAIL
        assert "no episode folder" in result.error
        assert ifo.path.exists()
        assert show.path.exists()
        assert len(messages.errors()) == 1


class TestRelocateEpisode:
    """Episode level entry point."""

    def test_moves_all_files(self, show, add_episode, settings):
        episode, video = add_episode("raw.S01E02.mkv", 1, 2, "Pilot")
        subtitle = MediaFile.from_path(touch(show.path / "raw.S01E02.en.srt"))
        episode.add_media_file(subtitle)

        results = core.relocate_episode(show, episode, settings)

        assert [r.success for r in results] == [True, True]
        season_dir = show.path / "Season 1"
        assert (season_dir / "Show - S01E02 - Pilot.mkv").exists()
        assert (season_dir / "Show - S01E02 - Pilot.en.srt").exists()

    def test_unknown_numbers_rejected(self, show, add_episode, settings, messages):
        episode, media_file = add_episode("raw.mkv", -1, 2, "Pilot")

        results = core.relocate_episode(show, episode, settings, messages)

        assert [r.success for r in results] == [False]
        assert media_file.path.exists()
        assert len(messages.errors()) == 1


class TestRelocateShowRoot:
    """Show folder renames."""

    def test_renames_and_rebases(self, library, add_episode, show, settings):
        episode, media_file = add_episode("Season 1/a.mkv", 1, 1, "A")
        old_root = show.path
        show.year = 2011

        result = core.relocate_show_root(show, settings)

        new_root = library / "Show (2011)"
        assert result.success and result.moved
        assert show.path == new_root
        assert not old_root.exists()
        assert episode.media_files[0].path == new_root / "Season 1" / "a.mkv"
        assert episode.media_files[0].path.exists()
        assert episode.path == new_root / "Season 1"

    def test_already_named(self, show, settings):
        result = core.relocate_show_root(show, settings)
        assert result.success
        assert result.moved is False
        assert show.path == Path(result.destination_path)
