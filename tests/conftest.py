"""
Pytest configuration and fixtures for plexnamer tests.
"""

from pathlib import Path

import pytest

from plexnamer.models import MediaFile, TvShow, TvShowEpisode
from plexnamer.utils import file_util
from plexnamer.utils.messages import MessageManager
from plexnamer.utils.settings import RenamerSettings


def touch(path: Path, content: str = "x") -> Path:
    """Create a file (and its folders) with some content."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def settings() -> RenamerSettings:
    """Default templates: "$N ($Y)", "Season $1", "$N - S$2E$E - $T"."""
    return RenamerSettings()


@pytest.fixture
def messages() -> MessageManager:
    return MessageManager()


@pytest.fixture
def library(tmp_path: Path) -> Path:
    """Library root holding show folders."""
    root = tmp_path / "library"
    root.mkdir()
    return root


@pytest.fixture
def show(library: Path) -> TvShow:
    """Show "Show" (2010) with an existing, empty show folder."""
    folder = library / "Show (2010)"
    folder.mkdir()
    return TvShow("Show", 2010, path=folder, data_source=library)


@pytest.fixture
def add_episode(show: TvShow):
    """Create a file below the show folder and an episode record referencing it."""

    def _add(relative: str, season: int, episode: int, title: str = "", media_file: MediaFile = None):
        if media_file is None:
            media_file = MediaFile.from_path(touch(show.path / relative))
        record = TvShowEpisode(season=season, episode=episode, title=title, path=media_file.folder)
        record.add_media_file(media_file)
        show.add_episode(record)
        return record, media_file

    return _add


@pytest.fixture
def no_sleep(monkeypatch):
    """Make probe retries instant and count the sleeps."""
    calls = []
    monkeypatch.setattr(file_util.time, "sleep", lambda seconds: calls.append(seconds))
    return calls
