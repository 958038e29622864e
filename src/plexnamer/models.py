"""
Data model for shows, episodes and the media files they reference.

A physical file may be referenced by several episode records at once (a
multi-episode file such as ``Show.S01E01E02.mkv``). The relocation engine
finds those records through `TvShow.find_episode_ids_by_file()` and updates
each of them after a move.
"""
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from pathlib import Path
from typing import List, Optional, Union

from plexnamer.utils.constants import (
    ARTWORK_EXTENSIONS,
    AUDIO_EXTENSIONS,
    BLURAY_FILE_REGEX,
    DVD_FILE_REGEX,
    EXTRAS_REGEX,
    NFO_EXTENSIONS,
    SAMPLE_REGEX,
    SUBTITLE_EXTENSIONS,
    SUBTITLE_LANGUAGE_REGEX,
    TEXT_EXTENSIONS,
    TRAILER_REGEX,
    VIDEO_EXTENSIONS,
)
from plexnamer.utils.file_util import get_stacking_marker


class MediaFileType(Enum):
    VIDEO = "video"
    VIDEO_EXTRA = "video_extra"
    TRAILER = "trailer"
    SAMPLE = "sample"
    SUBTITLE = "subtitle"
    NFO = "nfo"
    POSTER = "poster"
    FANART = "fanart"
    BANNER = "banner"
    THUMB = "thumb"
    AUDIO = "audio"
    TEXT = "text"
    UNKNOWN = "unknown"


def _artwork_type(basename: str) -> MediaFileType:
    lower = basename.lower()
    if lower.endswith("fanart"):
        return MediaFileType.FANART
    if lower.endswith("banner"):
        return MediaFileType.BANNER
    if lower.endswith("poster") or lower in ("folder", "cover"):
        return MediaFileType.POSTER
    return MediaFileType.THUMB


@dataclass
class MediaFile:
    """A physical file on disk plus the technical details the templates use."""
    path: Path
    type: MediaFileType = MediaFileType.UNKNOWN
    video_resolution: str = ""
    video_codec: str = ""
    video_format: str = ""
    audio_codec: str = ""
    audio_channels: str = ""
    language: str = ""
    forced: bool = False
    stacking_marker: str = ""

    def __post_init__(self):
        self.path = Path(self.path)

    @property
    def filename(self) -> str:
        return self.path.name

    @property
    def basename(self) -> str:
        return self.path.stem

    @property
    def extension(self) -> str:
        return self.path.suffix[1:]

    @property
    def folder(self) -> Path:
        return self.path.parent

    @property
    def is_disc_file(self) -> bool:
        name = self.filename
        return bool(DVD_FILE_REGEX.fullmatch(name) or BLURAY_FILE_REGEX.fullmatch(name))

    def with_path(self, path: Path) -> "MediaFile":
        """Copy of this media file pointing at another location."""
        return replace(self, path=Path(path))

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "MediaFile":
        """Build a media file and infer its type from the filename."""
        path = Path(path)
        ext = path.suffix.lower()
        stem = path.stem
        kwargs = {}

        if ext in VIDEO_EXTENSIONS:
            if EXTRAS_REGEX.match(stem):
                media_type = MediaFileType.VIDEO_EXTRA
            elif TRAILER_REGEX.search(stem):
                media_type = MediaFileType.TRAILER
            elif SAMPLE_REGEX.search(stem):
                media_type = MediaFileType.SAMPLE
            else:
                media_type = MediaFileType.VIDEO
                kwargs["stacking_marker"] = get_stacking_marker(path.name)
        elif ext in SUBTITLE_EXTENSIONS:
            media_type = MediaFileType.SUBTITLE
            m = SUBTITLE_LANGUAGE_REGEX.search(stem)
            if m:
                kwargs["language"] = m.group(1).lower()
                kwargs["forced"] = bool(m.group(2))
            elif stem.lower().endswith(".forced"):
                kwargs["forced"] = True
        elif ext in ARTWORK_EXTENSIONS:
            media_type = _artwork_type(stem)
        elif ext in NFO_EXTENSIONS:
            media_type = MediaFileType.NFO
        elif ext in AUDIO_EXTENSIONS:
            media_type = MediaFileType.AUDIO
        elif ext in TEXT_EXTENSIONS:
            media_type = MediaFileType.TEXT
        else:
            media_type = MediaFileType.UNKNOWN

        return cls(path=path, type=media_type, **kwargs)


def _as_path(value: Union[MediaFile, Path, str]) -> Path:
    if isinstance(value, MediaFile):
        return value.path
    return Path(value)


def same_file(a: Union[MediaFile, Path, str], b: Union[MediaFile, Path, str]) -> bool:
    """True when both arguments denote the same physical file (absolute path match)."""
    return _as_path(a).absolute() == _as_path(b).absolute()


def _rebase(path: Path, old_root: Path, new_root: Path) -> Optional[Path]:
    try:
        rel = path.relative_to(old_root)
    except ValueError:
        return None
    return new_root / rel


@dataclass
class TvShowEpisode:
    season: int = -1
    episode: int = -1
    title: str = ""
    path: Optional[Path] = None
    disc: bool = False
    media_files: List[MediaFile] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def video_file(self) -> Optional[MediaFile]:
        """First main video file of the episode."""
        for mf in self.media_files:
            if mf.type == MediaFileType.VIDEO:
                return mf
        return None

    def has_media_file(self, path: Union[MediaFile, Path, str]) -> bool:
        return any(same_file(mf, path) for mf in self.media_files)

    def add_media_file(self, media_file: MediaFile) -> None:
        if not self.has_media_file(media_file):
            self.media_files.append(media_file)

    def remove_media_file(self, path: Union[MediaFile, Path, str]) -> bool:
        before = len(self.media_files)
        self.media_files = [mf for mf in self.media_files if not same_file(mf, path)]
        return len(self.media_files) != before

    def replace_media_file(self, old: Union[MediaFile, Path, str], new: MediaFile) -> None:
        """Swap the entry for `old` with `new`, keeping its position."""
        for i, mf in enumerate(self.media_files):
            if same_file(mf, old):
                self.media_files[i] = new
                return
        self.media_files.append(new)

    def update_media_file_paths(self, old_root: Path, new_root: Path) -> None:
        """Rewrite every media file path (and the episode path) below `old_root`."""
        for i, mf in enumerate(self.media_files):
            moved = _rebase(mf.path, old_root, new_root)
            if moved is not None:
                self.media_files[i] = mf.with_path(moved)
        if self.path is not None:
            moved = _rebase(Path(self.path), old_root, new_root)
            if moved is not None:
                self.path = moved


@dataclass
class TvShow:
    title: str
    year: int = 0
    path: Optional[Path] = None
    data_source: Optional[Path] = None
    episodes: List[TvShowEpisode] = field(default_factory=list)
    media_files: List[MediaFile] = field(default_factory=list)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])

    def __post_init__(self):
        if self.path is not None:
            self.path = Path(self.path)
        if self.data_source is None and self.path is not None:
            self.data_source = self.path.parent
        elif self.data_source is not None:
            self.data_source = Path(self.data_source)

    def add_episode(self, episode: TvShowEpisode) -> None:
        self.episodes.append(episode)

    def get_episode(self, episode_id: str) -> Optional[TvShowEpisode]:
        for ep in self.episodes:
            if ep.id == episode_id:
                return ep
        return None

    def find_episode_ids_by_file(self, path: Union[MediaFile, Path, str]) -> List[str]:
        """Ids of every episode record currently referencing the physical file."""
        return [ep.id for ep in self.episodes if ep.has_media_file(path)]

    def episodes_by_file(self, path: Union[MediaFile, Path, str]) -> List[TvShowEpisode]:
        return [ep for ep in (self.get_episode(i) for i in self.find_episode_ids_by_file(path)) if ep]

    def episode_media_files(self) -> List[MediaFile]:
        """Every distinct physical file referenced by an episode, in episode order."""
        seen = set()
        files = []
        for ep in self.episodes:
            for mf in ep.media_files:
                key = mf.path.absolute()
                if key not in seen:
                    seen.add(key)
                    files.append(mf)
        return files

    def update_media_file_paths(self, old_root: Path, new_root: Path) -> None:
        """Rewrite show and episode paths after the show folder moved."""
        old_root, new_root = Path(old_root), Path(new_root)
        for i, mf in enumerate(self.media_files):
            moved = _rebase(mf.path, old_root, new_root)
            if moved is not None:
                self.media_files[i] = mf.with_path(moved)
        for ep in self.episodes:
            ep.update_media_file_paths(old_root, new_root)
        if self.path is not None and self.path == old_root:
            self.path = new_root
