"""
Utilities to render Plex folder and file names from token templates.

A template is literal text mixed with ``$x`` tokens:

- ``$N`` show title, ``$Y`` show year (empty when unknown)
- ``$1`` season, ``$2`` season padded to two digits
- ``$E`` episode padded to two digits, ``$T`` episode title
- ``$R`` video resolution, ``$A`` audio codec and channels,
  ``$V`` video codec and format, ``$F`` video format

Unknown tokens render as empty text. The part of the template holding the
episode tokens (the "episode span", e.g. ``S$2E$E - $T``) is dropped when
rendering show-level names and repeated once per episode for files that hold
several episodes:

    "$N - S$2E$E - $T" -> "Show - S01E01 - Pilot S01E02 - Second"

Every rendered path segment is sanitized so it can be used on disk.
"""
import re
from typing import List, Optional, Sequence

from plexnamer.models import MediaFile, MediaFileType, TvShow, TvShowEpisode
from plexnamer.utils.constants import EXTRAS_REGEX
from plexnamer.utils.file_util import convert_to_ascii, replace_invalid_characters, sanitize_filename
from plexnamer.utils.settings import RenamerSettings

TOKEN_REGEX = re.compile(r"\$[\w#]")
EPISODE_SPAN_REGEX = re.compile(
    r"(?:\b(?:season|staffel|episode|folge|ep|s|e)[ ._]?)?\$[12ET](?:.*\$[12ET])?",
    re.IGNORECASE,
)
_FRAGMENT_TAIL = re.compile(r"[\s._-]+$")
SEASON_TOKENS = ("$1", "$2")
EPISODE_TOKENS = ("$E",)
TITLE_TOKENS = ("$T",)

_ARTWORK_TYPES = {
    MediaFileType.THUMB,
    MediaFileType.FANART,
    MediaFileType.POSTER,
    MediaFileType.BANNER,
}


def _join(first: str, second: str) -> str:
    if not first:
        return second
    return f"{first}-{second}" if second else first


def _token_value(token: str, show: TvShow, episode: Optional[TvShowEpisode], video: Optional[MediaFile]) -> str:
    if token == "$N":
        value = show.title
    elif token == "$Y":
        value = str(show.year) if show.year else ""
    elif token in ("$1", "$2", "$E", "$T"):
        if episode is None:
            return ""
        if token == "$1":
            value = str(episode.season) if episode.season >= 0 else ""
        elif token == "$2":
            value = f"{episode.season:02d}" if episode.season >= 0 else ""
        elif token == "$E":
            value = f"{episode.episode:02d}" if episode.episode >= 0 else ""
        else:
            value = episode.title
    elif video is None:
        return ""
    elif token == "$R":
        value = video.video_resolution
    elif token == "$A":
        value = _join(video.audio_codec, video.audio_channels)
    elif token == "$V":
        value = _join(video.video_codec, video.video_format)
    elif token == "$F":
        value = video.video_format
    else:
        value = ""
    return sanitize_filename(value or "")


def _clean_segment(segment: str, settings: RenamerSettings) -> str:
    # Transliteration can produce reserved characters ("½" -> "1/2")
    if settings.ascii_replacement:
        segment = convert_to_ascii(segment)
    segment = replace_invalid_characters(segment)
    segment = re.sub(r" +", " ", segment).strip()
    # Separator left dangling by an empty token at the end
    segment = re.sub(r"\s+-$", "", segment)
    if settings.space_substitution:
        segment = segment.replace(" ", settings.space_replacement)
    return re.sub(r"[ .]+$", "", segment)


def _cleanup(text: str, settings: RenamerSettings) -> str:
    text = text.replace("()", "").replace("[]", "")
    text = re.sub(r"/{2,}", "/", text).lstrip("/")
    segments = (_clean_segment(s, settings) for s in text.split("/"))
    return "/".join(s for s in segments if s)


def render_destination(
        template: str,
        show: TvShow,
        episodes: Optional[Sequence[TvShowEpisode]] = None,
        settings: Optional[RenamerSettings] = None,
) -> str:
    """
    Expand a template for a show and (optionally) the episodes of one file.

    With no episodes the episode span is removed. With several episodes the
    span is rendered once per episode, in (season, episode) order, and the
    fragments are joined with a space. Technical tokens come from the first
    video file of the first episode.
    """
    if not template or not template.strip():
        return ""
    settings = settings or RenamerSettings()
    ordered: List[TvShowEpisode] = sorted(episodes or [], key=lambda e: (e.season, e.episode))
    first = ordered[0] if ordered else None
    video = first.video_file() if first else None

    def substitute(text: str, episode: Optional[TvShowEpisode]) -> str:
        return TOKEN_REGEX.sub(lambda m: _token_value(m.group(0), show, episode, video), text)

    span = EPISODE_SPAN_REGEX.search(template)
    if span and len(ordered) != 1:
        parts = " ".join(_FRAGMENT_TAIL.sub("", substitute(span.group(0), ep)) for ep in ordered)
        rendered = substitute(template[:span.start()], first) + parts + substitute(template[span.end():], first)
    else:
        rendered = substitute(template, first)

    return _cleanup(rendered, settings)


def render_show_folder(show: TvShow, settings: Optional[RenamerSettings] = None) -> str:
    """Folder name of the show root, e.g. "Show (2010)"."""
    settings = settings or RenamerSettings()
    name = render_destination(settings.show_folder_template, show, None, settings)
    return name or _cleanup(sanitize_filename(show.title), settings)


def _has_token(template: str, tokens: Sequence[str]) -> bool:
    return any(token in (template or "") for token in tokens)


def render_season_folder(show: TvShow, episode: TvShowEpisode, settings: Optional[RenamerSettings] = None) -> str:
    """
    Season folder name for an episode.

    When the season template renders blank and the filename template carries no
    season token either, "Season N" is used so the season does not get lost.
    An empty return value means files go straight into the show folder.
    """
    settings = settings or RenamerSettings()
    name = render_destination(settings.season_folder_template, show, [episode], settings)
    if not name and not _has_token(settings.filename_template, SEASON_TOKENS):
        name = f"Season {episode.season}"
    return name


def _type_suffix(media_file: MediaFile, settings: RenamerSettings) -> str:
    ext = media_file.extension
    if media_file.type in _ARTWORK_TYPES:
        ext = ext.lower().replace("jpeg", "jpg")
    ext = f".{ext}" if ext else ""

    media_type = media_file.type
    if media_type == MediaFileType.VIDEO:
        marker = f".{media_file.stacking_marker}" if media_file.stacking_marker else ""
        return marker + ext
    if media_type == MediaFileType.THUMB:
        return ("-thumb" if settings.thumb_postfix else "") + ext
    if media_type == MediaFileType.FANART:
        return "-fanart" + ext
    if media_type == MediaFileType.TRAILER:
        return "-trailer" + ext
    if media_type == MediaFileType.SUBTITLE:
        language = f".{media_file.language}" if media_file.language else ""
        forced = ".forced" if media_file.forced else ""
        return language + forced + ext
    if media_type == MediaFileType.VIDEO_EXTRA:
        m = EXTRAS_REGEX.match(media_file.basename)
        label = m.group(1).strip() if m else ""
        return ("-extras-" + label if label else "-extras") + ext
    return ext


def render_episode_filename(
        show: TvShow,
        media_file: MediaFile,
        settings: Optional[RenamerSettings] = None,
        template: Optional[str] = None,
) -> str:
    """
    New filename for a media file, covering every episode that references it.

    Returns "" when no episode references the file; the caller must not rename
    it then. A blank rendered name keeps the original basename.
    """
    settings = settings or RenamerSettings()
    episodes = show.episodes_by_file(media_file)
    if not episodes:
        return ""
    template = settings.filename_template if template is None else template
    name = render_destination(template, show, episodes, settings) or media_file.basename
    return name + _type_suffix(media_file, settings)


def is_recommended(season_template: str, file_template: str) -> bool:
    """
    Check that the templates produce unambiguous episode names.

    The filename template needs exactly one episode token and one title token,
    at most one season token, and the season must come before the episode
    with the title not squeezed in between.
    """
    def count(template, tokens):
        return sum((template or "").count(t) for t in tokens)

    def position(template, tokens):
        found = [template.find(t) for t in tokens if t in template]
        return min(found) if found else -1

    ep_count = count(file_template, EPISODE_TOKENS)
    title_count = count(file_template, TITLE_TOKENS)
    season_count = count(file_template, SEASON_TOKENS)
    season_folder_count = count(season_template, SEASON_TOKENS)

    if ep_count != 1 or title_count != 1 or season_count > 1 or season_folder_count > 1:
        return False
    if season_count + season_folder_count == 0:
        return False

    ep_pos = position(file_template, EPISODE_TOKENS)
    season_pos = position(file_template, SEASON_TOKENS)
    title_pos = position(file_template, TITLE_TOKENS)
    if season_pos > ep_pos:
        return False
    if season_count == 1 and season_pos < title_pos < ep_pos:
        return False
    return True
