"""
Module for inferring season, episode numbers and a candidate title from raw
filenames.

The filename is run through an ordered list of matchers. Every matcher that
recognises its pattern contributes a fragment (season, episode numbers and a
residual tail) and the fragments are folded by `combine_results()`: earlier
matchers take priority. The residual tail of a match is parsed again so that
chained markers such as ``Show.1x01.1x02.mkv`` yield both episodes.

Parsing never raises. Unparseable input gives season -1, no episodes and an
empty name.
"""

import datetime
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from plexnamer.rename.roman import decode_roman
from plexnamer.utils import logger
from plexnamer.utils.constants import MAX_PARSE_DEPTH
from plexnamer.utils.logger import LogLevel

_EXTRA_EPISODE_REGEX = re.compile(r"e(\d+)", re.IGNORECASE)
_EXTENSION_REGEX = re.compile(r"\.\w{1,4}$")
_SEPARATORS = " ._-"


@dataclass
class EpisodeMatchingResult:
    season: int = -1
    episodes: List[int] = field(default_factory=list)
    name: str = ""
    date: Optional[datetime.date] = None


def clean_name(tail: str) -> str:
    """Strip a trailing file extension and surrounding separators from a residual tail."""
    if not tail:
        return ""
    return _EXTENSION_REGEX.sub("", tail).strip(_SEPARATORS)


def _episode_number(token: str) -> int:
    try:
        return int(token)
    except ValueError:
        return decode_roman(token)


class EpisodeMatcher:
    """
    One filename pattern of the cascade.

    Patterns use the named groups ``season`` (optional), ``episode``,
    ``extra`` (chained episode markers, optional) and ``tail``.
    """

    def __init__(self, key: str, pattern: str, numeric_heuristic: bool = False):
        self.key = key
        self.pattern = re.compile(pattern, re.IGNORECASE)
        # Heuristic matchers stop contributing once a date was recognised
        self.numeric_heuristic = numeric_heuristic

    def __repr__(self):
        return f"{type(self).__name__}({self.key!r})"

    def match(self, text: str, depth: int = 0) -> Optional[EpisodeMatchingResult]:
        m = self.pattern.search(text)
        if not m:
            return None
        return self.build(m, depth)

    def build(self, m: re.Match, depth: int) -> EpisodeMatchingResult:
        groups = m.groupdict()
        season = groups.get("season")
        tokens = [groups["episode"]] + _EXTRA_EPISODE_REGEX.findall(groups.get("extra") or "")
        episodes = [n for n in (_episode_number(t) for t in tokens) if n > 0]

        result = EpisodeMatchingResult(season=int(season) if season else -1, episodes=episodes)
        self._apply_tail(result, groups.get("tail") or "", depth)
        return result

    @staticmethod
    def _apply_tail(result: EpisodeMatchingResult, tail: str, depth: int) -> None:
        """
        Pick up chained episodes from the tail, or use it as the candidate name.

        A tail that yields episodes leaves the name blank so that a later
        fragment can supply it.
        """
        if tail and depth < MAX_PARSE_DEPTH:
            nested = _parse(tail, depth + 1)
            if nested.episodes:
                result.episodes.extend(nested.episodes)
                return
        result.name = clean_name(tail)


class DateMatcher(EpisodeMatcher):
    """Air-date patterns. The year becomes the season, no episode numbers."""

    def __init__(self, key: str, pattern: str, day_first: bool = False):
        super().__init__(key, pattern)
        self.day_first = day_first

    def build(self, m: re.Match, depth: int) -> Optional[EpisodeMatchingResult]:
        year = int(m.group("year"))
        first, second = int(m.group("first")), int(m.group("second"))
        orders = [(first, second), (second, first)]
        if self.day_first:
            orders.reverse()

        date = None
        for month, day in orders:
            try:
                date = datetime.date(year, month, day)
                break
            except ValueError:
                continue
        if date is None:
            return None

        return EpisodeMatchingResult(season=year, name=clean_name(m.group("tail")), date=date)


MATCHERS: List[EpisodeMatcher] = [
    EpisodeMatcher(
        "season_episode",
        r"s(?P<season>\d+)[\]\[ ._-]*e(?P<episode>\d+)(?P<extra>(?:[ ._-]*e\d+)*)(?P<tail>[^\\/]*)$",
    ),
    EpisodeMatcher(
        "episode_only",
        r"(?:^|[._ -])ep_?(?P<episode>\d+)(?P<tail>[^\\/]*)$",
    ),
    DateMatcher(
        "date_ymd",
        r"(?P<year>\d{4})[.-](?P<first>\d{2})[.-](?P<second>\d{2})(?P<tail>[^\\/]*)$",
    ),
    DateMatcher(
        "date_mdy",
        r"(?P<first>\d{2})[.-](?P<second>\d{2})[.-](?P<year>\d{4})(?P<tail>[^\\/]*)$",
    ),
    EpisodeMatcher(
        "season_x_episode",
        r"(?:^|[\\/._ \[(-])(?P<season>\d+)x(?P<episode>\d+)(?P<tail>[^\\/]*)$",
    ),
    EpisodeMatcher(
        "three_digit",
        r"(?:^|[\\/._ -])(?P<season>\d+)(?P<episode>\d\d)(?P<tail>[._ -][^\\/]*)$",
        numeric_heuristic=True,
    ),
    EpisodeMatcher(
        "roman_part",
        r"(?:^|[\\/._ -])p(?:ar)?t[_. -](?P<episode>[ivx]+)(?P<tail>[._ -][^\\/]*|)$",
    ),
]


def combine_results(fragments: Iterable[EpisodeMatchingResult]) -> EpisodeMatchingResult:
    """
    Fold fragments in priority order.

    The first known season wins, the first fragment carrying episodes wins
    (later ones never overwrite it), the first non-blank name wins and the
    first date wins.
    """
    result = EpisodeMatchingResult()
    for fragment in fragments:
        if result.season < 0 <= fragment.season:
            result.season = fragment.season
        if not result.episodes and fragment.episodes:
            result.episodes = list(fragment.episodes)
        if not result.name.strip() and fragment.name.strip():
            result.name = fragment.name
        if result.date is None and fragment.date is not None:
            result.date = fragment.date
    return result


def _parse(text: str, depth: int) -> EpisodeMatchingResult:
    fragments = []
    date_found = False
    for matcher in MATCHERS:
        if date_found and matcher.numeric_heuristic:
            continue
        fragment = matcher.match(text, depth)
        if fragment is None:
            continue
        logger.log("parse.match", LogLevel.TRACE, matcher=matcher.key, depth=depth, season=fragment.season,
                   episodes=fragment.episodes)
        if fragment.date is not None:
            date_found = True
        fragments.append(fragment)

    result = combine_results(fragments)
    result.episodes = sorted(set(result.episodes))
    return result


def parse_episode_filename(filename: Union[str, Path, None]) -> EpisodeMatchingResult:
    """
    Infer season, episodes and a candidate title from a filename.

    Examples:
      "Show.S01E02.Pilot.mkv" -> season 1, episodes [2], name "Pilot"
      "Show.1x01.1x02.avi"    -> season 1, episodes [1, 2]
      "Show.Part.IV.mkv"      -> season -1, episodes [4]
    """
    if not filename:
        return EpisodeMatchingResult()
    name = re.split(r"[\\/]", str(filename))[-1]
    if not name.strip():
        return EpisodeMatchingResult()

    result = _parse(name, 0)
    logger.log("parse.result", LogLevel.DEBUG, file=name, season=result.season, episodes=result.episodes,
               name=result.name)
    return result


_SEASON_FOLDER_REGEX = re.compile(r"(?:season|staffel|series|s)?[\s._-]*(\d+)", re.IGNORECASE)


def detect_season(relative_path: Union[str, Path]) -> int:
    """
    Read a season number from the folders of a file path.

    "Season 2/Show.E05.mkv" -> 2, "S04/ep1.mkv" -> 4. Folders are checked from
    the innermost outward; -1 when none looks like a season folder.
    """
    if not relative_path:
        return -1
    for folder in reversed(Path(relative_path).parent.parts):
        m = _SEASON_FOLDER_REGEX.fullmatch(folder.strip())
        if m:
            return int(m.group(1))
    return -1
