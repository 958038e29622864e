"""
File renaming functionality for Plex TV show organization.

This package contains utilities to infer episode numbers from filenames,
render folder and file names from token templates, and move media files to
those names while keeping episode records consistent.

Package organization:
- roman: Roman numeral decoding for "Part IV" style markers.
- parser: The filename pattern cascade (season, episodes, candidate title).
- formatter: Token template rendering for show, season and episode names.
- core: Relocation of single media files, disc structures and show roots.
- batch: Relocation of a whole show with progress tracking.

Public API (top-level exports)
- Parsing:
  - `parse_episode_filename`: Infer season, episodes and title from a filename.
  - `detect_season`: Read a season number from folder names.
  - `decode_roman`: Decode a Roman numeral.
- Rendering:
  - `render_destination`: Expand a template for a show and its episodes.
- Relocation:
  - `relocate_media_file`: Move one file and update every owning record.
  - `relocate_episode`: Move all files of one episode.
  - `relocate_show`: Move a whole show, one file at a time.

Example:
    from plexnamer.rename import parse_episode_filename
    result = parse_episode_filename("Show.S01E02.Pilot.mkv")  # season 1, episodes [2]
"""
from .roman import decode_roman

from .parser import (
    EpisodeMatchingResult,
    combine_results,
    detect_season,
    parse_episode_filename,
)

from .formatter import (
    is_recommended,
    render_destination,
    render_episode_filename,
    render_season_folder,
    render_show_folder,
)

from .core import (
    RelocationPlan,
    RelocationResult,
    plan_relocation,
    relocate_episode,
    relocate_media_file,
    relocate_show_root,
)

from .batch import relocate_show

__all__ = [
    # Parsing
    "decode_roman",
    "EpisodeMatchingResult",
    "combine_results",
    "detect_season",
    "parse_episode_filename",
    # Rendering
    "is_recommended",
    "render_destination",
    "render_episode_filename",
    "render_season_folder",
    "render_show_folder",
    # Relocation
    "RelocationPlan",
    "RelocationResult",
    "plan_relocation",
    "relocate_episode",
    "relocate_media_file",
    "relocate_show_root",
    "relocate_show",
]
