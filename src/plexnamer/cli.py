#!/usr/bin/env python3
"""Command line entry point.

    plexnamer parse FILE...            show what the filename cascade infers
    plexnamer rename SHOW_DIR [...]    rename a show folder in place
"""
import argparse
import re
import sys
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import plexnamer
from plexnamer.models import MediaFile, MediaFileType, TvShow, TvShowEpisode
from plexnamer.rename import batch, core, formatter, parser
from plexnamer.utils import LogLevel, RenamerSettings, VIDEO_EXTENSIONS, file_util, logger
from plexnamer.utils.messages import MessageManager

_FOLDER_YEAR_REGEX = re.compile(r"^(.*?)\s*\((\d{4})\)\s*$")
_TECH_TAG_REGEX = re.compile(
    r"\b(480p|576p|720p|1080[pi]|2160p|4k|hdr|hdr10\+?|dv|web[- ]?dl|bluray|webrip|hdtv|x264|x265|h\.?264|h\.?265|"
    r"hevc|aac|ac3|ddp?\d?\.?\d?|dts|atmos|remux|proper|repack)\b.*$",
    re.IGNORECASE,
)


def _guess_show(show_dir: Path) -> Tuple[str, int]:
    """Split "Show Name (2010)" into title and year; year 0 when absent."""
    m = _FOLDER_YEAR_REGEX.match(show_dir.name)
    if m:
        return m.group(1), int(m.group(2))
    return show_dir.name, 0


def _clean_title(name: str) -> str:
    title = _TECH_TAG_REGEX.sub("", file_util.normalize_text(name))
    return title.strip(" -_()")


def _build_episodes(show: TvShow, video: MediaFile, label: str) -> List[TvShowEpisode]:
    result = parser.parse_episode_filename(label)
    if not result.episodes:
        logger.log("scan.unmatched", LogLevel.WARN, file=str(video.path))
        return []

    season = result.season
    if season < 0:
        season = parser.detect_season(video.path.relative_to(show.path))
    if season < 0:
        logger.log("scan.no_season", LogLevel.WARN, file=str(video.path), episodes=result.episodes)
        return []

    title = _clean_title(result.name)
    episodes = []
    for number in result.episodes:
        episode = TvShowEpisode(season=season, episode=number, title=title, path=video.folder,
                                disc=video.is_disc_file)
        show.add_episode(episode)
        episodes.append(episode)
    logger.log("scan.episode", LogLevel.DEBUG, file=video.filename, season=season, episodes=result.episodes,
               title=title)
    return episodes


def scan_show(show_dir: Path, title: Optional[str] = None, year: Optional[int] = None) -> TvShow:
    """Build show and episode records from the files below a show folder."""
    show_dir = Path(show_dir).resolve()
    guessed_title, guessed_year = _guess_show(show_dir)
    show = TvShow(title or guessed_title, guessed_year if year is None else year, path=show_dir)

    files = sorted(p for p in show_dir.rglob("*") if p.is_file())
    owners: Dict[Tuple[Path, str], List[TvShowEpisode]] = {}
    disc_owners: Dict[Path, List[TvShowEpisode]] = {}
    companions: List[MediaFile] = []

    for path in files:
        media_file = MediaFile.from_path(path)
        if path.suffix.lower() not in VIDEO_EXTENSIONS or media_file.type != MediaFileType.VIDEO:
            companions.append(media_file)
            continue

        if media_file.is_disc_file:
            disc_dir = media_file.folder
            if disc_dir not in disc_owners:
                disc_owners[disc_dir] = _build_episodes(show, media_file, disc_dir.parent.name)
            episodes = disc_owners[disc_dir]
        else:
            episodes = _build_episodes(show, media_file, media_file.filename)
            owners[(media_file.folder, media_file.basename)] = episodes

        for episode in episodes:
            episode.add_media_file(media_file)

    # Subtitles, artwork and NFOs follow the video they share a name with
    for media_file in companions:
        for (folder, stem), episodes in owners.items():
            if media_file.folder == folder and media_file.filename.startswith(stem + "."):
                for episode in episodes:
                    episode.add_media_file(media_file)
                break
        else:
            if media_file.folder == show_dir:
                show.media_files.append(media_file)

    logger.log("scan.complete", LogLevel.INFO, show=show.title, year=show.year, files=len(files),
               episodes=len(show.episodes))
    return show


def _proposals(show: TvShow, settings: RenamerSettings, rename_root: bool) -> List[Tuple[Path, Path]]:
    proposals = []
    if rename_root:
        root_dest = show.data_source / formatter.render_show_folder(show, settings)
        if root_dest != show.path:
            proposals.append((show.path, root_dest))
    seen = set()
    for media_file in show.episode_media_files():
        plan = core.plan_relocation(show, media_file, settings)
        if plan is None or plan.destination_path in seen:
            continue
        seen.add(plan.destination_path)
        source = media_file.folder.parent if plan.disc else plan.source_path
        if source != plan.destination_path:
            proposals.append((source, plan.destination_path))
    return proposals


def cmd_parse(args) -> int:
    for name in args.files:
        result = parser.parse_episode_filename(name)
        episodes = ",".join(str(e) for e in result.episodes) or "-"
        date = result.date.isoformat() if result.date else "-"
        print(f"{name}: season={result.season} episodes={episodes} date={date} name={result.name!r}")
    return 0


def cmd_rename(args) -> int:
    root = Path(args.root)
    if not root.exists() or not root.is_dir():
        print(f"❌ Folder {root} does not exist")
        return 1

    settings = RenamerSettings.from_env()
    show = scan_show(root, title=args.title, year=args.year)
    rename_root = not args.no_root
    proposals = _proposals(show, settings, rename_root)

    if not proposals:
        print("⚠️ Nothing to rename.")
        return 0

    print("\n📋 Proposed renames:")
    for old, new in proposals:
        print(f"{old} → {new}")
    print(f"\nTotal: {len(proposals)}")

    if args.dry_run:
        print("\n🧪 Dry-run mode: no changes will be made.")
        return 0

    if not args.no_confirm:
        answer = input("\nProceed with all renames? (y/n): ").strip().lower()
        if answer != "y":
            print("❌ Rename canceled.")
            return 0

    messages = MessageManager()
    results = batch.relocate_show(show, settings, messages, rename_root=rename_root, progress=True)
    failures = [r for r in results if not r.success]
    for message in messages.errors():
        print(f"❌ {message}")

    print("\n🎉 Finished renaming files.")
    return 1 if failures else 0


def build_parser() -> argparse.ArgumentParser:
    arg_parser = argparse.ArgumentParser(prog="plexnamer", description="Rename TV show files for Plex.")
    arg_parser.add_argument("--version", action="version", version=f"%(prog)s {plexnamer.__version__}")
    arg_parser.add_argument("--debug", action="store_true", help="Enable debug output")
    sub = arg_parser.add_subparsers(dest="command", required=True)

    parse_cmd = sub.add_parser("parse", help="Show season/episode numbers inferred from filenames")
    parse_cmd.add_argument("files", nargs="+", help="Filenames or paths")
    parse_cmd.set_defaults(func=cmd_parse)

    rename_cmd = sub.add_parser("rename", help="Rename the files of one show folder")
    rename_cmd.add_argument("root", help="Show folder")
    rename_cmd.add_argument("--title", help="Show title (defaults to the folder name)")
    rename_cmd.add_argument("--year", type=int, help="Show year (defaults to the folder name)")
    rename_cmd.add_argument("--dry-run", action="store_true", help="Simulate renaming without changes")
    rename_cmd.add_argument("--no-confirm", action="store_true", help="Skip confirmation prompt")
    rename_cmd.add_argument("--no-root", action="store_true", help="Keep the show folder name")
    rename_cmd.set_defaults(func=cmd_rename)
    return arg_parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    if args.debug:
        plexnamer.DEBUG = True
        logger.set_log_level(LogLevel.DEBUG)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
