"""
Relocation of media files to their rendered destinations.

This module moves one physical file (or one DVD/Blu-ray folder structure) at
a time and then updates every episode record that references it. A file
shared by several episodes (a multi-episode file) is moved once and all of
its owners are updated.

Functions:
- plan_relocation: Compute where a media file should go.
- relocate_media_file: Move one media file and update its owners.
- relocate_episode: Move every media file of one episode.
- relocate_show_root: Rename the show folder inside its library root.

Failures never raise. They are returned as a failed RelocationResult and
reported on the message channel when one is given.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from plexnamer.models import MediaFile, TvShow, TvShowEpisode, same_file
from plexnamer.rename import formatter
from plexnamer.utils import LogLevel, file_util, logger
from plexnamer.utils.constants import (
    DISC_FOLDER_NAMES,
    MESSAGE_FAILED_RENAME,
    PROBE_ATTEMPTS,
    STATUS_FAIL,
    STATUS_LOCKED,
    STATUS_MISSING,
    STATUS_MOVED,
    STATUS_OK,
    STATUS_SKIP,
)
from plexnamer.utils.errors import DiscStructureError, FileLockedError, RenamerError
from plexnamer.utils.messages import Message, MessageLevel, MessageManager
from plexnamer.utils.settings import RenamerSettings


@dataclass
class RelocationPlan:
    source_path: Path
    destination_path: Path
    affected_records: List[str] = field(default_factory=list)
    disc: bool = False


@dataclass
class RelocationResult:
    source_path: Path
    destination_path: Optional[Path]
    success: bool
    moved: bool = False
    status: str = STATUS_OK
    error: str = ""
    affected_records: List[str] = field(default_factory=list)


def _report(messages: Optional[MessageManager], source: str, reason: str) -> None:
    if messages is not None:
        messages.push_message(Message(MessageLevel.ERROR, source, MESSAGE_FAILED_RENAME, [":", reason]))
    else:
        logger.log("relocate.failed", LogLevel.ERROR, source=source, error=reason)


def _failure(source: Path, dest: Optional[Path], reason: str, messages: Optional[MessageManager],
             status: str = STATUS_FAIL, records: Optional[List[str]] = None) -> RelocationResult:
    _report(messages, str(source), reason)
    return RelocationResult(source, dest, success=False, status=status, error=reason,
                            affected_records=list(records or []))


def _season_dir(show: TvShow, episode: TvShowEpisode, settings: RenamerSettings) -> Path:
    season_folder = formatter.render_season_folder(show, episode, settings)
    return show.path / season_folder if season_folder else show.path


def plan_relocation(show: TvShow, media_file: MediaFile,
                    settings: Optional[RenamerSettings] = None) -> Optional[RelocationPlan]:
    """
    Compute the destination of a media file.

    Returns None when no episode references the file or no name can be
    rendered. For disc files the destination is the new episode folder that
    will hold the whole disc structure.
    """
    settings = settings or RenamerSettings()
    ids = show.find_episode_ids_by_file(media_file)
    if not ids or show.path is None:
        return None
    episodes = sorted((show.get_episode(i) for i in ids), key=lambda e: (e.season, e.episode))
    season_dir = _season_dir(show, episodes[0], settings)

    if media_file.is_disc_file:
        episode_folder = media_file.folder.parent
        folder_name = formatter.render_destination(settings.filename_template, show, episodes, settings)
        destination = season_dir / Path(folder_name or episode_folder.name).name
        return RelocationPlan(media_file.path, destination, ids, disc=True)

    filename = formatter.render_episode_filename(show, media_file, settings)
    if not filename:
        return None
    return RelocationPlan(media_file.path, season_dir / filename, ids)


def _update_records(show: TvShow, plan: RelocationPlan, new_file: MediaFile) -> None:
    """Replace the media file entry of every owning record and point the record at its new folder."""
    for episode_id in plan.affected_records:
        episode = show.get_episode(episode_id)
        if episode is None:
            continue
        episode.replace_media_file(plan.source_path, new_file)
        episode.path = new_file.folder


def _drop_vanished(show: TvShow, plan: RelocationPlan) -> None:
    for episode_id in plan.affected_records:
        episode = show.get_episode(episode_id)
        if episode is not None:
            episode.remove_media_file(plan.source_path)


def _probe(show: TvShow, plan: RelocationPlan) -> str:
    status = file_util.probe_file(plan.source_path)
    if status == STATUS_MISSING:
        logger.log("relocate.missing", LogLevel.WARN, file=str(plan.source_path), records=plan.affected_records)
        _drop_vanished(show, plan)
    elif status == STATUS_LOCKED:
        raise FileLockedError(plan.source_path, PROBE_ATTEMPTS)
    return status


def _relocate_file(show: TvShow, media_file: MediaFile, plan: RelocationPlan) -> RelocationResult:
    src, dest = plan.source_path, plan.destination_path

    if same_file(src, dest) and src.exists():
        logger.log("relocate.noop", LogLevel.DEBUG, file=str(src))
        _update_records(show, plan, media_file)
        return RelocationResult(src, dest, success=True, status=STATUS_OK, affected_records=plan.affected_records)

    if _probe(show, plan) == STATUS_MISSING:
        return RelocationResult(src, dest, success=True, status=STATUS_MISSING,
                                affected_records=plan.affected_records)

    file_util.move_file_safe(src, dest)
    logger.log("relocate.move", LogLevel.INFO, src=str(src), dest=str(dest), records=len(plan.affected_records))
    _update_records(show, plan, media_file.with_path(dest))
    file_util.delete_empty_parents(src.parent, stop_at=show.data_source)
    return RelocationResult(src, dest, success=True, moved=True, status=STATUS_MOVED,
                            affected_records=plan.affected_records)


def _relocate_disc(show: TvShow, media_file: MediaFile, plan: RelocationPlan) -> RelocationResult:
    disc_dir = media_file.folder
    if disc_dir.name.upper() not in DISC_FOLDER_NAMES:
        raise DiscStructureError(f"disc file is not inside a BDMV or VIDEO_TS folder: {media_file.path}")
    episode_folder = disc_dir.parent
    if episode_folder in (show.path, show.data_source):
        raise DiscStructureError(f"disc folder has no episode folder of its own: {disc_dir}")

    src, dest = plan.source_path, plan.destination_path
    if same_file(episode_folder, dest) and episode_folder.exists():
        logger.log("relocate.noop", LogLevel.DEBUG, folder=str(episode_folder))
        _update_records(show, plan, media_file)
        return RelocationResult(src, media_file.path, success=True, status=STATUS_OK,
                                affected_records=plan.affected_records)

    if _probe(show, plan) == STATUS_MISSING:
        return RelocationResult(src, dest, success=True, status=STATUS_MISSING,
                                affected_records=plan.affected_records)

    file_util.move_directory_safe(episode_folder, dest)
    logger.log("relocate.move_disc", LogLevel.INFO, src=str(episode_folder), dest=str(dest),
               records=len(plan.affected_records))
    # Every file below the episode folder moved with it
    show.update_media_file_paths(episode_folder, dest)
    for episode_id in plan.affected_records:
        episode = show.get_episode(episode_id)
        if episode is not None:
            episode.path = dest
    file_util.delete_empty_parents(episode_folder.parent, stop_at=show.data_source)
    new_path = dest / disc_dir.name / media_file.filename
    return RelocationResult(src, new_path, success=True, moved=True, status=STATUS_MOVED,
                            affected_records=plan.affected_records)


def relocate_media_file(
        show: TvShow,
        media_file: MediaFile,
        settings: Optional[RenamerSettings] = None,
        messages: Optional[MessageManager] = None,
) -> RelocationResult:
    """
    Move one media file to its rendered destination and update all owners.

    - Already in place: no filesystem operation, records are still refreshed.
    - Vanished: removed from every owning record, counts as success.
    - Locked after every probe attempt: reported, nothing touched.
    - Move failure: reported, earlier moves of a batch are kept.
    """
    settings = settings or RenamerSettings()
    plan = plan_relocation(show, media_file, settings)
    if plan is None:
        logger.log("relocate.skip", LogLevel.DEBUG, file=str(media_file.path), reason="no owning episode")
        return RelocationResult(media_file.path, None, success=True, status=STATUS_SKIP)

    logger.log("relocate.plan", LogLevel.DEBUG, src=str(plan.source_path), dest=str(plan.destination_path),
               records=plan.affected_records, disc=plan.disc)
    try:
        if plan.disc:
            return _relocate_disc(show, media_file, plan)
        return _relocate_file(show, media_file, plan)
    except FileLockedError as e:
        return _failure(plan.source_path, plan.destination_path, str(e), messages, STATUS_LOCKED,
                        plan.affected_records)
    except (RenamerError, OSError) as e:
        return _failure(plan.source_path, plan.destination_path, str(e), messages, STATUS_FAIL,
                        plan.affected_records)


def relocate_episode(
        show: TvShow,
        episode: TvShowEpisode,
        settings: Optional[RenamerSettings] = None,
        messages: Optional[MessageManager] = None,
) -> List[RelocationResult]:
    """Relocate every media file of an episode; each file is handled on its own."""
    if episode.season < 0 or episode.episode < 0:
        reason = f"season/episode unknown (S{episode.season} E{episode.episode})"
        return [_failure(mf.path, None, reason, messages, STATUS_SKIP, [episode.id]) for mf in episode.media_files]

    return [relocate_media_file(show, mf, settings, messages) for mf in list(episode.media_files)]


def relocate_show_root(
        show: TvShow,
        settings: Optional[RenamerSettings] = None,
        messages: Optional[MessageManager] = None,
) -> RelocationResult:
    """Rename the show folder per the show folder template and rewrite every path below it."""
    settings = settings or RenamerSettings()
    if show.path is None or show.data_source is None:
        return _failure(Path(show.title), None, "show has no folder", messages)

    src = show.path
    dest = show.data_source / formatter.render_show_folder(show, settings)
    if same_file(src, dest) and src.exists():
        logger.log("relocate.noop", LogLevel.DEBUG, folder=str(src))
        return RelocationResult(src, dest, success=True, status=STATUS_OK)

    try:
        file_util.move_directory_safe(src, dest)
    except (RenamerError, OSError) as e:
        return _failure(src, dest, str(e), messages)

    logger.log("relocate.move_root", LogLevel.INFO, src=str(src), dest=str(dest))
    show.update_media_file_paths(src, dest)
    return RelocationResult(src, dest, success=True, moved=True, status=STATUS_MOVED)
