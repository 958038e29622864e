"""Batch relocation of a whole show with progress tracking.

The show folder is renamed first, then every distinct physical file
referenced by an episode is relocated one at a time. A failure on one file
never stops the batch. Cancellation is checked between files only.
"""
import threading
from typing import List, Optional

from tqdm import tqdm

from plexnamer.models import TvShow
from plexnamer.rename import core
from plexnamer.utils import LogLevel, logger
from plexnamer.utils.messages import MessageManager
from plexnamer.utils.settings import RenamerSettings


def relocate_show(
        show: TvShow,
        settings: Optional[RenamerSettings] = None,
        messages: Optional[MessageManager] = None,
        cancel_event: Optional[threading.Event] = None,
        rename_root: bool = True,
        progress: bool = False,
) -> List[core.RelocationResult]:
    """Relocate the show root and all episode files of `show`.

    Args:
        show (TvShow): Show whose records are updated in place.
        settings (RenamerSettings): Naming templates; defaults when omitted.
        messages (MessageManager): Channel receiving failure messages.
        cancel_event (threading.Event): When set, no further file is started.
        rename_root (bool): Rename the show folder before moving episode files.
        progress (bool): Show a tqdm progress bar.

    Returns:
        list[RelocationResult]: One result per processed file (plus the root
        rename when requested), in processing order.
    """
    settings = settings or RenamerSettings()
    results: List[core.RelocationResult] = []

    if rename_root:
        root_result = core.relocate_show_root(show, settings, messages)
        results.append(root_result)
        if not root_result.success:
            logger.log("batch.root_failed", LogLevel.WARN, show=show.title, error=root_result.error)

    # Snapshot after the root rename so the paths are current
    files = show.episode_media_files()
    for index, media_file in enumerate(tqdm(files, desc="Renaming files", disable=not progress)):
        if cancel_event is not None and cancel_event.is_set():
            logger.log("batch.cancelled", LogLevel.WARN, show=show.title, remaining=len(files) - index)
            break
        results.append(core.relocate_media_file(show, media_file, settings, messages))

    failed = sum(1 for r in results if not r.success)
    moved = sum(1 for r in results if r.moved)
    logger.log("batch.complete", LogLevel.INFO, show=show.title, files=len(files), moved=moved, failed=failed)
    return results
