"""
SCUM Feed - Source Locator
Finds the active log file of a Source: the newest file matching its pattern
"""

import logging
import os
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def creation_time(stat_result: os.stat_result) -> float:
    """File creation time where the platform records it, else ctime"""
    birthtime = getattr(stat_result, 'st_birthtime', None)
    return birthtime if birthtime else stat_result.st_ctime


class SourceLocator:
    """
    SOURCE LOCATOR
    - Globs the Source directory with its filename pattern
    - Newest creation time wins, ties broken by file name
    - Never cached: every tick re-evaluates so rotation is noticed
    """

    def __init__(self, source):
        self.source = source

    def locate(self) -> Optional[Path]:
        directory = Path(self.source.directory)
        if not directory.is_dir():
            logger.debug(f"[{self.source.name}] Log directory missing: {directory}")
            return None

        newest = None
        newest_key = None
        try:
            for path in directory.glob(self.source.pattern):
                try:
                    if not path.is_file():
                        continue
                    key = (creation_time(path.stat()), path.name)
                except FileNotFoundError:
                    # Removed between glob and stat
                    continue

                if newest_key is None or key > newest_key:
                    newest, newest_key = path, key
        except OSError as e:
            logger.warning(f"[{self.source.name}] Failed to list {directory}: {e}")
            return None

        if newest is None:
            logger.debug(f"[{self.source.name}] No files matching {self.source.pattern} in {directory}")
            return None

        return newest.absolute()
