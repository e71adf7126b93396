"""Best-effort deletion of resolved paths, with a read-only mode."""

from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable

    from .config import Mode

logger = logging.getLogger(__name__)


@dataclass
class DeletionStats:
    """Counters for one executor's deletion requests."""

    deleted: int = 0
    would_delete: int = 0
    failed: int = 0
    missing: int = 0


class DeletionExecutor:
    """Deletes files and directories, or only reports them in read-only mode.

    Deletion is advisory: failures are logged at debug level and counted,
    never raised. Every path handed over is remembered, in both modes, so a
    later request for the same path or anything inside it is ignored.
    """

    def __init__(self, mode: Mode) -> None:
        """Initialize the executor.

        Args:
            mode: Cleaning mode; ``mode.readonly`` disables all mutation.

        """
        self.mode = mode
        self.stats = DeletionStats()
        self._handled: set[Path] = set()

    def covers(self, path: Path) -> bool:
        """Return True if ``path`` or one of its parents was already handled."""
        return path in self._handled or any(parent in self._handled for parent in path.parents)

    def remove(self, path: Path) -> None:
        """Delete whatever lives at ``path``, choosing file or directory removal."""
        try:
            is_directory = path.is_dir() and not path.is_symlink()
        except OSError:
            is_directory = False

        if is_directory:
            self.directory(path)
        else:
            self.file(path)

    def file(self, path: Path) -> None:
        """Delete a single file (or symlink) at ``path``."""
        self._delete(path, "File", path.unlink)

    def directory(self, path: Path) -> None:
        """Delete the directory tree at ``path``."""
        self._delete(path, "Directory", lambda: shutil.rmtree(path))

    def _delete(self, path: Path, kind: str, action: Callable[[], None]) -> None:
        if self.covers(path):
            logger.debug("Already handled '%s'", path)
            return

        if not os.path.lexists(path):
            logger.debug("Nothing to delete at '%s'", path)
            self.stats.missing += 1
            return

        self._handled.add(path)

        if self.mode.readonly:
            logger.info("%s '%s' can be deleted.", kind, path)
            self.stats.would_delete += 1
            return

        logger.info("Deleting '%s'", path)
        try:
            action()
        except OSError as e:
            logger.debug("Unable to delete '%s': %s", path, e)
            self.stats.failed += 1
            return

        self.stats.deleted += 1
