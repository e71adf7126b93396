"""Resolve delete-glob patterns into filesystem paths."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve(root: Path, pattern: str) -> Iterator[Path]:
    """Lazily yield every path below ``root`` matching ``pattern``.

    ``target`` yields ``root/target`` when it exists. ``**/*.log`` yields
    every file or directory at any depth below ``root`` (including directly
    inside it) whose name matches ``*.log``. Symlinked directories are not
    descended into by ``**``.

    Only paths strictly below ``root`` are yielded. Nothing is yielded when
    ``root`` is missing or the pattern is unusable (empty, absolute, or
    containing ``..``).
    """
    if not pattern or not pattern.strip():
        logger.warning("Ignoring empty glob pattern in %s", root)
        return

    if Path(pattern).is_absolute():
        logger.warning("Ignoring absolute glob pattern %r in %s", pattern, root)
        return

    if ".." in Path(pattern).parts:
        logger.warning("Ignoring glob pattern %r in %s: it leaves the directory", pattern, root)
        return

    if not root.is_dir():
        return

    try:
        for path in root.glob(pattern):
            if path != root and path.is_relative_to(root):
                yield path
    except ValueError as e:
        logger.warning("Ignoring unusable glob pattern %r in %s: %s", pattern, root, e)
    except PermissionError:
        logger.debug("Permission denied resolving %r in %s", pattern, root)
