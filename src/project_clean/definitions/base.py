"""Base protocol and shared behaviours for cleaning definitions."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from ..globs import resolve

if TYPE_CHECKING:
    from ..executor import DeletionExecutor

logger = logging.getLogger(__name__)


@runtime_checkable
class CleaningDefinition(Protocol):
    """Interface for pluggable project-type cleaning rules."""

    DEFINITION_ENABLED: bool
    name: str
    order: int

    def match(self, directory: Path) -> bool:
        """Check whether this definition applies to a directory.

        Args:
            directory: Directory to classify.

        Returns:
            True if the directory follows this definition's convention.

        """
        ...

    def clean(self, executor: DeletionExecutor, directory: Path) -> None:
        """Delete this definition's artifacts from a directory.

        Does nothing unless ``match(directory)`` is true at call time.

        Args:
            executor: Deletion handler.
            directory: Directory to clean.

        """
        ...


def file_exists(directory: Path, name: str) -> bool:
    """Return True if ``directory/name`` exists. Unreachable paths count as absent."""
    try:
        return (directory / name).exists()
    except OSError as e:
        logger.debug("Unable to check %s: %s", directory / name, e)
        return False


def _read_text(path: Path) -> str | None:
    """Read a file for matching purposes, mapping any failure to None."""
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        logger.debug("Unable to read %s: %s", path, e)
        return None


def file_contains(directory: Path, name: str, phrase: str) -> bool:
    """Return True if ``directory/name`` exists and contains ``phrase``.

    The search is a case-sensitive substring test. Unreadable files do not match.
    """
    text = _read_text(directory / name)
    return text is not None and phrase in text


def file_matches(directory: Path, name: str, regexp: str | re.Pattern[str]) -> bool:
    """Return True if ``directory/name`` exists and ``regexp`` is found in its text.

    Unreadable files do not match.
    """
    text = _read_text(directory / name)
    return text is not None and re.search(regexp, text) is not None


def delete_globs(executor: DeletionExecutor, directory: Path, patterns: Iterable[str]) -> None:
    """Resolve each pattern under ``directory`` and hand the paths to ``executor``.

    The executor ignores paths it has already handled, so a read-only run
    reports exactly what a real run deletes.
    """
    for pattern in patterns:
        for path in resolve(directory, pattern):
            executor.remove(path)
