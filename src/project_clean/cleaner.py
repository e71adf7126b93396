"""Depth-first cleaning of a project tree."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from .definitions import DefinitionRegistry, discover_definitions
from .definitions.base import file_exists
from .executor import DeletionExecutor, DeletionStats

if TYPE_CHECKING:
    from .config import Mode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DefinitionMatch:
    """A cleaning definition that applied to a directory."""

    name: str
    directory: Path

    def __str__(self) -> str:
        return f"[{self.name}]: {self.directory}"


@dataclass
class CleanReport:
    """Outcome of a cleaning run."""

    root: Path
    directories_visited: int = 0
    matches: list[DefinitionMatch] = field(default_factory=list)
    stats: DeletionStats = field(default_factory=DeletionStats)


class Clean:
    """Cleans a directory, and optionally all of its subdirectories."""

    def __init__(
        self,
        path: Path,
        mode: Mode,
        registry: DefinitionRegistry | None = None,
        executor: DeletionExecutor | None = None,
    ) -> None:
        """Initialize the cleaner.

        Args:
            path: Directory to start from.
            mode: Cleaning mode shared by the whole run.
            registry: Definitions to apply. Discovered if None.
            executor: Deletion handler. Built from ``mode`` if None.

        """
        self.path = path
        self.mode = mode
        self.registry = registry if registry is not None else discover_definitions()
        self.executor = executor if executor is not None else DeletionExecutor(mode)

    def run(self) -> CleanReport:
        """Clean the tree and report what happened."""
        report = CleanReport(root=self.path, stats=self.executor.stats)
        self._visit(self.path, report)
        return report

    def _visit(self, directory: Path, report: CleanReport) -> None:
        report.directories_visited += 1

        # pom.xml always means target/ goes, whatever the registry holds
        if file_exists(directory, "pom.xml"):
            self.executor.directory(directory / "target")

        for definition in self.registry.matching(directory):
            match = DefinitionMatch(name=definition.name, directory=directory)
            logger.info("%s", match)
            report.matches.append(match)
            definition.clean(self.executor, directory)

        if self.mode.recursive:
            for child in self._subdirectories(directory):
                # Already deleted, or reported as deletable in read-only mode
                if self.executor.covers(child):
                    continue
                self._visit(child, report)

        logger.debug("Finished %s", directory)

    @staticmethod
    def _subdirectories(directory: Path) -> list[Path]:
        """List immediate subdirectories, sorted by name, skipping symlinks."""
        try:
            children = sorted(directory.iterdir())
        except OSError as e:
            logger.debug("Unable to list %s: %s", directory, e)
            return []

        subdirectories: list[Path] = []
        for child in children:
            try:
                if child.is_dir() and not child.is_symlink():
                    subdirectories.append(child)
            except OSError as e:
                logger.debug("Unable to check %s: %s", child, e)
        return subdirectories
