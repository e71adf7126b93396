"""Maven cleaning definition."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .base import delete_globs, file_exists

if TYPE_CHECKING:
    from ..executor import DeletionExecutor


class MavenDefinition:
    """Removes the ``target`` directory of Maven projects."""

    DEFINITION_ENABLED: bool = True
    name: str = "Maven"
    order: int = 10
    deletes: tuple[str, ...] = ("target",)

    def match(self, directory: Path) -> bool:
        """A Maven project has a ``pom.xml``."""
        return file_exists(directory, "pom.xml")

    def clean(self, executor: DeletionExecutor, directory: Path) -> None:
        if self.match(directory):
            delete_globs(executor, directory, self.deletes)
