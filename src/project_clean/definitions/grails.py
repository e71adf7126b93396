"""Grails 2 cleaning definition."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from .base import delete_globs, file_contains

if TYPE_CHECKING:
    from ..executor import DeletionExecutor

_PROPERTIES = "application.properties"
_VERSION_KEY = "app.grails.version"


class Grails2Definition:
    """Removes ``target`` and stray log files from Grails 2 projects.

    Grails 2 applications declare ``app.grails.version`` in
    ``application.properties``; Grails 3+ moved to Gradle and is not covered.
    """

    DEFINITION_ENABLED: bool = True
    name: str = "Grails 2"
    order: int = 20
    deletes: tuple[str, ...] = ("target", "**/*.log")

    def match(self, directory: Path) -> bool:
        return file_contains(directory, _PROPERTIES, _VERSION_KEY)

    def clean(self, executor: DeletionExecutor, directory: Path) -> None:
        if self.match(directory):
            delete_globs(executor, directory, self.deletes)
