"""Cleaning definition driven by a project's own ``.clean.yml``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ..config import CONFIG_FILENAME, CleanFileConfig, ConfigError
from .base import delete_globs

if TYPE_CHECKING:
    from ..executor import DeletionExecutor

logger = logging.getLogger(__name__)


class YamlConfigDefinition:
    """Deletes every glob listed under ``deletes`` in ``.clean.yml``."""

    DEFINITION_ENABLED: bool = True
    name: str = CONFIG_FILENAME
    order: int = 30

    def _load(self, directory: Path) -> CleanFileConfig | None:
        """Load the directory's config, or None if absent or unusable."""
        config_path = CleanFileConfig.find(directory)
        if not config_path.exists():
            return None
        try:
            return CleanFileConfig.load(config_path)
        except ConfigError as e:
            logger.debug("Ignoring %s: %s", config_path, e)
            return None

    def match(self, directory: Path) -> bool:
        return self._load(directory) is not None

    def clean(self, executor: DeletionExecutor, directory: Path) -> None:
        config = self._load(directory)
        if config is None:
            return
        delete_globs(executor, directory, config.deletes)
