"""Pluggable cleaning definitions with auto-discovery."""

from __future__ import annotations

import importlib
import logging
import pkgutil
import types
from collections.abc import Collection, Iterable, Iterator
from pathlib import Path

from .base import CleaningDefinition

logger = logging.getLogger(__name__)


class DefinitionRegistry:
    """Ordered, fixed set of cleaning definitions tried against each directory.

    Order only affects log ordering: every matching definition runs.
    """

    def __init__(self, definitions: Iterable[CleaningDefinition]) -> None:
        self._definitions: tuple[CleaningDefinition, ...] = tuple(definitions)

    def __iter__(self) -> Iterator[CleaningDefinition]:
        return iter(self._definitions)

    def __len__(self) -> int:
        return len(self._definitions)

    @property
    def names(self) -> list[str]:
        return [definition.name for definition in self._definitions]

    def matching(self, directory: Path) -> Iterator[CleaningDefinition]:
        """Yield every definition whose match predicate accepts ``directory``."""
        for definition in self._definitions:
            if definition.match(directory):
                yield definition


def discover_definitions(disabled: Collection[str] = ()) -> DefinitionRegistry:
    """Discover and instantiate all enabled cleaning definitions.

    Scans the definitions package for classes with DEFINITION_ENABLED = True,
    drops those whose name is in ``disabled`` and sorts the rest by ``order``.
    """
    definitions: list[CleaningDefinition] = []
    package = importlib.import_module(__package__ or "project_clean.definitions")

    for _finder, module_name, _is_pkg in pkgutil.iter_modules(package.__path__):
        if module_name == "base":
            continue
        try:
            mod = importlib.import_module(f"{package.__name__}.{module_name}")
        except ImportError:
            logger.warning("Failed to import definition module: %s", module_name)
            continue

        definitions.extend(_find_definition_classes(mod, disabled))

    definitions.sort(key=lambda definition: definition.order)
    return DefinitionRegistry(definitions)


def _find_definition_classes(mod: types.ModuleType, disabled: Collection[str]) -> list[CleaningDefinition]:
    """Instantiate all cleaning definition classes found in the given Python module."""
    found: list[CleaningDefinition] = []

    for attr_name in dir(mod):
        attr = getattr(mod, attr_name)
        if not (
            isinstance(attr, type)
            and attr.__module__ == mod.__name__
            and getattr(attr, "DEFINITION_ENABLED", False) is True
        ):
            continue

        instance = attr()
        if instance.name in disabled:
            logger.info("Definition disabled: %s", instance.name)
            continue

        found.append(instance)
        logger.debug("Loaded definition: %s", instance.name)

    return found


__all__ = ["CleaningDefinition", "DefinitionRegistry", "discover_definitions"]
