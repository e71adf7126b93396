"""Run mode and per-project ``.clean.yml`` configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any

import yaml

if TYPE_CHECKING:
    import argparse

CONFIG_FILENAME = ".clean.yml"


class ConfigError(ValueError):
    """Raised when a ``.clean.yml`` file cannot be loaded."""


@dataclass(frozen=True)
class Mode:
    """Process-wide cleaning mode, fixed for the lifetime of a run."""

    # Report what would be deleted without touching the filesystem
    readonly: bool = False

    # Clean every subdirectory, not just the starting one
    recursive: bool = False

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> Mode:
        """Build a mode from parsed command line arguments."""
        return cls(
            readonly=bool(getattr(args, "readonly", False)),
            recursive=bool(getattr(args, "recursive", False)),
        )


@dataclass
class CleanFileConfig:
    """Contents of a ``.clean.yml`` file."""

    deletes: tuple[str, ...] = field(default_factory=tuple)

    @staticmethod
    def find(directory: Path) -> Path:
        """Get the path where a directory's ``.clean.yml`` lives."""
        return directory / CONFIG_FILENAME

    @classmethod
    def load(cls, config_path: Path) -> CleanFileConfig:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the ``.clean.yml`` file.

        Returns:
            Loaded configuration.

        Raises:
            ConfigError: If the file cannot be read or is not a valid config.

        """
        try:
            with config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Unable to read {config_path}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"Malformed YAML in {config_path}: {e}") from e

        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping in {config_path}, got {type(data).__name__}")

        return cls._from_dict(data, config_path)

    @classmethod
    def _from_dict(cls, data: dict[str, Any], config_path: Path) -> CleanFileConfig:
        """Create config from dictionary."""
        deletes = data.get("deletes") or []
        if not isinstance(deletes, list):
            raise ConfigError(f"'deletes' in {config_path} must be a list")

        for pattern in deletes:
            if not isinstance(pattern, str):
                raise ConfigError(f"'deletes' in {config_path} must only hold strings, got {pattern!r}")

        return cls(deletes=tuple(deletes))

    def save(self, config_path: Path) -> None:
        """Save configuration to a YAML file.

        Args:
            config_path: Path to save config.

        """
        data = {"deletes": list(self.deletes)}

        with config_path.open("w", encoding="utf-8") as f:
            yaml.dump(data, f, default_flow_style=False, sort_keys=False)
