"""Tests for the built-in cleaning definitions and their helpers."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from project_clean.config import Mode
from project_clean.definitions.base import (
    CleaningDefinition,
    delete_globs,
    file_contains,
    file_exists,
    file_matches,
)
from project_clean.definitions.grails import Grails2Definition
from project_clean.definitions.maven import MavenDefinition
from project_clean.definitions.yaml_config import YamlConfigDefinition
from project_clean.executor import DeletionExecutor


@pytest.fixture
def executor() -> DeletionExecutor:
    """Create an executor that deletes."""
    return DeletionExecutor(Mode())


@pytest.fixture
def grails_project(tmp_path: Path) -> Path:
    """Create a Grails 2 project with build output and logs."""
    (tmp_path / "application.properties").write_text("app.name=demo\napp.grails.version=2.4.0\n")
    (tmp_path / "target" / "work").mkdir(parents=True)
    (tmp_path / "stacktrace.log").write_text("boom")
    (tmp_path / "grails-app" / "conf").mkdir(parents=True)
    (tmp_path / "grails-app" / "conf" / "dev.log").write_text("log")
    (tmp_path / "grails-app" / "conf" / "Config.groovy").write_text("grails {}")
    return tmp_path


class TestMatchHelpers:
    """Tests for the match predicates shared by definitions."""

    def test_file_exists(self, tmp_path: Path) -> None:
        """Test file_exists for present and absent files."""
        (tmp_path / "pom.xml").write_text("<project/>")

        assert file_exists(tmp_path, "pom.xml")
        assert not file_exists(tmp_path, "build.gradle")

    def test_file_exists_unreachable(self, tmp_path: Path) -> None:
        """Test that stat failures count as absent."""
        with patch.object(Path, "exists", side_effect=PermissionError("denied")):
            assert not file_exists(tmp_path, "pom.xml")

    def test_file_contains(self, tmp_path: Path) -> None:
        """Test the case-sensitive substring search."""
        (tmp_path / "application.properties").write_text("app.grails.version=2.4.0\n")

        assert file_contains(tmp_path, "application.properties", "app.grails.version")
        assert not file_contains(tmp_path, "application.properties", "APP.GRAILS.VERSION")
        assert not file_contains(tmp_path, "missing.properties", "app.grails.version")

    def test_file_contains_unreadable(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a read failure is logged at debug level and does not match."""
        (tmp_path / "application.properties").write_text("app.grails.version=2.4.0\n")

        with (
            caplog.at_level(logging.DEBUG, logger="project_clean"),
            patch.object(Path, "read_text", side_effect=PermissionError("denied")),
        ):
            assert not file_contains(tmp_path, "application.properties", "app.grails.version")

        assert "Unable to read" in caplog.text

    def test_file_contains_undecodable(self, tmp_path: Path) -> None:
        """Test that binary content does not match and does not raise."""
        (tmp_path / "application.properties").write_bytes(b"\xff\xfe\x00app.grails.version")

        assert not file_contains(tmp_path, "application.properties", "app.grails.version")

    def test_file_contains_directory(self, tmp_path: Path) -> None:
        """Test that a directory in place of the file does not match."""
        (tmp_path / "application.properties").mkdir()

        assert not file_contains(tmp_path, "application.properties", "app")

    def test_file_matches(self, tmp_path: Path) -> None:
        """Test the regular expression predicate."""
        (tmp_path / "application.properties").write_text("app.grails.version=2.4.0\n")

        assert file_matches(tmp_path, "application.properties", r"app\.grails\.version=2\.\d+")
        assert file_matches(tmp_path, "application.properties", re.compile(r"^app\.", re.MULTILINE))
        assert not file_matches(tmp_path, "application.properties", r"version=3\.")
        assert not file_matches(tmp_path, "missing.properties", r".*")


class TestDeleteGlobs:
    """Tests for resolving glob lists into deletions."""

    def test_deletes_in_order(self, tmp_path: Path) -> None:
        """Test that each pattern's paths are handed to the executor."""
        (tmp_path / "build").mkdir()
        (tmp_path / "a.tmp").write_text("")
        executor = MagicMock()

        delete_globs(executor, tmp_path, ["build", "**/*.tmp"])

        assert [call.args[0] for call in executor.remove.call_args_list] == [
            tmp_path / "build",
            tmp_path / "a.tmp",
        ]

    def test_skips_paths_inside_handled_directory(self, tmp_path: Path) -> None:
        """Test that files inside an already handed-over directory are not repeated."""
        (tmp_path / "target").mkdir()
        (tmp_path / "target" / "build.log").write_text("log")
        (tmp_path / "app.log").write_text("log")
        executor = DeletionExecutor(Mode(readonly=True))

        delete_globs(executor, tmp_path, ["target", "**/*.log"])

        assert executor.stats.would_delete == 2
        assert executor.covers(tmp_path / "target" / "build.log")
        assert executor.covers(tmp_path / "app.log")

    def test_empty_list_is_noop(self, tmp_path: Path) -> None:
        """Test that an empty glob list does nothing."""
        executor = MagicMock()

        delete_globs(executor, tmp_path, [])

        executor.remove.assert_not_called()


class TestMavenDefinition:
    """Tests for the Maven definition."""

    def test_satisfies_protocol(self) -> None:
        """Test that the definition is a CleaningDefinition."""
        assert isinstance(MavenDefinition(), CleaningDefinition)

    def test_match(self, tmp_path: Path) -> None:
        """Test that a pom.xml marks a Maven project."""
        definition = MavenDefinition()
        assert not definition.match(tmp_path)

        (tmp_path / "pom.xml").write_text("<project/>")

        assert definition.match(tmp_path)

    def test_clean_deletes_target(self, tmp_path: Path, executor: DeletionExecutor) -> None:
        """Test that cleaning removes target and nothing else."""
        (tmp_path / "pom.xml").write_text("<project/>")
        (tmp_path / "target" / "classes").mkdir(parents=True)
        (tmp_path / "src").mkdir()

        MavenDefinition().clean(executor, tmp_path)

        assert not (tmp_path / "target").exists()
        assert (tmp_path / "src").exists()
        assert (tmp_path / "pom.xml").exists()

    def test_clean_without_match_does_nothing(self, tmp_path: Path, executor: DeletionExecutor) -> None:
        """Test that clean re-checks the match before deleting."""
        (tmp_path / "target").mkdir()

        MavenDefinition().clean(executor, tmp_path)

        assert (tmp_path / "target").exists()


class TestGrails2Definition:
    """Tests for the Grails 2 definition."""

    def test_match(self, grails_project: Path) -> None:
        """Test that app.grails.version marks a Grails 2 project."""
        assert Grails2Definition().match(grails_project)

    def test_no_match_without_version_key(self, tmp_path: Path) -> None:
        """Test that other properties files do not match."""
        (tmp_path / "application.properties").write_text("server.port=8080\n")

        assert not Grails2Definition().match(tmp_path)

    def test_no_match_without_file(self, tmp_path: Path) -> None:
        """Test that a directory without application.properties does not match."""
        assert not Grails2Definition().match(tmp_path)

    def test_clean_deletes_target_and_logs(self, grails_project: Path, executor: DeletionExecutor) -> None:
        """Test that target and every log file are removed."""
        Grails2Definition().clean(executor, grails_project)

        assert not (grails_project / "target").exists()
        assert not (grails_project / "stacktrace.log").exists()
        assert not (grails_project / "grails-app" / "conf" / "dev.log").exists()
        assert (grails_project / "grails-app" / "conf" / "Config.groovy").exists()
        assert (grails_project / "application.properties").exists()


class TestYamlConfigDefinition:
    """Tests for the .clean.yml definition."""

    def test_no_match_without_file(self, tmp_path: Path) -> None:
        """Test that a missing .clean.yml does not match."""
        assert not YamlConfigDefinition().match(tmp_path)

    def test_match(self, tmp_path: Path) -> None:
        """Test that a valid .clean.yml matches."""
        (tmp_path / ".clean.yml").write_text("deletes:\n  - build\n")

        assert YamlConfigDefinition().match(tmp_path)

    def test_malformed_config_does_not_match(self, tmp_path: Path) -> None:
        """Test that a config that cannot be loaded is treated as absent."""
        (tmp_path / ".clean.yml").write_text("deletes: [build\n")

        assert not YamlConfigDefinition().match(tmp_path)

    def test_clean_deletes_listed_globs(self, tmp_path: Path, executor: DeletionExecutor) -> None:
        """Test that build and every .tmp file are removed."""
        (tmp_path / ".clean.yml").write_text('deletes: ["build", "**/*.tmp"]\n')
        (tmp_path / "build" / "out").mkdir(parents=True)
        (tmp_path / "scratch.tmp").write_text("")
        (tmp_path / "src" / "deep").mkdir(parents=True)
        (tmp_path / "src" / "deep" / "cache.tmp").write_text("")
        (tmp_path / "src" / "deep" / "keep.txt").write_text("")

        YamlConfigDefinition().clean(executor, tmp_path)

        assert not (tmp_path / "build").exists()
        assert not (tmp_path / "scratch.tmp").exists()
        assert not (tmp_path / "src" / "deep" / "cache.tmp").exists()
        assert (tmp_path / "src" / "deep" / "keep.txt").exists()
        assert (tmp_path / ".clean.yml").exists()

    def test_clean_with_empty_deletes(self, tmp_path: Path) -> None:
        """Test that an empty deletes list is a legal no-op."""
        (tmp_path / ".clean.yml").write_text("deletes: []\n")
        executor = MagicMock()

        definition = YamlConfigDefinition()
        definition.clean(executor, tmp_path)

        assert definition.match(tmp_path)
        executor.remove.assert_not_called()
