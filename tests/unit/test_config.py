"""Tests for configuration loading and validation."""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest

from devflow.config.loader import find_config_file, load_config, load_toml, parse_config
from devflow.config.models import (
    BumpVersion,
    Command,
    DevflowConfig,
    GitHubConfig,
    PackageConfig,
    PrepareRelease,
    SelectJiraIssue,
)
from devflow.exceptions import ConfigNotFoundError, ConfigValidationError


def minimal(**extra) -> dict:
    data = {"workflows": [{"name": "hello", "steps": [{"type": "Command", "command": "echo hi"}]}]}
    data.update(extra)
    return data


class TestModels:
    """Tests for the pydantic models."""

    def test_minimal_config(self):
        """A single Command workflow needs no other sections."""
        config = parse_config(minimal())

        assert config.workflow_names == ["hello"]
        assert isinstance(config.workflows[0].steps[0], Command)
        assert config.package is None
        assert config.effective_changelog_path == Path("CHANGELOG.md")
        assert config.effective_tag_prefix == "v"

    def test_package_defaults(self):
        """Default package configuration."""
        package = PackageConfig()

        assert package.versioned_files == []
        assert package.changelog == Path("CHANGELOG.md")
        assert package.tag_prefix == "v"

    def test_github_defaults(self):
        """GitHub API URL defaults to github.com."""
        github = GitHubConfig(owner="me", repo="proj")
        assert github.api_url == "https://api.github.com"

    def test_steps_discriminated_by_type(self):
        """Each step table becomes its own model."""
        config = parse_config(
            {
                "package": {"versioned_files": ["pyproject.toml"]},
                "jira": {"url": "https://example.atlassian.net", "project": "PROJ"},
                "workflows": [
                    {
                        "name": "all",
                        "steps": [
                            {"type": "SelectJiraIssue", "status": "To Do"},
                            {"type": "BumpVersion", "rule": "minor"},
                            {"type": "PrepareRelease", "prerelease_label": "rc"},
                        ],
                    }
                ],
            }
        )
        steps = config.workflows[0].steps

        assert isinstance(steps[0], SelectJiraIssue) and steps[0].status == "To Do"
        assert isinstance(steps[1], BumpVersion) and steps[1].rule == "minor"
        assert isinstance(steps[2], PrepareRelease) and steps[2].prerelease_label == "rc"

    def test_get_workflow(self):
        """Workflows are looked up by name."""
        config = parse_config(minimal())
        assert config.get_workflow("hello") is config.workflows[0]
        assert config.get_workflow("missing") is None


class TestValidation:
    """Tests for structural validation."""

    def _problems(self, data: dict) -> list[str]:
        with pytest.raises(ConfigValidationError) as exc_info:
            parse_config(data)
        return exc_info.value.problems

    def test_unknown_step_type(self):
        """Unknown step types are rejected."""
        data = {"workflows": [{"name": "x", "steps": [{"type": "Teleport"}]}]}
        assert self._problems(data)

    def test_missing_step_field(self):
        """A step missing a required field is rejected with its location."""
        data = {"workflows": [{"name": "x", "steps": [{"type": "RebaseBranch"}]}]}
        problems = self._problems(data)
        assert any("to" in p for p in problems)

    def test_unknown_keys_rejected(self):
        """Typos in keys are reported instead of ignored."""
        assert self._problems(minimal(pakage={"versioned_files": []}))

    def test_empty_workflow(self):
        """Workflows need at least one step."""
        assert self._problems({"workflows": [{"name": "x", "steps": []}]})

    def test_duplicate_workflow_names(self):
        """Workflow names must be unique."""
        data = minimal()
        data["workflows"].append(data["workflows"][0])
        problems = self._problems(data)
        assert any("more than once" in p for p in problems)

    def test_jira_step_requires_jira(self):
        """Jira steps need a [jira] section."""
        data = {"workflows": [{"name": "x", "steps": [{"type": "SelectJiraIssue", "status": "Open"}]}]}
        problems = self._problems(data)
        assert any("[jira]" in p for p in problems)

    def test_release_steps_require_versioned_files(self):
        """PrepareRelease needs versioned files."""
        data = {"workflows": [{"name": "x", "steps": [{"type": "PrepareRelease"}]}]}
        problems = self._problems(data)
        assert any("versioned_files" in p for p in problems)

    def test_pre_rule_requires_label(self):
        """BumpVersion rule 'pre' needs a label."""
        data = {
            "package": {"versioned_files": ["pyproject.toml"]},
            "workflows": [{"name": "x", "steps": [{"type": "BumpVersion", "rule": "pre"}]}],
        }
        problems = self._problems(data)
        assert any("label" in p for p in problems)

    def test_structural_problems_on_valid_config(self):
        """A valid config reports no problems."""
        config = DevflowConfig.model_validate(minimal())
        assert config.structural_problems() == []


class TestLoading:
    """Tests for locating and reading devflow.toml."""

    def test_load_config(self, tmp_path: Path):
        """Load configuration from devflow.toml in the project directory."""
        (tmp_path / "devflow.toml").write_text(
            textwrap.dedent(
                """\
                [[workflows]]
                name = "hello"

                [[workflows.steps]]
                type = "Command"
                command = "echo hi"
                """
            )
        )
        config = load_config(tmp_path)
        assert config.workflow_names == ["hello"]

    def test_explicit_path_overrides(self, tmp_path: Path):
        """An explicit config path is used as is."""
        custom = tmp_path / "custom.toml"
        custom.write_text('[[workflows]]\nname = "a"\n[[workflows.steps]]\ntype = "Release"\n')
        assert find_config_file(tmp_path, custom) == custom
        assert load_config(tmp_path, custom).workflow_names == ["a"]

    def test_not_found(self, tmp_path: Path):
        """A missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path)
        with pytest.raises(ConfigNotFoundError):
            find_config_file(tmp_path, tmp_path / "nope.toml")

    def test_invalid_toml(self, tmp_path: Path):
        """Malformed TOML raises ConfigValidationError."""
        path = tmp_path / "devflow.toml"
        path.write_text("[[workflows]\nname = ")
        with pytest.raises(ConfigValidationError):
            load_toml(path)
