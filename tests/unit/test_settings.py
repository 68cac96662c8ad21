"""
Unit tests for deployment settings.
"""

import pytest
from pydantic import ValidationError

from deploy.settings import ENTRY_POINT, DeploySettings, discover_handlers


class TestDiscoverHandlers:
    """Test cases for discover_handlers."""

    def test_only_directories_with_entry_file(self, source_tree):
        assert discover_handlers(source_tree) == ["alpha", "beta"]


class TestDeploySettings:
    """Test cases for DeploySettings."""

    def test_defaults(self, tmp_path):
        settings = DeploySettings(handlers=["function1"], source_dir=tmp_path, dist_dir=tmp_path / "dist")

        assert settings.entry_point == ENTRY_POINT == "index.handler"
        assert settings.timeout_seconds == 20
        assert settings.runtime == "python3.12"
        assert settings.python_version == "3.12"
        assert settings.platform is None

    def test_paths_derive_from_name(self, tmp_path):
        settings = DeploySettings(handlers=["function1"], source_dir=tmp_path / "src", dist_dir=tmp_path / "dist")

        assert settings.handler_source("function1") == tmp_path / "src" / "function1" / "index.py"
        assert settings.artifact_path("function1") == tmp_path / "dist" / "function1.zip"

    @pytest.mark.parametrize("handlers", [
        [],
        ["has space"],
        ["../escape"],
        ["dup", "dup"],
    ])
    def test_invalid_handler_lists(self, handlers, tmp_path):
        with pytest.raises(ValidationError):
            DeploySettings(handlers=handlers, source_dir=tmp_path, dist_dir=tmp_path)

    def test_from_project_discovers_handlers(self, source_tree, monkeypatch):
        monkeypatch.setenv("AWS_REGION", "ap-southeast-2")

        settings = DeploySettings.from_project(source_tree.parent)

        assert settings.handlers == ["alpha", "beta"]
        assert settings.region == "ap-southeast-2"
        assert settings.source_dir == source_tree
        assert settings.dist_dir == source_tree.parent / "dist"

    def test_from_project_explicit_values(self, source_tree, tmp_path):
        settings = DeploySettings.from_project(
            source_tree.parent, handlers=["beta"], region="us-west-2", dist_dir=tmp_path / "out",
            platform="manylinux2014_aarch64",
        )

        assert settings.handlers == ["beta"]
        assert settings.region == "us-west-2"
        assert settings.dist_dir == tmp_path / "out"
        assert settings.platform == "manylinux2014_aarch64"
