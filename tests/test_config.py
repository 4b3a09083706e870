"""Tests for InstallerSettings loading."""

from pathlib import Path

import pytest
from template_packages import InstallerSettings


def test_defaults(tmp_path):
    settings = InstallerSettings(install_path=tmp_path)

    assert settings.package_extension == ".nupkg"
    assert settings.feed_sources_key == "NuGetSources"
    assert settings.feed_sources_separator == ";"
    assert settings.name == "NuGet"


def test_from_pyproject_tool_table(tmp_path):
    toml_path = tmp_path / "pyproject.toml"
    toml_path.write_text("""
[tool.template-packages]
install_path = "packages"
feed_sources_separator = "|"
""")

    settings = InstallerSettings.from_toml(toml_path)

    assert settings.install_path == tmp_path / "packages"
    assert settings.feed_sources_separator == "|"
    assert settings.feed_sources_key == "NuGetSources"


def test_from_toml_top_level_table(tmp_path):
    toml_path = tmp_path / "settings.toml"
    toml_path.write_text("""
[template-packages]
install_path = "/var/templates"
name = "Feeds"
""")

    settings = InstallerSettings.from_toml(toml_path)

    assert settings.install_path == Path("/var/templates")
    assert settings.name == "Feeds"


def test_from_toml_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        InstallerSettings.from_toml(tmp_path / "missing.toml")


def test_from_toml_missing_section(tmp_path):
    toml_path = tmp_path / "settings.toml"
    toml_path.write_text("[project]\nname = 'x'\n")

    with pytest.raises(KeyError, match="section missing"):
        InstallerSettings.from_toml(toml_path)


def test_from_toml_missing_install_path(tmp_path):
    toml_path = tmp_path / "settings.toml"
    toml_path.write_text("[template-packages]\nname = 'x'\n")

    with pytest.raises(KeyError, match="install_path"):
        InstallerSettings.from_toml(toml_path)
