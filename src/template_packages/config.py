"""Installer settings.

Per KERNEL_PHILOSOPHY: Apps inject policy (install root, feed hint encoding).
The library only supplies defaults and a loader for a TOML settings table.
"""

import tomllib
from pathlib import Path

from pydantic import BaseModel
from pydantic import ConfigDict

from .archive import PACKAGE_EXTENSION


class InstallerSettings(BaseModel):
    """Settings of a PackageInstaller."""

    model_config = ConfigDict(frozen=True)

    install_path: Path
    package_extension: str = PACKAGE_EXTENSION
    # Request details key holding the preferred feeds, and its separator
    feed_sources_key: str = "NuGetSources"
    feed_sources_separator: str = ";"
    name: str = "NuGet"

    @classmethod
    def from_toml(cls, toml_path: Path) -> "InstallerSettings":
        """
        Load settings from a TOML file.

        Reads ``[tool.template-packages]`` (pyproject.toml style) or a
        top-level ``[template-packages]`` table. A relative ``install_path``
        is resolved against the TOML file's directory.

        Raises:
            FileNotFoundError: If the file doesn't exist
            KeyError: If no settings table or no install_path is present
            tomllib.TOMLDecodeError: If invalid TOML
        """
        if not toml_path.exists():
            raise FileNotFoundError(f"Settings file not found: {toml_path}")

        with open(toml_path, "rb") as f:
            data = tomllib.load(f)

        table = data.get("tool", {}).get("template-packages") or data.get("template-packages")
        if not table:
            raise KeyError(f"[template-packages] section missing in {toml_path}")
        if "install_path" not in table:
            raise KeyError(f"install_path missing in {toml_path}")

        install_path = Path(table["install_path"]).expanduser()
        if not install_path.is_absolute():
            install_path = toml_path.parent / install_path

        return cls(**{**table, "install_path": install_path})
