"""Configuration loading from environment variables and tierlist.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

from tierlist.models import TierLayout

_CONFIG_FILENAME = "tierlist.toml"


@dataclass
class FilesConfig:
    """Artifact file names, relative to the data directory."""

    top: str = "levels_main.json"
    mid: str = "levels_extended.json"
    overflow: str = "levels_legacy.json"
    readme: str = "README.md"
    changelog: str = "CHANGELOG.md"


@dataclass
class TiersConfig:
    """Capacities of the bounded tiers."""

    top_capacity: int = 75
    mid_capacity: int = 75

    @property
    def layout(self) -> TierLayout:
        return TierLayout(self.top_capacity, self.mid_capacity)


@dataclass
class TierlistConfig:
    """Top-level configuration."""

    data_dir: Path = field(default_factory=Path.cwd)
    files: FilesConfig = field(default_factory=FilesConfig)
    tiers: TiersConfig = field(default_factory=TiersConfig)
    simulate_vcs: bool = False
    vcs_push: bool = True
    date_format: str = "%d/%m/%y"
    log_level: str = "INFO"


def _flag(value: str | None) -> bool | None:
    if value is None:
        return None
    return value.strip().lower() in ("1", "true", "yes", "on")


def load_config(config_path: Path | None = None) -> TierlistConfig:
    """Load configuration from environment variables and optional tierlist.toml.

    Priority: environment variables > tierlist.toml > defaults.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.tierlist/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".tierlist" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    files_data = file_data.get("files", {})
    tiers_data = file_data.get("tiers", {})

    simulate = _flag(os.getenv("TIERLIST_SIMULATE_VCS"))
    if simulate is None:
        # SIMULATE_GIT is the older name of the switch
        simulate = _flag(os.getenv("SIMULATE_GIT"))
    if simulate is None:
        simulate = bool(file_data.get("simulate_vcs", False))

    defaults = FilesConfig()
    config = TierlistConfig(
        data_dir=Path(os.getenv("TIERLIST_DATA_DIR", file_data.get("data_dir", str(Path.cwd())))),
        files=FilesConfig(
            top=files_data.get("top", defaults.top),
            mid=files_data.get("mid", defaults.mid),
            overflow=files_data.get("overflow", defaults.overflow),
            readme=files_data.get("readme", defaults.readme),
            changelog=files_data.get("changelog", defaults.changelog),
        ),
        tiers=TiersConfig(
            top_capacity=int(os.getenv("TIERLIST_TOP_CAPACITY", tiers_data.get("top_capacity", 75))),
            mid_capacity=int(os.getenv("TIERLIST_MID_CAPACITY", tiers_data.get("mid_capacity", 75))),
        ),
        simulate_vcs=simulate,
        vcs_push=bool(file_data.get("vcs_push", True)),
        date_format=file_data.get("date_format", "%d/%m/%y"),
        log_level=os.getenv("TIERLIST_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
