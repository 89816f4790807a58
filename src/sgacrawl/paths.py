"""Project path helpers."""

from __future__ import annotations

import os
from pathlib import Path

DEFAULT_CONFIG_NAME = ".sgacrawl.yaml"
LOG_FILE_NAME = "sgacrawl.log"


def work_dir() -> Path:
    """Return the working directory, honouring SGACRAWL_ROOT."""
    override = os.environ.get("SGACRAWL_ROOT")
    if override:
        return Path(override).resolve()
    return Path.cwd()


def default_config_path() -> Path:
    """Return the config path in the working directory."""
    return work_dir() / DEFAULT_CONFIG_NAME


def home_config_path() -> Path:
    return Path.home() / DEFAULT_CONFIG_NAME


def find_config(explicit: Path | None = None) -> Path:
    """Return the config file to read.

    An explicit path always wins; otherwise the working directory is tried
    before the home directory.
    """
    if explicit is not None:
        return explicit
    local = default_config_path()
    if local.exists():
        return local
    home = home_config_path()
    if home.exists():
        return home
    return local


def log_path(base: Path | None = None) -> Path:
    """Return the sgacrawl.log path."""
    return (base or work_dir()) / LOG_FILE_NAME
