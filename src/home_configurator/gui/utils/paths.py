"""
Path utilities for dev vs installed file locations.

Dev mode (running from a checkout): local workspace/ directory
Installed: the platform's application data directory
"""
from __future__ import annotations

from pathlib import Path

from PySide6.QtCore import QStandardPaths

APP_NAME = "Home Configurator"


def is_dev_checkout() -> bool:
    """True when running from a source tree that has a pyproject.toml."""
    return (Path(__file__).resolve().parents[4] / "pyproject.toml").exists()


def get_app_data_dir() -> Path:
    """
    Directory for internal state files.

    Installed: AppLocalDataLocation (e.g. ~/.local/share/Home Configurator)
    Dev: workspace/ under the current directory
    """
    if is_dev_checkout():
        return Path.cwd() / "workspace"
    location = QStandardPaths.writableLocation(QStandardPaths.StandardLocation.AppLocalDataLocation)
    if location:
        return Path(location)
    return Path.home() / ".home_configurator"


def get_store_path() -> Path:
    """JSON file holding persisted selections."""
    return get_app_data_dir() / "selections.json"
