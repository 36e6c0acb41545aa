"""Platform queries used during startup.

``PlatformProbe`` groups the questions the bootstrap asks the host: which
version of the client is installed, what device it runs on, how much physical
memory there is and whether the desktop exposes a system color palette.
Tests substitute a probe returning fixed values.
"""

from __future__ import annotations

import platform
import sys
from dataclasses import dataclass
from importlib import metadata
from typing import Dict, Optional

import psutil

from config import settings

try:  # Lazy / optional Qt import
    from PyQt6.QtGui import QGuiApplication, QPalette  # type: ignore

    _QT_AVAILABLE = True
except Exception:  # noqa: BLE001
    QGuiApplication = None  # type: ignore
    QPalette = None  # type: ignore
    _QT_AVAILABLE = False

__all__ = ["PackageInfo", "DeviceInfo", "PlatformProbe"]


@dataclass(frozen=True, slots=True)
class PackageInfo:
    app_name: str
    package_name: str
    version: str


@dataclass(frozen=True, slots=True)
class DeviceInfo:
    system: str
    release: str
    machine: str
    model: str
    python_version: str

    def as_dict(self) -> Dict[str, str]:
        return {
            "system": self.system,
            "release": self.release,
            "machine": self.machine,
            "model": self.model,
            "python_version": self.python_version,
        }


class PlatformProbe:
    def __init__(self, distribution: str = settings.APP_NAME) -> None:
        self.distribution = distribution

    def package_info(self) -> PackageInfo:
        """Installed distribution metadata; raises if the package is not installed."""
        return PackageInfo(
            app_name=settings.USER_AGENT_PRODUCT,
            package_name=self.distribution,
            version=metadata.version(self.distribution),
        )

    def device_info(self) -> DeviceInfo:
        uname = platform.uname()
        return DeviceInfo(
            system=uname.system or sys.platform,
            release=uname.release,
            machine=uname.machine,
            model=uname.node or uname.machine,
            python_version=platform.python_version(),
        )

    def physical_memory_mb(self) -> Optional[float]:
        try:
            return psutil.virtual_memory().total / (1024 * 1024)
        except (OSError, psutil.Error):
            return None

    def core_palette(self) -> Optional[Dict[str, str]]:
        """System accent colors, or None when the platform has no palette to follow."""
        if not _QT_AVAILABLE or QGuiApplication.instance() is None:
            return None
        pal = QGuiApplication.palette()
        return {
            "primary": pal.color(QPalette.ColorRole.Highlight).name(),
            "on_primary": pal.color(QPalette.ColorRole.HighlightedText).name(),
            "surface": pal.color(QPalette.ColorRole.Window).name(),
        }
