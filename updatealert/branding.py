"""Host application identity — name, version, bundle id and device OS."""

import platform
import re
import sys

from updatealert.core.version import VersionIdentifier

_LEADING_VERSION = re.compile(r'\d+(?:\.\d+)*')


class AppBranding:
    """Application identity constants."""

    APP_NAME = "UpdateAlert"
    PUBLISHER = "UpdateAlert"
    VERSION = "1.0.0"
    BUNDLE_ID = "com.updatealert.app"

    @classmethod
    def user_agent(cls) -> str:
        return f"{cls.APP_NAME}/{cls.VERSION}"

    @classmethod
    def installed_version(cls) -> VersionIdentifier:
        return VersionIdentifier.parse(cls.VERSION)

    @classmethod
    def best_matching_app_name(cls) -> str:
        """Display name reported by the running Qt application, else APP_NAME."""
        if 'PyQt6.QtWidgets' in sys.modules:
            from PyQt6.QtWidgets import QApplication
            app = QApplication.instance()
            if app is not None:
                name = app.applicationDisplayName() or app.applicationName()
                if name:
                    return name
        return cls.APP_NAME

    @staticmethod
    def os_version() -> VersionIdentifier:
        """Device OS version as a dotted identifier ("0" if unknown)."""
        if sys.platform == 'darwin':
            raw = platform.mac_ver()[0]
        elif sys.platform == 'win32':
            raw = platform.version()
        else:
            raw = platform.release()
        match = _LEADING_VERSION.match(raw or '')
        return VersionIdentifier.parse(match.group(0) if match else '0')
