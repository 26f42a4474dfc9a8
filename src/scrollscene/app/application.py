"""
Qt Application Setup
Application identity and the persisted user preferences (QSettings, INI).
"""
import os
import sys
from typing import Optional, Sequence

from PySide6.QtCore import QCoreApplication, QSettings
from PySide6.QtWidgets import QApplication

ORG_ID = "scrollscene"
APP_ID = "scrollscene"

VISIBLE_APP_NAME = "Scroll Scene"

SETTINGS_MUTED = "audio/muted"


def create_app(argv: Optional[Sequence[str]] = None) -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setOrganizationName(ORG_ID)
    QCoreApplication.setApplicationName(APP_ID)
    QSettings.setDefaultFormat(QSettings.Format.IniFormat)

    app = QApplication(list(argv) if argv is not None else sys.argv)
    app.setApplicationDisplayName(VISIBLE_APP_NAME)
    return app


def music_muted() -> bool:
    """Whether the user switched the soundtrack off in a previous session."""
    return QSettings().value(SETTINGS_MUTED, False, type=bool)


def remember_music_muted(muted: bool) -> None:
    QSettings().setValue(SETTINGS_MUTED, muted)
