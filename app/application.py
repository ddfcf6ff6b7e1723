"""Application factory — logging, QApplication creation, theme and data location."""

import logging
from pathlib import Path

from PyQt6.QtCore import QStandardPaths, QtMsgType, qInstallMessageHandler
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QApplication

from app.constants import APP_NAME, APP_ORGANIZATION, DB_FILENAME

logger = logging.getLogger(__name__)

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _qt_message_handler(msg_type, context, message):
    """Forward Qt warnings into the ``qt`` logger, minus QPainter cache noise."""
    if "QPainter" in message:
        return

    qt_logger = logging.getLogger("qt")
    if msg_type == QtMsgType.QtWarningMsg:
        qt_logger.warning(message)
    elif msg_type in (QtMsgType.QtCriticalMsg, QtMsgType.QtFatalMsg):
        qt_logger.error(message)


def configure_logging(level: int = logging.INFO) -> None:
    """Console logging for the desktop app."""
    logging.basicConfig(level=level, format=_LOG_FORMAT)


def default_database_path() -> Path:
    """Per-user location of the calculator database.

    Falls back to the working directory when Qt reports no writable
    app-data location. Must be called after the QApplication exists so the
    organization and application names are part of the path.
    """
    location = QStandardPaths.writableLocation(
        QStandardPaths.StandardLocation.AppDataLocation
    )
    base = Path(location) if location else Path.cwd()
    base.mkdir(parents=True, exist_ok=True)
    path = base / DB_FILENAME
    logger.info("Using database %s", path)
    return path


def create_application(argv: list[str]) -> QApplication:
    """Create and configure the QApplication instance."""
    qInstallMessageHandler(_qt_message_handler)

    app = QApplication(argv)
    app.setApplicationName(APP_NAME)
    app.setOrganizationName(APP_ORGANIZATION)

    font = QFont("Segoe UI", 10)
    font.setStyleHint(QFont.StyleHint.SansSerif)
    app.setFont(font)

    qss_path = Path(__file__).parent / "ui" / "styles" / "dark_theme.qss"
    if qss_path.exists():
        app.setStyleSheet(qss_path.read_text(encoding="utf-8"))
    else:
        logger.warning("Stylesheet not found: %s", qss_path)

    return app
