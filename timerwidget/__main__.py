"""Allow running TimerWidget as a module: python -m timerwidget."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .app import TimerWidgetApp, configure_logging, open_store
from .settings import load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    settings = load_settings()
    configure_logging(settings.log_level)

    app = QApplication(sys.argv)
    app.setApplicationName("TimerWidget")
    app.setOrganizationName("TimerWidget")

    store = open_store(settings)
    logger.info("TimerWidget ready")

    window = TimerWidgetApp(store, settings)
    app.aboutToQuit.connect(window.shutdown)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
