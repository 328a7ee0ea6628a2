"""Allow running PomoFlow as a module: python -m pomoflow."""

import logging
import sys

from PyQt6.QtWidgets import QApplication

from .config import AppConfig, build_services, configure_logging
from .settings import SettingsManager
from .app import PomoFlowApp

logger = logging.getLogger(__name__)


def main() -> None:
    config = AppConfig.from_env()
    configure_logging(config.log_level)

    app = QApplication(sys.argv)
    app.setApplicationName("PomoFlow")
    app.setOrganizationName("PomoFlow")

    auth, store = build_services(config)
    if hasattr(auth, "restore"):
        auth.restore()
    settings = SettingsManager(config.settings_path)

    window = PomoFlowApp(auth, store, settings, sounds_dir=config.home / "sounds")
    window.show()
    if not auth.is_authenticated:
        window.prompt_sign_in()

    logger.info("PomoFlow ready")
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
