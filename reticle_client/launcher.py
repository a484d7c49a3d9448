from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional

from PyQt6.QtGui import QGuiApplication
from PyQt6.QtWidgets import QApplication

from reticle_client.app_config import load_app_config
from reticle_client.logging_utils import configure_logging
from reticle_client.qt_scheduler import QtScheduler
from reticle_client.render_window import ReticleOverlayWindow
from reticle_store.change_bridge import StoreChangeBridge
from reticle_store.json_medium import JsonFileMedium
from reticle_store.settings_store import SettingsStore

_LOGGER = logging.getLogger("ReticleOverlay.Client")


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Reticle overlay renderer")
    parser.add_argument("--store", help="Path to the shared settings JSON file")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    config = load_app_config().with_store(args.store)
    configure_logging(
        "reticle-overlay.log",
        debug_enabled=config.debug or args.debug,
        retention=config.log_retention,
    )
    _LOGGER.info("Starting reticle overlay (pid=%s)", os.getpid())
    _LOGGER.debug("Using settings store %s (poll=%dms)", config.store_path, config.poll_interval_ms)

    app = QApplication(sys.argv)
    store = SettingsStore(JsonFileMedium(config.store_path))
    window = ReticleOverlayWindow(store)
    scheduler = QtScheduler(window)
    bridge = StoreChangeBridge(
        store,
        after=scheduler.after,
        after_cancel=scheduler.cancel,
        interval_ms=config.poll_interval_ms,
        logger=_LOGGER.debug,
    )

    screen = QGuiApplication.primaryScreen()
    if screen is not None:
        window.setGeometry(screen.geometry())
    window.show()
    window.refresh()
    bridge.start()

    exit_code = app.exec()
    bridge.stop()
    window.shutdown()
    _LOGGER.info("Reticle overlay exiting with code %s", exit_code)
    return int(exit_code)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
