"""
Entry point for the PySide6 Home Configurator.
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Configure a home model floor by floor")
    parser.add_argument("catalog", type=Path, help="Catalog JSON document")
    parser.add_argument("--model", type=int, help="Model id (defaults to the first model)")
    parser.add_argument("--assets", type=Path, help="Directory relative image paths resolve against")
    parser.add_argument("--store", type=Path, help="Selections file (defaults to the app data directory)")
    parser.add_argument("--verbose", action="store_true", help="Log debug output to stderr")
    return parser.parse_args(argv)


def run(argv: Optional[List[str]] = None):
    """
    Main entry point for the GUI application.
    """
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    from PySide6.QtWidgets import QApplication, QMessageBox

    from home_configurator.configurator.catalog_source import JsonCatalogSource
    from home_configurator.configurator.config import ConfiguratorConfig
    from home_configurator.configurator.session import ConfiguratorSession
    from home_configurator.core.errors import ConfiguratorError
    from home_configurator.gui.main_window import MainWindow
    from home_configurator.gui.utils.paths import get_store_path

    app = QApplication(sys.argv[:1])
    app.setApplicationName("Home Configurator")
    app.setApplicationDisplayName("Home Configurator")
    app.setOrganizationName("Home Configurator")

    store_path = args.store or get_store_path()
    config = ConfiguratorConfig(
        store_path=store_path,
        asset_root=args.assets or args.catalog.resolve().parent,
    )
    session = ConfiguratorSession(JsonCatalogSource(args.catalog), config=config)

    try:
        catalog = asyncio.run(session.load())
        model_id = args.model if args.model is not None else min(m.id for m in catalog.models)
        session.start(model_id)
    except (ConfiguratorError, ValueError) as e:
        QMessageBox.critical(None, "Home Configurator", str(e))
        sys.exit(1)

    window = MainWindow(session)
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    run()
