"""Application entry point launching the PyQt6 UI.

Environment (a .env file in the working directory is loaded first):
  HANZI_LOG_LEVEL   logging level name (default INFO)
  HANZI_BACKEND     "torch" or "synthetic"
  HANZI_MODEL_PATH  TorchScript model file
  HANZI_MODEL_URL   model to download into the cache dir before loading
"""
from __future__ import annotations

import logging
import os
import sys

from dotenv import load_dotenv

try:
    from PyQt6.QtWidgets import QApplication
except ImportError as e:  # pragma: no cover - environment guard
    raise RuntimeError("PyQt6 is required to run the UI. Ensure it is installed.") from e

from HanziHandwriting.core.config import load_config
from HanziHandwriting.ui.main_window import create_app_window


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.getenv('HANZI_LOG_LEVEL', 'INFO').upper(),
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )
    app = QApplication(sys.argv)
    win = create_app_window(load_config())
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
