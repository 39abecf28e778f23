"""Primary application window.

Drawing canvas on the left; ranked results, session history and a status
line on the right. Recognition runs on a `RecognitionWorker` in its own
QThread so the canvas stays responsive while the model loads or predicts.
History lives in memory only and is gone when the window closes.
"""
from __future__ import annotations

import logging
from typing import List

from PyQt6.QtCore import Qt, QThread, pyqtSignal
from PyQt6.QtGui import QFont, QKeySequence, QShortcut
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from HanziHandwriting.core.config import AppConfig, load_config
from HanziHandwriting.core.models import RankedResult
from HanziHandwriting.services.catalog.catalog import CharacterCatalog, load_catalog
from HanziHandwriting.services.drawing.surface import DrawingSurface
from HanziHandwriting.services.normalize.normalizer import ImageNormalizer
from HanziHandwriting.services.recognition import create_engine
from HanziHandwriting.services.recognition import status as st
from HanziHandwriting.ui.components.async_workers import RecognitionWorker
from HanziHandwriting.ui.components.dialogs import CharacterDetailsDialog
from HanziHandwriting.ui.custom_widget.drawing_canvas import DrawingCanvas

logger = logging.getLogger(__name__)

PLACEHOLDER = "Recognized characters will appear here"

STATUS_TEXT = {
    st.LOADING: "Loading model...",
    st.ANALYZING: "Analyzing drawing...",
    st.READY: "Ready",
    st.FALLBACK: "Using demonstration model",
}


def show_info_message(parent, title, text):
    dlg = QMessageBox(parent)
    dlg.setWindowTitle(title)
    dlg.setText(text)
    dlg.setIcon(QMessageBox.Icon.Information)
    dlg.setStandardButtons(QMessageBox.StandardButton.Ok)
    dlg.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
    dlg.exec()


class MainWindow(QMainWindow):
    """Main window wiring canvas, worker thread and result lists."""

    recognizeRequested = pyqtSignal(object)  # PIL raster snapshot
    preloadRequested = pyqtSignal()

    def __init__(self, config: AppConfig | None = None):
        super().__init__()
        self._config = config or load_config()
        self.setWindowTitle("Hanzi Handwriting Recognizer")
        self.resize(900, 560)
        self._catalog: CharacterCatalog = load_catalog(
            self._config.paths.catalog_path, class_count=self._config.recognition.class_count)
        self._history: set[str] = set()
        self._createLayout()
        self._createWorker()
        self._connectSignals()
        self._preloadHistory(5)
        self.preloadRequested.emit()

    # ----------------------- UI Construction -----------------------
    def _createLayout(self):
        surface = DrawingSurface.from_config(self._config.surface)
        self.canvas = DrawingCanvas(surface, self)

        self.recognizeBtn = QPushButton("Recognize", self)
        self.clearBtn = QPushButton("Clear", self)
        buttons = QHBoxLayout()
        buttons.addWidget(self.recognizeBtn)
        buttons.addWidget(self.clearBtn)

        left = QVBoxLayout()
        left.addWidget(self.canvas, 1)
        left.addLayout(buttons)

        big = QFont()
        big.setPointSize(20)
        self.resultsList = QListWidget(self)
        self.resultsList.setFont(big)
        self.historyList = QListWidget(self)
        self.historyList.setFlow(QListWidget.Flow.LeftToRight)
        self.historyList.setWrapping(True)
        self.historyList.setFont(big)
        self.statusLabel = QLabel("", self)

        right = QVBoxLayout()
        right.addWidget(QLabel("Results:"))
        right.addWidget(self.resultsList, 3)
        right.addWidget(QLabel("History:"))
        right.addWidget(self.historyList, 1)
        right.addWidget(self.statusLabel)

        root = QHBoxLayout()
        root.addLayout(left, 3)
        root.addLayout(right, 2)
        central = QWidget(self)
        central.setLayout(root)
        self.setCentralWidget(central)
        self._showPlaceholder()

    def _createWorker(self):
        engine = create_engine(self._config, catalog=self._catalog)
        self._thread = QThread(self)
        self._worker = RecognitionWorker(
            engine, ImageNormalizer.from_config(self._config.normalizer), self._config.recognition.top_k)
        self._worker.moveToThread(self._thread)
        self._thread.start()

    def _connectSignals(self):
        self.recognizeBtn.clicked.connect(self.recognizeDrawing)
        self.clearBtn.clicked.connect(self.clearDrawing)
        self.recognizeRequested.connect(self._worker.recognize)
        self.preloadRequested.connect(self._worker.preload)
        self._worker.statusChanged.connect(self._onStatus)
        self._worker.resultsReady.connect(self._onResults)
        self.resultsList.itemClicked.connect(self._onCharacterClicked)
        self.historyList.itemClicked.connect(self._onCharacterClicked)
        QShortcut(QKeySequence(Qt.Key.Key_Return), self, activated=self._onEnter)
        QShortcut(QKeySequence(Qt.Key.Key_Enter), self, activated=self._onEnter)
        QShortcut(QKeySequence(Qt.Key.Key_Escape), self, activated=self.clearDrawing)

    # ----------------------- Actions -----------------------
    def recognizeDrawing(self):
        self.recognizeBtn.setEnabled(False)
        self.recognizeRequested.emit(self.canvas.surface.snapshot())

    def clearDrawing(self):
        self.canvas.clear()
        self._showPlaceholder()

    def _onEnter(self):
        if self.recognizeBtn.isEnabled():
            self.recognizeDrawing()

    def _onStatus(self, status: str):
        self.statusLabel.setText(STATUS_TEXT.get(status, status))
        self.recognizeBtn.setEnabled(st.is_idle(status))

    def _onResults(self, results: List[RankedResult]):
        self.resultsList.clear()
        if not results:
            self.resultsList.addItem("No character recognized. Try drawing more clearly.")
            return
        for r in results:
            item = QListWidgetItem(f"{r.character}   {r.pinyin}   {r.percent}%")
            item.setData(Qt.ItemDataRole.UserRole, r.character)
            self.resultsList.addItem(item)
        self._addToHistory(results[0].character)

    def _onCharacterClicked(self, item: QListWidgetItem):
        character = item.data(Qt.ItemDataRole.UserRole)
        if not character:
            return
        record = self._catalog.lookup(character)
        if record is None:
            show_info_message(self, "Details", f"No detailed information is available for {character}.")
            return
        CharacterDetailsDialog(record, self).exec()

    # ----------------------- Helpers -----------------------
    def _showPlaceholder(self):
        self.resultsList.clear()
        self.resultsList.addItem(PLACEHOLDER)

    def _addToHistory(self, character: str):
        if character in self._history:
            return
        self._history.add(character)
        item = QListWidgetItem(character)
        item.setData(Qt.ItemDataRole.UserRole, character)
        self.historyList.addItem(item)

    def _preloadHistory(self, n: int):
        for rec in self._catalog.most_common(n):
            self._addToHistory(rec.character)

    def closeEvent(self, event):
        self._thread.quit()
        self._thread.wait()
        self._worker.shutdown()
        super().closeEvent(event)


def create_app_window(config: AppConfig | None = None) -> MainWindow:
    """Factory to create the fully constructed MainWindow."""
    return MainWindow(config)
