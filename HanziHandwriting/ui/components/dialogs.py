from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QFont
from PyQt6.QtWidgets import QDialog, QDialogButtonBox, QFormLayout, QLabel, QVBoxLayout

from HanziHandwriting.core.models import CharacterRecord


class CharacterDetailsDialog(QDialog):
    """Read-only details for one catalog character: big glyph, then a form of
    pinyin, meaning, stroke count, etymology, pronunciation, mnemonics and
    example words."""

    def __init__(self, record: CharacterRecord, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Character Details")
        self.resize(420, 360)
        root = QVBoxLayout(self)

        glyph = QLabel(record.character, self)
        font = QFont()
        font.setPointSize(56)
        glyph.setFont(font)
        glyph.setAlignment(Qt.AlignmentFlag.AlignCenter)
        root.addWidget(glyph)

        form = QFormLayout()
        examples = ', '.join(record.examples) if record.examples else 'No examples available'
        for label, value in (
            ("Pinyin:", record.pinyin),
            ("Meaning:", record.meaning),
            ("Strokes:", str(record.stroke_count)),
            ("Radical:", record.radical),
            ("Etymology:", record.etymology),
            ("Pronunciation:", record.pronunciation_tips),
            ("Mnemonic:", record.mnemonics),
            ("Examples:", examples),
        ):
            lbl = QLabel(value, self)
            lbl.setWordWrap(True)
            lbl.setTextInteractionFlags(Qt.TextInteractionFlag.TextSelectableByMouse)
            form.addRow(label, lbl)
        root.addLayout(form)

        buttons = QDialogButtonBox(QDialogButtonBox.StandardButton.Close, self)
        buttons.rejected.connect(self.reject)
        root.addWidget(buttons)
