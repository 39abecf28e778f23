"""Character catalog.

Static lookup service mapping classifier indexes and glyphs to display
metadata. Records are loaded once from `data/characters.json` and never
mutated afterwards.

The JSON file holds two arrays:
  - `class_index`: glyphs in classifier output order (index 0 first)
  - `characters`: full `CharacterRecord` entries, most common first
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from HanziHandwriting.core.models import CharacterRecord

logger = logging.getLogger(__name__)

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parents[2] / 'data' / 'characters.json'
DEFAULT_CLASS_COUNT = 3755


def _record_from_dict(item: Dict) -> CharacterRecord:
    item = dict(item)
    item['examples'] = tuple(item.get('examples') or ())
    return CharacterRecord(**item)


class CharacterCatalog:
    """Read-only index/glyph -> `CharacterRecord` service.

    `size` is the number of classes the backend predicts, which is usually
    far larger than the class table shipped with the catalog. Indexes past the
    end of the class table resolve deterministically by wrapping around it.
    """

    def __init__(self, records: Sequence[CharacterRecord], class_index: Sequence[str],
                 class_count: int = DEFAULT_CLASS_COUNT):
        if not class_index:
            raise ValueError('class_index must contain at least one character')
        self._records: List[CharacterRecord] = list(records)
        self._by_char: Dict[str, CharacterRecord] = {}
        for rec in self._records:
            # only record first occurrence
            if rec.character not in self._by_char:
                self._by_char[rec.character] = rec
        missing = [c for c in class_index if c not in self._by_char]
        if missing:
            raise ValueError(f"class_index references unknown characters: {''.join(missing)}")
        self._class_index: List[str] = list(class_index)
        self._size = max(int(class_count), len(self._class_index))

    @property
    def size(self) -> int:
        return self._size

    def resolve(self, index: int) -> CharacterRecord:
        """Return the record for classifier output `index`. Never fails."""
        i = int(index)
        if 0 <= i < len(self._class_index):
            return self._by_char[self._class_index[i]]
        return self._by_char[self._class_index[i % len(self._class_index)]]

    def lookup(self, character: str) -> Optional[CharacterRecord]:
        return self._by_char.get(character)

    def index_of(self, character: str) -> Optional[int]:
        """Class index of `character`, or None if it is not a known class."""
        try:
            return self._class_index.index(character)
        except ValueError:
            return None

    def search_by_pinyin(self, pinyin: str) -> List[CharacterRecord]:
        needle = (pinyin or '').strip().lower()
        if not needle:
            return []
        return [r for r in self._records if needle in r.pinyin.lower()]

    def search_by_meaning(self, meaning: str) -> List[CharacterRecord]:
        needle = (meaning or '').strip().lower()
        if not needle:
            return []
        return [r for r in self._records if needle in r.meaning.lower()]

    def most_common(self, n: int = 10) -> List[CharacterRecord]:
        return self._records[:max(0, min(n, len(self._records)))]

    def all_records(self) -> List[CharacterRecord]:
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)


def load_catalog(path: str | Path | None = None, class_count: int = DEFAULT_CLASS_COUNT) -> CharacterCatalog:
    """Load a `CharacterCatalog` from JSON (defaults to the bundled table)."""
    p = Path(path) if path else DEFAULT_CATALOG_PATH
    with p.open('r', encoding='utf8') as fh:
        data = json.load(fh)
    records = [_record_from_dict(item) for item in data.get('characters') or []]
    class_index = data.get('class_index') or []
    logger.debug('Loaded %d character records (%d indexed classes) from %s', len(records), len(class_index), p)
    return CharacterCatalog(records, class_index, class_count=class_count)
