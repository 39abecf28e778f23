import sys
from pathlib import Path

# Add the project root (one level up from 'test') to sys.path
project_root = Path(__file__).resolve().parents[1]
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

import json

import pytest

from HanziHandwriting.core.models import CharacterRecord
from HanziHandwriting.services.catalog.catalog import CharacterCatalog, load_catalog


@pytest.fixture(scope="module")
def catalog():
    return load_catalog()


def test_class_index_matches_reference_table(catalog):
    chars = [catalog.resolve(i).character for i in range(10)]
    assert chars == ['人', '大', '小', '山', '水', '木', '火', '土', '日', '月']


def test_size_is_class_count(catalog):
    assert catalog.size == 3755
    assert load_catalog(class_count=20).size == 20


def test_out_of_range_index_resolves_deterministically(catalog):
    assert catalog.resolve(10).character == '人'
    assert catalog.resolve(3754) == catalog.resolve(3754)
    assert catalog.resolve(3754).character == catalog.resolve(4).character
    assert catalog.resolve(-1).character == '月'
    assert catalog.resolve(10**9) is not None


def test_lookup_by_character(catalog):
    rec = catalog.lookup('水')
    assert rec.pinyin == 'shuǐ'
    assert rec.meaning == 'water'
    assert rec.stroke_count == 4
    assert rec.examples == ('水果', '喝水')
    assert 'flowing water' in rec.etymology
    assert catalog.lookup('龍') is None


def test_missing_details_use_defaults(catalog):
    rec = catalog.lookup('的')
    assert rec.etymology == 'Etymology not available.'
    assert rec.pronunciation_tips == 'Pronunciation tips not available.'
    assert rec.mnemonics == 'Mnemonics not available.'


def test_index_of(catalog):
    assert catalog.index_of('人') == 0
    assert catalog.index_of('月') == 9
    assert catalog.index_of('的') is None


def test_search_by_pinyin_and_meaning(catalog):
    assert {r.character for r in catalog.search_by_pinyin('mù')} == {'木', '目'}
    assert [r.character for r in catalog.search_by_pinyin('SHUǏ')] == ['水']
    assert [r.character for r in catalog.search_by_meaning('Water')] == ['水']
    assert catalog.search_by_meaning('') == []


def test_most_common(catalog):
    assert [r.character for r in catalog.most_common(3)] == ['的', '一', '是']
    assert len(catalog.most_common(1000)) == len(catalog)
    assert catalog.most_common(-1) == []


def test_class_index_must_reference_known_records():
    recs = [CharacterRecord('人', 'rén', 'person')]
    with pytest.raises(ValueError):
        CharacterCatalog(recs, ['人', '大'])
    with pytest.raises(ValueError):
        CharacterCatalog(recs, [])


def test_load_from_custom_file(tmp_path):
    path = tmp_path / 'chars.json'
    path.write_text(json.dumps({
        'class_index': ['一', '二'],
        'characters': [
            {'character': '一', 'pinyin': 'yī', 'meaning': 'one', 'examples': ['一个']},
            {'character': '二', 'pinyin': 'èr', 'meaning': 'two'},
        ],
    }, ensure_ascii=False), encoding='utf8')
    cat = load_catalog(path, class_count=2)
    assert cat.size == 2
    assert cat.resolve(1).pinyin == 'èr'
    assert cat.resolve(0).examples == ('一个',)
