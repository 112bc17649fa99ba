"""Parse Markdown word lists into WordRecord objects.

Words live in pipe tables whose columns are identified by their header:

  | Word | Part of speech | Meaning | Turkish | Example | Difficulty |

Only ``Word`` is mandatory; columns may appear in any order and unknown
columns are ignored.  ``## Section`` headings become each word's source tag.
"""
from __future__ import annotations

import re
from pathlib import Path

from wordquiz.models import WordRecord

HEADER_ALIASES = {
    "word": "word",
    "kelime": "word",
    "part of speech": "part_of_speech",
    "pos": "part_of_speech",
    "type": "part_of_speech",
    "meaning": "meaning_description",
    "definition": "meaning_description",
    "meaning description": "meaning_description",
    "turkish": "turkish_meaning",
    "turkish meaning": "turkish_meaning",
    "example": "english_example",
    "english example": "english_example",
    "difficulty": "difficulty",
    "level": "difficulty",
    "meaning id": "meaning_id",
}

_SEPARATOR_RE = re.compile(r"^\|?\s*:?-{3,}")


def _split_row(line: str) -> list[str]:
    return [c.strip() for c in line.strip().strip("|").split("|")]


def _clean(cell: str) -> str:
    # **bold** and *italic* markup around cell values
    cell = re.sub(r"\*\*(.+?)\*\*", r"\1", cell)
    cell = re.sub(r"\*(.+?)\*", r"\1", cell)
    return cell.strip()


def parse_word_table_file(path: Path) -> list[WordRecord]:
    return parse_word_table(path.read_text(), default_source=path.stem)


def parse_word_table(text: str, default_source: str = "") -> list[WordRecord]:
    words: list[WordRecord] = []
    section = default_source
    columns: list[str | None] | None = None

    for line in text.splitlines():
        m = re.match(r"^## (.+)", line)
        if m:
            section = m.group(1).strip()
            columns = None
            continue

        if not line.startswith("|"):
            columns = None
            continue

        if _SEPARATOR_RE.match(line):
            continue

        cells = _split_row(line)
        if columns is None:
            columns = [HEADER_ALIASES.get(c.lower()) for c in cells]
            if "word" not in columns:
                columns = None
            continue

        fields: dict[str, str] = {}
        for name, cell in zip(columns, cells):
            if name:
                fields[name] = _clean(cell)
        if not fields.get("word"):
            continue
        words.append(WordRecord(
            word=fields["word"],
            part_of_speech=fields.get("part_of_speech", ""),
            meaning_description=fields.get("meaning_description", ""),
            turkish_meaning=fields.get("turkish_meaning", ""),
            english_example=fields.get("english_example", ""),
            difficulty=fields.get("difficulty") or None,
            meaning_id=fields.get("meaning_id") or None,
            source=section,
        ))

    return words
