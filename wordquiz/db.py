from __future__ import annotations

import sqlite3
from datetime import datetime, timezone
from pathlib import Path

from wordquiz.errors import PersistenceError
from wordquiz.models import QuestionRecord, WordRecord

SCHEMA = """
CREATE TABLE IF NOT EXISTS words (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word TEXT NOT NULL,
    meaning_id TEXT,
    part_of_speech TEXT NOT NULL DEFAULT '',
    meaning_description TEXT NOT NULL DEFAULT '',
    english_example TEXT NOT NULL DEFAULT '',
    turkish_meaning TEXT NOT NULL DEFAULT '',
    difficulty TEXT,
    source TEXT NOT NULL DEFAULT '',
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    UNIQUE (word, part_of_speech, meaning_description)
);

CREATE TABLE IF NOT EXISTS questions (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    word_id INTEGER NOT NULL REFERENCES words(id),
    paragraph TEXT NOT NULL,
    question_text TEXT NOT NULL,
    option_a TEXT NOT NULL,
    option_b TEXT NOT NULL,
    option_c TEXT NOT NULL,
    option_d TEXT NOT NULL,
    correct_answer TEXT NOT NULL CHECK (correct_answer IN ('A', 'B', 'C', 'D')),
    explanation TEXT,
    difficulty TEXT,
    is_active INTEGER NOT NULL DEFAULT 1,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_questions_word_id ON questions(word_id);
"""

TABLES = ("words", "questions")

_WORD_FIELDS = {f for f in WordRecord.__dataclass_fields__}


def _word_from_row(row: sqlite3.Row) -> WordRecord:
    data = {k: row[k] for k in row.keys() if k in _WORD_FIELDS}
    data["is_active"] = bool(data.get("is_active", 1))
    return WordRecord(**data)


class Database:
    def __init__(self, db_path: Path):
        self.db_path = db_path
        self.conn = sqlite3.connect(str(db_path), check_same_thread=False)
        self.conn.row_factory = sqlite3.Row
        self.conn.execute("PRAGMA journal_mode=WAL")
        self.conn.execute("PRAGMA foreign_keys=ON")
        self._init_schema()

    def _init_schema(self) -> None:
        self.conn.executescript(SCHEMA)
        self.conn.commit()

    def close(self) -> None:
        self.conn.close()

    # ── Words ─────────────────────────────────────────────────────────────

    def import_words(self, words: list[WordRecord]) -> int:
        """Insert words, skipping ones already present. Returns rows added."""
        now = datetime.now(timezone.utc).isoformat()
        count = 0
        for w in words:
            cur = self.conn.execute(
                "INSERT OR IGNORE INTO words (word, meaning_id, part_of_speech, "
                "meaning_description, english_example, turkish_meaning, difficulty, "
                "source, is_active, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (w.word, w.meaning_id, w.part_of_speech, w.meaning_description,
                 w.english_example, w.turkish_meaning, w.difficulty, w.source,
                 1 if w.is_active else 0, w.created_at or now),
            )
            count += cur.rowcount
        self.conn.commit()
        return count

    def get_word_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM words").fetchone()
        return row[0]

    def get_word(self, word_id: int) -> WordRecord | None:
        row = self.conn.execute(
            "SELECT * FROM words WHERE id = ?", (word_id,)
        ).fetchone()
        return _word_from_row(row) if row else None

    def get_active_words_by_ids(self, word_ids: list[int]) -> list[WordRecord]:
        """Active words among *word_ids*, in the order the ids were given."""
        if not word_ids:
            return []
        placeholders = ", ".join("?" for _ in word_ids)
        rows = self.conn.execute(
            f"SELECT * FROM words WHERE is_active = 1 AND id IN ({placeholders})",
            list(word_ids),
        ).fetchall()
        by_id = {r["id"]: _word_from_row(r) for r in rows}
        return [by_id[i] for i in word_ids if i in by_id]

    def get_all_words(self) -> list[dict]:
        """Active words ordered alphabetically, each with its question count."""
        rows = self.conn.execute("""
            SELECT w.*, COUNT(q.id) AS question_count
            FROM words w
            LEFT JOIN questions q ON q.word_id = w.id
            WHERE w.is_active = 1
            GROUP BY w.id
            ORDER BY w.word ASC
        """).fetchall()
        words = []
        for r in rows:
            d = dict(r)
            d["is_active"] = bool(d["is_active"])
            words.append(d)
        return words

    def set_word_active(self, word_id: int, active: bool) -> bool:
        cur = self.conn.execute(
            "UPDATE words SET is_active = ? WHERE id = ?",
            (1 if active else 0, word_id),
        )
        self.conn.commit()
        return cur.rowcount > 0

    # ── Questions ─────────────────────────────────────────────────────────

    def save_question(self, q: QuestionRecord) -> int:
        """Insert a question and return its id.

        Raises ``PersistenceError`` if the write fails.
        """
        now = datetime.now(timezone.utc).isoformat()
        try:
            cur = self.conn.execute(
                "INSERT INTO questions "
                "(word_id, paragraph, question_text, option_a, option_b, option_c, "
                "option_d, correct_answer, explanation, difficulty, created_at, updated_at) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (
                    q.word_id,
                    q.paragraph,
                    q.question_text,
                    q.option_a,
                    q.option_b,
                    q.option_c,
                    q.option_d,
                    q.correct_answer,
                    q.explanation,
                    q.difficulty,
                    q.created_at or now,
                    now,
                ),
            )
            self.conn.commit()
        except sqlite3.Error as e:
            self.conn.rollback()
            raise PersistenceError(f"could not save question for word {q.word_id}: {e}") from e
        q.id = cur.lastrowid
        return cur.lastrowid

    def get_question_count(self) -> int:
        row = self.conn.execute("SELECT COUNT(*) FROM questions").fetchone()
        return row[0]

    def get_questions(self, word_id: int | None = None) -> list[dict]:
        if word_id is None:
            rows = self.conn.execute(
                "SELECT q.*, w.word FROM questions q JOIN words w ON w.id = q.word_id "
                "ORDER BY q.id DESC"
            ).fetchall()
        else:
            rows = self.conn.execute(
                "SELECT q.*, w.word FROM questions q JOIN words w ON w.id = q.word_id "
                "WHERE q.word_id = ? ORDER BY q.id DESC",
                (word_id,),
            ).fetchall()
        questions = []
        for r in rows:
            d = dict(r)
            d["is_active"] = bool(d["is_active"])
            questions.append(d)
        return questions

    # ── Introspection ─────────────────────────────────────────────────────

    def get_table_info(self) -> dict:
        """Row count and column names for each table."""
        info = {}
        for table in TABLES:
            count = self.conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()[0]
            columns = [r["name"] for r in self.conn.execute(f"PRAGMA table_info({table})")]
            info[f"{table}_table"] = {
                "total_rows": count,
                "columns": columns,
                "column_count": len(columns),
            }
        return info
