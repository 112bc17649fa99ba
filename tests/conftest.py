"""Shared test fixtures."""
from __future__ import annotations

import pytest

from wordquiz.db import Database
from wordquiz.models import WordRecord


@pytest.fixture
def tmp_db(tmp_path):
    """Create a fresh temporary database."""
    db = Database(tmp_path / "test.db")
    yield db
    db.close()


@pytest.fixture
def sample_words():
    """A small set of WordRecord objects for testing."""
    return [
        WordRecord(
            word="abandon", part_of_speech="verb",
            meaning_description="to leave behind permanently",
            turkish_meaning="terk etmek",
            english_example="They had to abandon the car in the snow.",
            difficulty="advanced",
        ),
        WordRecord(
            word="brief", part_of_speech="adjective",
            meaning_description="lasting a short time",
            turkish_meaning="kısa",
            english_example="We had a brief meeting after lunch.",
        ),
        WordRecord(
            word="candid", part_of_speech="adjective",
            meaning_description="truthful and straightforward",
            turkish_meaning="açık sözlü",
            english_example="She gave a candid answer to the question.",
        ),
        WordRecord(
            word="dormant", part_of_speech="adjective",
            meaning_description="temporarily inactive",
            turkish_meaning="uykuda",
            english_example="The volcano has been dormant for centuries.",
            is_active=False,
        ),
    ]


@pytest.fixture
def populated_db(tmp_db, sample_words):
    """A database pre-loaded with sample words (ids 1-4, id 4 inactive)."""
    tmp_db.import_words(sample_words)
    return tmp_db


