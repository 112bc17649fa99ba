"""Generate multiple-choice questions for vocabulary words through an LLM."""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from wordquiz.errors import (
    GenerationError,
    InvalidRequest,
    NotFound,
    ServiceError,
    ValidationError,
)
from wordquiz.models import BatchResult, GenerationOutcome, QuestionDraft, QuestionRecord
from wordquiz.prompts import build_question_prompt
from wordquiz.response_parser import parse_question_response

if TYPE_CHECKING:
    from wordquiz.db import Database
    from wordquiz.models import WordRecord
    from wordquiz.providers.base import LLMProvider

_log = logging.getLogger("wordquiz.qgen")

MAX_BATCH_SIZE = 50
# SQLite INTEGER range
MIN_WORD_ID = -(2 ** 63)
MAX_WORD_ID = 2 ** 63 - 1
DEFAULT_PACING_SECONDS = 1.0
DEFAULT_DIFFICULTY = "intermediate"


def validate_word_ids(word_ids: object) -> list[int]:
    """Check a caller-supplied id list and return it de-duplicated, in order."""
    if word_ids is None or not isinstance(word_ids, list) or not word_ids:
        raise InvalidRequest("wordIds must be a non-empty list of word ids")
    if len(word_ids) > MAX_BATCH_SIZE:
        raise InvalidRequest(
            f"At most {MAX_BATCH_SIZE} words can be processed per request "
            f"(got {len(word_ids)})"
        )
    seen: set[int] = set()
    ids: list[int] = []
    for wid in word_ids:
        if isinstance(wid, bool) or not isinstance(wid, int):
            raise InvalidRequest(f"word ids must be integers (got {wid!r})")
        if not MIN_WORD_ID <= wid <= MAX_WORD_ID:
            raise InvalidRequest(f"word id out of range: {wid}")
        if wid not in seen:
            seen.add(wid)
            ids.append(wid)
    return ids


async def generate_question(
    llm: LLMProvider,
    word: WordRecord,
    temperature: float = 0.7,
) -> QuestionDraft:
    """Ask the LLM for one question about *word* and parse the answer.

    Makes exactly one LLM call.  Raises ``ServiceError`` if the call fails,
    ``ParseError``/``ValidationError`` if the response is unusable.
    """
    if not word.word.strip():
        raise ValidationError("word")
    if not word.meaning.strip():
        raise ValidationError("meaning_description")

    prompt = build_question_prompt(word)
    try:
        response = await llm.generate(prompt, temperature=temperature)
    except Exception as e:
        raise ServiceError(word.word, str(e) or type(e).__name__) from e

    draft = parse_question_response(response or "")
    if word.english_example:
        draft.paragraph = word.english_example
    return draft


async def generate_batch(
    llm: LLMProvider,
    db: Database,
    word_ids: object,
    pacing_seconds: float = DEFAULT_PACING_SECONDS,
    default_difficulty: str = DEFAULT_DIFFICULTY,
    temperature: float = 0.7,
) -> BatchResult:
    """Generate and store one question per active word in *word_ids*.

    Words are processed one at a time, in the order given, with a fixed
    pause between consecutive words.  A failure on one word is recorded in
    its outcome and never stops the rest of the batch.

    Raises ``InvalidRequest`` for a bad id list and ``NotFound`` when no id
    matches an active word; store errors during the initial fetch propagate.
    """
    ids = validate_word_ids(word_ids)
    pacing_seconds = float(pacing_seconds)
    words = db.get_active_words_by_ids(ids)
    if not words:
        raise NotFound("No active words found for the given ids")

    found = {w.id for w in words}
    result = BatchResult(missing_word_ids=[i for i in ids if i not in found])
    total = len(words)
    _log.info("Batch: generating questions for %d words (%d ids not found)",
              total, len(result.missing_word_ids))

    for idx, word in enumerate(words, 1):
        if idx > 1 and pacing_seconds > 0:
            await asyncio.sleep(pacing_seconds)
        try:
            draft = await generate_question(llm, word, temperature=temperature)
            record = QuestionRecord.from_draft(
                word.id, draft, word.difficulty or default_difficulty,
            )
            question_id = db.save_question(record)
        except GenerationError as e:
            _log.warning("[%d/%d] '%s' failed: %s", idx, total, word.word, e)
            result.outcomes.append(GenerationOutcome(
                word_id=word.id, word=word.word, success=False, error=str(e),
            ))
            continue
        except Exception as e:
            _log.exception("[%d/%d] '%s' failed unexpectedly", idx, total, word.word)
            result.outcomes.append(GenerationOutcome(
                word_id=word.id, word=word.word, success=False,
                error=f"{type(e).__name__}: {e}",
            ))
            continue

        _log.info("[%d/%d] '%s' -> question %d", idx, total, word.word, question_id)
        result.outcomes.append(GenerationOutcome(
            word_id=word.id, word=word.word, success=True, question_id=question_id,
        ))

    _log.info("Batch done: %d/%d succeeded (%s)",
              result.successful, result.total_requested, result.success_rate)
    return result
