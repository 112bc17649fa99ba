"""Turn raw LLM text into a validated ``QuestionDraft``.

Two wire shapes have been produced by the prompt over time:

* lettered options -- ``{"paragraph", "question", "options": {"A".."D"},
  "correct_answer", "explanation"?}``; ``options`` may also be a list of four.
* flat options -- ``{"paragraph", "question", "option_a".."option_d",
  "correct_answer"?, "explanation"?}``; without a designator the correct
  answer is ``A``, which is where the older prompt put it.

Each is recognised into its own payload class and normalised to the same
draft.  Anything that decodes as JSON but does not fit raises
``ValidationError``; anything that does not decode raises ``ParseError``.
"""
from __future__ import annotations

import json
import re
from dataclasses import dataclass

from wordquiz.errors import ParseError, ValidationError
from wordquiz.models import OPTION_LETTERS, QuestionDraft

_FENCE_RE = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?(.*?)\n?[ \t]*```", re.DOTALL)
_LETTER_RE = re.compile(r"^\(?([A-Da-d])[).:]?$")

PARAGRAPH_KEYS = ("paragraph",)
QUESTION_KEYS = ("question", "question_text")
CORRECT_KEYS = ("correct_answer", "correct", "answer")


def strip_code_fence(text: str) -> str:
    m = _FENCE_RE.search(text)
    if m:
        return m.group(1).strip()
    return text.strip()


def _first_key(data: dict, keys: tuple[str, ...]) -> str | None:
    for k in keys:
        if k in data:
            return k
    return None


def _required_text(data: dict, keys: tuple[str, ...]) -> str:
    key = _first_key(data, keys)
    if key is None:
        raise ValidationError(keys[0])
    value = data[key]
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(key)
    return value.strip()


def _option_text(value: object, field: str) -> str:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(field)
    return value.strip()


def _normalize_letter(value: object, field: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(field, f"expected a letter A-D, got {value!r}")
    m = _LETTER_RE.match(value.strip())
    if not m:
        raise ValidationError(field, f"expected a letter A-D, got {value!r}")
    return m.group(1).upper()


def _optional_explanation(data: dict) -> str | None:
    value = data.get("explanation")
    if value is None:
        return None
    if not isinstance(value, str):
        raise ValidationError("explanation", "must be text")
    return value.strip() or None


@dataclass
class LetteredOptionsPayload:
    paragraph: str
    question: str
    options: dict[str, str]
    correct_answer: str
    explanation: str | None

    @classmethod
    def from_json(cls, data: dict) -> LetteredOptionsPayload:
        paragraph = _required_text(data, PARAGRAPH_KEYS)
        question = _required_text(data, QUESTION_KEYS)

        raw = data["options"]
        if isinstance(raw, list):
            if len(raw) != 4:
                raise ValidationError("options", f"expected 4 options, got {len(raw)}")
            raw = dict(zip(OPTION_LETTERS, raw))
        if not isinstance(raw, dict):
            raise ValidationError("options", "must be an object keyed A-D")
        by_letter = {str(k).strip().upper(): v for k, v in raw.items()}
        options = {}
        for letter in OPTION_LETTERS:
            if letter not in by_letter:
                raise ValidationError(f"options.{letter}")
            options[letter] = _option_text(by_letter[letter], f"options.{letter}")
        # raw keys, so "a" alongside "A" counts as a fifth option
        if len(raw) != 4:
            raise ValidationError("options", f"expected 4 options, got {len(raw)}")

        key = _first_key(data, CORRECT_KEYS)
        if key is None:
            raise ValidationError("correct_answer")
        correct = _normalize_letter(data[key], key)
        return cls(paragraph, question, options, correct, _optional_explanation(data))

    def to_draft(self) -> QuestionDraft:
        return QuestionDraft(
            paragraph=self.paragraph,
            question_text=self.question,
            options=self.options,
            correct_answer=self.correct_answer,
            explanation=self.explanation,
        )


@dataclass
class FlatOptionsPayload:
    paragraph: str
    question: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str
    explanation: str | None

    @classmethod
    def from_json(cls, data: dict) -> FlatOptionsPayload:
        paragraph = _required_text(data, PARAGRAPH_KEYS)
        question = _required_text(data, QUESTION_KEYS)
        opts = []
        for letter in OPTION_LETTERS:
            field = f"option_{letter.lower()}"
            if field not in data:
                raise ValidationError(field)
            opts.append(_option_text(data[field], field))

        key = _first_key(data, CORRECT_KEYS)
        correct = _normalize_letter(data[key], key) if key else "A"
        return cls(paragraph, question, *opts, correct, _optional_explanation(data))

    def to_draft(self) -> QuestionDraft:
        return QuestionDraft(
            paragraph=self.paragraph,
            question_text=self.question,
            options=dict(zip(OPTION_LETTERS, (
                self.option_a, self.option_b, self.option_c, self.option_d,
            ))),
            correct_answer=self.correct_answer,
            explanation=self.explanation,
        )


def recognize_payload(data: object) -> LetteredOptionsPayload | FlatOptionsPayload:
    if not isinstance(data, dict):
        raise ValidationError("response", f"expected a JSON object, got {type(data).__name__}")
    if "options" in data:
        return LetteredOptionsPayload.from_json(data)
    if any(f"option_{letter.lower()}" in data for letter in OPTION_LETTERS):
        return FlatOptionsPayload.from_json(data)
    raise ValidationError("options")


def parse_question_response(text: str) -> QuestionDraft:
    body = strip_code_fence(text)
    try:
        data = json.loads(body)
    except json.JSONDecodeError as e:
        raise ParseError(f"response is not valid JSON: {e.msg} (line {e.lineno})") from e
    return recognize_payload(data).to_draft()
