from __future__ import annotations

from dataclasses import dataclass, field

OPTION_LETTERS = ("A", "B", "C", "D")


@dataclass
class WordRecord:
    word: str
    part_of_speech: str
    meaning_description: str = ""
    turkish_meaning: str = ""
    english_example: str = ""
    difficulty: str | None = None
    source: str = ""
    meaning_id: str | None = None
    is_active: bool = True
    id: int | None = None
    created_at: str | None = None

    @property
    def meaning(self) -> str:
        return self.meaning_description or self.turkish_meaning


@dataclass
class QuestionDraft:
    """A parsed, validated question before it is stored."""
    paragraph: str
    question_text: str
    options: dict[str, str]  # keyed by A-D, always all four
    correct_answer: str
    explanation: str | None = None

    def to_dict(self) -> dict:
        return {
            "paragraph": self.paragraph,
            "question": self.question_text,
            "options": dict(self.options),
            "correct_answer": self.correct_answer,
            "explanation": self.explanation,
        }


@dataclass
class QuestionRecord:
    word_id: int
    paragraph: str
    question_text: str
    option_a: str
    option_b: str
    option_c: str
    option_d: str
    correct_answer: str
    explanation: str | None = None
    difficulty: str | None = None
    id: int | None = None
    created_at: str | None = None

    @classmethod
    def from_draft(cls, word_id: int, draft: QuestionDraft, difficulty: str | None) -> QuestionRecord:
        return cls(
            word_id=word_id,
            paragraph=draft.paragraph,
            question_text=draft.question_text,
            option_a=draft.options["A"],
            option_b=draft.options["B"],
            option_c=draft.options["C"],
            option_d=draft.options["D"],
            correct_answer=draft.correct_answer,
            explanation=draft.explanation,
            difficulty=difficulty,
        )


@dataclass
class GenerationOutcome:
    word_id: int
    word: str
    success: bool
    question_id: int | None = None
    error: str | None = None

    def to_dict(self) -> dict:
        d = {
            "word_id": self.word_id,
            "word": self.word,
            "status": "success" if self.success else "failure",
        }
        if self.success:
            d["question_id"] = self.question_id
        else:
            d["error"] = self.error
        return d


@dataclass
class BatchResult:
    outcomes: list[GenerationOutcome] = field(default_factory=list)
    missing_word_ids: list[int] = field(default_factory=list)

    @property
    def total_requested(self) -> int:
        return len(self.outcomes)

    @property
    def successful(self) -> int:
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failed(self) -> int:
        return self.total_requested - self.successful

    @property
    def success_rate(self) -> str:
        if not self.outcomes:
            return "0.0%"
        return f"{self.successful / self.total_requested * 100:.1f}%"

    @property
    def failures(self) -> list[GenerationOutcome]:
        return [o for o in self.outcomes if not o.success]

    def to_response(self) -> dict:
        resp = {
            "message": (
                f"{self.successful} of {self.total_requested} questions generated"
            ),
            "summary": {
                "total_requested": self.total_requested,
                "successful": self.successful,
                "failed": self.failed,
                "success_rate": self.success_rate,
            },
            "results": [o.to_dict() for o in self.outcomes],
        }
        if self.failures:
            resp["errors"] = [o.to_dict() for o in self.failures]
        if self.missing_word_ids:
            resp["missing_word_ids"] = list(self.missing_word_ids)
        return resp
