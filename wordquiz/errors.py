"""Error taxonomy for batch question generation.

Setup errors (``InvalidRequest``, ``NotFound``) reject a whole batch before
any word is processed.  Everything deriving from ``GenerationError`` is
scoped to a single word: the batch records it and moves on.
"""
from __future__ import annotations


class QuizError(Exception):
    pass


class InvalidRequest(QuizError):
    pass


class NotFound(QuizError):
    pass


class GenerationError(QuizError):
    """Failure while generating or storing the question for one word."""


class ServiceError(GenerationError):
    def __init__(self, word: str, message: str):
        self.word = word
        self.message = message
        super().__init__(f"LLM call failed for '{word}': {message}")


class ParseError(GenerationError):
    pass


class ValidationError(GenerationError):
    def __init__(self, field: str, reason: str = "missing or empty"):
        self.field = field
        self.reason = reason
        super().__init__(f"invalid field '{field}': {reason}")


class PersistenceError(GenerationError):
    pass
