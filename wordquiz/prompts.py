"""Prompt template for quiz question generation."""
from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from wordquiz.models import WordRecord

QUESTION_TEMPLATE = "Bu paragraftaki '{word}' kelimesinin anlamı nedir?"

QUESTION_PROMPT = """\
You are writing a multiple-choice vocabulary quiz item for Turkish learners of English.

Word: {word}
Part of speech: {part_of_speech}
Meaning: {meaning}
Turkish meaning: {turkish_meaning}
Example sentence: {example}

Instructions:
1. {paragraph_instruction}
2. Use exactly this question text: "{question}"
3. Write exactly 4 answer options in Turkish. Exactly ONE of them is the correct \
Turkish meaning of "{word}" as used in the paragraph; the other three are plausible \
but wrong meanings.
4. Set correct_answer to the letter (A, B, C or D) of the correct option.
5. Write a one-sentence explanation in Turkish of why the correct option is right.

Respond with a single JSON object only. No markdown, no commentary, no text \
before or after it:
{{
  "paragraph": "the paragraph",
  "question": "{question}",
  "options": {{"A": "...", "B": "...", "C": "...", "D": "..."}},
  "correct_answer": "A",
  "explanation": "..."
}}
"""


def question_text_for(word: str) -> str:
    return QUESTION_TEMPLATE.format(word=word)


def format_paragraph_instruction(example: str) -> str:
    if example:
        return (
            f'Use this example sentence VERBATIM as the paragraph, without changing '
            f'a single character: "{example}"'
        )
    return "Write a one-sentence English paragraph that uses the word in this meaning."


def build_question_prompt(word: WordRecord) -> str:
    return QUESTION_PROMPT.format(
        word=word.word,
        part_of_speech=word.part_of_speech,
        meaning=word.meaning,
        turkish_meaning=word.turkish_meaning or "-",
        example=word.english_example or "-",
        paragraph_instruction=format_paragraph_instruction(word.english_example),
        question=question_text_for(word.word),
    )
