"""Utility functions for identifiers, sanitization and quiz validation."""

import uuid

import bleach

from ecat_quiz.schemas import QuizDraft

QUIZ_TITLE_MAX_LENGTH = 200
QUESTION_MAX_LENGTH = 5000
ANSWER_MAX_LENGTH = 1000
MIN_ANSWERS_PER_QUESTION = 2


def generate_id() -> str:
    """Return a new globally unique identifier (random UUID4, hex form)."""
    return uuid.uuid4().hex


def sanitize_text(text: str) -> str:
    """Strip all HTML from user-authored text.

    Quiz titles, questions and answers are plain text, so no tags survive.
    """
    sanitized = bleach.clean(text or "", tags=[], strip=True)
    return sanitized.strip()


def sanitize_draft(draft: QuizDraft) -> QuizDraft:
    """Return a copy of ``draft`` with every text field sanitized."""
    return QuizDraft(
        title=sanitize_text(draft.title),
        published=draft.published,
        questions=[
            {
                "text": sanitize_text(question.text),
                "answers": [
                    {"text": sanitize_text(answer.text), "correct": answer.correct}
                    for answer in question.answers
                ],
            }
            for question in draft.questions
        ],
    )


def validate_quiz_draft(draft: QuizDraft) -> dict[str, str]:
    """Validate an authored quiz and return an error dictionary.

    Mirrors the rules of the authoring screens: a title, non-blank question
    and answer text, at least two answers and exactly one correct answer per
    question. The persistence layer itself accepts any tree.
    """
    errors: dict[str, str] = {}

    title = (draft.title or "").strip()
    if not title:
        errors["title"] = "Please enter a quiz title."
    elif len(title) > QUIZ_TITLE_MAX_LENGTH:
        errors["title"] = f"Title must be at most {QUIZ_TITLE_MAX_LENGTH} characters."

    for q_index, question in enumerate(draft.questions, start=1):
        key = f"questions.{q_index}"
        text = (question.text or "").strip()
        if not text:
            errors[key] = f"Please enter question #{q_index}."
            continue
        if len(text) > QUESTION_MAX_LENGTH:
            errors[key] = f"Question #{q_index} must be at most {QUESTION_MAX_LENGTH} characters."
            continue

        if len(question.answers) < MIN_ANSWERS_PER_QUESTION:
            errors[key] = f"Question #{q_index} needs at least {MIN_ANSWERS_PER_QUESTION} options."
            continue
        if any(not (answer.text or "").strip() for answer in question.answers):
            errors[key] = f"Please enter all options for question #{q_index}."
            continue
        if any(len(answer.text.strip()) > ANSWER_MAX_LENGTH for answer in question.answers):
            errors[key] = f"Options for question #{q_index} must be at most {ANSWER_MAX_LENGTH} characters."
            continue

        correct_count = sum(1 for answer in question.answers if answer.correct)
        if correct_count != 1:
            errors[key] = f"Question #{q_index} must have exactly one correct option."

    return errors
