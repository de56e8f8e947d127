"""Conversion between storage rows and domain records.

Rows are flat and store booleans as 0/1. Records are nested and carry real
``bool`` values. Every read path goes through ``decode_bool`` so that callers
never see the integer ``1`` where ``True`` is expected.
"""

from datetime import datetime, timezone
from typing import Any, Iterable

from ecat_quiz.models import Answer, Question, Quiz, Result, User
from ecat_quiz.schemas import (
    AnswerIn,
    AnswerRecord,
    QuestionIn,
    QuestionRecord,
    QuizSubmission,
    QuizSummary,
    QuizTree,
    ResultCreate,
    ResultRecord,
    UserCreate,
    UserRecord,
)


def encode_bool(value: bool) -> int:
    return 1 if value else 0


def decode_bool(value: Any) -> bool:
    return value == 1


def as_utc(value: datetime) -> datetime:
    """Timestamps are UTC; SQLite hands them back without an offset."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# --- domain -> row ---


def user_to_row(user: UserCreate, user_id: str) -> User:
    return User(
        id=user_id,
        email=user.email,
        password=user.password,
        name=user.name,
        role=user.role.value,
    )


def quiz_to_row(quiz: QuizSubmission, quiz_id: str) -> Quiz:
    return Quiz(
        id=quiz_id,
        title=quiz.title,
        teacher_id=quiz.teacher_id,
        published=encode_bool(quiz.published),
    )


def question_to_row(question: QuestionIn, question_id: str, quiz_id: str) -> Question:
    return Question(id=question_id, quiz_id=quiz_id, text=question.text)


def answer_to_row(answer: AnswerIn, answer_id: str, question_id: str) -> Answer:
    return Answer(
        id=answer_id,
        question_id=question_id,
        text=answer.text,
        correct=encode_bool(answer.correct),
    )


def result_to_row(result: ResultCreate, result_id: str) -> Result:
    return Result(
        id=result_id,
        quiz_id=result.quiz_id,
        student_id=result.student_id,
        score=result.score,
        total_questions=result.total_questions,
    )


# --- row -> domain ---


def row_to_user(row: User) -> UserRecord:
    return UserRecord(
        id=row.id, name=row.name, email=row.email, password=row.password, role=row.role
    )


def row_to_summary(row: Quiz) -> QuizSummary:
    return QuizSummary(
        id=row.id,
        title=row.title,
        teacher_id=row.teacher_id,
        published=decode_bool(row.published),
        created_at=as_utc(row.created_at),
    )


def row_to_answer(row: Answer) -> AnswerRecord:
    return AnswerRecord(
        id=row.id,
        question_id=row.question_id,
        text=row.text,
        correct=decode_bool(row.correct),
    )


def row_to_question(row: Question, answers: Iterable[Answer]) -> QuestionRecord:
    return QuestionRecord(
        id=row.id,
        quiz_id=row.quiz_id,
        text=row.text,
        answers=[row_to_answer(a) for a in answers],
    )


def row_to_tree(row: Quiz, questions: Iterable[QuestionRecord]) -> QuizTree:
    summary = row_to_summary(row)
    return QuizTree(**summary.model_dump(), questions=list(questions))


def row_to_result(row: Result) -> ResultRecord:
    return ResultRecord(
        id=row.id,
        quiz_id=row.quiz_id,
        student_id=row.student_id,
        score=row.score,
        total_questions=row.total_questions,
        date=as_utc(row.date),
    )
