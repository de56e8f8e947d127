"""SQLModel table models: the flat, storage-side shape of every entity.

Booleans are stored as integers (0/1). Conversion to and from the nested
domain records lives in ``ecat_quiz.codec``.
"""

from datetime import datetime, timezone

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class User(SQLModel, table=True):
    """A teacher or student account."""

    __tablename__ = "users"
    __table_args__ = (UniqueConstraint("email", name="uq_users_email"),)

    id: str = Field(primary_key=True)
    email: str
    password: str
    name: str
    role: str  # teacher | student


class Quiz(SQLModel, table=True):
    __tablename__ = "quizzes"

    id: str = Field(primary_key=True)
    title: str
    teacher_id: str = Field(foreign_key="users.id")
    published: int = Field(default=0)  # 0/1
    created_at: datetime = Field(default_factory=utc_now)


class Question(SQLModel, table=True):
    __tablename__ = "questions"

    id: str = Field(primary_key=True)
    quiz_id: str = Field(foreign_key="quizzes.id")
    text: str


class Answer(SQLModel, table=True):
    __tablename__ = "answers"

    id: str = Field(primary_key=True)
    question_id: str = Field(foreign_key="questions.id")
    text: str
    correct: int = Field(default=0)  # 0/1


class Result(SQLModel, table=True):
    """A graded quiz attempt. Append-only.

    Results are history: they outlive the quiz they were taken on, so
    ``quiz_id`` is not a constraint and may point at a deleted quiz.
    """

    __tablename__ = "results"

    id: str = Field(primary_key=True)
    quiz_id: str = Field(index=True)
    student_id: str = Field(foreign_key="users.id")
    score: int
    total_questions: int
    date: datetime = Field(default_factory=utc_now)
