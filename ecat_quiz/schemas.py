"""Pydantic records exchanged with callers.

Domain records are nested and carry real booleans; none of them is a storage
type. Request/response bodies for the HTTP surface live at the bottom.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class Role(str, Enum):
    TEACHER = "teacher"
    STUDENT = "student"


# --- Users ---


class UserCreate(BaseModel):
    id: Optional[str] = None
    name: str
    email: str
    password: str
    role: Role


class UserRecord(BaseModel):
    id: str
    name: str
    email: str
    password: str
    role: str


# --- Quiz trees (write side) ---


class AnswerIn(BaseModel):
    text: str
    correct: bool = False


class QuestionIn(BaseModel):
    text: str
    answers: List[AnswerIn] = Field(default_factory=list)


class QuizSubmission(BaseModel):
    """A whole quiz tree as submitted by a caller.

    ``id`` is optional on create (one is generated) and required on update.
    Ids of nested questions/answers are ignored: children are always
    regenerated.
    """

    id: Optional[str] = None
    title: str
    teacher_id: str
    published: bool = False
    questions: List[QuestionIn] = Field(default_factory=list)


# --- Quiz trees (read side) ---


class AnswerRecord(BaseModel):
    id: str
    question_id: str
    text: str
    correct: bool


class QuestionRecord(BaseModel):
    id: str
    quiz_id: str
    text: str
    answers: List[AnswerRecord] = Field(default_factory=list)


class QuizSummary(BaseModel):
    """Shallow quiz record, without questions."""

    id: str
    title: str
    teacher_id: str
    published: bool
    created_at: datetime


class QuizTree(QuizSummary):
    questions: List[QuestionRecord] = Field(default_factory=list)


# --- Results ---


class ResultCreate(BaseModel):
    quiz_id: str
    student_id: str
    score: int
    total_questions: int


class ResultRecord(BaseModel):
    id: str
    quiz_id: str
    student_id: str
    score: int
    total_questions: int
    date: datetime


# --- HTTP bodies ---


class SignupRequest(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=6, max_length=72)
    role: Role


class LoginRequest(BaseModel):
    email: str
    password: str


class UserPublic(BaseModel):
    id: str
    name: str
    email: str
    role: str


class AnswerDraft(BaseModel):
    text: str = ""
    correct: bool = False


class QuestionDraft(BaseModel):
    text: str = ""
    answers: List[AnswerDraft] = Field(default_factory=list)


class QuizDraft(BaseModel):
    """Quiz tree as authored by a teacher over HTTP."""

    title: str = ""
    published: bool = False
    questions: List[QuestionDraft] = Field(default_factory=list)


class StudentAnswerView(BaseModel):
    id: str
    text: str


class StudentQuestionView(BaseModel):
    id: str
    text: str
    answers: List[StudentAnswerView]


class StudentQuizView(BaseModel):
    """Quiz tree as shown to a student: correct flags are withheld."""

    id: str
    title: str
    questions: List[StudentQuestionView]


class AttemptSubmission(BaseModel):
    # question id -> selected answer id
    selections: Dict[str, str] = Field(default_factory=dict)


class AttemptOutcome(BaseModel):
    result: ResultRecord
    percentage: float
