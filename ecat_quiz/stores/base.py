"""
Entity Store interface.

Every backend exposes the same row-level operations so the write-side
synchronizer and the read-side aggregator never know which engine they run
on. Each operation issues exactly one statement and raises ``StoreError`` on
failure; nothing here interprets or validates the rows it is given.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from typing import List, Optional

from ecat_quiz.models import Answer, Question, Quiz, Result, User


class EntityStore(ABC):
    """Row-level CRUD over users, quizzes, questions, answers and results."""

    @abstractmethod
    def initialize(self) -> None:
        """Prepare the backing storage. Idempotent."""

    @abstractmethod
    def transaction(self) -> AbstractContextManager:
        """Scope in which every statement commits or rolls back together.

        Nested scopes opened by the same thread join the outermost one; scopes
        in other threads never share it.
        """

    # -----------------------------
    # Users
    # -----------------------------
    @abstractmethod
    def add_user(self, row: User) -> User: ...

    @abstractmethod
    def get_user_by_email(self, email: str) -> Optional[User]: ...

    @abstractmethod
    def get_user_by_id(self, user_id: str) -> Optional[User]: ...

    @abstractmethod
    def count_users(self) -> int: ...

    # -----------------------------
    # Quizzes
    # -----------------------------
    @abstractmethod
    def add_quiz(self, row: Quiz) -> Quiz: ...

    @abstractmethod
    def get_quiz(self, quiz_id: str) -> Optional[Quiz]: ...

    @abstractmethod
    def get_quizzes_by_teacher(self, teacher_id: str) -> List[Quiz]: ...

    @abstractmethod
    def get_published_quizzes(self) -> List[Quiz]: ...

    @abstractmethod
    def update_quiz(self, quiz_id: str, title: str, published: int) -> int:
        """Rewrite the scalar fields of one quiz; returns the matched row count."""

    @abstractmethod
    def delete_quiz(self, quiz_id: str) -> int: ...

    # -----------------------------
    # Questions
    # -----------------------------
    @abstractmethod
    def add_question(self, row: Question) -> Question: ...

    @abstractmethod
    def get_questions(self, quiz_id: str) -> List[Question]:
        """Questions of one quiz, in insertion order."""

    @abstractmethod
    def delete_questions(self, quiz_id: str) -> int: ...

    # -----------------------------
    # Answers
    # -----------------------------
    @abstractmethod
    def add_answer(self, row: Answer) -> Answer: ...

    @abstractmethod
    def get_answers(self, question_id: str) -> List[Answer]:
        """Answers of one question, in insertion order."""

    @abstractmethod
    def delete_answers_for_quiz(self, quiz_id: str) -> int:
        """Delete every answer whose question belongs to ``quiz_id``."""

    # -----------------------------
    # Results
    # -----------------------------
    @abstractmethod
    def add_result(self, row: Result) -> Result: ...

    @abstractmethod
    def get_results_by_student(self, student_id: str) -> List[Result]: ...
