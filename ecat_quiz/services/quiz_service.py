"""Caller-facing persistence operations.

``QuizService`` is the only interface the surrounding application uses. It
takes and returns plain pydantic records; which Entity Store backend sits
underneath is decided when the service is built.
"""

import logging
from typing import List, Optional

from ecat_quiz.codec import result_to_row, row_to_result, row_to_user, user_to_row
from ecat_quiz.schemas import (
    QuizSubmission,
    QuizSummary,
    QuizTree,
    ResultCreate,
    ResultRecord,
    UserCreate,
    UserRecord,
)
from ecat_quiz.services.aggregation import AggregationReader
from ecat_quiz.services.hierarchy import HierarchySynchronizer
from ecat_quiz.stores.base import EntityStore
from ecat_quiz.utils import generate_id

logger = logging.getLogger(__name__)


class QuizService:
    def __init__(self, store: EntityStore, id_factory=generate_id):
        self.store = store
        self.id_factory = id_factory
        self.writer = HierarchySynchronizer(store, id_factory=id_factory)
        self.reader = AggregationReader(store)

    def initialize(self) -> None:
        """Create the schema. Raises InitializationError on failure."""
        self.store.initialize()

    # -----------------------------
    # Users
    # -----------------------------
    def add_user(self, user: UserCreate) -> UserRecord:
        row = self.store.add_user(user_to_row(user, user.id or self.id_factory()))
        logger.info("Added %s user %s", row.role, row.id)
        return row_to_user(row)

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        row = self.store.get_user_by_email(email)
        return row_to_user(row) if row else None

    def get_user_by_id(self, user_id: str) -> Optional[UserRecord]:
        row = self.store.get_user_by_id(user_id)
        return row_to_user(row) if row else None

    def count_users(self) -> int:
        return self.store.count_users()

    # -----------------------------
    # Quizzes
    # -----------------------------
    def add_quiz(self, quiz: QuizSubmission) -> QuizTree:
        return self.writer.create(quiz)

    def get_quiz_by_id(self, quiz_id: str) -> Optional[QuizTree]:
        """Full quiz tree, or None when the quiz does not exist."""
        return self.reader.quiz_by_id(quiz_id)

    def get_quizzes_by_teacher(self, teacher_id: str) -> List[QuizSummary]:
        return self.reader.quizzes_by_teacher(teacher_id)

    def get_all_published_quizzes(self) -> List[QuizTree]:
        return self.reader.published_quizzes()

    def update_quiz(self, quiz: QuizSubmission) -> Optional[QuizTree]:
        """Replace a quiz's title, published flag and entire child set.

        Question and answer ids are regenerated on every update; callers
        must not hold on to ids read before the update.
        """
        return self.writer.replace(quiz)

    def delete_quiz(self, quiz_id: str) -> bool:
        return self.writer.delete(quiz_id)

    # -----------------------------
    # Results
    # -----------------------------
    def add_result(self, result: ResultCreate) -> ResultRecord:
        row = self.store.add_result(result_to_row(result, self.id_factory()))
        logger.info(
            "Recorded result %s/%s for student %s on quiz %s",
            row.score,
            row.total_questions,
            row.student_id,
            row.quiz_id,
        )
        return row_to_result(row)

    def get_results_by_student(self, student_id: str) -> List[ResultRecord]:
        return self.reader.results_by_student(student_id)
