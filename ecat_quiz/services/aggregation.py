"""Read side: rebuild nested quiz trees from quizzes, questions and answers."""

import logging
from typing import Any, List, Optional

from ecat_quiz.codec import row_to_question, row_to_result, row_to_summary, row_to_tree
from ecat_quiz.models import Quiz
from ecat_quiz.schemas import QuizSummary, QuizTree, ResultRecord
from ecat_quiz.stores.base import EntityStore

logger = logging.getLogger(__name__)


def _is_valid_key(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


class AggregationReader:
    """Assembles caller-facing views.

    Multi-query reads run inside one store transaction so a concurrent tree
    rewrite cannot leave a quiz with half of its questions. Store failures
    always propagate; absence is reported as None or an empty list.
    """

    def __init__(self, store: EntityStore):
        self.store = store

    def quiz_by_id(self, quiz_id: str) -> Optional[QuizTree]:
        with self.store.transaction():
            quiz_row = self.store.get_quiz(quiz_id)
            if quiz_row is None:
                return None
            return self._assemble(quiz_row)

    def published_quizzes(self) -> List[QuizTree]:
        with self.store.transaction():
            return [self._assemble(row) for row in self.store.get_published_quizzes()]

    def quizzes_by_teacher(self, teacher_id: str) -> List[QuizSummary]:
        """Shallow quiz records; no questions are loaded."""
        if not _is_valid_key(teacher_id):
            logger.warning("Ignoring quiz lookup with malformed teacher id %r", teacher_id)
            return []
        return [row_to_summary(row) for row in self.store.get_quizzes_by_teacher(teacher_id)]

    def results_by_student(self, student_id: str) -> List[ResultRecord]:
        if not _is_valid_key(student_id):
            logger.warning("Ignoring result lookup with malformed student id %r", student_id)
            return []
        return [row_to_result(row) for row in self.store.get_results_by_student(student_id)]

    def _assemble(self, quiz_row: Quiz) -> QuizTree:
        questions = [
            row_to_question(question, self.store.get_answers(question.id))
            for question in self.store.get_questions(quiz_row.id)
        ]
        return row_to_tree(quiz_row, questions)
