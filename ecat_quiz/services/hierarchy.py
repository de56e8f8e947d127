"""Write side of the quiz tree: create, replace-children update, delete.

Every operation runs inside one store transaction, so a failure at any
statement leaves no partial tree behind.
"""

import logging
from typing import Callable, List, Optional

from ecat_quiz.codec import (
    answer_to_row,
    encode_bool,
    question_to_row,
    quiz_to_row,
    row_to_question,
    row_to_tree,
)
from ecat_quiz.schemas import QuestionIn, QuestionRecord, QuizSubmission, QuizTree
from ecat_quiz.stores.base import EntityStore
from ecat_quiz.utils import generate_id

logger = logging.getLogger(__name__)


class HierarchySynchronizer:
    def __init__(self, store: EntityStore, id_factory: Callable[[], str] = generate_id):
        self.store = store
        self.id_factory = id_factory

    def create(self, submission: QuizSubmission) -> QuizTree:
        """Insert a quiz with all of its questions and answers.

        Uses ``submission.id`` when given, otherwise generates one. Child ids
        are always generated.
        """
        quiz_id = submission.id or self.id_factory()
        with self.store.transaction():
            quiz_row = self.store.add_quiz(quiz_to_row(submission, quiz_id))
            questions = self._insert_children(quiz_id, submission.questions)

        logger.info("Created quiz %s with %d question(s)", quiz_id, len(questions))
        return row_to_tree(quiz_row, questions)

    def replace(self, submission: QuizSubmission) -> Optional[QuizTree]:
        """Rewrite a quiz's title/published and replace its whole child set.

        Existing questions and answers are deleted and the submitted ones are
        inserted with fresh ids, so child ids never survive an update.
        ``teacher_id`` and ``created_at`` are left untouched.

        Returns:
            The stored tree, or None when no quiz has ``submission.id``.
        """
        if not submission.id:
            raise ValueError("update requires a quiz id")

        quiz_id = submission.id
        with self.store.transaction():
            quiz_row = self.store.get_quiz(quiz_id)
            if quiz_row is None:
                return None

            published = encode_bool(submission.published)
            self.store.update_quiz(quiz_id, submission.title, published)
            # answers reference questions, so they go first
            self.store.delete_answers_for_quiz(quiz_id)
            self.store.delete_questions(quiz_id)
            questions = self._insert_children(quiz_id, submission.questions)

        quiz_row.title = submission.title
        quiz_row.published = published
        logger.info("Replaced quiz %s with %d question(s)", quiz_id, len(questions))
        return row_to_tree(quiz_row, questions)

    def delete(self, quiz_id: str) -> bool:
        """Delete answers, then questions, then the quiz itself.

        Returns:
            True when a quiz row was removed.
        """
        with self.store.transaction():
            self.store.delete_answers_for_quiz(quiz_id)
            self.store.delete_questions(quiz_id)
            deleted = self.store.delete_quiz(quiz_id)

        if deleted:
            logger.info("Deleted quiz %s", quiz_id)
        return bool(deleted)

    def _insert_children(self, quiz_id: str, questions: List[QuestionIn]) -> List[QuestionRecord]:
        records = []
        for question in questions:
            question_row = self.store.add_question(
                question_to_row(question, self.id_factory(), quiz_id)
            )
            answer_rows = [
                self.store.add_answer(answer_to_row(answer, self.id_factory(), question_row.id))
                for answer in question.answers
            ]
            records.append(row_to_question(question_row, answer_rows))
        return records
