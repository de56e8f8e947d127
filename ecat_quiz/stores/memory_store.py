"""In-process Entity Store backed by plain lists.

Rows are kept exactly as the SQL backend stores them (booleans as 0/1) and the
same integrity rules are applied: unique ids and emails, and foreign keys on
insert and delete. Nothing is persisted across processes.
"""

import copy
import functools
import logging
import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional

from ecat_quiz.errors import StoreError
from ecat_quiz.models import Answer, Question, Quiz, Result, User
from ecat_quiz.stores.base import EntityStore

logger = logging.getLogger(__name__)

TABLES = ("users", "quizzes", "questions", "answers", "results")


def _locked(method):
    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        with self._lock:
            return method(self, *args, **kwargs)

    return wrapper


class MemoryEntityStore(EntityStore):
    """List-backed store.

    One re-entrant lock serializes every operation, and ``transaction()``
    holds it for the whole scope, so a rollback can never undo another
    thread's work. The rollback snapshot is taken on the first write.
    """

    def __init__(self):
        self._tables: Dict[str, List[Dict[str, Any]]] = {name: [] for name in TABLES}
        self._lock = threading.RLock()
        # only touched while holding _lock
        self._in_transaction = False
        self._snapshot: Optional[Dict[str, List[Dict[str, Any]]]] = None

    def initialize(self) -> None:
        logger.info("Using in-memory store")

    @contextmanager
    def transaction(self) -> Iterator[None]:
        with self._lock:
            if self._in_transaction:
                yield
                return

            self._in_transaction = True
            try:
                yield
            except Exception:
                if self._snapshot is not None:
                    self._tables = self._snapshot
                logger.warning("Transaction rolled back")
                raise
            finally:
                self._in_transaction = False
                self._snapshot = None

    # -----------------------------
    # Helpers
    # -----------------------------
    @staticmethod
    def _fail(message: str, statement: str, params: Any) -> None:
        logger.error("Statement failed: %s params=%r", statement, params)
        raise StoreError(message, statement=statement, params=params)

    def _before_write(self) -> None:
        if self._in_transaction and self._snapshot is None:
            self._snapshot = copy.deepcopy(self._tables)

    def _where(self, table: str, **criteria) -> List[Dict[str, Any]]:
        return [
            row
            for row in self._tables[table]
            if all(row[key] == value for key, value in criteria.items())
        ]

    def _exists(self, table: str, row_id: str) -> bool:
        return bool(self._where(table, id=row_id))

    def _insert(self, table: str, row, references: Dict[str, str]):
        values = row.model_dump()
        statement = f"INSERT INTO {table}"
        if self._exists(table, values["id"]):
            self._fail(f"UNIQUE constraint failed: {table}.id", statement, values)
        for column, parent in references.items():
            if not self._exists(parent, values[column]):
                self._fail("FOREIGN KEY constraint failed", statement, values)
        self._before_write()
        self._tables[table].append(values)
        return row

    def _delete(self, table: str, predicate) -> int:
        doomed = [row for row in self._tables[table] if predicate(row)]
        if doomed:
            self._before_write()
            self._tables[table] = [row for row in self._tables[table] if not predicate(row)]
        return len(doomed)

    # -----------------------------
    # Users
    # -----------------------------
    @_locked
    def add_user(self, row: User) -> User:
        if self._where("users", email=row.email):
            self._fail(
                "UNIQUE constraint failed: users.email",
                "INSERT INTO users",
                row.model_dump(),
            )
        return self._insert("users", row, {})

    @_locked
    def get_user_by_email(self, email: str) -> Optional[User]:
        rows = self._where("users", email=email)
        return User(**rows[0]) if rows else None

    @_locked
    def get_user_by_id(self, user_id: str) -> Optional[User]:
        rows = self._where("users", id=user_id)
        return User(**rows[0]) if rows else None

    @_locked
    def count_users(self) -> int:
        return len(self._tables["users"])

    # -----------------------------
    # Quizzes
    # -----------------------------
    @_locked
    def add_quiz(self, row: Quiz) -> Quiz:
        return self._insert("quizzes", row, {"teacher_id": "users"})

    @_locked
    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        rows = self._where("quizzes", id=quiz_id)
        return Quiz(**rows[0]) if rows else None

    @_locked
    def get_quizzes_by_teacher(self, teacher_id: str) -> List[Quiz]:
        return [Quiz(**row) for row in self._where("quizzes", teacher_id=teacher_id)]

    @_locked
    def get_published_quizzes(self) -> List[Quiz]:
        return [Quiz(**row) for row in self._where("quizzes", published=1)]

    @_locked
    def update_quiz(self, quiz_id: str, title: str, published: int) -> int:
        rows = self._where("quizzes", id=quiz_id)
        if rows:
            self._before_write()
        for row in rows:
            row["title"] = title
            row["published"] = published
        return len(rows)

    @_locked
    def delete_quiz(self, quiz_id: str) -> int:
        if self._where("questions", quiz_id=quiz_id):
            self._fail("FOREIGN KEY constraint failed", "DELETE FROM quizzes", {"id": quiz_id})
        return self._delete("quizzes", lambda row: row["id"] == quiz_id)

    # -----------------------------
    # Questions
    # -----------------------------
    @_locked
    def add_question(self, row: Question) -> Question:
        return self._insert("questions", row, {"quiz_id": "quizzes"})

    @_locked
    def get_questions(self, quiz_id: str) -> List[Question]:
        return [Question(**row) for row in self._where("questions", quiz_id=quiz_id)]

    @_locked
    def delete_questions(self, quiz_id: str) -> int:
        params = {"quiz_id": quiz_id}
        question_ids = {row["id"] for row in self._where("questions", quiz_id=quiz_id)}
        if any(row["question_id"] in question_ids for row in self._tables["answers"]):
            self._fail("FOREIGN KEY constraint failed", "DELETE FROM questions", params)
        return self._delete("questions", lambda row: row["quiz_id"] == quiz_id)

    # -----------------------------
    # Answers
    # -----------------------------
    @_locked
    def add_answer(self, row: Answer) -> Answer:
        return self._insert("answers", row, {"question_id": "questions"})

    @_locked
    def get_answers(self, question_id: str) -> List[Answer]:
        return [Answer(**row) for row in self._where("answers", question_id=question_id)]

    @_locked
    def delete_answers_for_quiz(self, quiz_id: str) -> int:
        question_ids = {row["id"] for row in self._where("questions", quiz_id=quiz_id)}
        return self._delete("answers", lambda row: row["question_id"] in question_ids)

    # -----------------------------
    # Results
    # -----------------------------
    @_locked
    def add_result(self, row: Result) -> Result:
        # quiz_id is history, not a reference; only the student must exist
        return self._insert("results", row, {"student_id": "users"})

    @_locked
    def get_results_by_student(self, student_id: str) -> List[Result]:
        return [Result(**row) for row in self._where("results", student_id=student_id)]
