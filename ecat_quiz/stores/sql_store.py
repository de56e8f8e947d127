"""SQL backend for the Entity Store, on SQLModel/SQLAlchemy sessions."""

import logging
import threading
from contextlib import contextmanager, nullcontext
from typing import Any, Iterator, List, Optional, Tuple

from sqlalchemy import delete, func, insert, literal_column, update
from sqlalchemy.engine import Engine
from sqlalchemy.exc import DBAPIError, SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, select

from ecat_quiz.database import initialize
from ecat_quiz.errors import StoreError
from ecat_quiz.models import Answer, Question, Quiz, Result, User
from ecat_quiz.stores.base import EntityStore

logger = logging.getLogger(__name__)

# SQLite scans rowid tables in insertion order; ordering by it keeps
# questions and answers in authoring order without an ordinal column.
INSERTION_ORDER = literal_column("rowid")


def _describe(stmt, exc: SQLAlchemyError) -> Tuple[str, Any]:
    """Return the failing SQL and its bound parameters."""
    if isinstance(exc, DBAPIError) and exc.statement is not None:
        return exc.statement, exc.params
    compiled = stmt.compile()
    return str(compiled), compiled.params


class SqlEntityStore(EntityStore):
    """Entity Store backed by a relational engine.

    Outside ``transaction()`` every statement runs in its own short-lived
    session and commits immediately. Inside, all statements share one session
    and are committed or rolled back together. The open session belongs to the
    thread that opened it.

    A single-connection pool (in-memory SQLite) shares one DBAPI transaction
    between all sessions, so there every scope and statement is serialized.
    """

    def __init__(self, engine: Engine):
        self.engine = engine
        self._local = threading.local()
        if isinstance(engine.pool, StaticPool):
            self._lock = threading.RLock()
        else:
            self._lock = nullcontext()

    @property
    def _session(self) -> Optional[Session]:
        return getattr(self._local, "session", None)

    def initialize(self) -> None:
        initialize(self.engine)

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self._session is not None:
            yield
            return

        with self._lock:
            session = Session(self.engine, expire_on_commit=False)
            self._local.session = session
            try:
                with session.begin():
                    yield
            except Exception:
                logger.warning("Transaction rolled back")
                raise
            finally:
                self._local.session = None
                session.close()

    # -----------------------------
    # Statement execution
    # -----------------------------
    def _execute(self, stmt, mode: str) -> Any:
        if self._session is not None:
            return self._run(self._session, stmt, mode)
        with self._lock, Session(self.engine, expire_on_commit=False) as session:
            outcome = self._run(session, stmt, mode)
            session.commit()
            return outcome

    def _run(self, session: Session, stmt, mode: str) -> Any:
        try:
            if mode == "all":
                return list(session.exec(stmt).all())
            if mode == "first":
                return session.exec(stmt).first()
            if mode == "scalar":
                return session.exec(stmt).one()
            return session.execute(stmt).rowcount
        except SQLAlchemyError as exc:
            statement, params = _describe(stmt, exc)
            logger.error("Statement failed: %s params=%r", statement, params)
            message = str(getattr(exc, "orig", None) or exc)
            raise StoreError(message, statement=statement, params=params) from exc

    def _insert(self, row):
        self._execute(insert(type(row)).values(**row.model_dump()), "rowcount")
        return row

    # -----------------------------
    # Users
    # -----------------------------
    def add_user(self, row: User) -> User:
        return self._insert(row)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self._execute(select(User).where(User.email == email), "first")

    def get_user_by_id(self, user_id: str) -> Optional[User]:
        return self._execute(select(User).where(User.id == user_id), "first")

    def count_users(self) -> int:
        return self._execute(select(func.count()).select_from(User), "scalar")

    # -----------------------------
    # Quizzes
    # -----------------------------
    def add_quiz(self, row: Quiz) -> Quiz:
        return self._insert(row)

    def get_quiz(self, quiz_id: str) -> Optional[Quiz]:
        return self._execute(select(Quiz).where(Quiz.id == quiz_id), "first")

    def get_quizzes_by_teacher(self, teacher_id: str) -> List[Quiz]:
        stmt = select(Quiz).where(Quiz.teacher_id == teacher_id).order_by(INSERTION_ORDER)
        return self._execute(stmt, "all")

    def get_published_quizzes(self) -> List[Quiz]:
        stmt = select(Quiz).where(Quiz.published == 1).order_by(INSERTION_ORDER)
        return self._execute(stmt, "all")

    def update_quiz(self, quiz_id: str, title: str, published: int) -> int:
        stmt = (
            update(Quiz)
            .where(Quiz.id == quiz_id)
            .values(title=title, published=published)
            .execution_options(synchronize_session=False)
        )
        return self._execute(stmt, "rowcount")

    def delete_quiz(self, quiz_id: str) -> int:
        stmt = (
            delete(Quiz)
            .where(Quiz.id == quiz_id)
            .execution_options(synchronize_session=False)
        )
        return self._execute(stmt, "rowcount")

    # -----------------------------
    # Questions
    # -----------------------------
    def add_question(self, row: Question) -> Question:
        return self._insert(row)

    def get_questions(self, quiz_id: str) -> List[Question]:
        stmt = select(Question).where(Question.quiz_id == quiz_id).order_by(INSERTION_ORDER)
        return self._execute(stmt, "all")

    def delete_questions(self, quiz_id: str) -> int:
        stmt = (
            delete(Question)
            .where(Question.quiz_id == quiz_id)
            .execution_options(synchronize_session=False)
        )
        return self._execute(stmt, "rowcount")

    # -----------------------------
    # Answers
    # -----------------------------
    def add_answer(self, row: Answer) -> Answer:
        return self._insert(row)

    def get_answers(self, question_id: str) -> List[Answer]:
        stmt = (
            select(Answer)
            .where(Answer.question_id == question_id)
            .order_by(INSERTION_ORDER)
        )
        return self._execute(stmt, "all")

    def delete_answers_for_quiz(self, quiz_id: str) -> int:
        question_ids = select(Question.id).where(Question.quiz_id == quiz_id)
        stmt = (
            delete(Answer)
            .where(Answer.question_id.in_(question_ids))
            .execution_options(synchronize_session=False)
        )
        return self._execute(stmt, "rowcount")

    # -----------------------------
    # Results
    # -----------------------------
    def add_result(self, row: Result) -> Result:
        return self._insert(row)

    def get_results_by_student(self, student_id: str) -> List[Result]:
        stmt = select(Result).where(Result.student_id == student_id).order_by(INSERTION_ORDER)
        return self._execute(stmt, "all")
