import pytest
from fastapi.testclient import TestClient
from sqlmodel import SQLModel

from ecat_quiz.config import Settings
from ecat_quiz.database import create_db_engine, initialize
from ecat_quiz.main import create_app
from ecat_quiz.schemas import AnswerIn, QuestionIn, QuizSubmission, Role, UserCreate
from ecat_quiz.services.quiz_service import QuizService
from ecat_quiz.stores.memory_store import MemoryEntityStore
from ecat_quiz.stores.sql_store import SqlEntityStore

# ============================================================================
# STORAGE
# ============================================================================


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database with the schema created."""
    test_engine = create_db_engine("sqlite://")
    initialize(test_engine)
    yield test_engine
    SQLModel.metadata.drop_all(test_engine)
    test_engine.dispose()


@pytest.fixture(params=["sql", "memory"])
def store(request, engine):
    """Every store-level test runs against both backends."""
    if request.param == "memory":
        backend = MemoryEntityStore()
    else:
        backend = SqlEntityStore(engine)
    backend.initialize()
    return backend


@pytest.fixture
def service(store):
    return QuizService(store)


# ============================================================================
# ENTITY FIXTURES
# ============================================================================


@pytest.fixture
def teacher(service):
    return service.add_user(
        UserCreate(
            name="Ada Teacher",
            email="ada@example.com",
            password="secret",
            role=Role.TEACHER,
        )
    )


@pytest.fixture
def student(service):
    return service.add_user(
        UserCreate(
            name="Sam Student",
            email="sam@example.com",
            password="secret",
            role=Role.STUDENT,
        )
    )


@pytest.fixture
def algebra(teacher):
    """Unpublished quiz "Algebra": one question, answers ["3", "4"], "4" correct."""
    return QuizSubmission(
        title="Algebra",
        teacher_id=teacher.id,
        published=False,
        questions=[
            QuestionIn(
                text="2+2?",
                answers=[AnswerIn(text="3", correct=False), AnswerIn(text="4", correct=True)],
            )
        ],
    )


# ============================================================================
# FASTAPI APP & TEST CLIENTS
# ============================================================================


@pytest.fixture(params=["sql", "memory"])
def app(request):
    settings = Settings(
        DATABASE_URL="sqlite://",
        STORE_BACKEND=request.param,
        SEED_TEST_DATA=False,
        SECRET_KEY="test-secret",
        LOG_LEVEL="WARNING",
    )
    return create_app(settings)


@pytest.fixture
def make_client(app):
    """Factory for clients that share one app but keep separate session cookies."""
    clients = []

    def _make():
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


def _signup(client, email, role, name="Test User", password="password123"):
    response = client.post(
        "/auth/signup",
        json={"name": name, "email": email, "password": password, "role": role},
    )
    assert response.status_code == 201, response.text
    return response.json()


@pytest.fixture
def teacher_client(make_client):
    client = make_client()
    client.user = _signup(client, "teacher@example.com", "teacher", name="Tina Teacher")
    return client


@pytest.fixture
def student_client(make_client):
    client = make_client()
    client.user = _signup(client, "student@example.com", "student", name="Stu Student")
    return client


def _quiz_payload(title="Algebra", published=False, questions=None):
    if questions is None:
        questions = [
            {
                "text": "2+2?",
                "answers": [
                    {"text": "3", "correct": False},
                    {"text": "4", "correct": True},
                ],
            }
        ]
    return {"title": title, "published": published, "questions": questions}


@pytest.fixture
def signup_user():
    return _signup


@pytest.fixture
def quiz_payload():
    return _quiz_payload
