"""Demo accounts inserted on first startup."""

import logging

from ecat_quiz.auth_utils import hash_password
from ecat_quiz.schemas import Role, UserCreate
from ecat_quiz.services.quiz_service import QuizService

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    UserCreate(
        id="1",
        email="teacher@ecat.com",
        password=DEMO_PASSWORD,
        name="Test Teacher",
        role=Role.TEACHER,
    ),
    UserCreate(
        id="2",
        email="student@ecat.com",
        password=DEMO_PASSWORD,
        name="Test Student",
        role=Role.STUDENT,
    ),
]


def initialize_test_data(service: QuizService) -> int:
    """Add a demo teacher and student when no users exist yet.

    Returns the number of users added.
    """
    try:
        if service.count_users() > 0:
            return 0
        for user in DEMO_USERS:
            service.add_user(user.model_copy(update={"password": hash_password(user.password)}))
    except Exception:
        logger.exception("Seeding demo users failed")
        raise

    logger.info("Seeded demo users: teacher@ecat.com / student@ecat.com")
    return len(DEMO_USERS)
