"""Shared FastAPI dependencies for service access and authentication."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from ecat_quiz.schemas import UserRecord
from ecat_quiz.services.quiz_service import QuizService


def get_quiz_service(request: Request) -> QuizService:
    """The service built for this app instance in ``create_app``."""
    return request.app.state.quiz_service


def get_current_user(
    request: Request, service: QuizService = Depends(get_quiz_service)
) -> Optional[UserRecord]:
    """Return the currently logged-in user based on the session cookie, if any."""
    user_id = request.session.get("user_id")
    if not user_id:
        return None

    user = service.get_user_by_id(user_id)
    if user is None:
        # Clear any stale session
        request.session.clear()
        return None
    return user


def require_login(current_user: Optional[UserRecord] = Depends(get_current_user)) -> UserRecord:
    """Ensure that a user is logged in."""
    if current_user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Login required")
    return current_user


def require_role(required_roles: list[str]):
    """Dependency factory that enforces one of the given roles."""

    def wrapper(current_user: UserRecord = Depends(require_login)) -> UserRecord:
        if current_user.role not in required_roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Forbidden")
        return current_user

    return wrapper
