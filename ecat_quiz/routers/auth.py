"""Signup, login and session routes."""

from fastapi import APIRouter, Depends, HTTPException, Request, Response, status

from ecat_quiz.auth_utils import MAX_PASSWORD_BYTES, hash_password, verify_password
from ecat_quiz.deps import get_quiz_service, require_login
from ecat_quiz.email_validator import validate_email_format
from ecat_quiz.schemas import LoginRequest, SignupRequest, UserCreate, UserPublic, UserRecord
from ecat_quiz.services.quiz_service import QuizService

router = APIRouter()


def _public(user: UserRecord) -> UserPublic:
    return UserPublic(id=user.id, name=user.name, email=user.email, role=user.role)


@router.post("/signup", status_code=status.HTTP_201_CREATED, response_model=UserPublic)
def signup(
    payload: SignupRequest,
    request: Request,
    service: QuizService = Depends(get_quiz_service),
):
    errors: dict[str, str] = {}

    name_clean = payload.name.strip()
    email_clean = payload.email.strip().lower()
    if not name_clean:
        errors["name"] = "Full name is required."
    email_error = validate_email_format(email_clean)
    if email_error:
        errors["email"] = email_error
    elif service.get_user_by_email(email_clean):
        errors["email"] = "An account with this email already exists."
    if len(payload.password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        errors["password"] = f"Password must be at most {MAX_PASSWORD_BYTES} bytes."

    if errors:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)

    user = service.add_user(
        UserCreate(
            name=name_clean,
            email=email_clean,
            password=hash_password(payload.password),
            role=payload.role,
        )
    )

    request.session.clear()
    request.session["user_id"] = user.id
    return _public(user)


@router.post("/login", response_model=UserPublic)
def login(
    payload: LoginRequest,
    request: Request,
    service: QuizService = Depends(get_quiz_service),
):
    user = service.get_user_by_email(payload.email.strip().lower())
    if user is None or not verify_password(payload.password, user.password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid email or password.",
        )

    # Clear any existing session first to avoid conflicts
    request.session.clear()
    request.session["user_id"] = user.id
    return _public(user)


@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(request: Request):
    request.session.clear()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/me", response_model=UserPublic)
def me(current_user: UserRecord = Depends(require_login)):
    return _public(current_user)
