"""Quiz authoring, browsing and attempt routes."""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from ecat_quiz.deps import get_quiz_service, require_login, require_role
from ecat_quiz.schemas import (
    AttemptOutcome,
    AttemptSubmission,
    QuizDraft,
    QuizSubmission,
    QuizSummary,
    QuizTree,
    ResultCreate,
    StudentQuizView,
    UserRecord,
)
from ecat_quiz.services.grading import grade_attempt, percentage
from ecat_quiz.services.quiz_service import QuizService
from ecat_quiz.utils import sanitize_draft, validate_quiz_draft

router = APIRouter()


def _get_quiz(quiz_id: str, service: QuizService) -> QuizTree:
    """Get quiz by ID or raise 404."""
    quiz = service.get_quiz_by_id(quiz_id)
    if quiz is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return quiz


def _get_owned_quiz(quiz_id: str, teacher: UserRecord, service: QuizService) -> QuizTree:
    quiz = _get_quiz(quiz_id, service)
    if quiz.teacher_id != teacher.id:
        raise HTTPException(status_code=403, detail="You can only manage your own quizzes")
    return quiz


def _to_submission(draft: QuizDraft, teacher_id: str, quiz_id: Optional[str] = None) -> QuizSubmission:
    errors = validate_quiz_draft(draft)
    if errors:
        raise HTTPException(status_code=422, detail=errors)

    clean = sanitize_draft(draft)
    return QuizSubmission(
        id=quiz_id,
        title=clean.title,
        teacher_id=teacher_id,
        published=clean.published,
        questions=[question.model_dump() for question in clean.questions],
    )


def _student_view(quiz: QuizTree) -> StudentQuizView:
    return StudentQuizView(
        id=quiz.id,
        title=quiz.title,
        questions=[
            {
                "id": question.id,
                "text": question.text,
                "answers": [{"id": a.id, "text": a.text} for a in question.answers],
            }
            for question in quiz.questions
        ],
    )


@router.post("", status_code=status.HTTP_201_CREATED, response_model=QuizTree)
def create_quiz(
    draft: QuizDraft,
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_role(["teacher"])),
):
    return service.add_quiz(_to_submission(draft, current_user.id))


@router.get("/mine", response_model=List[QuizSummary])
def my_quizzes(
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_role(["teacher"])),
):
    """Shallow listing for the teacher dashboard."""
    return service.get_quizzes_by_teacher(current_user.id)


@router.get("/published")
def published_quizzes(
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_login),
):
    quizzes = service.get_all_published_quizzes()
    if current_user.role == "student":
        return [_student_view(quiz) for quiz in quizzes]
    return quizzes


@router.get("/{quiz_id}")
def get_quiz(
    quiz_id: str,
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_login),
):
    quiz = _get_quiz(quiz_id, service)
    if quiz.teacher_id == current_user.id:
        return quiz
    # Drafts are only visible to their author
    if not quiz.published:
        raise HTTPException(status_code=404, detail="Quiz not found")
    if current_user.role == "student":
        return _student_view(quiz)
    return quiz


@router.put("/{quiz_id}", response_model=QuizTree)
def update_quiz(
    quiz_id: str,
    draft: QuizDraft,
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_role(["teacher"])),
):
    _get_owned_quiz(quiz_id, current_user, service)
    updated = service.update_quiz(_to_submission(draft, current_user.id, quiz_id))
    if updated is None:
        raise HTTPException(status_code=404, detail="Quiz not found")
    return updated


@router.delete("/{quiz_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_quiz(
    quiz_id: str,
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_role(["teacher"])),
):
    _get_owned_quiz(quiz_id, current_user, service)
    service.delete_quiz(quiz_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{quiz_id}/attempts",
    status_code=status.HTTP_201_CREATED,
    response_model=AttemptOutcome,
)
def submit_attempt(
    quiz_id: str,
    attempt: AttemptSubmission,
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_role(["student"])),
):
    """Grade the selected answers and record the result."""
    quiz = _get_quiz(quiz_id, service)
    if not quiz.published:
        raise HTTPException(status_code=404, detail="Quiz not found")

    score, total = grade_attempt(quiz, attempt.selections)
    result = service.add_result(
        ResultCreate(
            quiz_id=quiz.id,
            student_id=current_user.id,
            score=score,
            total_questions=total,
        )
    )
    return AttemptOutcome(result=result, percentage=percentage(score, total))
