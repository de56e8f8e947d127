"""Student result history."""

from typing import List

from fastapi import APIRouter, Depends

from ecat_quiz.deps import get_quiz_service, require_role
from ecat_quiz.schemas import ResultRecord, UserRecord
from ecat_quiz.services.quiz_service import QuizService

router = APIRouter()


@router.get("/mine", response_model=List[ResultRecord])
def my_results(
    service: QuizService = Depends(get_quiz_service),
    current_user: UserRecord = Depends(require_role(["student"])),
):
    return service.get_results_by_student(current_user.id)
