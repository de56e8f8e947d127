"""Auto-grading of a submitted quiz attempt."""

from typing import Dict, Tuple

from ecat_quiz.schemas import QuizTree


def grade_attempt(quiz: QuizTree, selections: Dict[str, str]) -> Tuple[int, int]:
    """Score one attempt.

    Args:
        quiz: The full quiz tree being attempted
        selections: Mapping of question id to the selected answer id

    Returns:
        ``(score, total_questions)``: one point per question whose selected
        answer is marked correct. Unanswered questions and selections for
        unknown questions score nothing.
    """
    score = 0
    for question in quiz.questions:
        selected = selections.get(question.id)
        if not selected:
            continue
        if any(answer.id == selected and answer.correct for answer in question.answers):
            score += 1
    return score, len(quiz.questions)


def percentage(score: int, total_questions: int) -> float:
    if total_questions <= 0:
        return 0.0
    return round((score / total_questions) * 100, 2)
