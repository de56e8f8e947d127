from ecat_quiz.services.quiz_service import QuizService

__all__ = ["QuizService"]
