"""Exception types raised by the persistence layer."""

from typing import Any, Optional


class QuizStoreError(Exception):
    """Base class for every error raised by the persistence layer."""


class InitializationError(QuizStoreError):
    """The storage engine could not be opened or the schema could not be created.

    Fatal: application startup must abort when this is raised.
    """


class StoreError(QuizStoreError):
    """A single statement failed to execute.

    Carries the failing statement and its parameters so the failure can be
    diagnosed from logs. Never retried automatically.
    """

    def __init__(
        self,
        message: str,
        statement: Optional[str] = None,
        params: Optional[Any] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.statement = statement
        self.params = params

    def __str__(self) -> str:
        if self.statement is None:
            return self.message
        return f"{self.message} [statement: {self.statement}; params: {self.params!r}]"
