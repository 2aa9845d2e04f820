"""Typed errors raised by services and translated to HTTP responses by routers."""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single validation failure attached to a field (or ``base``)."""

    field: str
    message: str

    @property
    def full_message(self) -> str:
        if self.field == "base":
            return self.message
        return f"{self.field.replace('_', ' ').capitalize()} {self.message}"


class StorefrontError(Exception):
    """Base class for all domain errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """One or more fields failed validation. Nothing was persisted."""

    def __init__(self, errors: list[FieldError]):
        self.errors = list(errors)
        super().__init__(_to_sentence(self.full_messages))

    @property
    def full_messages(self) -> list[str]:
        return [error.full_message for error in self.errors]

    def messages_for(self, field: str) -> list[str]:
        return [error.message for error in self.errors if error.field == field]


class NotFoundError(StorefrontError):
    """A lookup failed. The message names the missing resource."""


class ConflictError(StorefrontError):
    """A business rule blocked a state transition. Prior state is untouched."""


class PersistenceError(StorefrontError):
    """The store rejected a write for a reason outside the business rules."""


def _to_sentence(words: list[str]) -> str:
    if not words:
        return ""
    if len(words) == 1:
        return words[0]
    if len(words) == 2:
        return f"{words[0]} and {words[1]}"
    return f"{', '.join(words[:-1])}, and {words[-1]}"
