"""Error taxonomy for builder operations.

Every error is scoped to a single user operation. None of them leave
persisted state half-written: the engine decides first, persistence happens
only after an accepted decision.
"""

from __future__ import annotations


class FormBuilderError(Exception):
    # Base class for intended, meaningful failures.
    pass


class ValidationError(FormBuilderError):
    # Missing or invalid setup answer; shown inline next to the field.
    pass


class StructuralConstraintError(FormBuilderError):
    # Pinned-position violation, page break collision, broken contiguity.
    pass


class EssentialQuestionError(FormBuilderError):
    """Attempt to delete, edit or make optional a protected question type."""

    def __init__(self, question_type: str, action: str) -> None:
        self.question_type = question_type
        self.action = action
        super().__init__(f'"{question_type}" is an essential question and cannot be {_ACTION_WORDS[action]}.')


class NotFoundError(FormBuilderError):
    pass


class UnknownQuestionTypeError(NotFoundError, KeyError):
    def __str__(self) -> str:
        return f"Unknown question type: {self.args[0]}"


class PersistenceError(FormBuilderError):
    # Opaque failure from the record store. Never retried by the engine.
    pass


_ACTION_WORDS = {
    "delete": "deleted",
    "edit": "edited",
    "make_optional": "made optional",
}
