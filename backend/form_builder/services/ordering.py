"""Ordering rules for the question list of a single form.

Functions here work on a snapshot of ``QuestionInstance`` rows and never
touch storage. A rejected move or insert comes back as an
``OrderingResult`` with ``applied=False``; deleting or editing an essential
question raises ``EssentialQuestionError``.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from form_builder.core.errors import EssentialQuestionError, NotFoundError, StructuralConstraintError
from form_builder.models.schemas import OrderChange, OrderingResult, QuestionInstance
from form_builder.services.question_catalog import FormRules

ESSENTIAL_ACTIONS = ("delete", "edit", "make_optional")


def sort_questions(questions: Iterable[QuestionInstance]) -> list[QuestionInstance]:
    return sorted(questions, key=lambda question: question.order)


def is_pinned_in_place(question: QuestionInstance, rules: FormRules) -> bool:
    return rules.pinned_positions.get(question.type) == question.order


def is_anchored(question: QuestionInstance, rules: FormRules) -> bool:
    return question.type in rules.anchored_types or is_pinned_in_place(question, rules)


def find_question(questions: Sequence[QuestionInstance], question_id: str) -> QuestionInstance:
    for question in questions:
        if question.id == question_id:
            return question
    raise NotFoundError(f"Question {question_id} not found")


def _rejected(questions: Sequence[QuestionInstance], reason: str) -> OrderingResult:
    return OrderingResult(applied=False, reason=reason, questions=sort_questions(questions))


def _swap(questions: Sequence[QuestionInstance], question_id: str, offset: int, rules: FormRules) -> OrderingResult:
    ordered = sort_questions(questions)
    current = find_question(ordered, question_id)
    index = ordered.index(current)
    target = index + offset
    if target < 0 or target >= len(ordered):
        return _rejected(ordered, "Question is already at the " + ("top." if offset < 0 else "bottom."))

    neighbour = ordered[target]
    if is_anchored(current, rules):
        return _rejected(ordered, f'"{current.type}" has a fixed position and cannot be moved.')
    if is_anchored(neighbour, rules):
        return _rejected(ordered, f'Cannot move past "{neighbour.type}", which has a fixed position.')

    ordered[index] = current.model_copy(update={"order": neighbour.order})
    ordered[target] = neighbour.model_copy(update={"order": current.order})
    return OrderingResult(
        applied=True,
        questions=sort_questions(ordered),
        changes=[
            OrderChange(id=current.id, order=neighbour.order),
            OrderChange(id=neighbour.id, order=current.order),
        ],
    )


def move_up(questions: Sequence[QuestionInstance], question_id: str, rules: FormRules) -> OrderingResult:
    return _swap(questions, question_id, -1, rules)


def move_down(questions: Sequence[QuestionInstance], question_id: str, rules: FormRules) -> OrderingResult:
    return _swap(questions, question_id, 1, rules)


def insert_after(
    questions: Sequence[QuestionInstance],
    after_order: int,
    new_question: QuestionInstance,
    rules: FormRules,
) -> OrderingResult:
    """Place ``new_question`` directly after the row at ``after_order``.

    ``after_order=0`` inserts at the top. Rows below the insertion point are
    shifted down by one; their changes are listed highest order first so a
    store with a unique (form, order) constraint never sees a collision.
    """
    ordered = sort_questions(questions)
    if not 0 <= after_order <= len(ordered):
        return _rejected(ordered, f"Insert position {after_order} is out of range.")

    by_order = {question.order: question for question in ordered}
    following = by_order.get(after_order + 1)
    if following is not None and is_pinned_in_place(following, rules):
        return _rejected(ordered, f'"{following.type}" must stay at position {following.order}.')
    preceding = by_order.get(after_order)
    if preceding is not None and preceding.type in rules.anchored_types:
        return _rejected(ordered, f'Questions cannot be added after "{preceding.type}".')
    pinned_at = rules.pinned_positions.get(new_question.type)
    if pinned_at is not None and pinned_at != after_order + 1:
        return _rejected(ordered, f'"{new_question.type}" can only be placed at position {pinned_at}.')

    changes = [
        OrderChange(id=question.id, order=question.order + 1)
        for question in reversed(ordered)
        if question.order > after_order
    ]
    shifted = {change.id: change.order for change in changes}
    result = [
        question.model_copy(update={"order": shifted[question.id]}) if question.id in shifted else question
        for question in ordered
    ]
    result.append(new_question.model_copy(update={"order": after_order + 1}))
    return OrderingResult(applied=True, questions=sort_questions(result), changes=changes)


def check_essential(question: QuestionInstance | str, action: str, rules: FormRules) -> None:
    if action not in ESSENTIAL_ACTIONS:
        raise ValueError(f"Unknown action: {action}")
    question_type = question if isinstance(question, str) else question.type
    if question_type not in rules.required_question_types:
        return
    if action == "delete" and question_type in rules.deletable_essential_types:
        return
    if action == "edit" and question_type in rules.editable_essential_types:
        return
    raise EssentialQuestionError(question_type, action)


def delete(
    questions: Sequence[QuestionInstance],
    question_id: str,
    rules: FormRules,
    authorized: bool = False,
) -> OrderingResult:
    ordered = sort_questions(questions)
    target = find_question(ordered, question_id)
    if not authorized:
        check_essential(target, "delete", rules)

    changes = [
        OrderChange(id=question.id, order=question.order - 1)
        for question in ordered
        if question.order > target.order
    ]
    shifted = {change.id: change.order for change in changes}
    result = [
        question.model_copy(update={"order": shifted.get(question.id, question.order)})
        for question in ordered
        if question.id != question_id
    ]
    return OrderingResult(applied=True, questions=result, changes=changes)


def assert_contiguous(questions: Iterable[QuestionInstance]) -> None:
    orders = sorted(question.order for question in questions)
    if orders != list(range(1, len(orders) + 1)):
        raise StructuralConstraintError(f"Question orders are not contiguous: {orders}")
