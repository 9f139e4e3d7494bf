"""Page break placement.

A break with ``break_index = k`` sits between the question at order ``k``
and the one at ``k + 1``. Valid indexes run from 1 up to, but excluding,
the order of the last regular question (anchored rows such as the submit
button never start a page of their own).
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from uuid import uuid4

from form_builder.core.errors import NotFoundError
from form_builder.models.schemas import BreakChange, PageBreak, PageBreakResult, QuestionInstance
from form_builder.services.ordering import is_pinned_in_place
from form_builder.services.question_catalog import FormRules


def sort_breaks(breaks: Iterable[PageBreak]) -> list[PageBreak]:
    return sorted(breaks, key=lambda page_break: page_break.break_index)


def last_regular_order(questions: Iterable[QuestionInstance], rules: FormRules) -> int:
    return max((q.order for q in questions if q.type not in rules.anchored_types), default=0)


def separates_pinned(questions: Iterable[QuestionInstance], break_index: int, rules: FormRules) -> bool:
    by_order = {question.order: question for question in questions}
    before, after = by_order.get(break_index), by_order.get(break_index + 1)
    if before is None or after is None:
        return False
    return is_pinned_in_place(before, rules) and is_pinned_in_place(after, rules)


def _rejected(breaks: Sequence[PageBreak], reason: str) -> PageBreakResult:
    return PageBreakResult(applied=False, reason=reason, page_breaks=sort_breaks(breaks))


def find_break(breaks: Sequence[PageBreak], break_id: str) -> PageBreak:
    for page_break in breaks:
        if page_break.id == break_id:
            return page_break
    raise NotFoundError(f"Page break {break_id} not found")


def add_break(
    questions: Sequence[QuestionInstance],
    breaks: Sequence[PageBreak],
    after_order: int,
    rules: FormRules,
    form_id: str,
    break_id: str | None = None,
) -> PageBreakResult:
    if after_order < 1:
        return _rejected(breaks, "A page break must follow a question.")
    if after_order >= last_regular_order(questions, rules):
        return _rejected(breaks, "A page break cannot be added after the last question.")
    if any(page_break.break_index == after_order for page_break in breaks):
        return _rejected(breaks, f"A page break already exists after question {after_order}.")
    if separates_pinned(questions, after_order, rules):
        return _rejected(breaks, "A page break cannot separate questions with fixed positions.")

    created = PageBreak(id=break_id or str(uuid4()), form_id=form_id, break_index=after_order)
    return PageBreakResult(applied=True, page_breaks=sort_breaks([*breaks, created]), created=created)


def move_break(
    questions: Sequence[QuestionInstance],
    breaks: Sequence[PageBreak],
    break_id: str,
    direction: str,
    rules: FormRules,
) -> PageBreakResult:
    if direction not in ("up", "down"):
        raise ValueError(f"Unknown direction: {direction}")
    target = find_break(breaks, break_id)
    new_index = target.break_index + (1 if direction == "down" else -1)

    if new_index < 1:
        return _rejected(breaks, "Page break is already after the first question.")
    if new_index >= last_regular_order(questions, rules):
        return _rejected(breaks, "Page break is already before the last question.")
    if any(other.id != break_id and other.break_index == new_index for other in breaks):
        return _rejected(breaks, "Page break would collide with another page break.")
    if separates_pinned(questions, new_index, rules):
        return _rejected(breaks, "A page break cannot separate questions with fixed positions.")

    moved = target.model_copy(update={"break_index": new_index})
    result = [moved if page_break.id == break_id else page_break for page_break in breaks]
    return PageBreakResult(
        applied=True,
        page_breaks=sort_breaks(result),
        changes=[BreakChange(id=break_id, break_index=new_index)],
    )


def delete_break(breaks: Sequence[PageBreak], break_id: str) -> PageBreakResult:
    removed = find_break(breaks, break_id)
    remaining = [page_break for page_break in breaks if page_break.id != break_id]
    return PageBreakResult(applied=True, page_breaks=sort_breaks(remaining), removed=removed)


def shift_for_insert(breaks: Sequence[PageBreak], after_order: int) -> PageBreakResult:
    """Keep breaks attached to their questions after an insert at ``after_order + 1``.

    A break directly after the anchor row moves with the new question, so the
    inserted question lands on the same page as the row it follows.
    """
    changes = [
        BreakChange(id=page_break.id, break_index=page_break.break_index + 1)
        for page_break in reversed(sort_breaks(breaks))
        if page_break.break_index >= after_order
    ]
    shifted = {change.id: change.break_index for change in changes}
    result = [
        page_break.model_copy(update={"break_index": shifted[page_break.id]}) if page_break.id in shifted else page_break
        for page_break in breaks
    ]
    return PageBreakResult(applied=True, page_breaks=sort_breaks(result), changes=changes)


def shift_for_delete(
    breaks: Sequence[PageBreak],
    deleted_order: int,
    questions: Sequence[QuestionInstance],
    rules: FormRules,
) -> PageBreakResult:
    """Re-index breaks after the question at ``deleted_order`` was removed.

    ``questions`` is the snapshot after the delete. Breaks that end up out of
    range or on top of an earlier break are dropped.
    """
    upper = last_regular_order(questions, rules)
    kept: list[PageBreak] = []
    dropped: list[PageBreak] = []
    changes: list[BreakChange] = []
    taken: set[int] = set()
    for page_break in sort_breaks(breaks):
        index = page_break.break_index - 1 if page_break.break_index >= deleted_order else page_break.break_index
        if index < 1 or index >= upper or index in taken:
            dropped.append(page_break)
            continue
        taken.add(index)
        if index != page_break.break_index:
            changes.append(BreakChange(id=page_break.id, break_index=index))
            page_break = page_break.model_copy(update={"break_index": index})
        kept.append(page_break)
    return PageBreakResult(applied=True, page_breaks=kept, changes=changes, dropped=dropped)


def validate_breaks(
    questions: Sequence[QuestionInstance],
    breaks: Sequence[PageBreak],
    rules: FormRules,
) -> list[PageBreak]:
    """Return the breaks that are out of range or duplicate an earlier index."""
    upper = last_regular_order(questions, rules)
    seen: set[int] = set()
    invalid = []
    for page_break in sort_breaks(breaks):
        if page_break.break_index >= upper or page_break.break_index in seen:
            invalid.append(page_break)
        seen.add(page_break.break_index)
    return invalid
