"""Resolve which setup sub-questions are shown for a partial answer map."""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from functools import partial
from typing import Any

from form_builder.models.schemas import SetupKind, SetupQuestionSpec
from form_builder.services.dependency import is_visible
from form_builder.services.question_catalog import (
    BLOCK_PLACEHOLDER,
    DUE_DATE_CONFIG_DIMENSIONS,
    INSTALMENT_SUFFIXES,
    MAX_CONDITION_BLOCKS,
    currency_codes,
)

Planner = Callable[..., list[SetupQuestionSpec]]


def has_value(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return bool(value)
    return True


def config_is_filled(config: Any) -> bool:
    if not isinstance(config, Mapping):
        return False
    return any(isinstance(config.get(key), list) and config.get(key) for key in DUE_DATE_CONFIG_DIMENSIONS)


def block_field_id(template_id: str, number: int) -> str:
    return template_id.replace(BLOCK_PLACEHOLDER, str(number))


def _block_specs(templates: Sequence[SetupQuestionSpec], number: int, gate_required: bool) -> list[SetupQuestionSpec]:
    specs = []
    for position, template in enumerate(templates):
        update: dict[str, Any] = {
            "id": block_field_id(template.id, number),
            "label": template.label.replace(BLOCK_PLACEHOLDER, str(number)),
            "repeating": False,
            "block": number,
        }
        if position == 0:
            update["required"] = gate_required
        specs.append(template.model_copy(update=update))
    return specs


def expand_blocks(
    templates: Sequence[SetupQuestionSpec],
    answers: Mapping[str, Any],
    max_blocks: int = MAX_CONDITION_BLOCKS,
) -> list[SetupQuestionSpec]:
    """Materialize a repeating block run.

    Block 1 is always shown; block ``k + 1`` appears once block ``k`` has its
    first (gate) field filled. Blocks holding answers are shown even past that
    point, and every block up to the last one with content needs its gate
    field. A trailing block with nothing in it is an open slot.
    """
    gate = templates[0]
    last_declared = last_declared_block(templates, answers, max_blocks)
    expanded: list[SetupQuestionSpec] = []
    for number in range(1, max_blocks + 1):
        revealed = number == 1 or has_value(answers.get(block_field_id(gate.id, number - 1)))
        if not revealed and number > last_declared:
            break
        expanded.extend(_block_specs(templates, number, gate_required=number <= max(1, last_declared)))
    return expanded


def last_declared_block(
    templates: Sequence[SetupQuestionSpec],
    answers: Mapping[str, Any],
    max_blocks: int = MAX_CONDITION_BLOCKS,
) -> int:
    last = 0
    for number in range(1, max_blocks + 1):
        if any(has_value(answers.get(block_field_id(t.id, number))) for t in templates):
            last = number
    return last


def _parent_shown(spec: SetupQuestionSpec, declared: set[str], shown: set[str]) -> bool:
    if spec.depends_on is None:
        return True
    parent = spec.depends_on.question_id
    return parent not in declared or parent in shown


def plan_default(
    specs: Sequence[SetupQuestionSpec],
    answers: Mapping[str, Any],
    *,
    gate_question: str | None = None,
    max_blocks: int = MAX_CONDITION_BLOCKS,
) -> list[SetupQuestionSpec]:
    declared = {spec.id for spec in specs}
    shown: set[str] = set()
    planned: list[SetupQuestionSpec] = []

    def emit(spec: SetupQuestionSpec) -> None:
        if spec.id in shown:
            return
        shown.add(spec.id)
        planned.append(spec)

    index = 0
    while index < len(specs):
        spec = specs[index]
        if spec.repeating:
            run_end = index
            while run_end < len(specs) and specs[run_end].repeating:
                run_end += 1
            if is_visible(spec.depends_on, answers) and _parent_shown(spec, declared, shown):
                for block_spec in expand_blocks(specs[index:run_end], answers, max_blocks):
                    emit(block_spec)
            index = run_end
            continue

        if is_visible(spec.depends_on, answers) and _parent_shown(spec, declared, shown):
            emit(spec)
            if spec.id == gate_question and not has_value(answers.get(spec.id)):
                break
        index += 1
    return planned


def _instalment_group(spec_id: str) -> int:
    for rank, suffix in enumerate(INSTALMENT_SUFFIXES[1:], 1):
        if spec_id.endswith(suffix):
            return rank
    return 0


def _is_answered(spec: SetupQuestionSpec, answers: Mapping[str, Any], visible: Sequence[SetupQuestionSpec]) -> bool:
    if spec.kind == SetupKind.currency_options and spec.depends_on is not None:
        siblings = [
            other
            for other in visible
            if other.kind == SetupKind.currency_options
            and other.depends_on is not None
            and other.depends_on.question_id == spec.depends_on.question_id
        ]
        selected = set(currency_codes([answers.get(other.id) for other in siblings]))
        return len(selected) >= 2 or has_value(answers.get(spec.id))

    value = answers.get(spec.id)
    if not has_value(value):
        return False
    if spec.custom_config is not None and value == spec.custom_config.trigger_value:
        return config_is_filled(answers.get(spec.custom_config.config_key))
    return True


def plan_instalments(
    specs: Sequence[SetupQuestionSpec],
    answers: Mapping[str, Any],
    *,
    max_blocks: int = MAX_CONDITION_BLOCKS,
) -> list[SetupQuestionSpec]:
    visible = plan_default(specs, answers, max_blocks=max_blocks)
    if answers.get("instalments") != "two_always":
        return visible

    # sorted() is stable, so declaration order holds inside each instalment
    grouped = sorted(visible, key=lambda spec: _instalment_group(spec.id))
    planned: list[SetupQuestionSpec] = []
    for spec in grouped:
        planned.append(spec)
        if not _is_answered(spec, answers, grouped):
            break
    return planned


PLANNERS: dict[str, Planner] = {
    "deposit": plan_instalments,
    "specialConditions": partial(plan_default, gate_question="allow_custom_conditions"),
}


def plan(
    specs: Sequence[SetupQuestionSpec],
    answers: Mapping[str, Any],
    type_id: str | None = None,
    max_blocks: int = MAX_CONDITION_BLOCKS,
) -> list[SetupQuestionSpec]:
    planner = PLANNERS.get(type_id or "", plan_default)
    return planner(specs, answers, max_blocks=max_blocks)
