"""Setup answer state for a question being added or edited.

Every change to the answers goes through ``reduce``, which always starts
from the current state. ``SetupSession`` wraps it for the API layer and
exposes ``commit()`` as the single way to turn answers into a compiled
question.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any, Union

from form_builder.core.errors import ValidationError
from form_builder.models.schemas import CompiledQuestion, FormKind, SetupKind, SetupQuestionSpec, ValidationResult
from form_builder.services.compiler import compile_question
from form_builder.services.question_catalog import currency_codes, registry_for
from form_builder.services.setup_validator import validate
from form_builder.services.visibility import MAX_CONDITION_BLOCKS, plan, plan_default


@dataclass(frozen=True)
class SetupState:
    type_id: str
    mode: str
    answers: dict[str, Any]
    specs: tuple[SetupQuestionSpec, ...] = ()


@dataclass(frozen=True)
class SetAnswer:
    question_id: str
    value: Any


@dataclass(frozen=True)
class RemoveFile:
    question_id: str
    file_ref: str


@dataclass(frozen=True)
class SetCustomConfig:
    config_key: str
    config: Mapping[str, Any]


@dataclass(frozen=True)
class ResetAnswers:
    answers: Mapping[str, Any] = field(default_factory=dict)


Action = Union[SetAnswer, RemoveFile, SetCustomConfig, ResetAnswers]


def _file_key(item: Any) -> Any:
    if isinstance(item, Mapping):
        return item.get("id") or item.get("url") or item.get("path")
    return item


def _currency_children(specs: tuple[SetupQuestionSpec, ...], stipulation_id: str) -> list[str]:
    return [
        spec.id
        for spec in specs
        if spec.kind == SetupKind.currency_options
        and spec.depends_on is not None
        and spec.depends_on.question_id == stipulation_id
    ]


def _prune_hidden(specs: tuple[SetupQuestionSpec, ...], answers: dict[str, Any]) -> dict[str, Any]:
    visible = plan_default(specs, answers)
    visible_ids = {spec.id for spec in visible}
    pruned = {
        key: value
        for key, value in answers.items()
        if key in visible_ids or not any(spec.id == key and not spec.repeating for spec in specs)
    }
    # drop a custom sub-configuration once no visible answer triggers it
    for spec in specs:
        link = spec.custom_config
        if link is None or link.config_key not in pruned:
            continue
        still_used = any(
            other.custom_config is not None
            and other.custom_config.config_key == link.config_key
            and pruned.get(other.id) == other.custom_config.trigger_value
            for other in visible
        )
        if not still_used:
            pruned.pop(link.config_key)
    return pruned


def reduce(state: SetupState, action: Action) -> SetupState:
    answers = dict(state.answers)
    if isinstance(action, SetAnswer):
        previous = answers.get(action.question_id)
        answers[action.question_id] = action.value
        if previous != action.value:
            for child_id in _currency_children(state.specs, action.question_id):
                answers.pop(child_id, None)
    elif isinstance(action, RemoveFile):
        files = answers.get(action.question_id) or []
        answers[action.question_id] = [item for item in files if _file_key(item) != action.file_ref]
    elif isinstance(action, SetCustomConfig):
        answers[action.config_key] = dict(action.config)
    elif isinstance(action, ResetAnswers):
        answers = dict(action.answers)
    else:
        raise TypeError(f"Unsupported setup action: {action!r}")
    return replace(state, answers=_prune_hidden(state.specs, answers))


def initial_state(
    type_id: str,
    mode: str = "add",
    setup_config: Mapping[str, Any] | None = None,
    specs: tuple[SetupQuestionSpec, ...] = (),
) -> SetupState:
    answers = dict(setup_config or {})
    if isinstance(answers.get("currency_options"), str):
        answers["currency_options"] = currency_codes(answers["currency_options"])
    return SetupState(type_id=type_id, mode=mode, answers=answers, specs=tuple(specs))


class SetupSession:
    def __init__(
        self,
        type_id: str,
        kind: FormKind | str,
        mode: str = "add",
        setup_config: Mapping[str, Any] | None = None,
        max_blocks: int = MAX_CONDITION_BLOCKS,
    ) -> None:
        definition = registry_for(kind).get(type_id)
        self.kind = FormKind(kind)
        self.max_blocks = max_blocks
        self.state = initial_state(type_id, mode, setup_config, definition.setup_questions)
        self._committed: CompiledQuestion | None = None

    @property
    def answers(self) -> dict[str, Any]:
        return dict(self.state.answers)

    def dispatch(self, action: Action) -> SetupState:
        self.state = reduce(self.state, action)
        return self.state

    def visible(self) -> list[SetupQuestionSpec]:
        return plan(self.state.specs, self.state.answers, self.state.type_id, self.max_blocks)

    def validation(self) -> ValidationResult:
        return validate(self.visible(), self.state.answers, self.state.type_id)

    def commit(self) -> CompiledQuestion:
        if self._committed is not None:
            raise ValidationError("This setup has already been saved.")
        result = self.validation()
        if not result.ok:
            raise ValidationError(result.reason)
        self._committed = compile_question(self.state.type_id, self.state.answers, self.kind)
        return self._committed
