"""Validate a setup answer map against the currently visible plan.

Rules run in a fixed order and the first failure is reported, mirroring the
single inline error the builder shows under the setup form.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping, Sequence
from itertools import groupby
from typing import Any

from form_builder.models.schemas import SetupKind, SetupQuestionSpec, ValidationResult
from form_builder.services.question_catalog import CURRENCY_OPTIONS_MODE, currency_codes, split_option_list
from form_builder.services.visibility import config_is_filled, has_value

Rule = Callable[[Sequence[SetupQuestionSpec], Mapping[str, Any]], "str | None"]

CURRENCY_OPTIONS_REASON = "Please select at least 2 currencies for the currency options mode."
CUSTOM_CONFIG_REASON = "Please complete the custom due date configuration."
OPTION_LIST_REASON = "Please provide at least 2 options for the list."

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def _display_label(spec: SetupQuestionSpec) -> str:
    return spec.label.rstrip(":?").strip() or spec.id


def required_answers(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    for spec in plan:
        if spec.kind == SetupKind.currency_options or not spec.required:
            continue
        if not has_value(answers.get(spec.id)):
            return f'Please answer "{_display_label(spec)}".'
    return None


def currency_option_counts(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    for spec in plan:
        if answers.get(spec.id) != CURRENCY_OPTIONS_MODE:
            continue
        slots = [
            child.id
            for child in plan
            if child.kind == SetupKind.currency_options
            and child.depends_on is not None
            and child.depends_on.question_id == spec.id
        ]
        if not slots:
            continue
        selected = set(currency_codes([answers.get(slot) for slot in slots]))
        if len(selected) < 2:
            return CURRENCY_OPTIONS_REASON
    return None


def custom_configs(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    for spec in plan:
        link = spec.custom_config
        if link is None or answers.get(spec.id) != link.trigger_value:
            continue
        if not config_is_filled(answers.get(link.config_key)):
            return CUSTOM_CONFIG_REASON
    return None


def block_names(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    # The planner reveals every block holding answers, so gaps show up here
    blocks = [
        (number, list(group))
        for number, group in groupby((spec for spec in plan if spec.block is not None), key=lambda spec: spec.block)
    ]
    last_declared = max(
        (number for number, fields in blocks if any(has_value(answers.get(spec.id)) for spec in fields)),
        default=1,
    )
    for number, fields in blocks:
        gate = fields[0]
        if number <= last_declared and not has_value(answers.get(gate.id)):
            return f'Please fill in "{_display_label(gate)}".'
    return None


def option_lists(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    for spec in plan:
        if spec.kind != SetupKind.option_list:
            continue
        if len(split_option_list(answers.get(spec.id))) < 2:
            return OPTION_LIST_REASON
    return None


RULES: tuple[Rule, ...] = (
    required_answers,
    currency_option_counts,
    custom_configs,
    block_names,
    option_lists,
)


def _finance_emails(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    for spec in plan:
        if not spec.id.endswith("Email"):
            continue
        value = answers.get(spec.id)
        if has_value(value) and not EMAIL_RE.match(str(value).strip()):
            return f"{_display_label(spec)} must be a valid email address."
    return None


def _deposit_percentages(plan: Sequence[SetupQuestionSpec], answers: Mapping[str, Any]) -> str | None:
    for spec in plan:
        if not spec.id.startswith("fixed_deposit_percentage") or not has_value(answers.get(spec.id)):
            continue
        try:
            percentage = float(answers[spec.id])
        except (TypeError, ValueError):
            return "Deposit percentage must be a number."
        if not 0 < percentage <= 100:
            return "Deposit percentage must be between 0 and 100."
    return None


TYPE_RULES: dict[str, tuple[Rule, ...]] = {
    "captureFinanceLeads": (_finance_emails,),
    "deposit": (_deposit_percentages,),
}


def validate(
    plan: Sequence[SetupQuestionSpec],
    answers: Mapping[str, Any],
    type_id: str | None = None,
) -> ValidationResult:
    for rule in RULES + TYPE_RULES.get(type_id or "", ()):
        reason = rule(plan, answers)
        if reason:
            return ValidationResult.failure(reason)
    return ValidationResult.success()
