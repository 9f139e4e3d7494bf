"""Dependency conditions between setup questions.

Three shapes reach the builder for the same concept:

* canonical ``{"question_id": ..., "match_values": ...}``
* flat legacy ``{"dependsOn": "instalments", "showWhen": "two_always"}``
* nested legacy ``{"dependsOn": {"questionId": "instalments", "value": [...]}}``

All of them are turned into a single ``Condition`` when a spec is ingested,
so the visibility code only ever compares one shape.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from form_builder.models.schemas import Condition


def normalize_condition(raw: Any) -> Condition | None:
    if raw is None or raw == {} or raw == "":
        return None
    if isinstance(raw, Condition):
        return raw
    if not isinstance(raw, Mapping):
        raise TypeError(f"Unsupported condition shape: {raw!r}")

    if "question_id" in raw:
        return Condition(question_id=raw["question_id"], match_values=raw.get("match_values", ""))
    if "questionId" in raw:
        values = raw.get("value", raw.get("matchValues", ""))
        return Condition(question_id=raw["questionId"], match_values=values)

    depends_on = raw.get("dependsOn")
    if isinstance(depends_on, str):
        return Condition(question_id=depends_on, match_values=raw.get("showWhen", ""))
    if isinstance(depends_on, Mapping):
        return normalize_condition(depends_on)

    raise TypeError(f"Unsupported condition shape: {dict(raw)!r}")


def extract_condition(spec: Mapping[str, Any]) -> Condition | None:
    """Pull the dependency out of a raw setup-question mapping, whatever key it uses."""
    if spec.get("depends_on") is not None:
        return normalize_condition(spec["depends_on"])

    direct = spec.get("dependsOn")
    if isinstance(direct, Mapping):
        return normalize_condition(direct)
    if isinstance(direct, str):
        return normalize_condition({"dependsOn": direct, "showWhen": spec.get("showWhen", "")})

    wrapper = spec.get("conditional") or spec.get("conditional_display")
    return normalize_condition(wrapper)


def _matches(answer: Any, expected: str | tuple[str, ...]) -> bool:
    if isinstance(expected, tuple):
        return answer in expected
    return answer == expected


def is_visible(condition: Condition | None, answers: Mapping[str, Any]) -> bool:
    if condition is None:
        return True
    answer = answers.get(condition.question_id)
    if answer is None:
        return False
    if isinstance(answer, (list, tuple, set)):
        return any(_matches(item, condition.match_values) for item in answer)
    return _matches(answer, condition.match_values)
