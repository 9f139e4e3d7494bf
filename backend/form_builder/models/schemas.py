"""Pydantic schemas for engine data and API contracts."""

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class FormKind(str, Enum):
    lead = "lead"
    offer = "offer"


class SetupKind(str, Enum):
    radio = "radio"
    select = "select"
    text = "text"
    number = "number"
    multi_choice_select = "multiChoiceSelect"
    currency_options = "currencyOptions"
    file_upload = "fileUpload"
    option_list = "optionList"
    text_area = "textArea"


class Option(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: str
    label: str


class Condition(BaseModel):
    model_config = ConfigDict(frozen=True)

    question_id: str
    match_values: str | tuple[str, ...]

    @field_validator("match_values", mode="before")
    @classmethod
    def _freeze_list(cls, value: Any) -> Any:
        if isinstance(value, list):
            return tuple(value)
        return value


class CustomConfigLink(BaseModel):
    """Answer value that requires a structured sub-configuration."""

    model_config = ConfigDict(frozen=True)

    trigger_value: str
    config_key: str


_LEGACY_KINDS = {
    "text_area": "textArea",
    "file_upload": "fileUpload",
    "currency_options": "currencyOptions",
    "multi_choice_select": "multiChoiceSelect",
}


class SetupQuestionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    label: str = ""
    kind: SetupKind = SetupKind.select
    options: tuple[Option, ...] = ()
    required: bool = True
    depends_on: Condition | None = None
    placeholder: str | None = None
    repeating: bool = False
    block: int | None = None
    custom_config: CustomConfigLink | None = None

    @model_validator(mode="before")
    @classmethod
    def _normalize_legacy_condition(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        from form_builder.services.dependency import extract_condition  # circular at module level

        normalized = dict(data)
        raw = extract_condition(normalized)
        for legacy_key in ("dependsOn", "conditional", "conditional_display", "showWhen"):
            normalized.pop(legacy_key, None)
        if raw is not None:
            normalized["depends_on"] = raw
        for label_key in ("question", "question_text"):
            if label_key in normalized and "label" not in normalized:
                normalized["label"] = normalized.pop(label_key)
        for kind_key in ("type", "question_type"):
            if kind_key in normalized and "kind" not in normalized:
                kind = normalized.pop(kind_key)
                normalized["kind"] = _LEGACY_KINDS.get(kind, kind)
        return normalized


class QuestionInstance(BaseModel):
    id: str
    form_id: str
    type: str
    order: int = Field(ge=1)
    required: bool = False
    setup_config: dict[str, Any] = Field(default_factory=dict)
    ui_config: dict[str, Any] = Field(default_factory=dict)


class PageBreak(BaseModel):
    id: str
    form_id: str
    break_index: int = Field(ge=1)


class FormRecord(BaseModel):
    id: str
    kind: FormKind
    title: str | None = None


class ValidationResult(BaseModel):
    ok: bool
    reason: str | None = None

    @classmethod
    def success(cls) -> "ValidationResult":
        return cls(ok=True)

    @classmethod
    def failure(cls, reason: str) -> "ValidationResult":
        return cls(ok=False, reason=reason)


class CompiledQuestion(BaseModel):
    setup_config: dict[str, Any]
    ui_config: dict[str, Any]
    required_override: bool | None = None


class OrderChange(BaseModel):
    id: str
    order: int


class BreakChange(BaseModel):
    id: str
    break_index: int


class OrderingResult(BaseModel):
    applied: bool
    reason: str | None = None
    questions: list[QuestionInstance]
    changes: list[OrderChange] = Field(default_factory=list)


class PageBreakResult(BaseModel):
    applied: bool
    reason: str | None = None
    page_breaks: list[PageBreak]
    created: PageBreak | None = None
    removed: PageBreak | None = None
    dropped: list[PageBreak] = Field(default_factory=list)
    changes: list[BreakChange] = Field(default_factory=list)


# API contracts


class FormCreateRequest(BaseModel):
    kind: FormKind
    title: str | None = None


class FormStateResponse(BaseModel):
    form: FormRecord
    questions: list[QuestionInstance]
    page_breaks: list[PageBreak]


class CatalogEntry(BaseModel):
    type: str
    label: str
    description: str
    has_setup: bool
    essential: bool


class SetupPlanRequest(BaseModel):
    answers: dict[str, Any] = Field(default_factory=dict)


class SetupPlanResponse(BaseModel):
    visible: list[SetupQuestionSpec]
    validation: ValidationResult


class AddQuestionRequest(BaseModel):
    type: str = Field(min_length=1, max_length=80)
    after_order: int = Field(ge=0)
    answers: dict[str, Any] = Field(default_factory=dict)
    ui_config: dict[str, Any] = Field(default_factory=dict)


class EditSetupRequest(BaseModel):
    answers: dict[str, Any] = Field(default_factory=dict)


class RequiredUpdate(BaseModel):
    required: bool


class MoveRequest(BaseModel):
    direction: Literal["up", "down"]


class PageBreakCreateRequest(BaseModel):
    after_order: int = Field(ge=1)
