"""Compile a validated setup into stored setup config and UI config."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import Any

from form_builder.models.schemas import CompiledQuestion, FormKind
from form_builder.services.question_catalog import currency_codes, registry_for

RequiredRule = Callable[[Mapping[str, Any]], "bool | None"]


def _by_answer(key: str, required: set[str], optional: set[str]) -> RequiredRule:
    def rule(config: Mapping[str, Any]) -> bool | None:
        value = config.get(key)
        if value in required:
            return True
        if value in optional:
            return False
        return None

    return rule


def _loan_approval(config: Mapping[str, Any]) -> bool | None:
    if config.get("lender_details") == "required" or config.get("attachments") == "required":
        return True
    if config.get("lender_details") == "not_required" and config.get("attachments") == "not_required":
        return False
    return None


def _custom_statement(config: Mapping[str, Any]) -> bool | None:
    if config.get("answer_type") != "statement":
        return None
    return _by_answer("add_tickbox", {"required"}, {"optional", "no"})(config)


REQUIRED_OVERRIDE_RULES: dict[str, RequiredRule] = {
    "nameOfPurchaser": _by_answer("collect_identification", {"mandatory"}, {"optional", "no"}),
    "subjectToLoanApproval": _loan_approval,
    "evidenceOfFunds": _by_answer("evidence_of_funds", {"required"}, {"optional", "not_required"}),
    "offerExpiry": _by_answer("expiry_requirement", {"required"}, {"optional"}),
    "attachPurchaseAgreement": _by_answer("contract_requirement", {"required"}, {"optional"}),
    "custom": _custom_statement,
}


def required_from_setup(type_id: str, setup_config: Mapping[str, Any]) -> bool | None:
    rule = REQUIRED_OVERRIDE_RULES.get(type_id)
    return rule(setup_config) if rule else None


def clean_setup_config(answers: Mapping[str, Any]) -> dict[str, Any]:
    """Copy the answers, dropping empty currency codes from option lists."""
    config = dict(answers)
    for key, value in answers.items():
        if not key.startswith("currency_options"):
            continue
        # single-slot selects keep their scalar value; legacy comma strings become lists
        if isinstance(value, (list, tuple)) or (key == "currency_options" and isinstance(value, str)):
            config[key] = currency_codes(value)
    return config


def compile_question(
    type_id: str,
    answers: Mapping[str, Any],
    kind: FormKind | str = FormKind.offer,
) -> CompiledQuestion:
    definition = registry_for(kind).get(type_id)
    setup_config = clean_setup_config(answers)
    return CompiledQuestion(
        setup_config=setup_config,
        ui_config=definition.properties(setup_config),
        required_override=required_from_setup(type_id, setup_config),
    )


def _sync_loan_approval(config: dict[str, Any], required: bool) -> None:
    if required:
        if config.get("lender_details") == "not_required" and config.get("attachments") == "not_required":
            config["lender_details"] = "required"
            return
        for key in ("lender_details", "attachments"):
            if config.get(key) == "optional":
                config[key] = "required"
    else:
        for key in ("lender_details", "attachments"):
            if config.get(key) == "required":
                config[key] = "optional"


def sync_setup_config_from_required(type_id: str, setup_config: Mapping[str, Any], required: bool) -> dict[str, Any]:
    """Reflect a toggled required checkbox back into the setup answers.

    Explicit opt-outs ("no", "not_required") are left alone.
    """
    config = dict(setup_config)
    if type_id == "offerExpiry":
        config["expiry_requirement"] = "required" if required else "optional"
    elif type_id == "attachPurchaseAgreement":
        config["contract_requirement"] = "required" if required else "optional"
    elif type_id == "nameOfPurchaser":
        if config.get("collect_identification") in ("mandatory", "optional"):
            config["collect_identification"] = "mandatory" if required else "optional"
    elif type_id == "subjectToLoanApproval":
        _sync_loan_approval(config, required)
    elif type_id == "evidenceOfFunds":
        if config.get("evidence_of_funds") in ("required", "optional"):
            config["evidence_of_funds"] = "required" if required else "optional"
    elif type_id == "custom" and config.get("answer_type") == "statement":
        if not required and config.get("add_tickbox") == "required":
            config["add_tickbox"] = "optional"
        elif required and config.get("add_tickbox") == "optional":
            config["add_tickbox"] = "required"
    return config
