import pytest

from form_builder.core.errors import UnknownQuestionTypeError
from form_builder.models.schemas import FormKind
from form_builder.services.compiler import (
    compile_question,
    required_from_setup,
    sync_setup_config_from_required,
)


@pytest.mark.parametrize(
    ("type_id", "config", "expected"),
    [
        ("nameOfPurchaser", {"collect_identification": "mandatory"}, True),
        ("nameOfPurchaser", {"collect_identification": "optional"}, False),
        ("nameOfPurchaser", {"collect_identification": "no"}, False),
        ("subjectToLoanApproval", {"lender_details": "optional", "attachments": "required"}, True),
        ("subjectToLoanApproval", {"lender_details": "not_required", "attachments": "not_required"}, False),
        ("subjectToLoanApproval", {"lender_details": "optional", "attachments": "not_required"}, None),
        ("evidenceOfFunds", {"evidence_of_funds": "required"}, True),
        ("evidenceOfFunds", {"evidence_of_funds": "not_required"}, False),
        ("offerExpiry", {"expiry_requirement": "optional"}, False),
        ("attachPurchaseAgreement", {"contract_requirement": "required"}, True),
        ("custom", {"answer_type": "statement", "add_tickbox": "required"}, True),
        ("custom", {"answer_type": "statement", "add_tickbox": "no"}, False),
        ("custom", {"answer_type": "short_text"}, None),
        ("messageToAgent", {"allow_attachments": "yes"}, None),
    ],
)
def test_required_override_table(type_id, config, expected):
    assert required_from_setup(type_id, config) is expected


def test_custom_question_text_becomes_label():
    compiled = compile_question("custom", {"answer_type": "long_text", "question_text": "Anything else?"})
    assert compiled.ui_config["label"] == "Anything else?"
    assert compiled.required_override is None


def test_custom_statement_keeps_statement_text_and_tickbox():
    answers = {
        "answer_type": "statement",
        "question_text": "I have read the disclosure.",
        "add_tickbox": "required",
        "tickbox_text": "I agree",
    }
    compiled = compile_question("custom", answers, FormKind.lead)
    assert compiled.ui_config["statement"] == "I have read the disclosure."
    assert compiled.ui_config["tickbox_text"] == "I agree"
    assert compiled.required_override is True


def test_currency_option_lists_drop_empty_codes():
    answers = {"currency_mode": "options", "currency_options": ["USD", "", "EUR", None]}
    compiled = compile_question("offerAmount", answers)
    assert compiled.setup_config["currency_options"] == ["USD", "EUR"]
    assert compiled.ui_config["currency"] == {"mode": "options", "currencies": ["USD", "EUR"]}


def test_legacy_comma_separated_currency_options_become_a_list():
    compiled = compile_question("offerAmount", {"currency_mode": "options", "currency_options": "USD, NZD"})
    assert compiled.setup_config["currency_options"] == ["USD", "NZD"]


def test_deposit_two_instalments_compile_per_instalment():
    answers = {
        "instalments": "two_always",
        "deposit_management_instalment_1": "buyer_enters",
        "currency_stipulation_instalment_1": "options",
        "currency_options_1_instalment_1": "USD",
        "currency_options_2_instalment_1": "EUR",
        "deposit_due_instalment_1": "custom",
        "due_date_config": {"number": [3], "timeUnit": ["days"]},
        "deposit_holding_instalment_1": "stipulate",
        "deposit_holding_details_instalment_1": "Agent trust account",
        "deposit_management_instalment_2": "fixed_percentage",
        "fixed_deposit_percentage_instalment_2": 5,
        "deposit_due_instalment_2": "within_time",
        "deposit_holding_instalment_2": "buyer_input",
    }
    ui = compile_question("deposit", answers).ui_config
    first, second = ui["instalments"]
    assert first["currency"] == {"mode": "options", "currencies": ["USD", "EUR"]}
    assert first["due_config"] == {"number": [3], "timeUnit": ["days"]}
    assert first["holding_details"] == "Agent trust account"
    assert second["fixed_percentage"] == 5
    assert "currency" not in second
    # single-slot answers are stored as given
    assert compile_question("deposit", answers).setup_config["currency_options_1_instalment_1"] == "USD"


def test_special_conditions_compile_named_blocks():
    answers = {
        "allow_custom_conditions": "yes",
        "condition_1_name": "Finance",
        "condition_1_details": "Approval within 14 days",
        "condition_2_name": "Inspection",
        "condition_2_attachments": ["file-1"],
    }
    ui = compile_question("specialConditions", answers).ui_config
    assert ui["allow_custom_conditions"] is True
    assert [condition["name"] for condition in ui["conditions"]] == ["Finance", "Inspection"]
    assert ui["conditions"][1]["attachments"] == ["file-1"]


def test_unknown_type_raises_key_error():
    with pytest.raises(KeyError):
        compile_question("doesNotExist", {})
    with pytest.raises(UnknownQuestionTypeError):
        compile_question("specifyListing", {}, FormKind.lead)


def test_sync_toggles_requirement_fields():
    assert sync_setup_config_from_required("offerExpiry", {}, True) == {"expiry_requirement": "required"}
    assert sync_setup_config_from_required("attachPurchaseAgreement", {"contract_requirement": "required"}, False) == {
        "contract_requirement": "optional"
    }


def test_sync_leaves_explicit_opt_outs_alone():
    assert sync_setup_config_from_required("nameOfPurchaser", {"collect_identification": "no"}, True) == {
        "collect_identification": "no"
    }
    assert sync_setup_config_from_required("evidenceOfFunds", {"evidence_of_funds": "not_required"}, True) == {
        "evidence_of_funds": "not_required"
    }
    statement = {"answer_type": "statement", "add_tickbox": "no"}
    assert sync_setup_config_from_required("custom", statement, True) == statement


def test_sync_loan_approval_promotes_and_demotes():
    both_off = {"lender_details": "not_required", "attachments": "not_required"}
    assert sync_setup_config_from_required("subjectToLoanApproval", both_off, True)["lender_details"] == "required"

    optional = {"lender_details": "optional", "attachments": "optional"}
    assert sync_setup_config_from_required("subjectToLoanApproval", optional, True) == {
        "lender_details": "required",
        "attachments": "required",
    }

    required = {"lender_details": "required", "attachments": "not_required"}
    assert sync_setup_config_from_required("subjectToLoanApproval", required, False) == {
        "lender_details": "optional",
        "attachments": "not_required",
    }


def test_sync_round_trips_through_required_override():
    config = sync_setup_config_from_required("nameOfPurchaser", {"collect_identification": "optional"}, True)
    assert required_from_setup("nameOfPurchaser", config) is True
