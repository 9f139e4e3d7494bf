from form_builder.models.schemas import FormKind, SetupQuestionSpec
from form_builder.services.compiler import compile_question
from form_builder.services.question_catalog import registry_for
from form_builder.services.setup_validator import CURRENCY_OPTIONS_REASON, validate
from form_builder.services.visibility import plan


def _check(kind, type_id, answers):
    specs = registry_for(kind).get(type_id).setup_questions
    return validate(plan(specs, answers, type_id), answers, type_id)


def _currency_specs():
    return [
        SetupQuestionSpec.model_validate({"id": "stip", "dependsOn": None}),
        SetupQuestionSpec.model_validate(
            {
                "id": "opt1",
                "type": "currencyOptions",
                "dependsOn": {"questionId": "stip", "matchValues": "options"},
            }
        ),
    ]


def test_invisible_question_is_not_required():
    specs = _currency_specs()
    answers = {"stip": "fixed"}
    assert validate(plan(specs, answers), answers).ok


def test_single_currency_in_options_mode_is_rejected():
    specs = _currency_specs()
    answers = {"stip": "options", "opt1": "USD"}
    result = validate(plan(specs, answers), answers)
    assert not result.ok
    assert "at least 2 currencies" in result.reason


def test_missing_required_answer_is_reported():
    result = _check(FormKind.offer, "subjectToLoanApproval", {"lender_details": "required"})
    assert not result.ok
    assert "supporting documents" in result.reason


def test_offer_amount_currency_options_count_distinct_codes():
    base = {"currency_mode": "options"}
    assert _check(FormKind.offer, "offerAmount", {**base, "currency_options": ["USD", "USD", ""]}).reason == (
        CURRENCY_OPTIONS_REASON
    )
    assert _check(FormKind.offer, "offerAmount", {**base, "currency_options": "USD, EUR"}).ok
    assert _check(FormKind.offer, "offerAmount", {**base, "currency_options": [{"value": "USD"}, {"code": "GBP"}]}).ok


def test_deposit_slots_count_across_the_stipulation():
    answers = {
        "instalments": "single",
        "deposit_management": "buyer_enters",
        "currency_stipulation": "options",
        "currency_options_1": "USD",
        "currency_options_3": "AUD",
        "deposit_due": "immediately",
        "deposit_holding": "buyer_input",
    }
    assert _check(FormKind.offer, "deposit", answers).ok

    answers["currency_options_3"] = ""
    assert _check(FormKind.offer, "deposit", answers).reason == CURRENCY_OPTIONS_REASON


def test_custom_due_date_requires_a_filled_configuration():
    answers = {"lender_details": "optional", "attachments": "optional", "due_date_management": "custom"}
    result = _check(FormKind.offer, "subjectToLoanApproval", answers)
    assert not result.ok
    assert "custom due date" in result.reason

    answers["loan_due_date_config"] = {"timeConstraint": [], "number": []}
    assert not _check(FormKind.offer, "subjectToLoanApproval", answers).ok

    answers["loan_due_date_config"] = {"timeConstraint": ["within"], "number": [5]}
    assert _check(FormKind.offer, "subjectToLoanApproval", answers).ok


def test_settlement_date_create_your_own_requires_configuration():
    answers = {"due_date_management": "CYO"}
    assert not _check(FormKind.offer, "settlementDate", answers).ok
    answers["settlement_date_config"] = {"action": ["settle"]}
    assert _check(FormKind.offer, "settlementDate", answers).ok


def test_special_conditions_require_first_block_name():
    result = _check(FormKind.offer, "specialConditions", {"allow_custom_conditions": "yes"})
    assert not result.ok
    assert "Name for Condition 1" in result.reason


def test_special_conditions_allow_open_trailing_block():
    answers = {"allow_custom_conditions": "yes", "condition_1_name": "Finance"}
    assert _check(FormKind.offer, "specialConditions", answers).ok


def test_special_conditions_block_with_details_needs_a_name():
    answers = {
        "allow_custom_conditions": "yes",
        "condition_1_name": "Finance",
        "condition_2_details": "Bank approval within 14 days",
    }
    result = _check(FormKind.offer, "specialConditions", answers)
    assert not result.ok
    assert "Condition 2" in result.reason


def test_special_conditions_block_past_an_empty_block_is_not_dropped():
    answers = {
        "allow_custom_conditions": "yes",
        "condition_1_name": "Finance",
        "condition_3_details": "Settlement subject to sale of existing home",
        "condition_3_attachments": ["f1"],
    }
    result = _check(FormKind.offer, "specialConditions", answers)
    assert not result.ok
    assert "Condition 2" in result.reason

    answers["condition_2_name"] = "Inspection"
    result = _check(FormKind.offer, "specialConditions", answers)
    assert not result.ok
    assert "Condition 3" in result.reason

    answers["condition_3_name"] = "Sale of home"
    assert _check(FormKind.offer, "specialConditions", answers).ok
    compiled = compile_question("specialConditions", answers)
    assert [condition["id"] for condition in compiled.ui_config["conditions"]] == [
        "condition_1",
        "condition_2",
        "condition_3",
    ]


def test_option_list_needs_two_entries():
    answers = {"answer_type": "single_select", "question_text": "Pick one", "select_options": "Only one"}
    result = _check(FormKind.offer, "custom", answers)
    assert not result.ok
    assert "at least 2 options" in result.reason

    answers["select_options"] = "Red, Green , "
    assert _check(FormKind.offer, "custom", answers).ok


def test_finance_lead_email_is_checked():
    answers = {"financeSetup": "referralPartner", "referralPartnerEmail": "not-an-email"}
    result = _check(FormKind.lead, "captureFinanceLeads", answers)
    assert not result.ok
    assert "valid email" in result.reason

    answers["referralPartnerEmail"] = "partner@example.com"
    assert _check(FormKind.lead, "captureFinanceLeads", answers).ok


def test_deposit_percentage_must_be_in_range():
    answers = {
        "instalments": "single",
        "deposit_management": "fixed_percentage",
        "fixed_deposit_percentage": 150,
        "deposit_due": "immediately",
        "deposit_holding": "not_ascertain",
    }
    assert "between 0 and 100" in _check(FormKind.offer, "deposit", answers).reason
    answers["fixed_deposit_percentage"] = "10"
    assert _check(FormKind.offer, "deposit", answers).ok


def test_complete_answers_validate_for_every_smart_question():
    complete = {
        "nameOfPurchaser": {"collection_method": "individual_names", "collect_middle_names": "no", "collect_identification": "optional"},
        "offerExpiry": {"expiry_requirement": "required"},
        "evidenceOfFunds": {"evidence_of_funds": "optional"},
        "attachPurchaseAgreement": {"contract_requirement": "optional"},
        "messageToAgent": {"allow_attachments": "yes"},
        "settlementDate": {"due_date_management": "seller_text", "seller_due_date_text": "30 days after approval"},
        "subjectToLoanApproval": {
            "lender_details": "optional",
            "attachments": "required",
            "due_date_management": "custom",
            "loan_due_date_config": {"number": [14], "timeUnit": ["days"], "trigger": ["acceptance"]},
        },
        "deposit": {
            "instalments": "two_always",
            "deposit_management_instalment_1": "fixed_percentage",
            "fixed_deposit_percentage_instalment_1": 10,
            "deposit_due_instalment_1": "immediately",
            "deposit_holding_instalment_1": "not_ascertain",
            "deposit_management_instalment_2": "fixed_amount",
            "fixed_deposit_amount_instalment_2": "5000",
            "fixed_deposit_currency_instalment_2": "AUD",
            "deposit_due_instalment_2": "custom",
            "due_date_config": {"number": [30], "timeUnit": ["days"]},
            "deposit_holding_instalment_2": "stipulate",
            "deposit_holding_details_instalment_2": "Agent trust account",
        },
    }
    for type_id, answers in complete.items():
        assert _check(FormKind.offer, type_id, answers).ok, type_id
