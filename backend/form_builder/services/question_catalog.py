"""Question catalog for lead and offer forms.

Each question type carries its setup questions and the function that turns
a completed setup into the UI configuration rendered to submitters.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from form_builder.core.errors import UnknownQuestionTypeError
from form_builder.models.schemas import (
    Condition,
    CustomConfigLink,
    FormKind,
    Option,
    SetupKind,
    SetupQuestionSpec,
)

GenerateProperties = Callable[[Mapping[str, Any]], dict[str, Any]]

CURRENCY_CODES = ["USD", "EUR", "GBP", "CAD", "AUD", "NZD", "JPY", "CHF", "CNY", "SGD", "ZAR", "AED"]
CURRENCY_OPTIONS_MODE = "options"
CURRENCY_SLOT_COUNT = 5
INSTALMENT_SUFFIXES = ("", "_instalment_1", "_instalment_2")
DUE_DATE_CONFIG_DIMENSIONS = ("timeConstraint", "number", "timeUnit", "action", "trigger")
MAX_CONDITION_BLOCKS = 15
BLOCK_PLACEHOLDER = "{n}"


@dataclass(frozen=True)
class QuestionDefinition:
    type: str
    label: str
    description: str
    setup_questions: tuple[SetupQuestionSpec, ...] = ()
    generate_properties: GenerateProperties | None = None

    @property
    def has_setup(self) -> bool:
        return bool(self.setup_questions)

    def properties(self, answers: Mapping[str, Any]) -> dict[str, Any]:
        if self.generate_properties is None:
            return {"label": self.label}
        return self.generate_properties(answers)


@dataclass(frozen=True)
class FormRules:
    pinned_positions: Mapping[str, int]
    required_question_types: frozenset[str]
    anchored_types: frozenset[str] = frozenset({"submitButton"})
    # essential types that may still be deleted / edited without authorization
    deletable_essential_types: frozenset[str] = frozenset({"submitterRole"})
    editable_essential_types: frozenset[str] = frozenset()


@dataclass
class QuestionDefinitionRegistry:
    kind: FormKind
    definitions: dict[str, QuestionDefinition] = field(default_factory=dict)

    def get(self, type_id: str) -> QuestionDefinition:
        try:
            return self.definitions[type_id]
        except KeyError as exc:
            raise UnknownQuestionTypeError(type_id) from exc

    def __contains__(self, type_id: object) -> bool:
        return type_id in self.definitions

    def types(self) -> list[str]:
        return list(self.definitions)


def _options(*pairs: tuple[str, str]) -> tuple[Option, ...]:
    return tuple(Option(value=value, label=label) for value, label in pairs)


def _when(question_id: str, *values: str) -> Condition:
    return Condition(question_id=question_id, match_values=values[0] if len(values) == 1 else values)


YES_NO = _options(("yes", "Yes"), ("no", "No"))
REQUIREMENT = _options(("required", "Required"), ("optional", "Optional"), ("not_required", "Not required"))
CURRENCIES = tuple(Option(value=code, label=code) for code in CURRENCY_CODES)
STIPULATION = _options(
    ("any", "Let Buyer choose any Currency."),
    (CURRENCY_OPTIONS_MODE, "Give Buyer 2+ Currency options."),
    ("fixed", "Stipulate a Currency."),
)


def _simple(label: str, **extra: Any) -> GenerateProperties:
    def generate(_: Mapping[str, Any]) -> dict[str, Any]:
        return {"label": label, **extra}

    return generate


def currency_codes(value: Any) -> list[str]:
    """Flatten a currency answer (code, {value}, list of either) into codes."""
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Mapping):
        code = value.get("value") or value.get("code") or ""
        return [str(code).strip()] if str(code).strip() else []
    if isinstance(value, (list, tuple)):
        codes: list[str] = []
        for item in value:
            codes.extend(currency_codes(item))
        return codes
    return []


def _dedupe(values: list[str]) -> list[str]:
    seen: set[str] = set()
    unique: list[str] = []
    for value in values:
        if value in seen:
            continue
        seen.add(value)
        unique.append(value)
    return unique


def currency_field(stipulation: Any, options: list[str], fixed: Any) -> dict[str, Any]:
    if stipulation == CURRENCY_OPTIONS_MODE:
        return {"mode": CURRENCY_OPTIONS_MODE, "currencies": _dedupe(options)}
    if stipulation == "fixed":
        return {"mode": "fixed", "currency": fixed}
    return {"mode": "any"}


# Offer form


def _name_of_purchaser(answers: Mapping[str, Any]) -> dict[str, Any]:
    identification = answers.get("collect_identification")
    if answers.get("collection_method") == "individual_names":
        return {
            "label": "Which of the following best applies:",
            "placeholder": "Select option",
            "collection_method": "individual_names",
            "collect_middle_names": answers.get("collect_middle_names") == "yes",
            "collect_identification": identification,
        }
    return {
        "label": "Who is the Purchaser?",
        "placeholder": "Enter purchaser name",
        "collection_method": "single_field",
        "collect_identification": identification,
    }


def _offer_amount(answers: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "label": "What is your offer amount?",
        "placeholder": "Enter amount",
        "currency": currency_field(
            answers.get("currency_mode"),
            currency_codes(answers.get("currency_options")),
            answers.get("currency_fixed"),
        ),
    }


def _requirement(label: str, key: str) -> GenerateProperties:
    def generate(answers: Mapping[str, Any]) -> dict[str, Any]:
        return {"label": label, "requirement": answers.get(key)}

    return generate


def _deposit_instalment(answers: Mapping[str, Any], suffix: str, number: int) -> dict[str, Any]:
    management = answers.get(f"deposit_management{suffix}")
    slots = [answers.get(f"currency_options_{slot}{suffix}") for slot in range(1, CURRENCY_SLOT_COUNT + 1)]
    instalment: dict[str, Any] = {
        "instalment": number,
        "amount_mode": management,
        "due": answers.get(f"deposit_due{suffix}"),
        "holding": answers.get(f"deposit_holding{suffix}"),
    }
    if management == "fixed_amount":
        instalment["fixed_amount"] = answers.get(f"fixed_deposit_amount{suffix}")
        instalment["currency"] = {"mode": "fixed", "currency": answers.get(f"fixed_deposit_currency{suffix}")}
    elif management == "fixed_percentage":
        instalment["fixed_percentage"] = answers.get(f"fixed_deposit_percentage{suffix}")
    elif management in ("buyer_enters", "buyer_choice"):
        instalment["currency"] = currency_field(
            answers.get(f"currency_stipulation{suffix}"),
            currency_codes(slots),
            answers.get(f"stipulated_currency{suffix}"),
        )
    if instalment["due"] == "seller_text":
        instalment["due_text"] = answers.get(f"seller_due_date_text{suffix}")
    if instalment["due"] == "custom":
        instalment["due_config"] = answers.get("due_date_config")
    if instalment["holding"] == "stipulate":
        instalment["holding_details"] = answers.get(f"deposit_holding_details{suffix}")
    return instalment


def _deposit(answers: Mapping[str, Any]) -> dict[str, Any]:
    mode = answers.get("instalments")
    if mode == "two_always":
        instalments = [_deposit_instalment(answers, suffix, number) for number, suffix in enumerate(INSTALMENT_SUFFIXES[1:], 1)]
        choices: list[str] = []
    else:
        instalments = [_deposit_instalment(answers, "", 1)]
        choices = {"one_or_two": ["1", "2"], "three_plus": ["1", "2", "3"]}.get(mode, [])
    return {
        "label": "Deposit Details",
        "instalment_mode": mode,
        "instalment_choices": choices,
        "instalments": instalments,
    }


def _deposit_setup() -> tuple[SetupQuestionSpec, ...]:
    single_modes = ("single", "one_or_two", "three_plus")
    management = _options(
        ("buyer_enters", "Buyer enters an amount."),
        ("buyer_percentage", "Buyer enters a % of purchase price."),
        ("buyer_choice", "Buyer can choose between an amount or a percentage of purchase price."),
        ("fixed_amount", "Deposit is a fixed amount, decided by you."),
        ("fixed_percentage", "Deposit is a fixed percentage of purchase price, decided by you."),
    )
    due = _options(
        ("immediately", "Deposit is paid immediately upon Offer Acceptance."),
        ("calendar", "Buyer selects a due date with a calendar selector."),
        ("datetime", "Buyer sets a deadline time and date."),
        ("buyer_text", "Buyer provides a due date by writing into a text field."),
        ("seller_text", "You set the due date by writing into a text field."),
        ("within_time", "Within X days of Offer Acceptance."),
        ("custom", "Something else. (Customize your own.)"),
    )
    holding = _options(
        ("buyer_input", "Yes, let Buyer input where deposit will be held."),
        ("stipulate", "Stipulate where deposit is held."),
        ("not_ascertain", "Do not ascertain where deposit is held."),
    )

    def instalment_gate(suffix: str) -> Condition:
        return _when("instalments", *single_modes) if not suffix else _when("instalments", "two_always")

    def for_each(build: Callable[[str, str], SetupQuestionSpec]) -> list[SetupQuestionSpec]:
        return [build(suffix, f" for Instalment {suffix[-1]}" if suffix else "") for suffix in INSTALMENT_SUFFIXES]

    specs: list[SetupQuestionSpec] = [
        SetupQuestionSpec(
            id="instalments",
            label="How many instalments would you like deposits paid in?",
            kind=SetupKind.select,
            options=_options(
                ("single", "Buyer always pays deposit in one instalment."),
                ("two_always", "Buyer always pays deposit in two instalments."),
                ("one_or_two", "Allow Buyer to pay deposit in one or two instalments"),
                ("three_plus", "Allow 3 instalments"),
            ),
        )
    ]
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"deposit_management{s}", label=f"How would you like to manage the deposit amount{t}?",
        options=management, depends_on=instalment_gate(s),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"fixed_deposit_amount{s}", label=f"Deposit fixed amount{t}", kind=SetupKind.text,
        depends_on=_when(f"deposit_management{s}", "fixed_amount"),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"fixed_deposit_currency{s}", label=f"Currency{t}", options=CURRENCIES,
        depends_on=_when(f"deposit_management{s}", "fixed_amount"),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"fixed_deposit_percentage{s}", label=f"Deposit fixed percentage{t}", kind=SetupKind.number,
        depends_on=_when(f"deposit_management{s}", "fixed_percentage"),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"currency_stipulation{s}", label=f"Stipulate Currency{t}", options=STIPULATION,
        depends_on=_when(f"deposit_management{s}", "buyer_enters", "buyer_choice"),
    ))
    for suffix in INSTALMENT_SUFFIXES:
        specs += [
            SetupQuestionSpec(
                id=f"currency_options_{slot}{suffix}",
                label=f"Select Currency {slot}",
                kind=SetupKind.currency_options,
                options=CURRENCIES,
                required=False,
                depends_on=_when(f"currency_stipulation{suffix}", CURRENCY_OPTIONS_MODE),
            )
            for slot in range(1, CURRENCY_SLOT_COUNT + 1)
        ]
        specs.append(SetupQuestionSpec(
            id=f"stipulated_currency{suffix}", label="Stipulated Currency", options=CURRENCIES,
            depends_on=_when(f"currency_stipulation{suffix}", "fixed"),
        ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"deposit_due{s}", label=f"How would you like to manage your Deposit Due Date{t}?",
        options=due, depends_on=instalment_gate(s),
        custom_config=CustomConfigLink(trigger_value="custom", config_key="due_date_config"),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"seller_due_date_text{s}", label=f"Enter the deposit due date text{t}", kind=SetupKind.text,
        depends_on=_when(f"deposit_due{s}", "seller_text"),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"deposit_holding{s}", label=f"Stipulate where the deposit is held{t}?",
        options=holding, depends_on=instalment_gate(s),
    ))
    specs += for_each(lambda s, t: SetupQuestionSpec(
        id=f"deposit_holding_details{s}", label=f"Enter details about where the deposit is held{t}",
        kind=SetupKind.text, depends_on=_when(f"deposit_holding{s}", "stipulate"),
    ))
    return tuple(specs)


def _loan_approval(answers: Mapping[str, Any]) -> dict[str, Any]:
    properties = {
        "label": "Is this offer subject to loan approval?",
        "placeholder": "Select option",
        "lender_details": answers.get("lender_details"),
        "attachments": answers.get("attachments"),
        "due_date_management": answers.get("due_date_management"),
    }
    if answers.get("due_date_management") == "seller_text":
        properties["due_date_text"] = answers.get("seller_due_date_text")
    if answers.get("due_date_management") == "custom":
        properties["due_date_config"] = answers.get("loan_due_date_config")
    return properties


def _special_conditions(answers: Mapping[str, Any]) -> dict[str, Any]:
    conditions = []
    for number in range(1, MAX_CONDITION_BLOCKS + 1):
        name = answers.get(f"condition_{number}_name")
        if not name:
            break
        conditions.append({
            "id": f"condition_{number}",
            "name": name,
            "details": answers.get(f"condition_{number}_details") or "",
            "attachments": list(answers.get(f"condition_{number}_attachments") or []),
        })
    return {
        "label": "Special Conditions",
        "conditions": conditions,
        "allow_custom_conditions": answers.get("allow_custom_conditions") == "yes",
    }


def _settlement_date(answers: Mapping[str, Any]) -> dict[str, Any]:
    properties = {
        "label": "Settlement Date",
        "due_date_management": answers.get("due_date_management"),
    }
    if answers.get("due_date_management") == "seller_text":
        properties["due_date_text"] = answers.get("seller_due_date_text")
    if answers.get("due_date_management") == "CYO":
        properties["due_date_config"] = answers.get("settlement_date_config")
    return properties


def _message_to_agent(answers: Mapping[str, Any]) -> dict[str, Any]:
    return {
        "label": "Message to Listing Agent:",
        "placeholder": "Type message here...",
        "allow_attachments": answers.get("allow_attachments") == "yes",
    }


def split_option_list(value: Any) -> list[str]:
    if isinstance(value, str):
        parts = value.split(",")
    elif isinstance(value, (list, tuple)):
        parts = [str(item) for item in value if item is not None]
    else:
        return []
    return [part.strip() for part in parts if part.strip()]


def _custom(answers: Mapping[str, Any]) -> dict[str, Any]:
    answer_type = answers.get("answer_type")
    properties: dict[str, Any] = {"answer_type": answer_type}
    if answer_type == "statement":
        properties["label"] = "Statement"
        properties["statement"] = answers.get("question_text")
        if answers.get("add_tickbox") in ("required", "optional"):
            properties["tickbox_text"] = answers.get("tickbox_text")
    else:
        properties["label"] = answers.get("question_text") or "Custom"
    if answer_type in ("single_select", "multi_select"):
        properties["options"] = split_option_list(answers.get("select_options"))
    if answer_type == "number_amount":
        properties["number_type"] = answers.get("number_type")
        if answers.get("number_type") == "money":
            properties["currency"] = currency_field(
                answers.get("currency_stipulation"),
                currency_codes(answers.get("currency_options")),
                answers.get("currency_fixed"),
            )
    if answer_type == "time_date":
        properties["time_date_type"] = answers.get("time_date_type")
    if answer_type == "yes_no":
        properties["allow_unsure"] = answers.get("allow_unsure") == "yes"
    return properties


CUSTOM_SETUP = (
    SetupQuestionSpec(
        id="answer_type",
        label="What type of answer/information do you want the Buyer/Agent to provide?",
        options=_options(
            ("short_text", "Short Text Answer"),
            ("long_text", "Long Text Answer"),
            ("number_amount", "Provide a Number or Amount"),
            ("file_upload", "Upload Files"),
            ("time_date", "Provide a Time and/or Date"),
            ("yes_no", "Answer Yes or No"),
            ("single_select", "Select 1 Option from a List"),
            ("multi_select", "Select 1 or more Options from a List"),
            ("statement", "Statement (Tickbox to Agree is optional)"),
        ),
    ),
    SetupQuestionSpec(
        id="number_type",
        label="What type of number?",
        options=_options(("money", "An amount of money"), ("phone", "A phone number"), ("percentage", "A percentage")),
        depends_on=_when("answer_type", "number_amount"),
    ),
    SetupQuestionSpec(
        id="currency_stipulation",
        label="Would you like to allow Buyers to select a Currency?",
        kind=SetupKind.radio,
        options=STIPULATION,
        depends_on=_when("number_type", "money"),
    ),
    SetupQuestionSpec(
        id="currency_options",
        label="Currency Options",
        kind=SetupKind.currency_options,
        options=CURRENCIES,
        required=False,
        depends_on=_when("currency_stipulation", CURRENCY_OPTIONS_MODE),
    ),
    SetupQuestionSpec(
        id="currency_fixed",
        label="Select currency",
        options=CURRENCIES,
        depends_on=_when("currency_stipulation", "fixed"),
    ),
    SetupQuestionSpec(
        id="time_date_type",
        label="What would you like to collect?",
        options=_options(("time", "Time"), ("date", "Date"), ("datetime", "Time and Date")),
        depends_on=_when("answer_type", "time_date"),
    ),
    SetupQuestionSpec(
        id="allow_unsure",
        label="Allow 'Unsure' as an option?",
        options=YES_NO,
        depends_on=_when("answer_type", "yes_no"),
    ),
    SetupQuestionSpec(
        id="select_options",
        label="Create your list (comma-separated options)",
        kind=SetupKind.option_list,
        placeholder="Option 1, Option 2, Option 3",
        depends_on=_when("answer_type", "single_select", "multi_select"),
    ),
    SetupQuestionSpec(
        id="add_tickbox",
        label="Do you wish to add a tickbox for the Buyer/Agent to agree?",
        options=_options(
            ("required", "Yes, and Submitter must tick the box to submit their Offer"),
            ("optional", "Yes, ticking the box is optional"),
            ("no", "No, just add a statement"),
        ),
        depends_on=_when("answer_type", "statement"),
    ),
    SetupQuestionSpec(
        id="tickbox_text",
        label="What text would you like to display next to your tickbox (eg 'I agree')?",
        kind=SetupKind.text,
        placeholder="I agree",
        depends_on=_when("add_tickbox", "required", "optional"),
    ),
    SetupQuestionSpec(
        id="question_text",
        label="What is your question/statement?",
        kind=SetupKind.text,
        placeholder="Enter your question here",
    ),
)

DUE_DATE_OPTIONS = (
    ("calendar", "Buyer selects a date with a calendar selector."),
    ("datetime", "Buyer sets a deadline time and date."),
    ("buyer_text", "Buyer provides a date by writing into a text field."),
    ("seller_text", "You set the date by writing into a text field."),
    ("within_time", "Within X days of Offer Acceptance."),
)

OFFER_DEFINITIONS = [
    QuestionDefinition(
        type="specifyListing",
        label="Specify Listing",
        description="Identify which listing the offer is for.",
        generate_properties=_simple("Which listing is this offer for?", placeholder="Select a listing"),
    ),
    QuestionDefinition(
        type="submitterRole",
        label="Submitter Role",
        description="Identify Submitter as an Unrepresented Buyer, a Represented Buyer, or an Agent.",
        generate_properties=_simple("What best describes you?", placeholder="Select your role"),
    ),
    QuestionDefinition(
        type="submitterName",
        label="Submitter Name",
        description="Collect the submitter's name.",
        generate_properties=_simple("What is your name?"),
    ),
    QuestionDefinition(
        type="submitterEmail",
        label="Submitter Email",
        description="Collect the submitter's email address.",
        generate_properties=_simple("What is your email address?", placeholder="example@email.com"),
    ),
    QuestionDefinition(
        type="submitterPhone",
        label="Submitter Phone",
        description="Collect the submitter's phone number.",
        generate_properties=_simple("What is your phone number?"),
    ),
    QuestionDefinition(
        type="nameOfPurchaser",
        label="Name of Purchaser",
        description="Collect Purchaser Names in your preferred format, require i.d. optional.",
        setup_questions=(
            SetupQuestionSpec(
                id="collection_method",
                label="How do you want to collect the Name of Purchaser(s)?",
                kind=SetupKind.radio,
                options=_options(
                    ("single_field", "Use one freeform text field to collect the name of the Purchaser(s)"),
                    ("individual_names", "Ascertain the number of Purchasers, and collect each name individually"),
                ),
            ),
            SetupQuestionSpec(
                id="collect_middle_names",
                label="Do you want to collect Middle Name(s)?",
                kind=SetupKind.radio,
                options=YES_NO,
                depends_on=_when("collection_method", "individual_names"),
            ),
            SetupQuestionSpec(
                id="collect_identification",
                label="Do you want to collect identification of Purchasers?",
                kind=SetupKind.radio,
                options=_options(("mandatory", "Yes (Mandatory)"), ("optional", "Yes (Optional)"), ("no", "No")),
            ),
        ),
        generate_properties=_name_of_purchaser,
    ),
    QuestionDefinition(
        type="offerAmount",
        label="Offer Amount",
        description="Collect the offer amount from the buyer.",
        setup_questions=(
            SetupQuestionSpec(
                id="currency_mode",
                label="Would you like to allow Buyers to select a Currency?",
                kind=SetupKind.radio,
                options=_options(
                    ("any", "Yes, let Buyer choose any"),
                    (CURRENCY_OPTIONS_MODE, "Yes, give Buyer 2+ options"),
                    ("fixed", "No, stipulate a Currency"),
                ),
            ),
            SetupQuestionSpec(
                id="currency_options",
                label="Currency Options",
                kind=SetupKind.currency_options,
                options=CURRENCIES,
                required=False,
                depends_on=_when("currency_mode", CURRENCY_OPTIONS_MODE),
            ),
            SetupQuestionSpec(
                id="currency_fixed",
                label="Select currency",
                options=CURRENCIES,
                depends_on=_when("currency_mode", "fixed"),
            ),
        ),
        generate_properties=_offer_amount,
    ),
    QuestionDefinition(
        type="offerExpiry",
        label="Offer Expiry",
        description="Allow buyers to set expiry dates and times for their offers.",
        setup_questions=(
            SetupQuestionSpec(
                id="expiry_requirement",
                label="Allow Offers to include an Expiry?",
                kind=SetupKind.radio,
                options=_options(("required", "Expiry Date/Time is required"), ("optional", "Expiry Date/Time is optional")),
            ),
        ),
        generate_properties=_requirement("When does this offer expire?", "expiry_requirement"),
    ),
    QuestionDefinition(
        type="deposit",
        label="Deposit Details",
        description="Collect Deposit Details in your preferred format.",
        setup_questions=_deposit_setup(),
        generate_properties=_deposit,
    ),
    QuestionDefinition(
        type="subjectToLoanApproval",
        label="Subject to Loan Approval",
        description="Ask if the Offer is Subject to Loan Approval. Collect details in your preferred format.",
        setup_questions=(
            SetupQuestionSpec(
                id="lender_details",
                label="Do you want Lender details?",
                kind=SetupKind.radio,
                options=_options(
                    ("required", "Yes, Lender details must be provided."),
                    ("optional", "Yes, but it's optional."),
                    ("not_required", "No, I don't need Lender details."),
                ),
            ),
            SetupQuestionSpec(
                id="attachments",
                label="Do you want supporting documents attached?",
                kind=SetupKind.radio,
                options=REQUIREMENT,
            ),
            SetupQuestionSpec(
                id="due_date_management",
                label="How would you like to manage the Loan Approval Due Date?",
                options=_options(
                    ("no_due_date", "No due date."),
                    *DUE_DATE_OPTIONS,
                    ("custom", "Something Else (Create your Own)"),
                ),
                custom_config=CustomConfigLink(trigger_value="custom", config_key="loan_due_date_config"),
            ),
            SetupQuestionSpec(
                id="seller_due_date_text",
                label="Enter the loan approval due date text",
                kind=SetupKind.text,
                depends_on=_when("due_date_management", "seller_text"),
            ),
        ),
        generate_properties=_loan_approval,
    ),
    QuestionDefinition(
        type="evidenceOfFunds",
        label="Evidence of Funds",
        description="Ask buyers to attach evidence of their funds.",
        setup_questions=(
            SetupQuestionSpec(
                id="evidence_of_funds",
                label="Would you like Buyers to attach evidence of funds?",
                kind=SetupKind.radio,
                options=_options(
                    ("optional", "Yes, but it is optional"),
                    ("required", "Yes, an attachment must be provided"),
                    ("not_required", "No"),
                ),
            ),
        ),
        generate_properties=_requirement("Attach evidence of funds", "evidence_of_funds"),
    ),
    QuestionDefinition(
        type="attachPurchaseAgreement",
        label="Attach Purchase Agreement",
        description="Collect signed purchase agreements with your Offer Form.",
        setup_questions=(
            SetupQuestionSpec(
                id="contract_requirement",
                label="How would you like to manage Purchase Agreements?",
                kind=SetupKind.radio,
                options=_options(
                    ("required", "ALL of the offers I receive must include a Purchase Agreement."),
                    ("optional", "Buyers/Agents may include a Purchase Agreement, but it isn't required."),
                ),
            ),
        ),
        generate_properties=_requirement("Attach the signed Purchase Agreement", "contract_requirement"),
    ),
    QuestionDefinition(
        type="specialConditions",
        label="Special Conditions",
        description="Set up a list of common Conditions and let buyers tick boxes to include.",
        setup_questions=(
            SetupQuestionSpec(
                id="allow_custom_conditions",
                label="Would you like to allow the Buyer/Agent to add their own conditions?",
                options=YES_NO,
            ),
            SetupQuestionSpec(
                id="condition_{n}_name",
                label="Name for Condition {n}:",
                kind=SetupKind.text,
                placeholder="Enter condition name",
                repeating=True,
            ),
            SetupQuestionSpec(
                id="condition_{n}_details",
                label="Additional details",
                kind=SetupKind.text_area,
                required=False,
                repeating=True,
            ),
            SetupQuestionSpec(
                id="condition_{n}_attachments",
                label="Attachments for this condition",
                kind=SetupKind.file_upload,
                required=False,
                repeating=True,
            ),
        ),
        generate_properties=_special_conditions,
    ),
    QuestionDefinition(
        type="settlementDate",
        label="Settlement Date",
        description="Collect the settlement date in your preferred format.",
        setup_questions=(
            SetupQuestionSpec(
                id="due_date_management",
                label="How would you like to manage the Settlement Date?",
                options=_options(*DUE_DATE_OPTIONS, ("CYO", "Create Your Own")),
                custom_config=CustomConfigLink(trigger_value="CYO", config_key="settlement_date_config"),
            ),
            SetupQuestionSpec(
                id="seller_due_date_text",
                label="Enter the settlement date text",
                kind=SetupKind.text,
                depends_on=_when("due_date_management", "seller_text"),
            ),
        ),
        generate_properties=_settlement_date,
    ),
    QuestionDefinition(
        type="messageToAgent",
        label="Message to Agent",
        description="Allow Buyers/Agents to send messages with optional attachments.",
        setup_questions=(
            SetupQuestionSpec(
                id="allow_attachments",
                label="Would you like to allow Buyers/Agents to add attachments to their message?",
                kind=SetupKind.radio,
                options=YES_NO,
            ),
        ),
        generate_properties=_message_to_agent,
    ),
    QuestionDefinition(
        type="custom",
        label="Custom",
        description="Create your own question.",
        setup_questions=CUSTOM_SETUP,
        generate_properties=_custom,
    ),
    QuestionDefinition(
        type="submitButton",
        label="Submit Button",
        description="Submit the form.",
        generate_properties=_simple("Submit"),
    ),
]


# Lead form


def _are_you_interested(answers: Mapping[str, Any]) -> dict[str, Any]:
    selected = answers.get("options") or []
    return {"label": "Are you interested in making an offer?", "options": list(selected)}


def _finance_leads(answers: Mapping[str, Any]) -> dict[str, Any]:
    setup = answers.get("financeSetup")
    recipient = answers.get("referralPartnerEmail") if setup == "referralPartner" else answers.get("leadRecipientEmail")
    return {"label": "Would you like help with finance?", "finance_setup": setup, "recipient": recipient}


LEAD_DEFINITIONS = [
    QuestionDefinition(
        type="listingInterest",
        label="Listing Interest",
        description="Collect which listing the user is interested in via free-form text input.",
        generate_properties=_simple("What listing are you interested in?", placeholder="Specify the listing here..."),
    ),
    QuestionDefinition(
        type="submitterRole",
        label="Submitter Role",
        description="Identify Submitter as an Unrepresented Buyer, a Represented Buyer, or an Agent.",
        generate_properties=_simple("What best describes you?", placeholder="Select your role"),
    ),
    QuestionDefinition(
        type="name",
        label="Name",
        description="Collect the submitter's first and last name.",
        generate_properties=_simple("What is your name?"),
    ),
    QuestionDefinition(
        type="email",
        label="Email Address",
        description="Collect the submitter's email address.",
        generate_properties=_simple("What is your email address?", placeholder="example@email.com"),
    ),
    QuestionDefinition(
        type="tel",
        label="Phone Number",
        description="Collect the submitter's mobile phone number.",
        generate_properties=_simple("What is your mobile phone number?"),
    ),
    QuestionDefinition(
        type="areYouInterested",
        label="Are You Interested?",
        description="Ask if the user is potentially interested in making an offer for the listing.",
        setup_questions=(
            SetupQuestionSpec(
                id="options",
                label="Which options would you like to include?",
                kind=SetupKind.multi_choice_select,
                options=_options(
                    ("yesVeryInterested", "Yes, very interested"),
                    ("yes", "Yes"),
                    ("no", "No"),
                    ("maybe", "Maybe"),
                ),
            ),
        ),
        generate_properties=_are_you_interested,
    ),
    QuestionDefinition(
        type="followAllListings",
        label="Follow All Listings?",
        description="Ask if the user wants updates about all listings.",
        generate_properties=_simple("Would you like to follow all of our listings?"),
    ),
    QuestionDefinition(
        type="opinionOfSalePrice",
        label="Opinion of Sale Price",
        description="Ask for the user's opinion of the sale price.",
        setup_questions=(
            SetupQuestionSpec(
                id="answerType",
                label="What type of answer would you like to collect?",
                kind=SetupKind.radio,
                options=_options(("text", "Text - Free-form text input"), ("number", "A number - Numeric input only")),
            ),
        ),
        generate_properties=lambda answers: {
            "label": "What is your opinion of the sale price?",
            "answer_type": answers.get("answerType"),
        },
    ),
    QuestionDefinition(
        type="captureFinanceLeads",
        label="Capture Finance Leads",
        description="Offer finance assistance and route the lead.",
        setup_questions=(
            SetupQuestionSpec(
                id="financeSetup",
                label="How would you like to manage finance leads?",
                kind=SetupKind.radio,
                options=_options(
                    ("referralPartner", "Send leads to my Finance Referral Partner"),
                    ("selfManage", "Send me the leads and I'll manage them"),
                ),
            ),
            SetupQuestionSpec(
                id="referralPartnerEmail",
                label="Referral Partner Email",
                kind=SetupKind.text,
                depends_on=_when("financeSetup", "referralPartner"),
            ),
            SetupQuestionSpec(
                id="leadRecipientEmail",
                label="Lead Recipient Email",
                kind=SetupKind.text,
                depends_on=_when("financeSetup", "selfManage"),
            ),
        ),
        generate_properties=_finance_leads,
    ),
    QuestionDefinition(
        type="custom",
        label="Custom",
        description="Create your own question.",
        setup_questions=CUSTOM_SETUP,
        generate_properties=_custom,
    ),
    QuestionDefinition(
        type="submitButton",
        label="Submit Button",
        description="Submit the form.",
        generate_properties=_simple("Submit"),
    ),
]

FORM_RULES = {
    FormKind.lead: FormRules(
        pinned_positions={"listingInterest": 1, "submitterRole": 2},
        required_question_types=frozenset({"listingInterest", "submitterRole", "name", "email", "tel", "submitButton"}),
    ),
    FormKind.offer: FormRules(
        pinned_positions={"specifyListing": 1, "submitterRole": 2},
        required_question_types=frozenset({
            "specifyListing",
            "submitterRole",
            "submitterName",
            "submitterEmail",
            "submitterPhone",
            "offerAmount",
            "submitButton",
        }),
        editable_essential_types=frozenset({"offerAmount"}),
    ),
}

_REGISTRIES = {
    FormKind.lead: QuestionDefinitionRegistry(FormKind.lead, {d.type: d for d in LEAD_DEFINITIONS}),
    FormKind.offer: QuestionDefinitionRegistry(FormKind.offer, {d.type: d for d in OFFER_DEFINITIONS}),
}


def registry_for(kind: FormKind | str) -> QuestionDefinitionRegistry:
    return _REGISTRIES[FormKind(kind)]


def rules_for(kind: FormKind | str) -> FormRules:
    return FORM_RULES[FormKind(kind)]
