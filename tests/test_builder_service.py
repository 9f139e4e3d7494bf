import pytest

from form_builder.core.errors import (
    EssentialQuestionError,
    NotFoundError,
    PersistenceError,
    StructuralConstraintError,
    ValidationError,
)
from form_builder.models.schemas import AddQuestionRequest, FormKind


def _types(state):
    return [question.type for question in state.questions]


def _by_type(state, question_type):
    return next(question for question in state.questions if question.type == question_type)


def test_create_lead_form_seeds_default_questions(service):
    state = service.create_form(FormKind.lead, "Open home")
    assert _types(state) == ["listingInterest", "submitterRole", "name", "email", "tel", "submitButton"]
    assert [question.order for question in state.questions] == [1, 2, 3, 4, 5, 6]
    assert _by_type(state, "listingInterest").ui_config["label"] == "What listing are you interested in?"
    assert _by_type(state, "submitterRole").required is False
    assert state.page_breaks == []


def test_add_question_compiles_setup_and_shifts_rows(service):
    form_id = service.create_form(FormKind.offer).form.id
    state = service.add_question(
        form_id,
        AddQuestionRequest(type="offerExpiry", after_order=6, answers={"expiry_requirement": "required"}),
    )
    assert _types(state)[-3:] == ["offerAmount", "offerExpiry", "submitButton"]
    expiry = _by_type(state, "offerExpiry")
    assert expiry.order == 7
    assert expiry.required is True
    assert expiry.setup_config == {"expiry_requirement": "required"}
    assert _by_type(state, "submitButton").order == 8


def test_add_question_with_invalid_setup_is_not_persisted(service, store):
    form_id = service.create_form(FormKind.offer).form.id
    with pytest.raises(ValidationError):
        service.add_question(form_id, AddQuestionRequest(type="offerAmount", after_order=3, answers={}))
    assert len(store.load_questions(form_id)) == 7


def test_add_question_between_pinned_rows_is_rejected(service, store):
    form_id = service.create_form(FormKind.lead).form.id
    with pytest.raises(StructuralConstraintError):
        service.add_question(form_id, AddQuestionRequest(type="followAllListings", after_order=1))
    assert len(store.load_questions(form_id)) == 6


def test_add_unknown_type_is_not_found(service):
    form_id = service.create_form(FormKind.lead).form.id
    with pytest.raises(NotFoundError):
        service.add_question(form_id, AddQuestionRequest(type="offerAmount", after_order=3))


def test_insert_keeps_page_breaks_with_their_questions(service):
    form_id = service.create_form(FormKind.lead).form.id
    service.add_page_break(form_id, 3)
    state = service.add_question(form_id, AddQuestionRequest(type="followAllListings", after_order=4))
    assert [page_break.break_index for page_break in state.page_breaks] == [3]

    state = service.add_question(form_id, AddQuestionRequest(type="followAllListings", after_order=2))
    assert [page_break.break_index for page_break in state.page_breaks] == [4]


def test_move_question_persists_swap(service):
    form_id = service.create_form(FormKind.lead).form.id
    email = _by_type(service.form_state(form_id), "email")
    state = service.move_question(form_id, email.id, "up")
    assert _types(state)[2:4] == ["email", "name"]

    with pytest.raises(StructuralConstraintError):
        service.move_question(form_id, email.id, "up")


def test_delete_essential_question_is_forbidden(service):
    form_id = service.create_form(FormKind.lead).form.id
    name = _by_type(service.form_state(form_id), "name")
    with pytest.raises(EssentialQuestionError):
        service.delete_question(form_id, name.id)


def test_delete_submitter_role_reorders_and_reconciles_breaks(service):
    form_id = service.create_form(FormKind.lead).form.id
    service.add_page_break(form_id, 3)
    service.add_page_break(form_id, 4)
    role = _by_type(service.form_state(form_id), "submitterRole")

    state = service.delete_question(form_id, role.id)
    assert _types(state) == ["listingInterest", "name", "email", "tel", "submitButton"]
    assert [question.order for question in state.questions] == [1, 2, 3, 4, 5]
    assert [page_break.break_index for page_break in state.page_breaks] == [2, 3]


def test_set_required_syncs_setup_config(service):
    form_id = service.create_form(FormKind.offer).form.id
    service.add_question(
        form_id,
        AddQuestionRequest(
            type="evidenceOfFunds",
            after_order=6,
            answers={"evidence_of_funds": "required"},
        ),
    )
    evidence = _by_type(service.form_state(form_id), "evidenceOfFunds")
    state = service.set_required(form_id, evidence.id, False)
    updated = _by_type(state, "evidenceOfFunds")
    assert updated.required is False
    assert updated.setup_config["evidence_of_funds"] == "optional"
    assert updated.ui_config["requirement"] == "optional"


def test_making_essential_question_optional_is_forbidden(service):
    form_id = service.create_form(FormKind.offer).form.id
    amount = _by_type(service.form_state(form_id), "offerAmount")
    with pytest.raises(EssentialQuestionError):
        service.set_required(form_id, amount.id, False)


def test_offer_amount_setup_is_editable(service):
    form_id = service.create_form(FormKind.offer).form.id
    amount = _by_type(service.form_state(form_id), "offerAmount")
    state = service.edit_setup(form_id, amount.id, {"currency_mode": "fixed", "currency_fixed": "AUD"})
    updated = _by_type(state, "offerAmount")
    assert updated.ui_config["currency"] == {"mode": "fixed", "currency": "AUD"}
    assert updated.ui_config["description"] == "OFFER AMOUNT"


def test_other_essential_questions_are_not_editable(service):
    form_id = service.create_form(FormKind.offer).form.id
    email = _by_type(service.form_state(form_id), "submitterEmail")
    with pytest.raises(EssentialQuestionError):
        service.edit_setup(form_id, email.id, {})


def test_page_break_lifecycle(service):
    form_id = service.create_form(FormKind.lead).form.id
    with pytest.raises(StructuralConstraintError):
        service.add_page_break(form_id, 5)

    state = service.add_page_break(form_id, 3)
    break_id = state.page_breaks[0].id
    state = service.move_page_break(form_id, break_id, "down")
    assert state.page_breaks[0].break_index == 4
    with pytest.raises(StructuralConstraintError):
        service.move_page_break(form_id, break_id, "down")

    state = service.delete_page_break(form_id, break_id)
    assert state.page_breaks == []


def test_reset_restores_defaults(service):
    form_id = service.create_form(FormKind.lead).form.id
    service.add_question(form_id, AddQuestionRequest(type="followAllListings", after_order=5))
    service.add_page_break(form_id, 3)

    state = service.reset_form(form_id)
    assert _types(state) == ["listingInterest", "submitterRole", "name", "email", "tel", "submitButton"]
    assert state.page_breaks == []


def test_unknown_form_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.form_state("missing")


def test_persistence_failures_propagate(service, store, monkeypatch):
    form_id = service.create_form(FormKind.lead).form.id

    def fail(*args, **kwargs):
        raise PersistenceError("store unavailable")

    monkeypatch.setattr(store, "save_page_break", fail)
    with pytest.raises(PersistenceError):
        service.add_page_break(form_id, 3)


def test_preview_setup_reports_visible_specs_and_validation(service):
    preview = service.preview_setup(FormKind.offer, "offerAmount", {"currency_mode": "options", "currency_options": ["USD"]})
    assert [spec.id for spec in preview.visible] == ["currency_mode", "currency_options"]
    assert not preview.validation.ok


def test_catalog_flags_essential_types(service):
    entries = {entry.type: entry for entry in service.catalog(FormKind.offer)}
    assert entries["offerAmount"].essential
    assert entries["offerAmount"].has_setup
    assert not entries["deposit"].essential
