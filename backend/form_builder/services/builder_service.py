"""Builder operations: engine decision first, persistence second."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any
from uuid import uuid4

from form_builder.core.config import Settings, get_settings
from form_builder.core.errors import NotFoundError, PersistenceError, StructuralConstraintError
from form_builder.data.sample_data import DEFAULT_QUESTIONS
from form_builder.models.schemas import (
    AddQuestionRequest,
    CatalogEntry,
    FormKind,
    FormRecord,
    FormStateResponse,
    PageBreak,
    QuestionInstance,
    SetupPlanResponse,
)
from form_builder.services import ordering, page_breaks
from form_builder.services.compiler import compile_question, sync_setup_config_from_required
from form_builder.services.question_catalog import registry_for, rules_for
from form_builder.services.setup_state import SetupSession
from form_builder.services.store import Store

logger = logging.getLogger(__name__)


class FormBuilderService:
    def __init__(self, store: Store, settings: Settings | None = None) -> None:
        self.store = store
        self.max_blocks = (settings or get_settings()).max_condition_blocks

    # Reads

    def get_form(self, form_id: str) -> FormRecord:
        row = self.store.get_form(form_id)
        if not row:
            raise NotFoundError(f"Form {form_id} not found")
        return FormRecord.model_validate(row)

    def load_questions(self, form_id: str) -> list[QuestionInstance]:
        return [QuestionInstance.model_validate(row) for row in self.store.load_questions(form_id)]

    def load_page_breaks(self, form_id: str) -> list[PageBreak]:
        return [PageBreak.model_validate(row) for row in self.store.load_page_breaks(form_id)]

    def form_state(self, form_id: str) -> FormStateResponse:
        form = self.get_form(form_id)
        questions = self.load_questions(form_id)
        ordering.assert_contiguous(questions)
        return FormStateResponse(form=form, questions=questions, page_breaks=self.load_page_breaks(form_id))

    def catalog(self, kind: FormKind | str) -> list[CatalogEntry]:
        rules = rules_for(kind)
        return [
            CatalogEntry(
                type=definition.type,
                label=definition.label,
                description=definition.description,
                has_setup=definition.has_setup,
                essential=definition.type in rules.required_question_types,
            )
            for definition in registry_for(kind).definitions.values()
        ]

    def preview_setup(self, kind: FormKind | str, type_id: str, answers: dict[str, Any]) -> SetupPlanResponse:
        session = SetupSession(type_id, kind, setup_config=answers, max_blocks=self.max_blocks)
        return SetupPlanResponse(visible=session.visible(), validation=session.validation())

    # Form lifecycle

    @contextmanager
    def _writes(self, operation: str, form_id: str) -> Iterator[None]:
        try:
            yield
        except PersistenceError:
            logger.exception("Persistence failed during %s", operation, extra={"form_id": form_id})
            raise

    def _insert_defaults(self, form: FormRecord) -> None:
        for default in DEFAULT_QUESTIONS[form.kind.value]:
            self.store.save_question(
                {
                    "id": str(uuid4()),
                    "form_id": form.id,
                    "type": default["type"],
                    "order": default["order"],
                    "required": default["required"],
                    "setup_config": dict(default.get("setup_config", {})),
                    "ui_config": dict(default["ui_config"]),
                }
            )

    def create_form(self, kind: FormKind | str, title: str | None = None) -> FormStateResponse:
        kind = FormKind(kind)
        with self._writes("create_form", "-"):
            form = FormRecord.model_validate(self.store.create_form(kind=kind.value, title=title))
            self._insert_defaults(form)
        logger.info("Created %s form", kind.value, extra={"form_id": form.id})
        return self.form_state(form.id)

    def reset_form(self, form_id: str) -> FormStateResponse:
        form = self.get_form(form_id)
        with self._writes("reset_form", form_id):
            self.store.clear_form(form_id)
            self._insert_defaults(form)
        logger.info("Reset form to default questions", extra={"form_id": form_id})
        return self.form_state(form_id)

    # Questions

    def _reject(self, operation: str, form_id: str, reason: str | None) -> StructuralConstraintError:
        logger.info("Rejected %s: %s", operation, reason, extra={"form_id": form_id})
        return StructuralConstraintError(reason or f"{operation} was rejected")

    def add_question(self, form_id: str, request: AddQuestionRequest) -> FormStateResponse:
        form = self.get_form(form_id)
        rules = rules_for(form.kind)
        definition = registry_for(form.kind).get(request.type)

        if definition.has_setup:
            session = SetupSession(request.type, form.kind, setup_config=request.answers, max_blocks=self.max_blocks)
            compiled = session.commit()
        else:
            compiled = compile_question(request.type, request.answers, form.kind)

        required = compiled.required_override
        if required is None:
            required = request.type in rules.required_question_types
        new_question = QuestionInstance(
            id=str(uuid4()),
            form_id=form_id,
            type=request.type,
            order=request.after_order + 1,
            required=required,
            setup_config=compiled.setup_config,
            ui_config={**compiled.ui_config, **request.ui_config},
        )

        questions = self.load_questions(form_id)
        result = ordering.insert_after(questions, request.after_order, new_question, rules)
        if not result.applied:
            raise self._reject("add_question", form_id, result.reason)

        shifted_breaks = page_breaks.shift_for_insert(self.load_page_breaks(form_id), request.after_order)
        with self._writes("add_question", form_id):
            for change in result.changes:
                self.store.save_order(change.id, change.order)
            self.store.save_question(new_question.model_dump())
            for break_change in shifted_breaks.changes:
                self.store.reorder_page_break(break_change.id, break_change.break_index)
        logger.info(
            "Added %s after order %s",
            request.type,
            request.after_order,
            extra={"form_id": form_id, "question_id": new_question.id},
        )
        return self.form_state(form_id)

    def _question(self, form_id: str, question_id: str) -> tuple[FormRecord, QuestionInstance]:
        form = self.get_form(form_id)
        question = ordering.find_question(self.load_questions(form_id), question_id)
        return form, question

    def edit_setup(self, form_id: str, question_id: str, answers: dict[str, Any]) -> FormStateResponse:
        form, question = self._question(form_id, question_id)
        ordering.check_essential(question, "edit", rules_for(form.kind))

        session = SetupSession(question.type, form.kind, mode="edit", setup_config=answers, max_blocks=self.max_blocks)
        compiled = session.commit()
        fields = {
            "setup_config": compiled.setup_config,
            "ui_config": {**question.ui_config, **compiled.ui_config},
        }
        if compiled.required_override is not None:
            fields["required"] = compiled.required_override

        with self._writes("edit_setup", form_id):
            self.store.update_question(question_id, fields)
        logger.info("Updated setup of %s", question.type, extra={"form_id": form_id, "question_id": question_id})
        return self.form_state(form_id)

    def set_required(self, form_id: str, question_id: str, required: bool) -> FormStateResponse:
        form, question = self._question(form_id, question_id)
        if not required:
            ordering.check_essential(question, "make_optional", rules_for(form.kind))

        setup_config = sync_setup_config_from_required(question.type, question.setup_config, required)
        fields: dict[str, Any] = {"required": required, "setup_config": setup_config}
        if setup_config != question.setup_config:
            compiled = compile_question(question.type, setup_config, form.kind)
            fields["ui_config"] = {**question.ui_config, **compiled.ui_config}

        with self._writes("set_required", form_id):
            self.store.update_question(question_id, fields)
        logger.info(
            "Set %s required=%s", question.type, required, extra={"form_id": form_id, "question_id": question_id}
        )
        return self.form_state(form_id)

    def move_question(self, form_id: str, question_id: str, direction: str) -> FormStateResponse:
        form = self.get_form(form_id)
        rules = rules_for(form.kind)
        questions = self.load_questions(form_id)
        if direction == "up":
            result = ordering.move_up(questions, question_id, rules)
        elif direction == "down":
            result = ordering.move_down(questions, question_id, rules)
        else:
            raise ValueError(f"Unknown direction: {direction}")
        if not result.applied:
            raise self._reject("move_question", form_id, result.reason)

        with self._writes("move_question", form_id):
            for change in result.changes:
                self.store.save_order(change.id, change.order)
        logger.info("Moved question %s", direction, extra={"form_id": form_id, "question_id": question_id})
        return self.form_state(form_id)

    def delete_question(self, form_id: str, question_id: str, authorized: bool = False) -> FormStateResponse:
        form = self.get_form(form_id)
        rules = rules_for(form.kind)
        questions = self.load_questions(form_id)
        target = ordering.find_question(questions, question_id)
        result = ordering.delete(questions, question_id, rules, authorized=authorized)
        reconciled = page_breaks.shift_for_delete(self.load_page_breaks(form_id), target.order, result.questions, rules)

        with self._writes("delete_question", form_id):
            self.store.delete_question(question_id)
            for change in result.changes:
                self.store.save_order(change.id, change.order)
            for dropped in reconciled.dropped:
                self.store.delete_page_break(dropped.id)
            for break_change in reconciled.changes:
                self.store.reorder_page_break(break_change.id, break_change.break_index)
        logger.info(
            "Deleted %s from order %s",
            target.type,
            target.order,
            extra={"form_id": form_id, "question_id": question_id, "dropped_breaks": len(reconciled.dropped)},
        )
        return self.form_state(form_id)

    # Page breaks

    def add_page_break(self, form_id: str, after_order: int) -> FormStateResponse:
        form = self.get_form(form_id)
        result = page_breaks.add_break(
            self.load_questions(form_id),
            self.load_page_breaks(form_id),
            after_order,
            rules_for(form.kind),
            form_id,
        )
        if not result.applied or result.created is None:
            raise self._reject("add_page_break", form_id, result.reason)

        with self._writes("add_page_break", form_id):
            self.store.save_page_break(result.created.model_dump())
        logger.info("Added page break after order %s", after_order, extra={"form_id": form_id})
        return self.form_state(form_id)

    def move_page_break(self, form_id: str, break_id: str, direction: str) -> FormStateResponse:
        form = self.get_form(form_id)
        result = page_breaks.move_break(
            self.load_questions(form_id),
            self.load_page_breaks(form_id),
            break_id,
            direction,
            rules_for(form.kind),
        )
        if not result.applied:
            raise self._reject("move_page_break", form_id, result.reason)

        with self._writes("move_page_break", form_id):
            for change in result.changes:
                self.store.reorder_page_break(change.id, change.break_index)
        logger.info("Moved page break %s", direction, extra={"form_id": form_id, "break_id": break_id})
        return self.form_state(form_id)

    def delete_page_break(self, form_id: str, break_id: str) -> FormStateResponse:
        self.get_form(form_id)
        result = page_breaks.delete_break(self.load_page_breaks(form_id), break_id)
        with self._writes("delete_page_break", form_id):
            self.store.delete_page_break(break_id)
        logger.info(
            "Deleted page break at %s", result.removed.break_index if result.removed else "?", extra={"form_id": form_id}
        )
        return self.form_state(form_id)
