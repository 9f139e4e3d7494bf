"""Storage abstraction with Supabase and in-memory implementations."""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from typing import Any, TypeVar
from uuid import uuid4

from supabase import Client, create_client

from form_builder.core.config import get_settings
from form_builder.core.errors import PersistenceError

logger = logging.getLogger(__name__)

T = TypeVar("T")

# engine field name -> column name in the Supabase tables
QUESTION_COLUMNS = {
    "id": "id",
    "form_id": "formId",
    "type": "type",
    "order": "order",
    "required": "required",
    "setup_config": "setupConfig",
    "ui_config": "uiConfig",
}
PAGE_BREAK_COLUMNS = {"id": "id", "form_id": "formId", "break_index": "breakIndex"}
FORM_COLUMNS = {"id": "id", "kind": "kind", "title": "title", "created_at": "createdAt"}


def _to_row(record: dict[str, Any], columns: dict[str, str]) -> dict[str, Any]:
    return {columns[key]: value for key, value in record.items() if key in columns}


def _from_row(row: dict[str, Any], columns: dict[str, str]) -> dict[str, Any]:
    return {key: row[column] for key, column in columns.items() if column in row}


class InMemoryStore:
    def __init__(self) -> None:
        self.forms: dict[str, dict[str, Any]] = {}
        self.questions: dict[str, dict[str, Any]] = {}
        self.page_breaks: dict[str, dict[str, Any]] = {}

    def create_form(self, *, kind: str, title: str | None = None) -> dict[str, Any]:
        record = {
            "id": str(uuid4()),
            "kind": kind,
            "title": title,
            "created_at": datetime.now(timezone.utc),
        }
        self.forms[record["id"]] = record
        return dict(record)

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        record = self.forms.get(form_id)
        return dict(record) if record else None

    def load_questions(self, form_id: str) -> list[dict[str, Any]]:
        rows = [dict(row) for row in self.questions.values() if row["form_id"] == form_id]
        return sorted(rows, key=lambda row: row["order"])

    def load_page_breaks(self, form_id: str) -> list[dict[str, Any]]:
        rows = [dict(row) for row in self.page_breaks.values() if row["form_id"] == form_id]
        return sorted(rows, key=lambda row: row["break_index"])

    def save_question(self, question: dict[str, Any]) -> dict[str, Any]:
        record = dict(question)
        record.setdefault("id", str(uuid4()))
        self.questions[record["id"]] = record
        return dict(record)

    def save_order(self, question_id: str, order: int) -> None:
        self._require(self.questions, question_id)["order"] = order

    def update_question(self, question_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        record = self._require(self.questions, question_id)
        record.update(fields)
        return dict(record)

    def delete_question(self, question_id: str) -> None:
        self._require(self.questions, question_id)
        del self.questions[question_id]

    def save_page_break(self, page_break: dict[str, Any]) -> dict[str, Any]:
        record = dict(page_break)
        record.setdefault("id", str(uuid4()))
        self.page_breaks[record["id"]] = record
        return dict(record)

    def delete_page_break(self, break_id: str) -> None:
        self._require(self.page_breaks, break_id)
        del self.page_breaks[break_id]

    def reorder_page_break(self, break_id: str, break_index: int) -> None:
        self._require(self.page_breaks, break_id)["break_index"] = break_index

    def clear_form(self, form_id: str) -> None:
        self.questions = {key: row for key, row in self.questions.items() if row["form_id"] != form_id}
        self.page_breaks = {key: row for key, row in self.page_breaks.items() if row["form_id"] != form_id}

    @staticmethod
    def _require(table: dict[str, dict[str, Any]], record_id: str) -> dict[str, Any]:
        record = table.get(record_id)
        if record is None:
            raise PersistenceError(f"Record {record_id} does not exist")
        return record


class SupabaseStore:
    def __init__(self, url: str, service_key: str) -> None:
        settings = get_settings()
        self.client: Client = create_client(url, service_key)
        self.forms_table = settings.forms_table
        self.questions_table = settings.questions_table
        self.page_breaks_table = settings.page_breaks_table

    def _execute(self, operation: str, call: Callable[[], T]) -> T:
        try:
            return call()
        except Exception as exc:
            logger.error("Supabase %s failed: %s", operation, exc)
            raise PersistenceError(f"Failed to {operation}") from exc

    def create_form(self, *, kind: str, title: str | None = None) -> dict[str, Any]:
        row = {"kind": kind, "title": title}
        response = self._execute(
            "create form",
            lambda: self.client.table(self.forms_table).insert(row).execute(),
        )
        rows = response.data or []
        if not rows:
            raise PersistenceError("Failed to create form")
        return _from_row(rows[0], FORM_COLUMNS)

    def get_form(self, form_id: str) -> dict[str, Any] | None:
        response = self._execute(
            "fetch form",
            lambda: self.client.table(self.forms_table).select("*").eq("id", form_id).limit(1).execute(),
        )
        rows = response.data or []
        return _from_row(rows[0], FORM_COLUMNS) if rows else None

    def load_questions(self, form_id: str) -> list[dict[str, Any]]:
        response = self._execute(
            "fetch questions",
            lambda: (
                self.client.table(self.questions_table)
                .select("*")
                .eq("formId", form_id)
                .order("order")
                .execute()
            ),
        )
        return [_from_row(row, QUESTION_COLUMNS) for row in response.data or []]

    def load_page_breaks(self, form_id: str) -> list[dict[str, Any]]:
        response = self._execute(
            "fetch page breaks",
            lambda: (
                self.client.table(self.page_breaks_table)
                .select("*")
                .eq("formId", form_id)
                .order("breakIndex")
                .execute()
            ),
        )
        return [_from_row(row, PAGE_BREAK_COLUMNS) for row in response.data or []]

    def save_question(self, question: dict[str, Any]) -> dict[str, Any]:
        row = _to_row(question, QUESTION_COLUMNS)
        response = self._execute(
            "add question",
            lambda: self.client.table(self.questions_table).insert(row).execute(),
        )
        rows = response.data or []
        return _from_row(rows[0], QUESTION_COLUMNS) if rows else question

    def save_order(self, question_id: str, order: int) -> None:
        self._execute(
            "update question order",
            lambda: self.client.table(self.questions_table).update({"order": order}).eq("id", question_id).execute(),
        )

    def update_question(self, question_id: str, fields: dict[str, Any]) -> dict[str, Any]:
        row = _to_row(fields, QUESTION_COLUMNS)
        response = self._execute(
            "update question",
            lambda: self.client.table(self.questions_table).update(row).eq("id", question_id).execute(),
        )
        rows = response.data or []
        if not rows:
            raise PersistenceError(f"Record {question_id} does not exist")
        return _from_row(rows[0], QUESTION_COLUMNS)

    def delete_question(self, question_id: str) -> None:
        self._execute(
            "delete question",
            lambda: self.client.table(self.questions_table).delete().eq("id", question_id).execute(),
        )

    def save_page_break(self, page_break: dict[str, Any]) -> dict[str, Any]:
        row = _to_row(page_break, PAGE_BREAK_COLUMNS)
        response = self._execute(
            "add page break",
            lambda: self.client.table(self.page_breaks_table).insert(row).execute(),
        )
        rows = response.data or []
        return _from_row(rows[0], PAGE_BREAK_COLUMNS) if rows else page_break

    def delete_page_break(self, break_id: str) -> None:
        self._execute(
            "delete page break",
            lambda: self.client.table(self.page_breaks_table).delete().eq("id", break_id).execute(),
        )

    def reorder_page_break(self, break_id: str, break_index: int) -> None:
        self._execute(
            "move page break",
            lambda: (
                self.client.table(self.page_breaks_table)
                .update({"breakIndex": break_index})
                .eq("id", break_id)
                .execute()
            ),
        )

    def clear_form(self, form_id: str) -> None:
        self._execute(
            "clear page breaks",
            lambda: self.client.table(self.page_breaks_table).delete().eq("formId", form_id).execute(),
        )
        self._execute(
            "clear questions",
            lambda: self.client.table(self.questions_table).delete().eq("formId", form_id).execute(),
        )


Store = InMemoryStore | SupabaseStore

_store: Store | None = None


def get_store() -> Store:
    global _store
    if _store is not None:
        return _store

    settings = get_settings()
    if not settings.use_in_memory_store and settings.supabase_url and settings.supabase_service_key:
        _store = SupabaseStore(settings.supabase_url, settings.supabase_service_key)
    else:
        _store = InMemoryStore()
    return _store
