from __future__ import annotations

import sys
from pathlib import Path

import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
_BACKEND = _REPO_ROOT / "backend"
if _BACKEND.exists():
    sys.path.insert(0, str(_BACKEND))

from form_builder.core.config import Settings  # noqa: E402
from form_builder.models.schemas import FormKind, PageBreak, QuestionInstance  # noqa: E402
from form_builder.services.builder_service import FormBuilderService  # noqa: E402
from form_builder.services.question_catalog import rules_for  # noqa: E402
from form_builder.services.store import InMemoryStore  # noqa: E402


def make_questions(*types: str, form_id: str = "form-1") -> list[QuestionInstance]:
    return [
        QuestionInstance(id=f"q{order}", form_id=form_id, type=question_type, order=order)
        for order, question_type in enumerate(types, 1)
    ]


def make_breaks(*indexes: int, form_id: str = "form-1") -> list[PageBreak]:
    return [PageBreak(id=f"b{index}", form_id=form_id, break_index=index) for index in indexes]


@pytest.fixture
def lead_rules():
    return rules_for(FormKind.lead)


@pytest.fixture
def offer_rules():
    return rules_for(FormKind.offer)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def service(store):
    return FormBuilderService(store=store, settings=Settings(_env_file=None))
