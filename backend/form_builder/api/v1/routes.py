"""API routes for the question catalog, setup previews and form editing."""

from fastapi import APIRouter, Depends, Query, status

from form_builder.models.schemas import (
    AddQuestionRequest,
    CatalogEntry,
    EditSetupRequest,
    FormCreateRequest,
    FormKind,
    FormStateResponse,
    MoveRequest,
    PageBreakCreateRequest,
    RequiredUpdate,
    SetupPlanRequest,
    SetupPlanResponse,
)
from form_builder.services.builder_service import FormBuilderService
from form_builder.services.store import get_store

router = APIRouter()


def get_builder_service() -> FormBuilderService:
    return FormBuilderService(store=get_store())


@router.get("/health", tags=["health"])
def health_check() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/catalog/{form_kind}", response_model=list[CatalogEntry], tags=["catalog"])
def get_catalog(
    form_kind: FormKind,
    service: FormBuilderService = Depends(get_builder_service),
) -> list[CatalogEntry]:
    return service.catalog(form_kind)


@router.post("/setup/{form_kind}/{type_id}/plan", response_model=SetupPlanResponse, tags=["catalog"])
def plan_setup(
    form_kind: FormKind,
    type_id: str,
    payload: SetupPlanRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> SetupPlanResponse:
    return service.preview_setup(form_kind, type_id, payload.answers)


@router.post("/forms", response_model=FormStateResponse, status_code=status.HTTP_201_CREATED, tags=["forms"])
def create_form(
    payload: FormCreateRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.create_form(payload.kind, payload.title)


@router.get("/forms/{form_id}", response_model=FormStateResponse, tags=["forms"])
def get_form(form_id: str, service: FormBuilderService = Depends(get_builder_service)) -> FormStateResponse:
    return service.form_state(form_id)


@router.post("/forms/{form_id}/reset", response_model=FormStateResponse, tags=["forms"])
def reset_form(form_id: str, service: FormBuilderService = Depends(get_builder_service)) -> FormStateResponse:
    return service.reset_form(form_id)


@router.post(
    "/forms/{form_id}/questions",
    response_model=FormStateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["questions"],
)
def add_question(
    form_id: str,
    payload: AddQuestionRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.add_question(form_id, payload)


@router.put("/forms/{form_id}/questions/{question_id}/setup", response_model=FormStateResponse, tags=["questions"])
def edit_question_setup(
    form_id: str,
    question_id: str,
    payload: EditSetupRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.edit_setup(form_id, question_id, payload.answers)


@router.patch("/forms/{form_id}/questions/{question_id}/required", response_model=FormStateResponse, tags=["questions"])
def set_question_required(
    form_id: str,
    question_id: str,
    payload: RequiredUpdate,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.set_required(form_id, question_id, payload.required)


@router.post("/forms/{form_id}/questions/{question_id}/move", response_model=FormStateResponse, tags=["questions"])
def move_question(
    form_id: str,
    question_id: str,
    payload: MoveRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.move_question(form_id, question_id, payload.direction)


@router.delete("/forms/{form_id}/questions/{question_id}", response_model=FormStateResponse, tags=["questions"])
def delete_question(
    form_id: str,
    question_id: str,
    authorized: bool = Query(default=False),
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.delete_question(form_id, question_id, authorized=authorized)


@router.post(
    "/forms/{form_id}/page-breaks",
    response_model=FormStateResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["page-breaks"],
)
def add_page_break(
    form_id: str,
    payload: PageBreakCreateRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.add_page_break(form_id, payload.after_order)


@router.post("/forms/{form_id}/page-breaks/{break_id}/move", response_model=FormStateResponse, tags=["page-breaks"])
def move_page_break(
    form_id: str,
    break_id: str,
    payload: MoveRequest,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.move_page_break(form_id, break_id, payload.direction)


@router.delete("/forms/{form_id}/page-breaks/{break_id}", response_model=FormStateResponse, tags=["page-breaks"])
def delete_page_break(
    form_id: str,
    break_id: str,
    service: FormBuilderService = Depends(get_builder_service),
) -> FormStateResponse:
    return service.delete_page_break(form_id, break_id)
