"""FastAPI entrypoint for the form builder backend."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from form_builder.api.v1.routes import router as api_v1_router
from form_builder.core.config import get_settings
from form_builder.core.errors import (
    EssentialQuestionError,
    FormBuilderError,
    NotFoundError,
    PersistenceError,
    StructuralConstraintError,
    ValidationError,
)
from form_builder.core.logging import setup_logging

settings = get_settings()
setup_logging(settings.log_level, json_logs=settings.log_json)
logger = logging.getLogger(__name__)

ERROR_STATUS = [
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY, "validation_error"),
    (StructuralConstraintError, status.HTTP_409_CONFLICT, "structural_constraint"),
    (EssentialQuestionError, status.HTTP_403_FORBIDDEN, "essential_question"),
    (NotFoundError, status.HTTP_404_NOT_FOUND, "not_found"),
    (PersistenceError, status.HTTP_502_BAD_GATEWAY, "persistence_error"),
]

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Lead and offer form builder API: conditional setup, pinned ordering and page breaks.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(FormBuilderError)
async def form_builder_error_handler(request: Request, exc: FormBuilderError) -> JSONResponse:
    status_code, error = status.HTTP_400_BAD_REQUEST, "form_builder_error"
    for error_type, mapped_status, mapped_error in ERROR_STATUS:
        if isinstance(exc, error_type):
            status_code, error = mapped_status, mapped_error
            break
    logger.info("%s %s -> %s: %s", request.method, request.url.path, status_code, exc)
    content = {"error": error, "detail": str(exc)}
    if isinstance(exc, EssentialQuestionError):
        content["question_type"] = exc.question_type
        content["action"] = exc.action
    return JSONResponse(status_code=status_code, content=content)


app.include_router(api_v1_router, prefix="/api/v1")


@app.get("/", tags=["health"])
def root() -> dict[str, str]:
    return {"message": "Form Builder API is running"}
