"""File workflow endpoints

Every endpoint resolves the caller to an actor and delegates to
``FileWorkflowService``. Domain errors propagate to the exception handlers
registered in ``main``.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..auth.dependencies import ActiveActor
from ..database import get_db
from ..domain.files.file_status import FileStatus
from ..infrastructure.repositories.file_repository import FileRepository
from ..infrastructure.repositories.user_repository import UserRepository
from .schemas import (
    DashboardStats,
    FileCreate,
    FileListResponse,
    FileResponse,
    TitleUpdate,
    TranscriptionText,
)
from .service import FileWorkflowService

router = APIRouter(prefix="/files", tags=["Files"])


def get_file_service(db: Session = Depends(get_db)) -> FileWorkflowService:
    return FileWorkflowService(store=FileRepository(db), users=UserRepository(db))


Service = Annotated[FileWorkflowService, Depends(get_file_service)]


def _respond(service: FileWorkflowService, actor, file_id: int) -> FileResponse:
    return FileResponse.from_view(service.get_file(actor, file_id))


@router.post("", response_model=FileResponse, status_code=status.HTTP_201_CREATED)
def create_file(payload: FileCreate, actor: ActiveActor, service: Service):
    """Register an uploaded file as pending."""
    file = service.create_file(actor, payload.title, payload.source_ref)
    return _respond(service, actor, file.id)


@router.get("", response_model=FileListResponse)
def list_files(
    actor: ActiveActor,
    service: Service,
    status_filter: Optional[FileStatus] = Query(None, alias="status"),
):
    """List files visible to the caller, newest first."""
    views = service.list_visible(actor, status=status_filter)
    return FileListResponse(
        files=[FileResponse.from_view(view) for view in views],
        total=len(views),
    )


@router.get("/stats", response_model=DashboardStats)
def dashboard_stats(actor: ActiveActor, service: Service):
    return DashboardStats(**service.dashboard_stats(actor))


@router.get("/{file_id}", response_model=FileResponse)
def get_file(file_id: int, actor: ActiveActor, service: Service):
    return _respond(service, actor, file_id)


@router.post("/{file_id}/claim", response_model=FileResponse)
def claim_file(file_id: int, actor: ActiveActor, service: Service):
    service.claim(actor, file_id)
    return _respond(service, actor, file_id)


@router.put("/{file_id}/draft", response_model=FileResponse)
def save_draft(file_id: int, payload: TranscriptionText, actor: ActiveActor, service: Service):
    service.save_draft(actor, file_id, payload.text)
    return _respond(service, actor, file_id)


@router.post("/{file_id}/submit", response_model=FileResponse)
def submit_file(file_id: int, payload: TranscriptionText, actor: ActiveActor, service: Service):
    service.submit(actor, file_id, payload.text)
    return _respond(service, actor, file_id)


@router.post("/{file_id}/approve", response_model=FileResponse)
def approve_file(file_id: int, actor: ActiveActor, service: Service):
    service.approve(actor, file_id)
    return _respond(service, actor, file_id)


@router.post("/{file_id}/reject", response_model=FileResponse)
def reject_file(file_id: int, actor: ActiveActor, service: Service):
    service.reject(actor, file_id)
    return _respond(service, actor, file_id)


@router.patch("/{file_id}", response_model=FileResponse)
def edit_title(file_id: int, payload: TitleUpdate, actor: ActiveActor, service: Service):
    service.edit_title(actor, file_id, payload.title)
    return _respond(service, actor, file_id)


@router.delete("/{file_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_file(file_id: int, actor: ActiveActor, service: Service):
    service.delete_file(actor, file_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
