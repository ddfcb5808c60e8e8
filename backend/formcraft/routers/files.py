"""Respondent file upload router."""

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from formcraft.database import get_db
from formcraft.schemas.submission import FileDescriptor
from formcraft.services.rate_limit import limit_public
from formcraft.services.storage import FileStorageService

router = APIRouter()


@router.post("/upload", response_model=FileDescriptor, status_code=status.HTTP_201_CREATED)
@limit_public
async def upload_file(
    request: Request,
    form_id: str = Form(...),
    field_id: str = Form(...),
    file: UploadFile = File(...),
    db: Session = Depends(get_db)
):
    """
    Upload a file for a public form's file field.

    The returned descriptor is what goes into the submission payload.
    """
    return FileStorageService.store_for_field(db, form_id, field_id, file)


@router.get("/{filename}")
@limit_public
async def download_file(request: Request, filename: str):
    path = FileStorageService.resolve_path(filename)
    return FileResponse(path)
