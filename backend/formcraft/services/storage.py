"""Local file storage for submission uploads."""

import logging
import os
import re
import secrets
import shutil
from datetime import datetime
from typing import Any, Dict, Optional

from fastapi import HTTPException, UploadFile, status

from formcraft.config import get_settings
from formcraft.errors import InvalidFieldDefinition
from formcraft.schemas.form import FieldType, FileProperties
from formcraft.services.field_types import parse_field
from formcraft.services.file_check import check_file
from formcraft.services.form import FormService

logger = logging.getLogger(__name__)

settings = get_settings()

_SAFE_NAME = re.compile(r"^[A-Za-z0-9._-]+$")


class FileStorageService:
    """Stores raw uploads and hands back descriptors; bytes never reach the form core."""

    @staticmethod
    def _upload_size(file: UploadFile) -> int:
        if file.size is not None:
            return file.size
        file.file.seek(0, os.SEEK_END)
        size = file.file.tell()
        file.file.seek(0)
        return size

    @staticmethod
    def field_constraints(form_fields: list, field_id: str) -> FileProperties:
        for raw in form_fields:
            if raw.get("id") != field_id:
                continue
            field = parse_field(raw)
            if field.type != FieldType.FILE:
                break
            return field.properties if isinstance(field.properties, FileProperties) else FileProperties()
        raise InvalidFieldDefinition("Not a file field", field_id=field_id)

    @staticmethod
    def store(file: UploadFile, upload_dir: Optional[str] = None) -> Dict[str, Any]:
        """Write an upload under a unique name and return its descriptor."""
        upload_dir = upload_dir or settings.upload_dir
        original = file.filename or "upload"
        timestamp = datetime.utcnow().strftime("%Y%m%d_%H%M%S")
        safe_filename = re.sub(r'[^a-zA-Z0-9._-]', '_', os.path.basename(original))
        stored_filename = f"{timestamp}_{secrets.token_hex(4)}_{safe_filename}"
        file_path = os.path.join(upload_dir, stored_filename)

        os.makedirs(upload_dir, exist_ok=True)
        with open(file_path, "wb") as buffer:
            shutil.copyfileobj(file.file, buffer)

        size = os.path.getsize(file_path)
        logger.info("File stored", extra={"stored_filename": stored_filename, "size": size})
        return {
            "name": original,
            "size": size,
            "mime_type": file.content_type or "",
            "url": f"/api/files/{stored_filename}",
        }

    @staticmethod
    def store_for_field(db, form_id: str, field_id: str, file: UploadFile) -> Dict[str, Any]:
        """Check an upload against a public form's file field, then store it."""
        form = FormService.get_public_form(db, form_id)
        props = FileStorageService.field_constraints(form.fields, field_id)
        try:
            check_file(
                file.filename or "",
                FileStorageService._upload_size(file),
                file.content_type or "",
                props.accepted_file_types,
                props.max_file_size,
                field_id=field_id,
            )
        except HTTPException:
            logger.info("Upload rejected", extra={"form_id": form_id, "field_id": field_id})
            raise
        return FileStorageService.store(file)

    @staticmethod
    def resolve_path(filename: str, upload_dir: Optional[str] = None) -> str:
        upload_dir = upload_dir or settings.upload_dir
        if not _SAFE_NAME.match(filename):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid file name"
            )
        path = os.path.join(upload_dir, filename)
        if not os.path.isfile(path):
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="File not found"
            )
        return path
