import time
import uuid
from pathlib import Path
from typing import List, Optional, Tuple
from fastapi import UploadFile
from sqlalchemy.orm import Session
from schoolhub.crud import content as content_crud, subject as subject_crud
from schoolhub.models.content import Content, ContentType, ContentStatus
from schoolhub.schemas.content import ContentUpdate
from schoolhub.core.config import settings
from schoolhub.core.exceptions import NotFoundError, ValidationError
from schoolhub.core.logging_config import logger

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/vnd.ms-powerpoint",
    "application/vnd.openxmlformats-officedocument.presentationml.presentation",
    "video/mp4",
    "video/avi",
    "video/mov",
    "image/jpeg",
    "image/png",
    "image/gif",
    "text/plain",
    "application/zip",
}

CHUNK_SIZE = 1024 * 1024


def parse_tags(raw: Optional[str]) -> List[str]:
    """Comma separated form value -> trimmed, non-empty tags."""
    if not raw:
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


class ContentService:
    """
    Learning material metadata plus the optional uploaded file.

    Files land under ``UPLOAD_DIR/content`` with a generated name; the row
    keeps the original name, size and MIME type.
    """

    def __init__(self):
        self.crud = content_crud

    @property
    def storage_dir(self) -> Path:
        return Path(settings.UPLOAD_DIR) / "content"

    def get_content(self, db: Session, content_id: int, tenant_id: int) -> Content:
        content = self.crud.get(db=db, id=content_id, tenant_id=tenant_id)
        if not content:
            raise NotFoundError("Content")
        return content

    def get_contents(self, db: Session, tenant_id: int, page: int = 1, limit: int = 10, **filters) -> Tuple[List[Content], int]:
        return self.crud.get_filtered(db, tenant_id=tenant_id, page=page, limit=limit, **filters)

    def store_upload(self, file: UploadFile) -> dict:
        """
        Copy an upload to disk in chunks, enforcing the MIME whitelist and size cap.

        Blocking I/O; callers run in the request threadpool.

        Returns:
            Column values describing the stored file

        Raises:
            ValidationError: MIME type not allowed or file too large
        """
        if file.content_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(f"File type {file.content_type} not allowed")

        original_name = file.filename or "upload"
        stored_name = f"{uuid.uuid4()}-{int(time.time() * 1000)}{Path(original_name).suffix}"
        self.storage_dir.mkdir(parents=True, exist_ok=True)
        target = self.storage_dir / stored_name

        size = 0
        try:
            with open(target, "wb") as out:
                while True:
                    chunk = file.file.read(CHUNK_SIZE)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > settings.MAX_UPLOAD_SIZE:
                        raise ValidationError(
                            f"File exceeds the maximum size of {settings.MAX_UPLOAD_SIZE // (1024 * 1024)}MB"
                        )
                    out.write(chunk)
        except Exception:
            target.unlink(missing_ok=True)
            raise

        logger.info(f"Stored upload '{original_name}' as {stored_name} ({size} bytes)")
        return {
            "file_name": original_name,
            "file_path": stored_name,
            "file_size": size,
            "mime_type": file.content_type,
        }

    def remove_file(self, file_path: Optional[str]) -> None:
        if file_path:
            (self.storage_dir / file_path).unlink(missing_ok=True)

    def create_content(
        self,
        db: Session,
        *,
        tenant_id: int,
        created_by: int,
        title: str,
        content_type: ContentType,
        description: Optional[str] = None,
        subject_id: Optional[int] = None,
        grade_level: Optional[str] = None,
        tags: Optional[str] = None,
        file_info: Optional[dict] = None
    ) -> Content:
        if not title.strip():
            raise ValidationError("Title is required", errors=[{"field": "title", "message": "Field required"}])
        try:
            if subject_id and not subject_crud.get(db=db, id=subject_id, tenant_id=tenant_id):
                raise NotFoundError("Subject")
            content = self.crud.create(
                db,
                obj_in={
                    "title": title.strip(),
                    "description": description,
                    "content_type": content_type,
                    "status": ContentStatus.DRAFT,
                    "subject_id": subject_id,
                    "grade_level": grade_level,
                    "tags": parse_tags(tags),
                    **(file_info or {}),
                },
                tenant_id=tenant_id,
                created_by=created_by,
            )
        except Exception:
            # The row never landed; drop the orphaned file
            self.remove_file((file_info or {}).get("file_path"))
            raise
        return self.get_content(db, content.id, tenant_id)

    def update_content(self, db: Session, content_id: int, content_data: ContentUpdate, tenant_id: int) -> Content:
        content = self.get_content(db, content_id, tenant_id)
        update_data = content_data.model_dump(exclude_unset=True)
        if update_data.get("subject_id") and not subject_crud.get(
            db=db, id=update_data["subject_id"], tenant_id=tenant_id
        ):
            raise NotFoundError("Subject")
        self.crud.update(db=db, db_obj=content, obj_in=update_data)
        return self.get_content(db, content.id, tenant_id)

    def delete_content(self, db: Session, content_id: int, tenant_id: int) -> None:
        content = self.get_content(db, content_id, tenant_id)
        file_path = content.file_path
        self.crud.delete(db=db, id=content.id, tenant_id=tenant_id)
        self.remove_file(file_path)


content_service = ContentService()
