"""Profile picture storage: files on local disk, referenced as `<prefix>/<name>`."""

import os
import uuid
from typing import List, Optional

import structlog
from fastapi import UploadFile

from employee_manager.core.exceptions import FieldError, ValidationError

logger = structlog.get_logger(__name__)

ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
ALLOWED_CONTENT_TYPES = {"image/jpeg", "image/png", "image/gif", "image/webp"}
FIELD_NAME = "profilePicture"


class PictureStorage:
    def __init__(self, base_dir: str, url_prefix: str = "/uploads", max_size_mb: int = 5):
        self.base_dir = base_dir
        self.url_prefix = "/" + url_prefix.strip("/")
        self.max_bytes = max_size_mb * 1024 * 1024

    @staticmethod
    def extension(filename: str) -> str:
        return os.path.splitext(filename or "")[1].lower()

    def check(self, upload: UploadFile) -> List[FieldError]:
        """Type checks that can run before anything is written."""
        content_type = (upload.content_type or "").split(";")[0].strip().lower()
        if self.extension(upload.filename) not in ALLOWED_EXTENSIONS or (
            content_type and content_type not in ALLOWED_CONTENT_TYPES
        ):
            return [{"field": FIELD_NAME, "message": "Only image files (jpg, jpeg, png, gif, webp) are allowed"}]
        return []

    async def save(self, upload: UploadFile) -> str:
        """Write the upload under a generated name and return its reference."""
        errors = self.check(upload)
        # One byte past the limit is enough to tell an oversized upload apart
        content = await upload.read(self.max_bytes + 1)
        if len(content) > self.max_bytes:
            errors.append({
                "field": FIELD_NAME,
                "message": f"File too large (max {self.max_bytes // (1024 * 1024)} MB)",
            })
        if errors:
            raise ValidationError(errors)

        os.makedirs(self.base_dir, exist_ok=True)
        name = f"{uuid.uuid4().hex}{self.extension(upload.filename)}"
        with open(os.path.join(self.base_dir, name), "wb") as f:
            f.write(content)

        logger.info("Profile picture stored", file=name, size=len(content))
        return f"{self.url_prefix}/{name}"

    def path_for(self, ref: str) -> Optional[str]:
        """Resolve a stored reference to a path inside the upload directory."""
        if not ref or not ref.startswith(self.url_prefix + "/"):
            return None
        name = os.path.basename(ref)
        if not name or name in (".", ".."):
            return None
        return os.path.join(self.base_dir, name)

    def delete(self, ref: str) -> bool:
        path = self.path_for(ref)
        if path is None or not os.path.exists(path):
            return False
        try:
            os.remove(path)
        except OSError as exc:
            logger.warning("Could not delete profile picture", ref=ref, error=str(exc))
            return False
        logger.info("Profile picture deleted", ref=ref)
        return True
