from sqlalchemy.orm import Session
from fastapi import HTTPException, UploadFile, status
from pathlib import Path
import logging
import time
import aiofiles

from ..core.config import settings
from ..models.patient import PatientProfile

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/webp": "webp",
    "image/gif": "gif",
}

class StorageService:
    """Profile picture storage in a public bucket on the local filesystem."""

    def __init__(self, db: Session = None, root: str = None, public_url: str = None):
        self.db = db
        self.root = Path(root or settings.STORAGE_ROOT)
        self.public_url = (public_url or settings.STORAGE_PUBLIC_URL).rstrip("/")
        self.bucket = settings.AVATAR_BUCKET

    def object_key(self, user_id: str, content_type: str) -> str:
        """``<user_id>/<epoch millis>.<ext>``, the extension taken from the validated content type."""
        return f"{user_id}/{int(time.time() * 1000)}.{ALLOWED_IMAGE_TYPES[content_type]}"

    def get_public_url(self, key: str) -> str:
        return f"{self.public_url}/{self.bucket}/{key}"

    def object_path(self, bucket: str, key: str) -> Path:
        """Location of a stored object; 404 for other buckets, missing files and paths outside the bucket."""
        bucket_root = (self.root / self.bucket).resolve()
        path = (bucket_root / key).resolve()

        if bucket != self.bucket or bucket_root not in path.parents or not path.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="File not found"
            )
        return path

    async def upload_avatar(self, user_id: str, file: UploadFile) -> dict:
        """Validate, store and link a new profile picture for the caller."""
        if file.content_type not in ALLOWED_IMAGE_TYPES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid file type. Please upload a JPEG, PNG, WebP, or GIF image."
            )

        content = await file.read()
        if len(content) > settings.AVATAR_MAX_BYTES:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="File too large. Please upload an image smaller than 5MB."
            )

        profile = self.db.query(PatientProfile).filter(
            PatientProfile.user_id == user_id
        ).first()
        if not profile:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="Please complete your profile first."
            )

        key = self.object_key(user_id, file.content_type)
        destination = self.root / self.bucket / key
        destination.parent.mkdir(parents=True, exist_ok=True)

        async with aiofiles.open(destination, "wb") as f:
            await f.write(content)

        public_url = self.get_public_url(key)
        profile.avatar_url = public_url
        self.db.commit()

        logger.info(f"Stored avatar for user {user_id} at {key}")
        return {"avatar_url": public_url, "path": key}
