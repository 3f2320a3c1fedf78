"""
Public bucket reads. Serves the files behind the ``avatar_url`` values that
uploads write to profiles.
"""
from fastapi import APIRouter
from fastapi.responses import FileResponse
from urllib.parse import urlparse

from ..core.config import settings
from ..services.storage_service import StorageService

# Mounted at the path part of STORAGE_PUBLIC_URL so stored URLs resolve here
STORAGE_PATH = urlparse(settings.STORAGE_PUBLIC_URL).path.rstrip("/") or "/storage"

router = APIRouter(prefix=STORAGE_PATH, tags=["Storage"])

@router.get("/{bucket}/{key:path}")
async def get_public_object(bucket: str, key: str):
    return FileResponse(StorageService().object_path(bucket, key))
