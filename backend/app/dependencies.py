"""FastAPI dependencies shared by the routers."""

from typing import Optional

from fastapi import Depends, HTTPException, Request, status

from .config import settings
from .models import RecordKind
from .services import CategoryService, RecordService, StorageService, get_storage_service


def get_requester_id(request: Request) -> Optional[str]:
    """Identity of the caller as set by the authentication layer, if any."""
    value = request.headers.get(settings.requester_header, "").strip()
    return value or None


def require_requester_id(requester_id: Optional[str] = Depends(get_requester_id)) -> str:
    """Identity of the caller; anonymous requests are rejected with 401."""
    if not requester_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return requester_id


def get_prompt_service(storage: StorageService = Depends(get_storage_service)) -> RecordService:
    return RecordService(RecordKind.PROMPT, storage.records, storage.users)


def get_tool_service(storage: StorageService = Depends(get_storage_service)) -> RecordService:
    return RecordService(RecordKind.TOOL, storage.records, storage.users)


def get_category_service(storage: StorageService = Depends(get_storage_service)) -> CategoryService:
    return CategoryService(storage.records, storage.categories)
