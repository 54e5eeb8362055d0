"""Record endpoints shared by prompts and tools."""

import logging
from typing import Callable, List, Optional, Type

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel

from ..config import settings
from ..dependencies import get_requester_id, require_requester_id
from ..models import (
    MessageResponse,
    RateRequest,
    RecordKind,
    RecordPage,
    RecordResponse,
    Visibility,
)
from ..services import (
    AccessDeniedError,
    AuthenticationRequiredError,
    FilterSet,
    RecordNotFoundError,
    RecordService,
    RecordValidationError,
    RetrievalError,
)
from ..services.query_builder import DEFAULT_SORT

logger = logging.getLogger(__name__)


def create_record_router(
    kind: RecordKind,
    create_model: Type[BaseModel],
    update_model: Type[BaseModel],
    get_service: Callable[..., RecordService],
) -> APIRouter:
    """
    Build the CRUD, listing and rating routes for one record kind.

    Args:
        kind: Record kind served under ``/api/<kind>s``
        create_model: Request body model for creation
        update_model: Request body model for partial updates
        get_service: Dependency returning the RecordService for the kind

    Returns:
        APIRouter with the record routes
    """
    label = kind.value
    title = label.capitalize()
    router = APIRouter(prefix=f"/api/{label}s", tags=[f"{label}s"])

    @router.get("", response_model=RecordPage)
    async def list_records(
        page: int = Query(1, ge=1, description="Page number (1-indexed)"),
        limit: int = Query(
            settings.default_page_size, ge=1, le=settings.max_page_size, description="Page size"
        ),
        category: Optional[str] = Query(None, description="Exact category"),
        search: Optional[str] = Query(None, description="Text in title, description or tags"),
        visibility: Optional[List[Visibility]] = Query(None, description="One or more visibilities"),
        user_id: Optional[str] = Query(None, alias="userId", description="Owner ID"),
        favorites: Optional[str] = Query(None, description="Rated by this user ID"),
        shared_with: Optional[str] = Query(None, alias="sharedWith"),
        accessible_by: Optional[str] = Query(None, alias="accessibleBy"),
        pricing: Optional[str] = Query(None, description="Exact pricing label"),
        sort: str = Query(DEFAULT_SORT, description="[-]createdAt|updatedAt|rating|reviews|title"),
        requester_id: Optional[str] = Depends(get_requester_id),
        service: RecordService = Depends(get_service),
    ):
        """List records with filters, access control and pagination."""
        if visibility and len(visibility) == 1:
            visibility_filter = visibility[0]
        elif visibility:
            visibility_filter = frozenset(visibility)
        else:
            visibility_filter = None

        try:
            filters = FilterSet(
                page=page,
                limit=limit,
                category=category,
                search=search,
                visibility=visibility_filter,
                user_id=user_id,
                favorites=favorites,
                shared_with=shared_with,
                accessible_by=accessible_by,
                pricing=pricing,
                sort=sort,
            )
            return service.list_records(filters, requester_id)
        except RecordValidationError as e:
            logger.warning(f"Invalid {label} listing request: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except RetrievalError:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Error fetching {label}s",
            )

    @router.get("/{record_id}", response_model=RecordResponse)
    async def get_record(
        record_id: str,
        requester_id: Optional[str] = Depends(get_requester_id),
        service: RecordService = Depends(get_service),
    ):
        """Get one record, subject to its visibility."""
        try:
            return service.get_record(record_id, requester_id)
        except RecordNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{title} not found")
        except AccessDeniedError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        except Exception as e:
            logger.exception(f"Error getting {label} {record_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    @router.post("", response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
    async def create_record(
        payload: create_model,
        requester_id: str = Depends(require_requester_id),
        service: RecordService = Depends(get_service),
    ):
        """Create a record owned by the requester."""
        try:
            return service.create_record(payload, requester_id)
        except AuthenticationRequiredError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
        except RecordValidationError as e:
            logger.warning(f"Validation error creating {label}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except Exception as e:
            logger.exception(f"Error creating {label}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    @router.put("/{record_id}", response_model=RecordResponse)
    async def update_record(
        record_id: str,
        patch: update_model,
        requester_id: str = Depends(require_requester_id),
        service: RecordService = Depends(get_service),
    ):
        """Update a record. Only its owner may do so."""
        try:
            return service.update_record(record_id, requester_id, patch)
        except RecordNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{title} not found")
        except AccessDeniedError as e:
            logger.warning(f"{requester_id} denied update of {label} {record_id}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        except RecordValidationError as e:
            logger.warning(f"Validation error updating {label} {record_id}: {e}")
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except Exception as e:
            logger.exception(f"Error updating {label} {record_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    @router.delete("/{record_id}", response_model=MessageResponse)
    async def delete_record(
        record_id: str,
        requester_id: str = Depends(require_requester_id),
        service: RecordService = Depends(get_service),
    ):
        """Delete a record permanently. Only its owner may do so."""
        try:
            service.delete_record(record_id, requester_id)
            return MessageResponse(message=f"{title} deleted successfully")
        except RecordNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{title} not found")
        except AccessDeniedError as e:
            logger.warning(f"{requester_id} denied delete of {label} {record_id}")
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=str(e))
        except Exception as e:
            logger.exception(f"Error deleting {label} {record_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    @router.post("/{record_id}/rate", response_model=RecordResponse)
    async def rate_record(
        record_id: str,
        request: RateRequest,
        requester_id: str = Depends(require_requester_id),
        service: RecordService = Depends(get_service),
    ):
        """Rate a record from 1 to 5. Rating again replaces the earlier rating."""
        try:
            return service.rate_record(record_id, requester_id, request.rating)
        except AuthenticationRequiredError as e:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
        except RecordNotFoundError:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{title} not found")
        except AccessDeniedError:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Access denied")
        except RecordValidationError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
        except Exception as e:
            logger.exception(f"Error rating {label} {record_id}")
            raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))

    return router
