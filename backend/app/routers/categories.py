"""Category catalog endpoints."""

import logging
from fastapi import APIRouter, Depends, HTTPException, status

from ..dependencies import get_category_service
from ..models import CategoryList, CategoryResponse
from ..services import CategoryService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/categories", tags=["categories"])


@router.get("", response_model=CategoryList)
async def list_categories(service: CategoryService = Depends(get_category_service)):
    """List all categories ordered by name."""
    try:
        categories = service.list_categories()
        return CategoryList(categories=categories, total=len(categories))
    except Exception as e:
        logger.exception("Error listing categories")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )


@router.get("/{slug}", response_model=CategoryResponse)
async def get_category(slug: str, service: CategoryService = Depends(get_category_service)):
    """Get one category by slug."""
    try:
        category = service.get_category(slug)
        if not category:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category '{slug}' not found",
            )
        return category
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("Error getting category")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e)
        )
