from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ....application.services.category_service import CategoryService
from ....core.dependencies import get_category_service
from ....domain.models import PageRequest
from ..dependencies import page_params
from ..serializers import envelope, serialize_category, serialize_page

router = APIRouter(prefix="/public/categories", tags=["public-categories"])

_public_page = page_params(default_sort_by="name", default_sort_order="ASC")


@router.get("/")
def list_categories(
    page: PageRequest = Depends(_public_page),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    result = category_service.list_categories(page, is_active=True)
    return envelope("Categories retrieved successfully", **serialize_page(result, "categories", serialize_category))


@router.get("/search")
def search_categories(
    name: Optional[str] = Query(default=None),
    page: PageRequest = Depends(_public_page),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    result = category_service.list_categories(page, name=name, is_active=True)
    return envelope("Categories filtered successfully", **serialize_page(result, "categories", serialize_category))


@router.get("/{slug}")
def get_category(
    slug: str,
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    category = category_service.get_category_by_slug(slug, active_only=True)
    return envelope("Category retrieved successfully", category=serialize_category(category))
