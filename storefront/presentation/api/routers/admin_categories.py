from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....application.services.category_service import CategoryService
from ....core.dependencies import get_category_service
from ....domain.models import PageRequest, User
from ..dependencies import page_params, require_admin_user
from ..schemas.catalog import CategoryCreatePayload, CategoryUpdatePayload, StatusPayload
from ..serializers import envelope, serialize_category, serialize_page

router = APIRouter(prefix="/admin/categories", tags=["admin-categories"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_category(
    payload: CategoryCreatePayload,
    admin: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    category = category_service.create_category(
        admin,
        name=payload.name,
        title=payload.title,
        description=payload.description,
        image=payload.image,
        is_active=payload.is_active,
    )
    return envelope("Category created successfully", category=serialize_category(category))


@router.get("/")
def list_categories(
    page: PageRequest = Depends(page_params()),
    _: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    result = category_service.list_categories(page)
    return envelope("Categories retrieved successfully", **serialize_page(result, "categories", serialize_category))


@router.get("/slug/{slug}")
def get_category_by_slug(
    slug: str,
    _: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    category = category_service.get_category_by_slug(slug)
    return envelope("Category retrieved successfully", category=serialize_category(category))


@router.get("/filter")
def filter_categories(
    name: Optional[str] = Query(default=None),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    page: PageRequest = Depends(page_params()),
    _: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    result = category_service.list_categories(page, name=name, is_active=is_active)
    return envelope("Categories filtered successfully", **serialize_page(result, "categories", serialize_category))


@router.put("/{category_id}")
def update_category(
    category_id: str,
    payload: CategoryUpdatePayload,
    _: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    category, changed = category_service.update_category(category_id, payload.model_dump(exclude_unset=True))
    message = "Category updated successfully" if changed else "No changes to update"
    return envelope(message, category=serialize_category(category))


@router.patch("/{category_id}/status")
def set_category_status(
    category_id: str,
    payload: StatusPayload,
    _: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    category = category_service.set_category_status(category_id, payload.status)
    state = "activated" if payload.status else "deactivated"
    return envelope(f"Category {state} successfully", category=serialize_category(category))


@router.delete("/{category_id}")
def delete_category(
    category_id: str,
    _: User = Depends(require_admin_user),
    category_service: CategoryService = Depends(get_category_service),
) -> Dict[str, Any]:
    category_service.delete_category(category_id)
    return envelope("Category deleted successfully")
