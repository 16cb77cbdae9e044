from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query, status

from ....application.services.product_service import ProductService
from ....core.dependencies import get_product_service
from ....domain.models import PageRequest, User
from ....domain.ports.persistence import ProductFilter
from ..dependencies import page_params, require_admin_user
from ..schemas.catalog import ProductCreatePayload, ProductUpdatePayload, StatusPayload
from ..serializers import envelope, serialize_page, serialize_product

router = APIRouter(prefix="/admin/products", tags=["admin-products"])


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreatePayload,
    admin: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product = product_service.create_product(admin, payload.model_dump())
    return envelope("Product created successfully", product=serialize_product(product))


@router.get("/")
def list_products(
    name: Optional[str] = Query(default=None),
    category_id: Optional[str] = Query(default=None, alias="categoryId"),
    is_active: Optional[bool] = Query(default=None, alias="isActive"),
    featured: Optional[bool] = Query(default=None),
    page: PageRequest = Depends(page_params()),
    _: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    filters = ProductFilter(name=name, category_id=category_id, is_active=is_active, featured=featured)
    result = product_service.list_products(filters, page)
    return envelope("Products retrieved successfully", **serialize_page(result, "products", serialize_product))


@router.get("/{product_id}")
def get_product(
    product_id: str,
    _: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product = product_service.get_product(product_id)
    return envelope("Product retrieved successfully", product=serialize_product(product))


def _update(product_id: str, payload: ProductUpdatePayload, product_service: ProductService) -> Dict[str, Any]:
    changes = payload.model_dump(exclude_unset=True, exclude={"images", "remove_images"})
    product, changed = product_service.update_product(
        product_id,
        changes,
        new_images=payload.images,
        remove_images=payload.remove_images,
    )
    message = "Product updated successfully" if changed else "No changes to update"
    return envelope(message, product=serialize_product(product))


@router.put("/{product_id}")
def replace_product_fields(
    product_id: str,
    payload: ProductUpdatePayload,
    _: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    return _update(product_id, payload, product_service)


@router.patch("/{product_id}")
def update_product(
    product_id: str,
    payload: ProductUpdatePayload,
    _: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    return _update(product_id, payload, product_service)


@router.patch("/{product_id}/status")
def set_product_status(
    product_id: str,
    payload: StatusPayload,
    _: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product = product_service.set_product_status(product_id, payload.status)
    state = "activated" if payload.status else "deactivated"
    return envelope(f"Product {state} successfully", product=serialize_product(product))


@router.delete("/{product_id}")
def delete_product(
    product_id: str,
    _: User = Depends(require_admin_user),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product_service.delete_product(product_id)
    return envelope("Product deleted successfully")
