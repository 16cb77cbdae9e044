from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, Query

from ....application.services.product_service import ProductService
from ....core.dependencies import get_product_service
from ....domain.models import PageRequest
from ....domain.ports.persistence import ProductFilter
from ..dependencies import page_params
from ..serializers import envelope, serialize_page, serialize_product

router = APIRouter(prefix="/public/products", tags=["public-products"])

_public_page = page_params(default_limit=12)


@router.get("/")
def list_products(
    page: PageRequest = Depends(_public_page),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    result = product_service.list_products(ProductFilter(is_active=True, category_active=True), page)
    return envelope("Products retrieved successfully", **serialize_page(result, "products", serialize_product))


@router.get("/featured")
def featured_products(
    limit: int = Query(default=8, ge=1, le=100),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    result = product_service.featured_products(limit)
    return envelope(
        "Featured products retrieved successfully", **serialize_page(result, "products", serialize_product)
    )


@router.get("/search")
def search_products(
    name: Optional[str] = Query(default=None),
    category_id: Optional[str] = Query(default=None, alias="categoryId"),
    min_price: Optional[float] = Query(default=None, alias="minPrice", ge=0),
    max_price: Optional[float] = Query(default=None, alias="maxPrice", ge=0),
    page: PageRequest = Depends(_public_page),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    filters = ProductFilter(
        name=name,
        category_id=category_id,
        min_price=min_price,
        max_price=max_price,
        is_active=True,
        category_active=True,
    )
    result = product_service.list_products(filters, page)
    return envelope("Products retrieved successfully", **serialize_page(result, "products", serialize_product))


@router.get("/category/slug/{slug}")
def products_by_category_slug(
    slug: str,
    page: PageRequest = Depends(_public_page),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    result = product_service.products_by_category_slug(slug, page)
    return envelope("Products retrieved successfully", **serialize_page(result, "products", serialize_product))


@router.get("/category/{category_id}")
def products_by_category(
    category_id: str,
    page: PageRequest = Depends(_public_page),
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    result = product_service.products_by_category_id(category_id, page)
    return envelope("Products retrieved successfully", **serialize_page(result, "products", serialize_product))


@router.get("/slug/{slug}")
def get_product_by_slug(
    slug: str,
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product = product_service.get_product_by_slug(slug, public=True)
    return envelope("Product retrieved successfully", product=serialize_product(product))


@router.get("/{product_id}")
def get_product(
    product_id: str,
    product_service: ProductService = Depends(get_product_service),
) -> Dict[str, Any]:
    product = product_service.get_product(product_id, public=True)
    return envelope("Product retrieved successfully", product=serialize_product(product))
