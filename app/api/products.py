from fastapi import APIRouter, Depends, HTTPException, Query, status
from typing import List, Optional

from app.api.deps import get_product_service
from app.models.product import Product
from app.schemas.product import ProductCreate, ProductUpdate
from app.schemas.response import ApiResponse
from app.services.product_service import ProductService
from app.services.product_repository import ProductConflictError, ProductNotFoundError

router = APIRouter(prefix="/products", tags=["Products"])


@router.get(
    "",
    response_model=ApiResponse[List[Product]],
    response_model_exclude_none=True,
    summary="List all products",
    description="Get every product, optionally filtered by a search term."
)
@router.get("/", response_model=ApiResponse[List[Product]], response_model_exclude_none=True, include_in_schema=False)
def list_products(
    search: Optional[str] = Query(None, description="Search by name, category or supplier"),
    service: ProductService = Depends(get_product_service)
):
    """Get all products matching the optional search term, in stored order."""
    products = service.list_products(search)
    return ApiResponse[List[Product]](
        success=True,
        data=products,
        message=f"Fetched {len(products)} products"
    )


@router.get(
    "/{product_id}",
    response_model=ApiResponse[Product],
    response_model_exclude_none=True,
    summary="Get product by ID",
    description="Get detailed information about a specific product."
)
def get_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Get a product by ID."""
    try:
        product = service.get_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return ApiResponse[Product](success=True, data=product)


@router.post(
    "",
    response_model=ApiResponse[Product],
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new product",
    description="Create a new product. Names must be unique regardless of case."
)
@router.post("/", response_model=ApiResponse[Product], response_model_exclude_none=True, status_code=status.HTTP_201_CREATED, include_in_schema=False)
def create_product(
    product_data: ProductCreate,
    service: ProductService = Depends(get_product_service)
):
    """
    Create a new product.

    - **name**: Product name, at least 2 characters (required)
    - **category**: Product category (required)
    - **price**: Unit price, must be positive (required)
    - **stock**: Initial stock quantity, must be non-negative (required)
    - **supplier**: Supplier name, at least 2 characters (required)
    """
    try:
        product = service.create_product(product_data)
    except ProductConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return ApiResponse[Product](
        success=True,
        data=product,
        message="Product created successfully"
    )


@router.put(
    "/{product_id}",
    response_model=ApiResponse[Product],
    response_model_exclude_none=True,
    summary="Update a product",
    description="Replace every field of a product except its id and creation time."
)
def update_product(
    product_id: int,
    product_data: ProductUpdate,
    service: ProductService = Depends(get_product_service)
):
    """
    Update a product.

    All fields are required; the product's update time is refreshed.
    """
    try:
        product = service.update_product(product_id, product_data)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )
    except ProductConflictError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )

    return ApiResponse[Product](
        success=True,
        data=product,
        message="Product updated successfully"
    )


@router.delete(
    "/{product_id}",
    response_model=ApiResponse[Product],
    response_model_exclude_none=True,
    summary="Delete a product",
    description="Delete a product by ID and return the removed record."
)
def delete_product(
    product_id: int,
    service: ProductService = Depends(get_product_service)
):
    """Delete a product."""
    try:
        product = service.delete_product(product_id)
    except ProductNotFoundError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )

    return ApiResponse[Product](
        success=True,
        data=product,
        message="Product deleted successfully"
    )
