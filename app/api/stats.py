from fastapi import APIRouter, Depends

from app.api.deps import get_product_service
from app.schemas.product import InventoryStats
from app.schemas.response import ApiResponse
from app.services.product_service import ProductService

router = APIRouter(prefix="/stats", tags=["Statistics"])


@router.get(
    "",
    response_model=ApiResponse[InventoryStats],
    response_model_exclude_none=True,
    summary="Inventory statistics",
    description="Product count, total stock, total stock value, distinct categories and low-stock count."
)
@router.get("/", response_model=ApiResponse[InventoryStats], response_model_exclude_none=True, include_in_schema=False)
def get_stats(service: ProductService = Depends(get_product_service)):
    """
    Get aggregate statistics.

    The client also polls this endpoint to check that the server is reachable.
    """
    return ApiResponse[InventoryStats](success=True, data=service.get_statistics())
