from fastapi import Depends

from app.config import Settings, get_settings
from app.database import JsonRecordStore, get_store
from app.services.product_service import ProductService


def get_product_service(
    store: JsonRecordStore = Depends(get_store),
    settings: Settings = Depends(get_settings),
) -> ProductService:
    """
    Dependency building the product service for one request.

    Example:
        @router.get("/products")
        def list_products(service: ProductService = Depends(get_product_service)):
            return service.list_products()
    """
    return ProductService(store, low_stock_threshold=settings.LOW_STOCK_THRESHOLD)
