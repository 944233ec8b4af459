from typing import Optional, List
import logging

from app.database import JsonRecordStore
from app.models.product import Product
from app.schemas.product import InventoryStats
from app.services import product_repository
from app.services.product_repository import DraftInput, ProductNotFoundError

logger = logging.getLogger(__name__)


class ProductService:
    """
    Service class for Product CRUD operations.

    Each call works on a fresh copy of the collection:
    - Load the whole products document
    - Apply one repository operation in memory
    - Save the whole document back (mutations only)

    Mutations hold the store's writer lock for the full cycle, so two
    requests in the same process cannot overwrite each other's changes.
    If saving fails the in-memory change is dropped and the error propagates.
    """

    def __init__(self, store: JsonRecordStore, low_stock_threshold: int = 10):
        self.store = store
        self.low_stock_threshold = low_stock_threshold

    def list_products(self, search: Optional[str] = None) -> List[Product]:
        """
        Get all products, optionally filtered.

        Args:
            search: Optional term matched against name, category and supplier

        Returns:
            Matching products in stored order
        """
        products = self.store.load()
        return product_repository.search(products, search)

    def get_product(self, product_id: int) -> Product:
        """
        Get a product by ID.

        Raises:
            ProductNotFoundError: If the product doesn't exist
        """
        product = product_repository.find_by_id(self.store.load(), product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        return product

    def create_product(self, draft: DraftInput) -> Product:
        """
        Create a new product.

        Args:
            draft: Product creation data

        Returns:
            Created product with its assigned id and timestamps
        """
        with self.store.transaction():
            products = self.store.load()
            product = product_repository.create(
                products, draft, last_issued=self.store.read_sequence()
            )
            # Sequence first: a failed save then only skips an id
            self.store.write_sequence(product.id)
            self.store.save(products)

        logger.info(f"Product #{product.id} '{product.name}' created")
        return product

    def update_product(self, product_id: int, draft: DraftInput) -> Product:
        """
        Replace all mutable fields of a product.

        Args:
            product_id: ID of product to update
            draft: New product data

        Returns:
            Updated product
        """
        with self.store.transaction():
            products = self.store.load()
            product = product_repository.update(products, product_id, draft)
            self.store.save(products)

        logger.info(f"Product #{product_id} updated")
        return product

    def delete_product(self, product_id: int) -> Product:
        """
        Delete a product.

        Returns:
            The removed product
        """
        with self.store.transaction():
            products = self.store.load()
            product = product_repository.delete(products, product_id)
            self.store.save(products)

        logger.info(f"Product #{product_id} deleted")
        return product

    def get_statistics(self) -> InventoryStats:
        """Compute inventory statistics over all products."""
        return product_repository.statistics(
            self.store.load(), low_stock_threshold=self.low_stock_threshold
        )
