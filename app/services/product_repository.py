"""
In-memory operations over a loaded product collection.

Every function takes the whole collection and, for mutations, changes it in
place. Loading before and saving after is the caller's job.
"""
from typing import Any, Mapping, Optional, Sequence, Union

import pydantic

from app.models.product import Product, utc_now
from app.schemas.product import InventoryStats, ProductDraft
from app.schemas.response import FieldError, field_errors_from

DraftInput = Union[ProductDraft, Mapping[str, Any]]

DEFAULT_LOW_STOCK_THRESHOLD = 10


class ProductValidationError(Exception):
    """Exception raised when a product draft has missing or invalid fields."""

    def __init__(self, errors: list[FieldError]):
        self.errors = errors
        if errors:
            message = "; ".join(f"{e.field}: {e.message}" for e in errors)
        else:
            message = "Invalid product data"
        super().__init__(message)


class ProductConflictError(Exception):
    """Exception raised when a product name is already taken."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Product with name '{name}' already exists")


class ProductNotFoundError(Exception):
    """Exception raised when the requested product doesn't exist."""

    def __init__(self, product_id: int):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} not found")


def validate_draft(draft: DraftInput) -> ProductDraft:
    """
    Validate a raw draft into a ProductDraft.

    Raises:
        ProductValidationError: With one entry per invalid field
    """
    if isinstance(draft, ProductDraft):
        return draft
    try:
        return ProductDraft.model_validate(draft)
    except pydantic.ValidationError as e:
        raise ProductValidationError(field_errors_from(e.errors())) from e


def next_id(products: Sequence[Product], last_issued: int = 0) -> int:
    """
    Return the id for the next product.

    Args:
        products: Current collection
        last_issued: Highest id ever issued, from the persisted sequence

    Returns:
        One more than the larger of the highest existing id and last_issued
    """
    highest = max((p.id for p in products), default=0)
    return max(highest, last_issued) + 1


def find_by_id(products: Sequence[Product], product_id: int) -> Optional[Product]:
    for product in products:
        if product.id == product_id:
            return product
    return None


def _index_of(products: Sequence[Product], product_id: int) -> int:
    for index, product in enumerate(products):
        if product.id == product_id:
            return index
    raise ProductNotFoundError(product_id)


def _name_taken(products: Sequence[Product], name: str, exclude_id: Optional[int] = None) -> bool:
    wanted = name.casefold()
    return any(p.name.casefold() == wanted and p.id != exclude_id for p in products)


def search(products: Sequence[Product], term: Optional[str]) -> list[Product]:
    """
    Case-insensitive substring search on name, category and supplier.

    An empty or missing term returns every product in stored order.
    """
    if term is None or not term.strip():
        return list(products)

    needle = term.strip().casefold()
    return [
        p for p in products
        if needle in p.name.casefold()
        or needle in p.category.casefold()
        or needle in p.supplier.casefold()
    ]


def create(products: list[Product], draft: DraftInput, last_issued: int = 0) -> Product:
    """
    Validate a draft and append it as a new product.

    Args:
        products: Collection to append to
        draft: Product fields to create
        last_issued: Highest id ever issued

    Returns:
        The created product

    Raises:
        ProductValidationError: If the draft is invalid
        ProductConflictError: If the name is already used
    """
    data = validate_draft(draft)
    if _name_taken(products, data.name):
        raise ProductConflictError(data.name)

    now = utc_now()
    product = Product(
        id=next_id(products, last_issued),
        created_at=now,
        updated_at=now,
        **data.model_dump(),
    )
    products.append(product)
    return product


def update(products: list[Product], product_id: int, draft: DraftInput) -> Product:
    """
    Replace every mutable field of an existing product.

    The id and creation time are kept and the update time is refreshed.

    Raises:
        ProductValidationError: If the draft is invalid
        ProductNotFoundError: If no product has this id
        ProductConflictError: If another product already uses the name
    """
    data = validate_draft(draft)
    index = _index_of(products, product_id)
    if _name_taken(products, data.name, exclude_id=product_id):
        raise ProductConflictError(data.name)

    updated = products[index].model_copy(
        update={**data.model_dump(), "updated_at": utc_now()}
    )
    products[index] = updated
    return updated


def delete(products: list[Product], product_id: int) -> Product:
    """
    Remove a product and return it.

    Raises:
        ProductNotFoundError: If no product has this id
    """
    return products.pop(_index_of(products, product_id))


def statistics(
    products: Sequence[Product],
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
) -> InventoryStats:
    """Compute aggregate figures for the collection."""
    return InventoryStats(
        total_products=len(products),
        total_stock=sum(p.stock for p in products),
        total_value=sum(p.price * p.stock for p in products),
        categories=len({p.category for p in products}),
        low_stock_products=sum(1 for p in products if p.stock < low_stock_threshold),
    )
