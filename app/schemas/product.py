from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

# Keeps price x stock, and sums of it, well inside float range
MAX_PRICE = 1_000_000_000
MAX_STOCK = 1_000_000_000


class ProductDraft(BaseModel):
    """Unvalidated product payload accepted on create and update."""
    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")

    name: str = Field(..., min_length=2, max_length=255, description="Product name (unique, case-insensitive)")
    category: str = Field(..., min_length=1, description="Product category")
    price: float = Field(..., gt=0, le=MAX_PRICE, allow_inf_nan=False, description="Unit price (must be positive)")
    stock: int = Field(..., ge=0, le=MAX_STOCK, description="Available stock (must be non-negative)")
    supplier: str = Field(..., min_length=2, max_length=255, description="Supplier name")

    @field_validator("price", "stock", mode="before")
    @classmethod
    def _reject_booleans(cls, value):
        if isinstance(value, bool):
            raise ValueError("must be a number")
        return value


class ProductCreate(ProductDraft):
    """Schema for creating a new product."""
    pass


class ProductUpdate(ProductDraft):
    """Schema for replacing every mutable field of an existing product."""
    pass


class InventoryStats(BaseModel):
    """Aggregate figures over the whole product collection."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    total_products: int = Field(..., description="Number of products")
    total_stock: int = Field(..., description="Sum of stock over all products")
    total_value: float = Field(..., description="Sum of price x stock")
    categories: int = Field(..., description="Number of distinct categories")
    low_stock_products: int = Field(..., description="Products below the low-stock threshold")
