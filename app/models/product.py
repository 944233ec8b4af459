from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel


def utc_now() -> datetime:
    """Current UTC time truncated to millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as ISO-8601 UTC with milliseconds, e.g. 2025-01-22T10:30:00.000Z."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class Product(BaseModel):
    """
    Product record as persisted in the products document.

    Attributes:
        id: Unique identifier, assigned by the store
        name: Product name (unique, case-insensitive)
        category: Free-form classification label
        price: Unit price (positive)
        stock: Available quantity (non-negative)
        supplier: Supplier name
        created_at: Timestamp when the product was created
        updated_at: Timestamp when the product was last updated
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., gt=0)
    name: str
    category: str
    price: float
    stock: int
    supplier: str
    created_at: datetime
    updated_at: datetime

    @field_serializer("created_at", "updated_at")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)

    def __repr__(self):
        return f"<Product(id={self.id}, name='{self.name}', stock={self.stock})>"
