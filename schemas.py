from __future__ import annotations
from typing import Any
from pydantic import BaseModel, field_validator

# Storefront schemas

class Product(BaseModel):
    id: int
    name: str
    description: str
    price: float
    image_url: str

class OrderIn(BaseModel):
    name: str
    email: str
    phone: str
    address: str
    product_id: int
    quantity: int = 1

    @field_validator("quantity", mode="before")
    @classmethod
    def default_quantity(cls, value: Any) -> int:
        # Missing, fractional or unparseable quantities count as a single item
        if isinstance(value, bool):
            return 1
        if isinstance(value, float) and not value.is_integer():
            return 1
        try:
            return int(value)
        except (TypeError, ValueError, OverflowError):
            return 1

class OrderPlaced(BaseModel):
    message: str = "Order placed successfully!"
