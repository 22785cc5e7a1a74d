from decimal import Decimal
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator

from bazaarbuddy.models.item import CATEGORIES, UNITS


def _choice(value, allowed, label):
    if value is None:
        return value
    norm = str(value).strip().lower()
    if norm not in allowed:
        raise ValueError(f"{label} must be one of: {', '.join(allowed)}")
    return norm


class AddItemRequest(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    category: str
    unit: str
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)
    stock: int = Field(default=0, ge=0)
    description: Optional[str] = ""
    image: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _category(cls, v):
        return _choice(v, CATEGORIES, "category")

    @field_validator("unit")
    @classmethod
    def _unit(cls, v):
        return _choice(v, UNITS, "unit")


class UpdateItemRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    category: Optional[str] = None
    unit: Optional[str] = None
    price: Optional[Decimal] = Field(default=None, ge=0, max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0)
    description: Optional[str] = None
    image: Optional[str] = None

    @field_validator("category")
    @classmethod
    def _category(cls, v):
        return _choice(v, CATEGORIES, "category")

    @field_validator("unit")
    @classmethod
    def _unit(cls, v):
        return _choice(v, UNITS, "unit")


class BulkItemsRequest(BaseModel):
    items: List[dict] = Field(min_length=1)
