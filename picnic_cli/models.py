"""Data models for picnic-cli."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class OutputFormat(str, Enum):
    PRETTY = "pretty"
    JSON = "json"
    TABLE = "table"


class CountryCode(str, Enum):
    NL = "NL"
    DE = "DE"


class DeliveryStatus(str, Enum):
    CURRENT = "CURRENT"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class ImageSize(str, Enum):
    TINY = "tiny"
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"
    EXTRA_LARGE = "extra-large"


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"


@dataclass
class Category:
    id: str
    name: str
    image_id: str | None = None


@dataclass
class CategoryProduct:
    id: str
    name: str
    price: int | None  # cents
    unit_quantity: str = ""
    image_id: str | None = None


@dataclass
class CategoryListing:
    subcategories: list[Category] = field(default_factory=list)
    products: list[CategoryProduct] = field(default_factory=list)
    raw: Any = field(default=None, repr=False)


@dataclass
class ProductInfo:
    id: str
    name: str
    brand: str = ""
    unit_quantity: str = ""
    base_price: str = ""
    display_price: int | None = None  # cents
    description: str = ""
    highlights: list[str] = field(default_factory=list)
    allergens: list[str] = field(default_factory=list)
    ingredients: str = ""
    raw: Any = field(default=None, repr=False)
