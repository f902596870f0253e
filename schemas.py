"""
Record Schemas

Pydantic models for the records kept in the file-backed collections.
These schemas are used to validate and normalize payloads before they
are written back to disk.

Each collection stores JSON with camelCase keys, the same keys the
browser clients send and read:
- Product    -> "products" collection (array)
- SiteConfig -> "site-config" collection (single object)
- Order      -> "orders" collection (array)
"""

import uuid
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


def new_product_id() -> str:
    return f"prod-{uuid.uuid4()}"


def new_order_id() -> str:
    return f"order-{uuid.uuid4()}"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Product(BaseModel):
    """
    Products collection schema
    Collection name: "products"
    """
    id: str = Field(default_factory=new_product_id, description="Stable product id")
    name: str = Field(..., min_length=1, description="Product name")
    category: str = Field(..., min_length=1, description="Product category")
    price: float = Field(..., ge=0, allow_inf_nan=False, description="Unit price")
    currency: str = Field("CNY", description="Currency code")
    description: str = ""
    image: str = Field("", description="Image URL")
    features: List[str] = Field(default_factory=list, description="Selling points, in display order")
    inventory: int = Field(0, ge=0, description="Units in stock")
    badge: str = ""

    @field_validator("id", mode="before")
    @classmethod
    def _generate_missing_id(cls, value):
        return value or new_product_id()

    @field_validator("price", mode="before")
    @classmethod
    def _price_is_number(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError("price must be a number")
        return value

    @field_validator("currency", mode="before")
    @classmethod
    def _default_currency(cls, value):
        return value or "CNY"

    @field_validator("description", "image", "badge", mode="before")
    @classmethod
    def _default_blank(cls, value):
        return value or ""

    @field_validator("features", mode="before")
    @classmethod
    def _default_features(cls, value):
        return value if isinstance(value, list) else []

    @field_validator("inventory", mode="before")
    @classmethod
    def _coerce_inventory(cls, value):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return 0
        return int(value)


class HeroAction(BaseModel):
    model_config = ConfigDict(extra="allow")

    label: Optional[str] = None
    href: Optional[str] = None


class Hero(CamelModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    subtitle: str = ""
    background_image: str = ""
    primary_action: Optional[HeroAction] = None
    secondary_action: Optional[HeroAction] = None


class Highlight(BaseModel):
    title: str = ""
    description: str = ""


class Consult(BaseModel):
    model_config = ConfigDict(extra="allow")

    title: str = ""
    description: str = ""


class Footer(BaseModel):
    model_config = ConfigDict(extra="allow")

    email: str = ""
    phone: str = ""
    address: str = ""


class SiteConfig(BaseModel):
    """
    Site configuration schema
    Collection name: "site-config" (a single record)
    """
    model_config = ConfigDict(extra="allow")

    brand: str = ""
    hero: Hero = Field(default_factory=Hero)
    highlights: List[Highlight] = Field(default_factory=list)
    consult: Consult = Field(default_factory=Consult)
    footer: Footer = Field(default_factory=Footer)


class OrderItem(CamelModel):
    product_id: str
    name: str
    unit_price: float = Field(..., ge=0, allow_inf_nan=False)
    quantity: int = Field(..., ge=1)


class Payment(BaseModel):
    method: str = Field("offline", description="Payment method chosen by the customer")
    status: str = Field("pending", description="Always pending: no gateway settles orders")
    reference: str = Field("", description="External payment reference")


class Order(CamelModel):
    """
    Orders collection schema
    Collection name: "orders"
    """
    id: str = Field(default_factory=new_order_id)
    created_at: datetime
    items: List[OrderItem]
    customer: Dict[str, Any] = Field(default_factory=dict)
    payment: Payment = Field(default_factory=Payment)
    total: float = Field(..., ge=0, allow_inf_nan=False)


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class Identity(BaseModel):
    email: EmailStr


class Session(CamelModel):
    token: str
    identity: Identity
    issued_at: datetime
