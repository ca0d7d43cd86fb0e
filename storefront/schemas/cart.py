"""Cart schemas"""

from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from decimal import Decimal

class CartLineItem(BaseModel):
    """Single cart line as stored in the cart's items column"""
    product_id: str
    name: str
    slug: str
    qty: int = Field(..., gt=0)
    price: Decimal
    image: Optional[str] = None

class CartRecord(BaseModel):
    """Detached snapshot of a cart row"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = None
    session_cart_id: Optional[str] = None
    items: List[dict] = Field(default_factory=list)
    items_price: Decimal = Decimal("0")
    tax_price: Decimal = Decimal("0")
    shipping_price: Decimal = Decimal("0")
    total_price: Decimal = Decimal("0")

    def content_fields(self) -> dict:
        """Line items and totals, the part of a cart that moves with it"""
        return {
            "items": list(self.items),
            "items_price": self.items_price,
            "tax_price": self.tax_price,
            "shipping_price": self.shipping_price,
            "total_price": self.total_price,
        }

class CartResponse(BaseModel):
    """Cart returned by the API"""
    id: str
    user_id: Optional[str] = None
    session_cart_id: Optional[str] = None
    items: List[CartLineItem] = Field(default_factory=list)
    items_price: Decimal
    tax_price: Decimal
    shipping_price: Decimal
    total_price: Decimal

    @classmethod
    def from_record(cls, record: CartRecord) -> "CartResponse":
        return cls(**record.model_dump())
