"""
Shopping cart model
One row per cart; owned by a user, an anonymous session, or both
"""

from sqlalchemy import Column, String, Numeric, JSON, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship

from .base import Base, TimestampedModel, UUIDModel

class Cart(Base, TimestampedModel, UUIDModel):
    """Shopping cart with its line items and derived totals"""

    __tablename__ = "carts"

    # Owner: user or anonymous session
    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=True,
        unique=True,
    )
    session_cart_id = Column(String(255), nullable=True, unique=True)

    # Line items: product_id, name, slug, qty, price, image
    items = Column(JSON, nullable=False, default=list)

    # Totals
    items_price = Column(Numeric(12, 2), nullable=False, default=0)
    tax_price = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_price = Column(Numeric(12, 2), nullable=False, default=0)
    total_price = Column(Numeric(12, 2), nullable=False, default=0)

    # Relationships
    user = relationship("User", back_populates="cart")

    __table_args__ = (
        CheckConstraint(
            "(user_id IS NOT NULL) OR (session_cart_id IS NOT NULL)",
            name="check_user_or_session",
        ),
    )
