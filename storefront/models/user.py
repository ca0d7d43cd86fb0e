"""
User model
Holds the durable identity behind a session token
"""

from sqlalchemy import Column, String, Enum
from sqlalchemy.orm import relationship
import enum

from .base import Base, TimestampedModel, UUIDModel

class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"

class User(Base, TimestampedModel, UUIDModel):
    """Storefront account"""

    __tablename__ = "users"

    # NULL name means the user never set one
    name = Column(String(100), nullable=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=True)
    role = Column(
        Enum(UserRole, values_callable=lambda roles: [r.value for r in roles]),
        default=UserRole.USER,
        nullable=False
    )

    # Relationships
    cart = relationship("Cart", back_populates="user", uselist=False, passive_deletes=True)

    def __repr__(self):
        return f"<User {self.name or self.email}>"
