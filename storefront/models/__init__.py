"""Models package initialization"""

from .base import Base
from .user import User, UserRole
from .cart import Cart

# Export all models
__all__ = [
    "Base",
    "User",
    "UserRole",
    "Cart",
]
