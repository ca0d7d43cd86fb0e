"""API v1 routes aggregation"""

from fastapi import APIRouter

from .auth.router import router as auth_router
from .cart.router import router as cart_router

# Create v1 router
api_router = APIRouter()

# Include all routers
api_router.include_router(auth_router, prefix="/auth", tags=["Authentication"])
api_router.include_router(cart_router, prefix="/cart", tags=["Cart"])

# Export router
router = api_router
