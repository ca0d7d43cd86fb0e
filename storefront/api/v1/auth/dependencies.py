"""
Authentication dependencies and utilities
"""

from typing import Optional
from fastapi import Cookie, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from storefront.core.config import settings
from storefront.core.database import get_session_factory
from storefront.core.exceptions import UnauthorizedException
from storefront.core.security import SecurityUtils
from storefront.middleware.route_guard import read_session_token
from storefront.schemas.auth import AuthContext, SessionToken
from storefront.services.cart_reconciler import CartReconciler
from storefront.services.cart_store import CartStore
from storefront.services.token_builder import IdentityTokenBuilder
from storefront.services.user_store import UserStore
from .services import AuthService

def get_user_store(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> UserStore:
    return UserStore(session_factory)

def get_cart_store(
    session_factory: async_sessionmaker[AsyncSession] = Depends(get_session_factory),
) -> CartStore:
    return CartStore(session_factory)

def get_auth_service(
    users: UserStore = Depends(get_user_store),
    carts: CartStore = Depends(get_cart_store),
) -> AuthService:
    builder = IdentityTokenBuilder(users, CartReconciler(carts))
    return AuthService(users, builder)

def get_auth_context(
    session_cart_id: Optional[str] = Cookie(None, alias=settings.SESSION_CART_COOKIE_NAME),
) -> AuthContext:
    """Request values the auth flow needs, read once at the edge"""
    return AuthContext(session_cart_id=session_cart_id or None)

def get_current_token_optional(request: Request) -> Optional[SessionToken]:
    """
    Get current session token if authenticated, otherwise None
    Useful for endpoints that work for both authenticated and anonymous users
    """
    raw = read_session_token(request)
    if not raw:
        return None

    claims = SecurityUtils.decode_session_token(raw)
    if claims is None:
        return None
    return SessionToken.from_claims(claims)

def get_current_token(
    token: Optional[SessionToken] = Depends(get_current_token_optional),
) -> SessionToken:
    """
    Get current session token (required)
    Raises 401 if not authenticated
    """
    if token is None or not token.sub:
        raise UnauthorizedException("Not authenticated")
    return token
