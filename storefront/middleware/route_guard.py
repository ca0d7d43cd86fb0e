"""
Route guard middleware
Keeps anonymous visitors off account pages and hands out anonymous cart ids
"""

from dataclasses import dataclass
from typing import Optional, Pattern, Sequence
from urllib.parse import quote
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import RedirectResponse, Response
import re
import logging

from storefront.core.config import settings
from storefront.core.security import SecurityUtils

logger = logging.getLogger(__name__)

PROTECTED_PATHS: Sequence[Pattern] = tuple(
    re.compile(pattern)
    for pattern in (
        r"^/shipping-address(/|$)",
        r"^/payment-method(/|$)",
        r"^/place-order(/|$)",
        r"^/profile(/|$)",
        r"^/user/.*",
        r"^/order/.*",
        r"^/admin(/|$)",
    )
)

@dataclass(frozen=True)
class GuardDecision:
    allowed: bool
    mint_session_cart_id: Optional[str] = None

def is_protected(path: str) -> bool:
    return any(pattern.search(path) for pattern in PROTECTED_PATHS)

def evaluate_request(
    path: str,
    session_cart_id: Optional[str],
    authenticated: bool,
) -> GuardDecision:
    """
    Decide whether a request may proceed

    The anonymous cart id is minted whenever the cookie is missing,
    whatever the access decision.
    """
    allowed = authenticated or not is_protected(path)
    minted = None if session_cart_id else SecurityUtils.generate_session_cart_id()
    return GuardDecision(allowed=allowed, mint_session_cart_id=minted)

def read_session_token(request: Request) -> Optional[str]:
    """Session token from the session cookie or a bearer header"""
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if token:
        return token

    authorization = request.headers.get("Authorization", "")
    scheme, _, credentials = authorization.partition(" ")
    if scheme.lower() == "bearer" and credentials:
        return credentials
    return None

def is_authenticated(request: Request) -> bool:
    token = read_session_token(request)
    return bool(token) and SecurityUtils.decode_session_token(token) is not None

def set_session_cart_cookie(response: Response, session_cart_id: str) -> None:
    response.set_cookie(
        settings.SESSION_CART_COOKIE_NAME,
        session_cart_id,
        max_age=settings.session_max_age_seconds,
        httponly=True,
        samesite="lax",
        secure=settings.COOKIE_SECURE,
    )

class RouteGuardMiddleware(BaseHTTPMiddleware):
    """Apply evaluate_request to every inbound request"""

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        decision = evaluate_request(
            path,
            request.cookies.get(settings.SESSION_CART_COOKIE_NAME),
            is_authenticated(request),
        )

        if decision.allowed:
            response = await call_next(request)
        else:
            logger.info("Denied anonymous request to %s", path)
            response = RedirectResponse(
                f"{settings.SIGN_IN_PATH}?callbackUrl={quote(path)}",
                status_code=307,
            )

        if decision.mint_session_cart_id:
            try:
                set_session_cart_cookie(response, decision.mint_session_cart_id)
            except Exception:
                # Minting is best effort; the request itself already succeeded
                logger.warning("Could not set %s cookie", settings.SESSION_CART_COOKIE_NAME, exc_info=True)

        return response
