"""
Cart API routes
Read-only view of the cart that belongs to the caller
"""

from typing import Optional
from fastapi import APIRouter, Depends

from storefront.core.exceptions import NotFoundException
from storefront.schemas.auth import AuthContext, SessionToken
from storefront.schemas.cart import CartResponse
from storefront.services.cart_store import CartStore
from ..auth.dependencies import get_auth_context, get_cart_store, get_current_token_optional

router = APIRouter()

@router.get(
    "",
    response_model=CartResponse,
    summary="Get my cart",
    description="Cart owned by the signed-in user, else the anonymous session's cart"
)
async def get_my_cart(
    token: Optional[SessionToken] = Depends(get_current_token_optional),
    context: AuthContext = Depends(get_auth_context),
    carts: CartStore = Depends(get_cart_store)
):
    cart = None
    if token is not None and token.sub:
        cart = await carts.find_cart_by_user(token.sub)
    elif context.session_cart_id:
        cart = await carts.find_cart_by_session(context.session_cart_id)

    if cart is None:
        raise NotFoundException("Cart not found")
    return CartResponse.from_record(cart)
