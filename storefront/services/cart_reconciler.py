"""
Cart reconciliation at the sign-in boundary
Hands the anonymous session's cart over to the user who just authenticated
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional
import asyncio
import enum
import logging

from storefront.core.exceptions import CartReconciliationError
from storefront.schemas.cart import CartRecord
from .cart_store import CartStore

logger = logging.getLogger(__name__)

class ReconcileAction(str, enum.Enum):
    REPLACED_USER_CART = "replaced_user_cart"
    CLAIMED_SESSION_CART = "claimed_session_cart"
    KEPT_USER_CART = "kept_user_cart"
    ALREADY_CLAIMED = "already_claimed"
    CREATED_CART = "created_cart"

@dataclass(frozen=True)
class ReconcileOutcome:
    action: ReconcileAction
    cart_id: Optional[str]

class CartReconciler:
    """
    Applies the sign-in merge policy

    ================  =============  ==========================================
    session cart      user cart      result
    ================  =============  ==========================================
    present           present        user cart deleted, session cart claimed
    present           absent         session cart claimed
    absent            present        untouched
    absent            absent         empty cart created for the user
    ================  =============  ==========================================

    The anonymous cart always wins. All writes of one run share a transaction.
    """

    def __init__(self, carts: CartStore):
        self.carts = carts

    async def reconcile(self, anonymous_session_id: str, user_id: str) -> ReconcileOutcome:
        """
        Leave exactly one cart owned by user_id

        Raises:
            ValueError: If either identifier is empty
            CartReconciliationError: If a lookup or write fails
        """
        if not anonymous_session_id:
            raise ValueError("anonymous_session_id is required")
        if not user_id:
            raise ValueError("user_id is required")

        try:
            session_cart, user_cart = await asyncio.gather(
                self.carts.find_cart_by_session(anonymous_session_id),
                self.carts.find_cart_by_user(user_id),
            )
            outcome = await self._apply(anonymous_session_id, user_id, session_cart, user_cart)
        except Exception as exc:
            logger.exception(
                "Cart reconciliation failed for user %s session %s",
                user_id,
                anonymous_session_id,
            )
            raise CartReconciliationError() from exc

        logger.info(
            "Cart reconciliation for user %s: %s (cart %s)",
            user_id,
            outcome.action.value,
            outcome.cart_id,
        )
        return outcome

    async def _apply(
        self,
        anonymous_session_id: str,
        user_id: str,
        session_cart: Optional[CartRecord],
        user_cart: Optional[CartRecord],
    ) -> ReconcileOutcome:
        if session_cart is None:
            if user_cart is not None:
                return ReconcileOutcome(ReconcileAction.KEPT_USER_CART, user_cart.id)

            async with self.carts.begin() as tx:
                cart_id = await tx.create_cart(empty_cart_fields(user_id, anonymous_session_id))
            return ReconcileOutcome(ReconcileAction.CREATED_CART, cart_id)

        if user_cart is not None and user_cart.id == session_cart.id:
            return ReconcileOutcome(ReconcileAction.ALREADY_CLAIMED, session_cart.id)

        async with self.carts.begin() as tx:
            if user_cart is not None:
                await tx.delete_cart(user_cart.id)
            await tx.upsert_cart(
                session_cart.id,
                update_fields={"user_id": user_id},
                create_fields={
                    "user_id": user_id,
                    "session_cart_id": anonymous_session_id,
                    **session_cart.content_fields(),
                },
            )

        action = (
            ReconcileAction.REPLACED_USER_CART
            if user_cart is not None
            else ReconcileAction.CLAIMED_SESSION_CART
        )
        return ReconcileOutcome(action, session_cart.id)

def empty_cart_fields(user_id: str, session_cart_id: str) -> dict:
    return {
        "user_id": user_id,
        "session_cart_id": session_cart_id,
        "items": [],
        "items_price": Decimal("0"),
        "tax_price": Decimal("0"),
        "shipping_price": Decimal("0"),
        "total_price": Decimal("0"),
    }
