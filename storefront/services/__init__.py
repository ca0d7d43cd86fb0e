"""Services package"""

from .cart_store import CartStore
from .user_store import UserStore
from .cart_reconciler import CartReconciler, ReconcileAction, ReconcileOutcome
from .token_builder import IdentityTokenBuilder

__all__ = [
    "CartStore",
    "UserStore",
    "CartReconciler",
    "ReconcileAction",
    "ReconcileOutcome",
    "IdentityTokenBuilder",
]
