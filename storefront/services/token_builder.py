"""
Session token and session view construction
Runs on every authentication-related event
"""

from datetime import datetime
from typing import Optional
import logging

from storefront.schemas.auth import (
    AuthContext,
    AuthTrigger,
    Identity,
    SessionToken,
    SessionUpdate,
    SessionUser,
    SessionView,
)
from .cart_reconciler import CartReconciler
from .user_store import UserStore

logger = logging.getLogger(__name__)

def derive_display_name(email: str) -> str:
    """Local part of an email address"""
    return email.split("@", 1)[0]

class IdentityTokenBuilder:
    """Populates session tokens from identities and triggers cart reconciliation"""

    def __init__(self, users: UserStore, reconciler: CartReconciler):
        self.users = users
        self.reconciler = reconciler

    async def build_token(
        self,
        token: SessionToken,
        identity: Optional[Identity] = None,
        trigger: AuthTrigger = AuthTrigger.REFRESH,
        context: Optional[AuthContext] = None,
        update: Optional[SessionUpdate] = None,
    ) -> SessionToken:
        """
        Mutate and return the token for this event

        The identity is only present on initial authentication; refreshes
        pass the previous token alone and get it back unchanged.
        """
        token = token.model_copy()

        if identity is not None:
            token.sub = identity.id
            token.id = identity.id
            token.role = identity.role
            token.email = identity.email
            token.name = identity.name

            if identity.name is None:
                token.name = derive_display_name(identity.email)
                # Keep the stored record in line with the token
                await self.users.update_identity_name(identity.id, token.name)

            session_cart_id = context.session_cart_id if context else None
            if trigger.is_authentication and session_cart_id:
                await self.reconciler.reconcile(session_cart_id, identity.id)

        if trigger == AuthTrigger.UPDATE and update is not None and update.name:
            token.name = update.name

        return token

    def build_session(
        self,
        token: SessionToken,
        trigger: AuthTrigger = AuthTrigger.REFRESH,
        update: Optional[SessionUpdate] = None,
        expires: Optional[datetime] = None,
    ) -> SessionView:
        user = SessionUser(id=token.sub, role=token.role, name=token.name)

        if trigger == AuthTrigger.UPDATE and update is not None and update.name:
            user.name = update.name

        return SessionView(user=user, expires=expires)
