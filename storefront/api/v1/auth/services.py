"""
Authentication service layer
Handles credential checks and session issuing
"""

from datetime import datetime, timedelta, timezone
from typing import Optional
import logging

from storefront.core.config import settings
from storefront.core.security import SecurityUtils
from storefront.schemas.auth import (
    AuthContext,
    AuthTrigger,
    Identity,
    SessionToken,
    SessionUpdate,
    SessionView,
)
from storefront.services.token_builder import IdentityTokenBuilder
from storefront.services.user_store import UserStore
from .schemas import AuthResponse, SignUpRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, users: UserStore, builder: IdentityTokenBuilder):
        self.users = users
        self.builder = builder

    async def authorize(self, email: Optional[str], password: Optional[str]) -> Optional[Identity]:
        """
        Check an email/password pair

        Returns:
            The identity, or None when the credentials don't match a user
        """
        if not email or not password:
            return None

        user = await self.users.find_user_by_email(email)
        if user is None or not user.password_hash:
            logger.info("Sign-in rejected: no credentials stored for %s", email)
            return None

        if not SecurityUtils.verify_password(password, user.password_hash):
            logger.info("Sign-in rejected: password mismatch for user %s", user.id)
            return None

        return user.to_identity()

    async def register(self, request: SignUpRequest) -> Identity:
        """
        Register new user

        Raises:
            DuplicateResourceException: If the email is already registered
        """
        user = await self.users.create_user(
            email=request.email,
            password_hash=SecurityUtils.hash_password(request.password),
            name=request.name,
        )
        return user.to_identity()

    async def sign_in(
        self,
        identity: Identity,
        trigger: AuthTrigger,
        context: AuthContext,
    ) -> AuthResponse:
        """Build a fresh token for an authenticated identity"""
        token = await self.builder.build_token(
            SessionToken(),
            identity=identity,
            trigger=trigger,
            context=context,
        )
        logger.info("Issued session for user %s (%s)", identity.id, trigger.value)
        return self.issue(token, trigger)

    async def update_session(self, token: SessionToken, update: SessionUpdate) -> AuthResponse:
        token = await self.builder.build_token(token, trigger=AuthTrigger.UPDATE, update=update)
        return self.issue(token, AuthTrigger.UPDATE, update)

    async def current_session(self, token: SessionToken) -> SessionView:
        token = await self.builder.build_token(token, trigger=AuthTrigger.REFRESH)
        return self.builder.build_session(token, AuthTrigger.REFRESH, expires=token.exp)

    def issue(
        self,
        token: SessionToken,
        trigger: AuthTrigger,
        update: Optional[SessionUpdate] = None,
    ) -> AuthResponse:
        """Sign the token and shape the session returned to the client"""
        max_age = timedelta(days=settings.SESSION_MAX_AGE_DAYS)
        access_token = SecurityUtils.create_session_token(token.model_dump(), expires_in=max_age)
        session = self.builder.build_session(
            token,
            trigger,
            update,
            expires=datetime.now(timezone.utc) + max_age,
        )
        return AuthResponse(
            session=session,
            access_token=access_token,
            expires_in=int(max_age.total_seconds()),
        )
