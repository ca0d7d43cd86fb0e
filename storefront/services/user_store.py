"""
Credential store
Reads and writes the durable user record
"""

from typing import Optional
from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import logging

from storefront.models import User, UserRole
from storefront.core.exceptions import DuplicateResourceException, NotFoundException
from storefront.schemas.auth import UserRecord

logger = logging.getLogger(__name__)

def normalize_email(email: str) -> str:
    return email.strip().lower()

class UserStore:
    """User persistence backed by SQLAlchemy"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        async with self.session_factory() as session:
            result = await session.execute(
                select(User).where(User.email == normalize_email(email))
            )
            user = result.scalar_one_or_none()
            return UserRecord.model_validate(user) if user else None

    async def create_user(
        self,
        email: str,
        password_hash: str,
        name: Optional[str] = None,
        role: UserRole = UserRole.USER,
    ) -> UserRecord:
        """
        Create a user

        Raises:
            DuplicateResourceException: If the email is already registered
        """
        email = normalize_email(email)
        user = User(email=email, password_hash=password_hash, name=name, role=role)

        async with self.session_factory() as session:
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise DuplicateResourceException("User", "email", email) from exc
            await session.refresh(user)
            logger.info("Created user %s", user.id)
            return UserRecord.model_validate(user)

    async def update_identity_name(self, user_id: str, name: str) -> None:
        """Persist a display name; the user must exist"""
        async with self.session_factory() as session:
            result = await session.execute(
                update(User).where(User.id == user_id).values(name=name)
            )
            if result.rowcount == 0:
                await session.rollback()
                raise NotFoundException(f"User {user_id} not found")
            await session.commit()
