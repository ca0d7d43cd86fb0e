"""
Cart store
Keyed access to carts by anonymous session and by owning user
"""

from typing import Any, AsyncIterator, Dict, Optional
from contextlib import asynccontextmanager
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
import logging

from storefront.models import Cart
from storefront.schemas.cart import CartRecord

logger = logging.getLogger(__name__)

class CartWriter:
    """Cart writes bound to one open transaction"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def delete_cart(self, cart_id: str) -> None:
        await self.session.execute(delete(Cart).where(Cart.id == cart_id))

    async def upsert_cart(
        self,
        cart_id: str,
        update_fields: Dict[str, Any],
        create_fields: Dict[str, Any],
    ) -> None:
        """Update the cart if it exists, otherwise insert it with create_fields"""
        result = await self.session.execute(
            update(Cart).where(Cart.id == cart_id).values(**update_fields)
        )
        if result.rowcount == 0:
            self.session.add(Cart(id=cart_id, **create_fields))
            await self.session.flush()

    async def create_cart(self, fields: Dict[str, Any]) -> str:
        cart = Cart(**fields)
        self.session.add(cart)
        await self.session.flush()
        return cart.id

class CartStore:
    """Cart persistence backed by SQLAlchemy"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def _find_one(self, *conditions) -> Optional[CartRecord]:
        # Own session per lookup so lookups can be awaited together
        async with self.session_factory() as session:
            result = await session.execute(select(Cart).where(*conditions))
            cart = result.scalar_one_or_none()
            return CartRecord.model_validate(cart) if cart else None

    async def find_cart_by_session(self, session_cart_id: str) -> Optional[CartRecord]:
        return await self._find_one(Cart.session_cart_id == session_cart_id)

    async def find_cart_by_user(self, user_id: str) -> Optional[CartRecord]:
        return await self._find_one(Cart.user_id == user_id)

    @asynccontextmanager
    async def begin(self) -> AsyncIterator[CartWriter]:
        """
        Open a write transaction
        Commits when the block exits cleanly, rolls back otherwise
        """
        async with self.session_factory() as session:
            async with session.begin():
                yield CartWriter(session)
