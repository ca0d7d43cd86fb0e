from __future__ import annotations

import asyncio
import uuid
from contextlib import asynccontextmanager
from decimal import Decimal
from typing import Any, Dict, List, Optional, Tuple

from storefront.schemas.auth import UserRecord
from storefront.schemas.cart import CartRecord


class StoreFailure(RuntimeError):
    pass


def make_cart(
    cart_id: str,
    user_id: Optional[str] = None,
    session_cart_id: Optional[str] = None,
    items: Optional[List[dict]] = None,
    total: str = "0",
) -> CartRecord:
    return CartRecord(
        id=cart_id,
        user_id=user_id,
        session_cart_id=session_cart_id,
        items=items or [],
        items_price=Decimal(total),
        tax_price=Decimal("0"),
        shipping_price=Decimal("0"),
        total_price=Decimal(total),
    )


class FakeCartWriter:
    def __init__(self, store: "FakeCartStore", staged: Dict[str, CartRecord]):
        self._store = store
        self._staged = staged

    async def delete_cart(self, cart_id: str) -> None:
        self._store._maybe_fail("delete_cart")
        self._store.writes.append(("delete", cart_id))
        self._staged.pop(cart_id, None)

    async def upsert_cart(self, cart_id: str, update_fields: Dict[str, Any], create_fields: Dict[str, Any]) -> None:
        self._store._maybe_fail("upsert_cart")
        self._store.writes.append(("upsert", cart_id))
        existing = self._staged.get(cart_id)
        if existing is not None:
            self._staged[cart_id] = existing.model_copy(update=update_fields)
        else:
            self._staged[cart_id] = CartRecord(id=cart_id, **create_fields)

    async def create_cart(self, fields: Dict[str, Any]) -> str:
        self._store._maybe_fail("create_cart")
        cart_id = str(uuid.uuid4())
        self._store.writes.append(("create", cart_id))
        self._staged[cart_id] = CartRecord(id=cart_id, **fields)
        return cart_id


class FakeCartStore:
    """
    In-memory cart store with all-or-nothing transactions.
    """

    def __init__(self, *carts: CartRecord):
        self.carts: Dict[str, CartRecord] = {c.id: c for c in carts}
        self.fail_on: Optional[str] = None
        self.writes: List[Tuple[str, str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    def _maybe_fail(self, op: str) -> None:
        if self.fail_on == op:
            raise StoreFailure(f"{op} failed")

    async def _lookup(self, op: str, predicate) -> Optional[CartRecord]:
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            self._maybe_fail(op)
            for cart in self.carts.values():
                if predicate(cart):
                    return cart.model_copy(deep=True)
            return None
        finally:
            self.in_flight -= 1

    async def find_cart_by_session(self, session_cart_id: str) -> Optional[CartRecord]:
        return await self._lookup("find_cart_by_session", lambda c: c.session_cart_id == session_cart_id)

    async def find_cart_by_user(self, user_id: str) -> Optional[CartRecord]:
        return await self._lookup("find_cart_by_user", lambda c: c.user_id == user_id)

    @asynccontextmanager
    async def begin(self):
        staged = {k: v.model_copy(deep=True) for k, v in self.carts.items()}
        yield FakeCartWriter(self, staged)
        self.carts = staged

    def owned_by(self, user_id: str) -> List[CartRecord]:
        return [c for c in self.carts.values() if c.user_id == user_id]


class FakeUserStore:
    def __init__(self, *users: UserRecord):
        self.users: Dict[str, UserRecord] = {u.id: u for u in users}
        self.name_updates: List[Tuple[str, str]] = []

    async def find_user_by_email(self, email: str) -> Optional[UserRecord]:
        for user in self.users.values():
            if user.email == email.strip().lower():
                return user
        return None

    async def update_identity_name(self, user_id: str, name: str) -> None:
        self.name_updates.append((user_id, name))
        self.users[user_id] = self.users[user_id].model_copy(update={"name": name})


class FakeReconciler:
    def __init__(self, fail: bool = False):
        self.calls: List[Tuple[str, str]] = []
        self.fail = fail

    async def reconcile(self, anonymous_session_id: str, user_id: str):
        self.calls.append((anonymous_session_id, user_id))
        if self.fail:
            raise StoreFailure("reconcile failed")
        return None
