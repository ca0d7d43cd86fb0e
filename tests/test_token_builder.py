from __future__ import annotations

import pytest

from storefront.schemas.auth import AuthContext, AuthTrigger, Identity, SessionToken, SessionUpdate, UserRecord
from storefront.services.token_builder import IdentityTokenBuilder, derive_display_name
from tests.helpers.fakes import FakeReconciler, FakeUserStore, StoreFailure


def make_builder(*users: UserRecord, fail_reconcile: bool = False):
    store = FakeUserStore(*users)
    reconciler = FakeReconciler(fail=fail_reconcile)
    return IdentityTokenBuilder(store, reconciler), store, reconciler


JANE = UserRecord(id="u-1", name=None, email="jane@example.com", role="user")
ADA = UserRecord(id="u-2", name="Ada", email="ada@example.com", role="admin")


def test_derive_display_name_uses_local_part():
    assert derive_display_name("jane@example.com") == "jane"
    assert derive_display_name("a@b@c") == "a"


@pytest.mark.asyncio
async def test_unset_name_is_derived_and_persisted():
    builder, store, _ = make_builder(JANE)

    token = await builder.build_token(SessionToken(), JANE.to_identity(), AuthTrigger.SIGN_IN)

    assert token.name == "jane"
    assert token.sub == token.id == "u-1"
    assert token.role == "user"
    assert store.name_updates == [("u-1", "jane")]
    assert store.users["u-1"].name == "jane"


@pytest.mark.asyncio
async def test_existing_name_is_copied_without_write():
    builder, store, _ = make_builder(ADA)

    token = await builder.build_token(SessionToken(), ADA.to_identity(), AuthTrigger.SIGN_IN)

    assert token.name == "Ada"
    assert token.role == "admin"
    assert store.name_updates == []


@pytest.mark.asyncio
@pytest.mark.parametrize("trigger", [AuthTrigger.SIGN_IN, AuthTrigger.SIGN_UP])
async def test_authentication_with_cookie_reconciles_cart(trigger):
    builder, _, reconciler = make_builder(ADA)

    await builder.build_token(
        SessionToken(), ADA.to_identity(), trigger, AuthContext(session_cart_id="sess-1")
    )

    assert reconciler.calls == [("sess-1", "u-2")]


@pytest.mark.asyncio
async def test_missing_cookie_means_nothing_to_merge():
    builder, _, reconciler = make_builder(ADA)

    await builder.build_token(SessionToken(), ADA.to_identity(), AuthTrigger.SIGN_IN, AuthContext())

    assert reconciler.calls == []


@pytest.mark.asyncio
@pytest.mark.parametrize("trigger", [AuthTrigger.UPDATE, AuthTrigger.REFRESH])
async def test_other_triggers_never_reconcile(trigger):
    builder, _, reconciler = make_builder(ADA)

    await builder.build_token(
        SessionToken(), ADA.to_identity(), trigger, AuthContext(session_cart_id="sess-1")
    )

    assert reconciler.calls == []


@pytest.mark.asyncio
async def test_reconciliation_failure_propagates():
    builder, _, _ = make_builder(ADA, fail_reconcile=True)

    with pytest.raises(StoreFailure):
        await builder.build_token(
            SessionToken(), ADA.to_identity(), AuthTrigger.SIGN_IN, AuthContext(session_cart_id="sess-1")
        )


@pytest.mark.asyncio
async def test_update_overrides_name():
    builder, store, _ = make_builder()
    token = SessionToken(sub="u-2", id="u-2", role="admin", name="Ada")

    updated = await builder.build_token(token, trigger=AuthTrigger.UPDATE, update=SessionUpdate(name="Countess"))

    assert updated.name == "Countess"
    assert token.name == "Ada"
    assert store.name_updates == []


@pytest.mark.asyncio
async def test_update_without_name_keeps_token():
    builder, _, _ = make_builder()
    token = SessionToken(sub="u-2", id="u-2", role="admin", name="Ada")

    updated = await builder.build_token(token, trigger=AuthTrigger.UPDATE, update=SessionUpdate())

    assert updated == token


@pytest.mark.asyncio
async def test_refresh_returns_token_unchanged():
    builder, store, reconciler = make_builder()
    token = SessionToken(sub="u-2", id="u-2", role="admin", name="Ada", email="ada@example.com")

    refreshed = await builder.build_token(token)

    assert refreshed == token
    assert store.name_updates == [] and reconciler.calls == []


def test_build_session_copies_token_fields():
    builder, _, _ = make_builder()
    token = SessionToken(sub="u-2", id="u-2", role="admin", name="Ada")

    session = builder.build_session(token)

    assert session.user.id == "u-2"
    assert session.user.role == "admin"
    assert session.user.name == "Ada"


def test_build_session_applies_update_name():
    builder, _, _ = make_builder()
    token = SessionToken(sub="u-2", id="u-2", role="admin", name="Ada")

    session = builder.build_session(token, AuthTrigger.UPDATE, SessionUpdate(name="Countess"))
    refreshed = builder.build_session(token, AuthTrigger.REFRESH, SessionUpdate(name="Countess"))

    assert session.user.name == "Countess"
    assert refreshed.user.name == "Ada"


def test_identity_accepts_enum_roles():
    from storefront.models import UserRole

    assert Identity(id="u", email="x@example.com", role=UserRole.ADMIN).role == "admin"
