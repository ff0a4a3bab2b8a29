import sys
import os

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))
import pytest
from storefront.auth import AuthSession
from storefront.domain import User

ADMIN = User(id="a1", name="Root", email="root@example.com", role="admin")


@pytest.mark.asyncio
async def test_pending_action_runs_once(user):
    auth = AuthSession()
    runs = []

    async def action():
        runs.append(auth.is_authenticated)

    auth.set_pending_action(action)
    await auth.login(user)
    await auth.login(user)

    assert runs == [True]
    assert not auth.has_pending_action


@pytest.mark.asyncio
async def test_failing_pending_action_does_not_raise(user):
    auth = AuthSession()

    async def broken():
        raise RuntimeError("boom")

    auth.set_pending_action(broken)
    await auth.login(user)
    assert auth.is_authenticated


@pytest.mark.asyncio
async def test_listeners_see_auth_changes(user):
    auth = AuthSession()
    seen = []

    async def listener(is_authenticated):
        seen.append(is_authenticated)

    auth.subscribe(listener)
    await auth.login(user)
    await auth.logout()
    assert seen == [True, False]


@pytest.mark.asyncio
async def test_logout_drops_pending_action(user):
    auth = AuthSession(user)

    async def action():
        pass

    auth.set_pending_action(action)
    await auth.logout()
    assert not auth.has_pending_action
    assert auth.user is None


def test_login_modal_and_roles(user):
    auth = AuthSession()
    auth.open_login_modal()
    assert auth.is_login_modal_open
    auth.close_login_modal()
    assert not auth.is_login_modal_open

    assert ADMIN.is_admin
    assert not user.is_admin
