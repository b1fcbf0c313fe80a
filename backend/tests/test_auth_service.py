"""
Test per AuthService: admin di default, login, sessioni, utenti.
"""

from datetime import datetime, timedelta, timezone

import pytest

from app.core.exceptions import AuthenticationError, DuplicateError
from app.core.record_store import SESSIONS, USERS
from app.core.security import decode_token, hash_password, verify_password
from app.schemas.user import SessionInfo, UserCreate, UserLogin, UserRole
from app.services.auth_service import AuthService


@pytest.fixture
def auth_service(store, test_settings):
    return AuthService(store, test_settings)


class TestPasswordHashing:

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("password")
        assert hashed != "password"
        assert verify_password("password", hashed)
        assert not verify_password("wrong", hashed)


class TestDefaultAdmin:

    async def test_created_on_empty_store(self, auth_service, store):
        assert await auth_service.ensure_default_admin() is True
        users = await store.load_all(USERS)
        assert len(users) == 1
        assert users[0]["username"] == "admin"
        assert users[0]["role"] == "admin"
        assert "password" not in users[0]

    async def test_not_recreated(self, auth_service):
        await auth_service.ensure_default_admin()
        assert await auth_service.ensure_default_admin() is False
        assert len(await auth_service.list_users()) == 1


class TestLogin:

    async def test_login_opens_session(self, auth_service, store, test_settings):
        await auth_service.ensure_default_admin()
        token = await auth_service.login(UserLogin(username="admin", password="password"))

        payload = decode_token(token.access_token, test_settings)
        assert payload.role == "admin"
        sessions = await store.load_all(SESSIONS)
        assert [s["session_id"] for s in sessions] == [payload.sid]

        session = await auth_service.current_session(token.access_token)
        assert session.username == "admin"
        assert session.role == UserRole.ADMIN

    async def test_wrong_password(self, auth_service):
        await auth_service.ensure_default_admin()
        with pytest.raises(AuthenticationError) as exc_info:
            await auth_service.login(UserLogin(username="admin", password="nope"))
        assert exc_info.value.detail == "Invalid username or password"

    async def test_unknown_user(self, auth_service):
        with pytest.raises(AuthenticationError):
            await auth_service.login(UserLogin(username="ghost", password="password"))

    async def test_logout_closes_session(self, auth_service):
        await auth_service.ensure_default_admin()
        token = await auth_service.login(UserLogin(username="admin", password="password"))
        session = await auth_service.current_session(token.access_token)

        assert await auth_service.logout(session.session_id) is True
        assert await auth_service.current_session(token.access_token) is None
        assert await auth_service.logout(session.session_id) is False

    async def test_invalid_token(self, auth_service):
        assert await auth_service.current_session("not-a-jwt") is None
        assert await auth_service.current_session(None) is None


class TestUserManagement:

    async def test_add_user(self, auth_service):
        user = await auth_service.add_user(UserCreate(username="dispatch", password="s3cret"))
        assert user.role == UserRole.USER
        assert await auth_service.authenticate("dispatch", "s3cret") is not None

    async def test_duplicate_username(self, auth_service):
        await auth_service.ensure_default_admin()
        with pytest.raises(DuplicateError):
            await auth_service.add_user(UserCreate(username="admin", password="x"))

    async def test_delete_user_closes_sessions(self, auth_service):
        user = await auth_service.add_user(UserCreate(username="dispatch", password="s3cret"))
        token = await auth_service.login(UserLogin(username="dispatch", password="s3cret"))

        assert await auth_service.delete_user(user.id) is True
        assert await auth_service.current_session(token.access_token) is None
        assert await auth_service.delete_user(user.id) is False


class TestSessionPruning:

    async def test_expired_sessions_dropped_on_login(self, auth_service, store, test_settings):
        await auth_service.ensure_default_admin()
        now = datetime.now(timezone.utc)
        expired = now - timedelta(minutes=test_settings.access_token_expire_minutes + 5)
        recent = now - timedelta(minutes=5)
        await store.save_all(
            SESSIONS,
            [
                SessionInfo(
                    session_id=session_id,
                    user_id="1",
                    username="admin",
                    role=UserRole.ADMIN,
                    created_at=created_at,
                ).to_record()
                for session_id, created_at in (("old", expired), ("recent", recent))
            ],
        )

        token = await auth_service.login(UserLogin(username="admin", password="password"))

        ids = [s["session_id"] for s in await store.load_all(SESSIONS)]
        assert "old" not in ids
        assert "recent" in ids
        assert decode_token(token.access_token, test_settings).sid in ids
        assert len(ids) == 2
