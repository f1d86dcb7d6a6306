"""
Unit tests for auth dependencies and AuthService.

Tests shared authentication dependencies for API endpoints:
- get_current_user_id: Bearer header or cookie token verification
- get_current_user: Full account retrieval for authenticated requests
- require_admin: Admin privilege verification (secret header and session token)
"""

from datetime import timedelta
from unittest.mock import AsyncMock, Mock

import pytest
from jose import jwt

from imagestudio.api.dependencies.auth import (
    get_current_user,
    get_current_user_id,
    is_admin_account,
    require_admin,
)
from imagestudio.core.config import Settings
from imagestudio.core.exceptions import AuthenticationError, AuthorizationError
from imagestudio.core.utils.date_utils import utcnow
from imagestudio.models.account import Account
from imagestudio.services.auth_service import AuthService

# ===== Fixtures =====


@pytest.fixture
def settings():
    return Settings(
        secret_key="test-secret",
        admin_secret="admin-secret",
        admin_emails=["Boss@Example.com"],
    )


@pytest.fixture
def auth_service(settings):
    return AuthService(settings)


@pytest.fixture
def mock_account_repo():
    """Mock AccountRepository"""
    repo = Mock()
    repo.get_by_id = AsyncMock()
    return repo


@pytest.fixture
def sample_account():
    """Regular account"""
    return Account(user_id="user_123", email="test@example.com", credits=100)


@pytest.fixture
def admin_account():
    """Admin account"""
    return Account(user_id="admin_456", email="admin@example.com", is_admin=True)


# ===== AuthService =====


class TestAuthService:
    """Test token issuance and verification"""

    def test_round_trip(self, auth_service):
        """Test issued token verifies to the same account"""
        token = auth_service.create_access_token("user_123")

        assert auth_service.verify_token(token) == "user_123"

    def test_user_id_claim(self, auth_service, settings):
        """Test web app tokens carrying userId are accepted"""
        token = jwt.encode({"userId": "user_789"}, settings.secret_key, algorithm="HS256")

        assert auth_service.verify_token(token) == "user_789"

    def test_expired_token(self, auth_service, settings):
        """Test expired token is rejected"""
        token = jwt.encode(
            {"sub": "user_123", "exp": utcnow() - timedelta(minutes=1)},
            settings.secret_key,
            algorithm="HS256",
        )

        assert auth_service.verify_token(token) is None

    def test_wrong_secret(self, auth_service):
        """Test token signed with another key is rejected"""
        token = jwt.encode({"sub": "user_123"}, "other-secret", algorithm="HS256")

        assert auth_service.verify_token(token) is None

    def test_missing_claim(self, auth_service, settings):
        """Test token without an account ID is rejected"""
        token = jwt.encode({"role": "user"}, settings.secret_key, algorithm="HS256")

        assert auth_service.verify_token(token) is None


# ===== get_current_user_id =====


@pytest.mark.asyncio
class TestGetCurrentUserId:
    """Test token extraction and verification"""

    async def test_bearer_header(self, auth_service):
        token = auth_service.create_access_token("user_123")

        user_id = await get_current_user_id(
            authorization=f"Bearer {token}", token=None, auth_service=auth_service
        )

        assert user_id == "user_123"

    async def test_cookie_token(self, auth_service):
        """Test cookie is used when no header is sent"""
        token = auth_service.create_access_token("user_123")

        user_id = await get_current_user_id(
            authorization=None, token=token, auth_service=auth_service
        )

        assert user_id == "user_123"

    async def test_missing_token(self, auth_service):
        with pytest.raises(AuthenticationError, match="Unauthorized"):
            await get_current_user_id(authorization=None, token=None, auth_service=auth_service)

    async def test_malformed_header(self, auth_service):
        with pytest.raises(AuthenticationError, match="Invalid authorization header"):
            await get_current_user_id(
                authorization="Token abc", token=None, auth_service=auth_service
            )

    async def test_invalid_token(self, auth_service):
        with pytest.raises(AuthenticationError) as exc_info:
            await get_current_user_id(
                authorization="Bearer not-a-jwt", token=None, auth_service=auth_service
            )

        assert exc_info.value.status_code == 401


# ===== get_current_user =====


@pytest.mark.asyncio
class TestGetCurrentUser:
    """Test account retrieval"""

    async def test_returns_account(self, mock_account_repo, sample_account):
        mock_account_repo.get_by_id.return_value = sample_account

        account = await get_current_user(user_id="user_123", account_repo=mock_account_repo)

        assert account is sample_account

    async def test_deleted_account(self, mock_account_repo):
        """Test valid token for a vanished account is unauthorized"""
        mock_account_repo.get_by_id.return_value = None

        with pytest.raises(AuthenticationError):
            await get_current_user(user_id="ghost", account_repo=mock_account_repo)


# ===== require_admin =====


@pytest.mark.asyncio
class TestRequireAdmin:
    """Test admin access checks"""

    async def call(self, settings, auth_service, repo, **kwargs):
        options = {"x_admin_secret": None, "authorization": None, "token": None}
        options.update(kwargs)
        return await require_admin(
            account_repo=repo, auth_service=auth_service, settings=settings, **options
        )

    async def test_admin_secret(self, settings, auth_service, mock_account_repo):
        """Test valid admin secret grants access without a token"""
        await self.call(settings, auth_service, mock_account_repo, x_admin_secret="admin-secret")

        mock_account_repo.get_by_id.assert_not_called()

    async def test_wrong_admin_secret(self, settings, auth_service, mock_account_repo):
        with pytest.raises(AuthenticationError, match="Invalid admin secret"):
            await self.call(settings, auth_service, mock_account_repo, x_admin_secret="nope")

    async def test_admin_account_token(
        self, settings, auth_service, mock_account_repo, admin_account
    ):
        mock_account_repo.get_by_id.return_value = admin_account
        token = auth_service.create_access_token("admin_456")

        await self.call(
            settings, auth_service, mock_account_repo, authorization=f"Bearer {token}"
        )

    async def test_non_admin_forbidden(
        self, settings, auth_service, mock_account_repo, sample_account
    ):
        """Test regular accounts get 403"""
        mock_account_repo.get_by_id.return_value = sample_account
        token = auth_service.create_access_token("user_123")

        with pytest.raises(AuthorizationError) as exc_info:
            await self.call(settings, auth_service, mock_account_repo, token=token)

        assert exc_info.value.status_code == 403

    async def test_no_credentials(self, settings, auth_service, mock_account_repo):
        with pytest.raises(AuthenticationError) as exc_info:
            await self.call(settings, auth_service, mock_account_repo)

        assert exc_info.value.status_code == 401


class TestIsAdminAccount:
    """Test admin detection"""

    def test_admin_flag(self, settings, admin_account):
        assert is_admin_account(admin_account, settings) is True

    def test_admin_email_case_insensitive(self, settings):
        account = Account(user_id="user_1", email="boss@example.com")

        assert is_admin_account(account, settings) is True

    def test_regular_account(self, settings, sample_account):
        assert is_admin_account(sample_account, settings) is False
