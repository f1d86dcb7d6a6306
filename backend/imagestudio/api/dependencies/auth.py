"""
Shared authentication dependencies for all API endpoints.

Session tokens arrive as "Authorization: Bearer <token>" or in the
"token" cookie set by the web app.
"""

import secrets

import structlog
from fastapi import Cookie, Depends, Header, Request

from ...core.config import Settings, get_settings
from ...core.exceptions import AuthenticationError, AuthorizationError
from ...database.mongodb import USERS_COLLECTION, MongoDB
from ...database.repositories.account_repository import AccountRepository
from ...models.account import Account
from ...services.auth_service import AuthService

logger = structlog.get_logger()


def get_mongodb(request: Request) -> MongoDB:
    """Get MongoDB instance from app state."""
    mongodb: MongoDB = request.app.state.mongodb
    return mongodb


def get_account_repository(mongodb: MongoDB = Depends(get_mongodb)) -> AccountRepository:
    """Get account repository instance."""
    return AccountRepository(mongodb.get_collection(USERS_COLLECTION))


def get_auth_service(settings: Settings = Depends(get_settings)) -> AuthService:
    """Get auth service for token verification."""
    return AuthService(settings)


def _extract_token(authorization: str | None, cookie_token: str | None) -> str | None:
    if authorization:
        parts = authorization.split()
        if len(parts) != 2 or parts[0].lower() != "bearer":
            raise AuthenticationError(
                "Invalid authorization header format. Expected: Bearer <token>"
            )
        return parts[1]
    return cookie_token or None


async def get_current_user_id(
    authorization: str | None = Header(None),
    token: str | None = Cookie(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> str:
    """
    Extract and verify the account ID from the session token.

    Returns:
        Account ID from token

    Raises:
        AuthenticationError: If token is missing, invalid, or expired
    """
    raw_token = _extract_token(authorization, token)
    if not raw_token:
        raise AuthenticationError("Unauthorized")

    user_id = auth_service.verify_token(raw_token)
    if not user_id:
        raise AuthenticationError("Unauthorized")

    return user_id


async def get_current_user(
    user_id: str = Depends(get_current_user_id),
    account_repo: AccountRepository = Depends(get_account_repository),
) -> Account:
    """
    Get the full Account for the authenticated caller.

    Raises:
        AuthenticationError: If the account no longer exists
    """
    account = await account_repo.get_by_id(user_id)

    if not account:
        logger.warning("Account not found", user_id=user_id)
        raise AuthenticationError("Unauthorized", user_id=user_id)

    return account


def is_admin_account(account: Account, settings: Settings) -> bool:
    """Admin flag on the account, or email listed in ADMIN_EMAILS."""
    if account.is_admin:
        return True
    admin_emails = {email.strip().lower() for email in settings.admin_emails if email.strip()}
    return bool(account.email) and account.email.lower() in admin_emails


async def require_admin(
    x_admin_secret: str | None = Header(None),
    authorization: str | None = Header(None),
    token: str | None = Cookie(None),
    account_repo: AccountRepository = Depends(get_account_repository),
    auth_service: AuthService = Depends(get_auth_service),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Require admin privileges for endpoint access.

    Supports two authentication methods:
    1. Admin secret header (service-to-service)
    2. Session token of an admin account

    Raises:
        AuthenticationError: No valid credentials (401)
        AuthorizationError: Authenticated but not an admin (403)
    """
    # Method 1: Admin secret header
    if x_admin_secret:
        # Use constant-time comparison to prevent timing attacks
        if secrets.compare_digest(x_admin_secret, settings.admin_secret):
            logger.info("Admin access via admin secret header")
            return
        logger.warning("Invalid admin secret provided")
        raise AuthenticationError("Invalid admin secret")

    # Method 2: session token of an admin account
    raw_token = _extract_token(authorization, token)
    user_id = auth_service.verify_token(raw_token) if raw_token else None
    if not user_id:
        raise AuthenticationError(
            "Admin authentication required (use X-Admin-Secret header or Bearer token)"
        )

    account = await account_repo.get_by_id(user_id)
    if account and is_admin_account(account, settings):
        logger.info("Admin access via session token", user_id=user_id)
        return

    logger.warning("Non-admin account attempted admin access", user_id=user_id)
    raise AuthorizationError("Admin privileges required", user_id=user_id)
