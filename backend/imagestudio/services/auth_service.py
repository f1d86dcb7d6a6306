"""
Authentication service.
Verifies session tokens issued by the account service (HS256 JWT).
"""

from datetime import timedelta

import structlog
from jose import JWTError, jwt

from ..core.config import Settings
from ..core.utils.date_utils import utcnow

logger = structlog.get_logger()


class AuthService:
    """Service for JWT verification and operational token issuance."""

    ALGORITHM = "HS256"

    def __init__(self, settings: Settings):
        self.settings = settings

    def create_access_token(self, user_id: str) -> str:
        """
        Create JWT access token for an account.

        Args:
            user_id: Account identifier

        Returns:
            JWT token string
        """
        expire = utcnow() + timedelta(days=self.settings.access_token_expire_days)

        payload = {
            "sub": user_id,  # Subject (account ID)
            "exp": expire,
            "iat": utcnow(),
        }

        token: str = jwt.encode(
            payload, self.settings.secret_key, algorithm=self.ALGORITHM
        )

        logger.info("Access token created", user_id=user_id, expires_at=expire)

        return token

    def verify_token(self, token: str) -> str | None:
        """
        Verify JWT token and extract the account ID.

        Tokens from the web app carry the ID in "userId" instead of "sub".

        Args:
            token: JWT token string

        Returns:
            Account ID if valid, None if invalid/expired
        """
        try:
            payload = jwt.decode(
                token, self.settings.secret_key, algorithms=[self.ALGORITHM]
            )
        except JWTError as e:
            logger.warning("Token verification failed", error=str(e))
            return None

        user_id = payload.get("sub") or payload.get("userId")

        if not user_id:
            logger.warning("Invalid token: missing user ID")
            return None

        return str(user_id)
