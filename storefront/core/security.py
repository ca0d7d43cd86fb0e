"""
Security utilities for authentication
Handles session tokens and password hashing
"""

from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
from passlib.context import CryptContext
import uuid
import logging

from .config import settings

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Malformed or unknown hash format
            logger.warning("Stored password hash could not be parsed")
            return False

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def create_session_token(
        data: Dict[str, Any],
        expires_in: Optional[timedelta] = None,
    ) -> str:
        """Create signed session token"""
        to_encode = {key: value for key, value in data.items() if value is not None}
        expire = datetime.now(timezone.utc) + (
            expires_in or timedelta(days=settings.SESSION_MAX_AGE_DAYS)
        )
        to_encode.update({"exp": expire, "type": "session"})
        return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)

    @staticmethod
    def decode_session_token(token: str) -> Optional[Dict[str, Any]]:
        """
        Decode and validate session token
        Returns None for expired, tampered or foreign tokens
        """
        try:
            payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
        except JWTError:
            return None

        if payload.get("type") != "session":
            return None
        return payload

    @staticmethod
    def generate_session_cart_id() -> str:
        """Generate anonymous session cart identifier"""
        return str(uuid.uuid4())
