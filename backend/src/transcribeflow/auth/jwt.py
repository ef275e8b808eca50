"""JWT token generation and validation

Access tokens are HS256 JWTs tied to a persisted login session.

Claims:
- sub: User ID as string
- sid: Login session ID; the token stops resolving once the session ends
- role: "regular" | "admin" (informational; the role is re-read from the
  user directory on every request)
- email: User's email address
- iat / exp: Issued-at and expiration Unix timestamps
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Any

import jwt

from ..config import get_settings


def _get_jwt_secret() -> str:
    """Get JWT_SECRET from settings.

    Raises:
        ValueError: If JWT_SECRET is empty
    """
    secret = get_settings().JWT_SECRET
    if not secret:
        raise ValueError("JWT_SECRET is not set")
    return secret


def get_jwt_expiry_minutes() -> int:
    return get_settings().JWT_EXPIRY_MINUTES


def create_access_token(user_id: int, session_id: str, role: str, email: str) -> str:
    """Create a JWT access token for an authenticated user.

    Args:
        user_id: User's id
        session_id: Login session the token belongs to
        role: User's role value
        email: User's email address

    Returns:
        str: Signed JWT token
    """
    now = datetime.now(timezone.utc)
    expiration = now + timedelta(minutes=get_jwt_expiry_minutes())

    payload = {
        'sub': str(user_id),
        'sid': session_id,
        'role': role,
        'email': email,
        'iat': int(now.timestamp()),
        'exp': int(expiration.timestamp())
    }

    return jwt.encode(payload, _get_jwt_secret(), algorithm='HS256')


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a JWT token.

    Raises:
        jwt.ExpiredSignatureError: If token has expired
        jwt.InvalidTokenError: If token is invalid or tampered
    """
    return jwt.decode(token, _get_jwt_secret(), algorithms=['HS256'])
