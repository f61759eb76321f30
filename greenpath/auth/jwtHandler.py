from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import JWTError, jwt

from greenpath.config import Settings


def createAccessToken(
    userId: str,
    settings: Settings,
    expiresDelta: Optional[timedelta] = None
) -> str:
    """
    Create a JWT access token for a user id.
    """
    now = datetime.now(timezone.utc)
    expire = now + (expiresDelta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    toEncode = {
        "sub": str(userId),
        "exp": expire,
        "iat": now,
    }
    return jwt.encode(toEncode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verifyToken(token: str, settings: Settings) -> Optional[Dict[str, Any]]:
    """
    Verify a JWT token and return the payload if valid, else None.
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None
