from typing import Optional
from uuid import UUID

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from greenpath.auth.accessControl import Requester
from greenpath.auth.jwtHandler import verifyToken
from greenpath.config import Settings
from greenpath.db.userUtils import getUserById
from greenpath.errors import UnauthorizedError
from greenpath.models.user import User

bearer = HTTPBearer(auto_error=False)


def getDb(request: Request):
    db = request.app.state.sessionFactory()
    try:
        yield db
    finally:
        db.close()


def getAppSettings(request: Request) -> Settings:
    return request.app.state.settings


def getCurrentUser(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer),
    settings: Settings = Depends(getAppSettings),
    db: Session = Depends(getDb),
) -> User:
    """Resolve the bearer token to a stored user, or fail with 401."""
    if credentials is None:
        raise UnauthorizedError("No token, authorization denied")

    payload = verifyToken(credentials.credentials, settings)
    if not payload or "sub" not in payload:
        raise UnauthorizedError("Token is not valid or expired")

    try:
        userId = UUID(payload["sub"])
    except (TypeError, ValueError, AttributeError):
        raise UnauthorizedError("Token is not valid or expired")

    user = getUserById(db, userId)
    if not user:
        raise UnauthorizedError("User not found")
    return user


def getRequester(user: User = Depends(getCurrentUser)) -> Requester:
    return Requester(userId=user.id, role=user.role)
