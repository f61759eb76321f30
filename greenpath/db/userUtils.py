import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from greenpath.auth.passwordHandler import hashPassword, verifyPassword
from greenpath.errors import InvalidRequestError, NotFoundError, UnauthorizedError
from greenpath.models.user import Role, User
from greenpath.schemas.user import ProfileUpdateRequest, UserRegisterRequest

logger = logging.getLogger(__name__)


def normalizeEmail(email: str) -> str:
    return email.strip().lower()


def getUserById(db: Session, userId: UUID) -> Optional[User]:
    return db.query(User).filter(User.id == userId).first()


def getUserByEmail(db: Session, email: str) -> Optional[User]:
    return db.query(User).filter(User.email == normalizeEmail(email)).first()


def registerUser(db: Session, request: UserRegisterRequest, rounds: int = 12) -> User:
    """New accounts always start with the USER role."""
    if getUserByEmail(db, request.email):
        raise InvalidRequestError("User already exists with this email")

    user = User(
        email=normalizeEmail(request.email),
        password=hashPassword(request.password, rounds),
        first_name=request.firstName,
        last_name=request.lastName,
        role=Role.USER,
    )
    try:
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise InvalidRequestError("User already exists with this email")

    logger.info("Registered user %s", user.id)
    return user


def authenticateUser(db: Session, email: str, password: str) -> User:
    user = getUserByEmail(db, email)
    if not user or not verifyPassword(password, user.password):
        raise UnauthorizedError("Invalid email or password")
    return user


def updateProfile(db: Session, user: User, request: ProfileUpdateRequest, rounds: int = 12) -> User:
    changes = request.model_dump(exclude_unset=True)
    changes = {field: value for field, value in changes.items() if value is not None}
    if not changes:
        raise InvalidRequestError("No valid updates provided")

    if "email" in changes:
        email = normalizeEmail(changes["email"])
        existing = getUserByEmail(db, email)
        if existing and existing.id != user.id:
            raise InvalidRequestError("User already exists with this email")
        user.email = email
    if "password" in changes:
        user.password = hashPassword(changes["password"], rounds)
    if "firstName" in changes:
        user.first_name = changes["firstName"]
    if "lastName" in changes:
        user.last_name = changes["lastName"]

    try:
        db.commit()
        db.refresh(user)
    except IntegrityError:
        db.rollback()
        raise InvalidRequestError("User already exists with this email")

    return user


def promoteToAdmin(db: Session, email: str) -> User:
    """Operator-only; there is no HTTP route that changes a role."""
    user = getUserByEmail(db, email)
    if not user:
        raise NotFoundError(f"No user registered with {email}")

    user.role = Role.ADMIN
    db.commit()
    db.refresh(user)

    logger.info("User %s promoted to ADMIN", user.id)
    return user
