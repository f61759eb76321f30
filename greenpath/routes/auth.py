from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from greenpath.auth.dependencies import getAppSettings, getCurrentUser, getDb
from greenpath.auth.jwtHandler import createAccessToken
from greenpath.config import Settings
from greenpath.db.userUtils import authenticateUser, registerUser, updateProfile
from greenpath.models.user import User
from greenpath.schemas.user import (
    AuthResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    UserLoginRequest,
    UserRegisterRequest,
    UserResponse,
)

router = APIRouter(prefix="/api/auth", tags=["Auth"])


def toUserResponse(user: User) -> UserResponse:
    return UserResponse(
        id=str(user.id),
        email=user.email,
        firstName=user.first_name,
        lastName=user.last_name,
        role=user.role,
        createdAt=user.created_at,
        updatedAt=user.updated_at
    )


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    request: UserRegisterRequest,
    settings: Settings = Depends(getAppSettings),
    db: Session = Depends(getDb)
):
    """Create a USER account and return it with an access token."""
    user = registerUser(db, request, settings.BCRYPT_ROUNDS)
    return AuthResponse(
        message="User registered successfully",
        user=toUserResponse(user),
        token=createAccessToken(str(user.id), settings)
    )


@router.post("/login", response_model=AuthResponse)
def login(
    request: UserLoginRequest,
    settings: Settings = Depends(getAppSettings),
    db: Session = Depends(getDb)
):
    user = authenticateUser(db, request.email, request.password)
    return AuthResponse(
        message="Login successful",
        user=toUserResponse(user),
        token=createAccessToken(str(user.id), settings)
    )


@router.get("/profile", response_model=ProfileResponse)
def getProfile(user: User = Depends(getCurrentUser)):
    return ProfileResponse(user=toUserResponse(user))


@router.put("/profile", response_model=ProfileResponse)
def editProfile(
    request: ProfileUpdateRequest,
    user: User = Depends(getCurrentUser),
    settings: Settings = Depends(getAppSettings),
    db: Session = Depends(getDb)
):
    """Update name, email or password. Role cannot be changed here."""
    user = updateProfile(db, user, request, settings.BCRYPT_ROUNDS)
    return ProfileResponse(user=toUserResponse(user))
