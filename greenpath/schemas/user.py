from datetime import datetime
from typing import Optional

from pydantic import BaseModel, EmailStr, Field

from greenpath.models.user import Role


class UserRegisterRequest(BaseModel):
    email: EmailStr
    password: str = Field(min_length=6, max_length=72)  # bcrypt limit
    firstName: str = Field(min_length=1)
    lastName: str = Field(min_length=1)

    class Config:
        json_schema_extra = {
            "example": {
                "email": "maya@example.com",
                "password": "rainforest42",
                "firstName": "Maya",
                "lastName": "Lindqvist"
            }
        }


class UserLoginRequest(BaseModel):
    email: EmailStr
    password: str


class ProfileUpdateRequest(BaseModel):
    """Self-service profile edit. Role is not editable here."""
    email: Optional[EmailStr] = None
    password: Optional[str] = Field(default=None, min_length=6, max_length=72)
    firstName: Optional[str] = Field(default=None, min_length=1)
    lastName: Optional[str] = Field(default=None, min_length=1)


class UserResponse(BaseModel):
    id: str
    email: str
    firstName: str
    lastName: str
    role: Role
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    class Config:
        from_attributes = True


class AuthResponse(BaseModel):
    message: str
    user: UserResponse
    token: str


class ProfileResponse(BaseModel):
    user: UserResponse
