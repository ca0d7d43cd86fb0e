"""
Authentication schemas for request/response validation
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional

from storefront.core.config import settings
from storefront.schemas.auth import SessionView

class SignInRequest(BaseModel):
    """Credential sign-in request"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "jane@example.com",
                "password": "secret123"
            }
        }
    }

class SignUpRequest(BaseModel):
    """Account registration request"""
    name: Optional[str] = Field(None, max_length=100)
    email: EmailStr
    password: str
    confirm_password: str

    @field_validator('name')
    @classmethod
    def validate_name(cls, v):
        if v is None:
            return v
        v = v.strip()
        return v or None

    @field_validator('password')
    @classmethod
    def validate_password(cls, v):
        if len(v) < settings.PASSWORD_MIN_LENGTH:
            raise ValueError(
                f"Password must be at least {settings.PASSWORD_MIN_LENGTH} characters long"
            )
        return v

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self

class SessionUpdateRequest(BaseModel):
    """Explicit session update"""
    name: str = Field(..., min_length=1, max_length=100)

class AuthResponse(BaseModel):
    """Session plus the signed token backing it"""
    session: SessionView
    access_token: str
    token_type: str = "bearer"
    expires_in: int
