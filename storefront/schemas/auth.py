"""
Identity and session schemas
Shared by the token builder, the auth API and the route guard
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime
import enum

class AuthTrigger(str, enum.Enum):
    """Why a token or session is being built"""
    SIGN_IN = "signIn"
    SIGN_UP = "signUp"
    UPDATE = "update"
    REFRESH = "refresh"

    @property
    def is_authentication(self) -> bool:
        return self in (AuthTrigger.SIGN_IN, AuthTrigger.SIGN_UP)

class Identity(BaseModel):
    """Authenticated user as handed to the token builder"""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str
    role: str = "user"

    @field_validator("role", mode="before")
    @classmethod
    def role_value(cls, v):
        return v.value if isinstance(v, enum.Enum) else v

class UserRecord(Identity):
    """Stored user including the credential hash"""
    password_hash: Optional[str] = None

    def to_identity(self) -> Identity:
        return Identity(id=self.id, name=self.name, email=self.email, role=self.role)

class SessionUpdate(BaseModel):
    """Payload of an explicit session update"""
    name: Optional[str] = None

class AuthContext(BaseModel):
    """Request-scoped values the auth flow needs from the transport"""
    session_cart_id: Optional[str] = None

class SessionToken(BaseModel):
    """Claims carried by the signed session token"""
    sub: Optional[str] = None
    id: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    # Expiry of the signed token it was read from; never re-encoded as a claim
    exp: Optional[datetime] = Field(default=None, exclude=True)

    @classmethod
    def from_claims(cls, claims: dict) -> "SessionToken":
        return cls(**{field: claims.get(field) for field in cls.model_fields})

class SessionUser(BaseModel):
    id: Optional[str] = None
    role: Optional[str] = None
    name: Optional[str] = None

class SessionView(BaseModel):
    """Session as exposed to clients"""
    user: SessionUser
    expires: Optional[datetime] = None
