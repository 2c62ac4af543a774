from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from app.features.auth.models.user_model import AuthProvider


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


class CurrentUser(BaseModel):
    user_id: int
    username: str


class SessionData(CurrentUser):
    sid: str
    created_at: datetime


class TokenPayload(BaseModel):
    sid: str
    exp: datetime


class TokenResponse(CamelModel):
    access_token: str
    token_type: str


class IssuedSession(BaseModel):
    token: str
    user: CurrentUser


class AuthResponse(CamelModel):
    success: bool
    message: str
    data: Optional[TokenResponse] = None


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=50)
    password: str = Field(min_length=6)
    email: EmailStr
    business_name: str = Field(min_length=1, max_length=255)
    subdomain: str
    preferred_language: str = "th"

    @field_validator("username", "business_name")
    def strip_text(cls, value: str):
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value

    @field_validator("subdomain")
    def clean_subdomain(cls, value: str):
        return value.strip()


class LoginRequest(CamelModel):
    username: str = Field(min_length=1)
    password: str = Field(min_length=1)


class OAuthLoginRequest(CamelModel):
    email: EmailStr
    display_name: Optional[str] = None
    auth_provider: AuthProvider
    provider_id: str = Field(min_length=1)
    photo_url: Optional[str] = Field(default=None, alias="photoURL")

    @field_validator("auth_provider", mode="before")
    def validate_provider(cls, value):
        if isinstance(value, AuthProvider):
            return value
        supported = [p.value for p in AuthProvider]
        if not isinstance(value, str) or value.strip().lower() not in supported:
            raise PydanticCustomError(
                "unsupported_provider",
                "Unsupported provider {provider}, expected one of: {supported}",
                {"provider": str(value), "supported": ", ".join(supported)},
            )
        return value.strip().lower()

    @field_validator("display_name")
    def blank_display_name(cls, value):
        if value is not None and not value.strip():
            return None
        return value.strip() if value else value


class UserCreate(BaseModel):
    username: str
    email: str
    business_name: str
    subdomain: str
    password: Optional[str] = None
    preferred_language: Optional[str] = "th"
    auth_provider: Optional[AuthProvider] = None
    provider_id: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = None


class UserPublic(CamelModel):
    id: int
    username: str
    email: str
    business_name: str
    subdomain: str
    created_at: datetime
    is_verified: bool
    preferred_language: Optional[str] = None
    auth_provider: Optional[AuthProvider] = None
    provider_id: Optional[str] = None
    display_name: Optional[str] = None
    photo_url: Optional[str] = Field(default=None, alias="photoURL")
