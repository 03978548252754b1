from __future__ import annotations

from pydantic import Field, field_validator

from ..schemas import CamelModel
from ..suggestions.preferences import DietaryPreference, normalize_term


class UserOut(CamelModel):
    id: str
    email: str | None = None
    name: str | None = None
    age: int | None = None
    profile_picture: str | None = None
    dietary_preferences: list[str] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)


class UserResponse(CamelModel):
    user: UserOut


class SignupRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
    name: str | None = None


class LoginRequest(CamelModel):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class AuthResponse(CamelModel):
    token: str
    user: UserOut


class ForgotPasswordRequest(CamelModel):
    email: str = Field(..., min_length=1)


class ForgotPasswordResponse(CamelModel):
    message: str
    reset_token: str | None = None
    reset_link: str | None = None


class ResetPasswordRequest(CamelModel):
    token: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class MessageResponse(CamelModel):
    message: str


class DebugResetPasswordRequest(CamelModel):
    email: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=1)


class PreferencesUpdate(CamelModel):
    dietary_preferences: list[DietaryPreference] = Field(default_factory=list)
    allergies: list[str] = Field(default_factory=list)

    @field_validator("dietary_preferences", mode="before")
    @classmethod
    def _normalize_preferences(cls, value):
        if value is None:
            return []
        if isinstance(value, list):
            return [normalize_term(v) if isinstance(v, str) else v for v in value]
        return value

    @field_validator("allergies", mode="before")
    @classmethod
    def _none_to_empty(cls, value):
        return [] if value is None else value


class ProfileUpdate(CamelModel):
    name: str | None = None
    age: int | None = Field(default=None, ge=0, le=150)


class ProfilePictureUpdate(CamelModel):
    profile_picture: str | None = None
