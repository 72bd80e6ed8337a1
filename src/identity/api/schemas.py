"""Pydantic request/response schemas for the Identity API."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

# bcrypt only looks at the first 72 bytes of a password
BCRYPT_MAX_BYTES = 72


def _within_bcrypt_limit(value: str) -> str:
    if len(value.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValueError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes when UTF-8 encoded")
    return value


# --- Request Schemas ---


class RegisterUserRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Jane Doe",
                    "email": "jane.doe@example.com",
                    "password": "correct horse battery",
                    "phone": "+1-555-0123",
                }
            ]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., max_length=254)
    password: str = Field(..., min_length=8, max_length=BCRYPT_MAX_BYTES)
    phone: str | None = Field(None, max_length=20)

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        return _within_bcrypt_limit(v)


class LoginRequest(BaseModel):
    email: str = Field(..., max_length=254)
    password: str = Field(..., max_length=BCRYPT_MAX_BYTES)

    @field_validator("password")
    @classmethod
    def validate_password_bytes(cls, v: str) -> str:
        return _within_bcrypt_limit(v)


# --- Response Schemas ---


class UserIdResponse(BaseModel):
    user_id: str


class UserProfileResponse(BaseModel):
    id: str
    name: str
    email: str
    phone: str | None = None
    role: str


class LoginResponse(BaseModel):
    token: str
    user: UserProfileResponse


class StatusResponse(BaseModel):
    status: str = "ok"
