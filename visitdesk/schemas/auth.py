"""Admin login and session schemas."""
from pydantic import BaseModel, field_validator


class AdminLogin(BaseModel):
    username: str
    password: str

    @field_validator("username", "password")
    @classmethod
    def required(cls, v: str) -> str:
        if not v:
            raise ValueError("is required")
        return v


class AdminSummary(BaseModel):
    id: str
    username: str


class LoginResponse(BaseModel):
    success: bool = True
    user: AdminSummary
    token: str


class LogoutResponse(BaseModel):
    success: bool = True


class SessionStatus(BaseModel):
    authenticated: bool
    user: AdminSummary | None = None
