"""Pydantic schemas for login."""

from pydantic import BaseModel

from portfolio_tracker.domain.models.enums import UserRole


class LoginRequest(BaseModel):
    password: str


class LoginResponse(BaseModel):
    role: UserRole
