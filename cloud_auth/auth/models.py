"""
Authentication models.

This module defines pydantic models for:
- Registration and login requests
- Stored users
- Login responses
"""
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field


class RegisterUser(BaseModel):
    """Model for user registration. Never persisted as-is."""
    username: str = ""
    password: str = ""


class LoginRequest(BaseModel):
    """Model for user login."""
    username: str = ""
    password: str = ""


class User(BaseModel):
    """
    A registered user.

    The stored record keeps the hash under the ``password`` attribute.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    username: str
    password_hash: str = Field(alias="password")

    def to_item(self) -> Dict[str, str]:
        """Return the persisted record shape."""
        return self.model_dump(by_alias=True)


class LoginResponse(BaseModel):
    """Body returned from a successful login."""
    access_token: str
