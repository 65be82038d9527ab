"""
Process configuration.

Settings are read from the environment once at startup and handed to the
components that need them.
"""
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

STORE_BACKENDS = ("dynamodb", "sql")


class Settings(BaseModel):
    """Runtime configuration for the auth function."""
    jwt_secret: str
    token_ttl_seconds: int = Field(default=3600, gt=0)
    bcrypt_rounds: int = Field(default=10, ge=4, le=31)
    table_name: str = "userTable"
    store_backend: str = "dynamodb"
    database_url: str = "sqlite+aiosqlite:///./users.db"
    aws_region: Optional[str] = None
    dynamodb_endpoint_url: Optional[str] = None
    log_level: str = "INFO"

    @field_validator("jwt_secret")
    @classmethod
    def secret_must_be_set(cls, v):
        if not v:
            raise ValueError("JWT_SECRET must be set")
        return v

    @field_validator("store_backend")
    @classmethod
    def backend_must_be_known(cls, v):
        v = v.lower()
        if v not in STORE_BACKENDS:
            raise ValueError(f"STORE_BACKEND must be one of {', '.join(STORE_BACKENDS)}")
        return v

    @classmethod
    def from_env(cls) -> "Settings":
        return cls(
            jwt_secret=os.getenv("JWT_SECRET", ""),
            token_ttl_seconds=os.getenv("TOKEN_TTL_SECONDS", "3600"),
            bcrypt_rounds=os.getenv("BCRYPT_ROUNDS", "10"),
            table_name=os.getenv("TABLE_NAME", "userTable"),
            store_backend=os.getenv("STORE_BACKEND", "dynamodb"),
            database_url=os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./users.db"),
            aws_region=os.getenv("AWS_REGION") or None,
            dynamodb_endpoint_url=os.getenv("DYNAMODB_ENDPOINT_URL") or None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
        )
