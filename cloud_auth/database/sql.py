"""
SQL user store.

Keeps users in a ``users`` table whose primary key is the username, so a
duplicate insert is rejected by the database itself.
"""
import logging

from sqlalchemy import Column, String, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

from cloud_auth.auth.exceptions import UserAlreadyExistsError, UserNotFoundError, UserStoreError
from cloud_auth.auth.models import User
from cloud_auth.database.store import UserStore

logger = logging.getLogger("cloud_auth")

Base = declarative_base()


class UserRecord(Base):
    """Persisted user row."""
    __tablename__ = "users"

    username = Column(String, primary_key=True)
    password = Column(String, nullable=False)


class SQLUserStore(UserStore):
    """UserStore backed by an async SQLAlchemy engine."""

    def __init__(self, engine: AsyncEngine):
        self.engine = engine
        self._sessions = sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)

    @classmethod
    def from_url(cls, database_url: str) -> "SQLUserStore":
        return cls(create_async_engine(database_url, echo=False, future=True))

    async def create_tables(self) -> None:
        """Create the users table if it does not exist."""
        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def _fetch(self, username: str):
        try:
            async with self._sessions() as session:
                result = await session.execute(
                    select(UserRecord).where(UserRecord.username == username)
                )
                return result.scalar_one_or_none()
        except SQLAlchemyError as e:
            logger.error(f"ERROR: user lookup failed: {e!r}")
            raise UserStoreError("user lookup failed") from e

    async def exists(self, username: str) -> bool:
        return await self._fetch(username) is not None

    async def insert(self, user: User) -> None:
        try:
            async with self._sessions() as session:
                session.add(UserRecord(username=user.username, password=user.password_hash))
                await session.commit()
        except IntegrityError as e:
            raise UserAlreadyExistsError(user.username) from e
        except SQLAlchemyError as e:
            logger.error(f"ERROR: user insert failed: {e!r}")
            raise UserStoreError("user insert failed") from e

    async def get(self, username: str) -> User:
        record = await self._fetch(username)
        if record is None:
            raise UserNotFoundError(username)
        return User(username=record.username, password_hash=record.password)
