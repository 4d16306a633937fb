"""Credential store for the single shared password.

The password lives as one bcrypt hash row. Setting it replaces the row
wholesale; there is no per-user identity.

Examples:
    >>> store = CredentialStore(get_session_factory())
    >>> await store.set_password("correct horse")
    >>> await store.verify("correct horse")
    True
"""

from __future__ import annotations

import asyncio
import logging

import bcrypt
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from pastebin.database import session_scope
from pastebin.errors import InvalidInput, StorageFailure
from pastebin.models import Credential

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
# bcrypt only looks at the first 72 bytes of a password.
BCRYPT_MAX_BYTES = 72


def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    """Hash a password with bcrypt."""
    secret = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    return bcrypt.hashpw(secret, bcrypt.gensalt(rounds=rounds)).decode("ascii")


def check_password(password: str, password_hash: str) -> bool:
    """Check a password against a bcrypt hash."""
    secret = password.encode("utf-8")[:BCRYPT_MAX_BYTES]
    try:
        return bcrypt.checkpw(secret, password_hash.encode("ascii"))
    except ValueError:
        logger.error("Stored password hash is malformed")
        return False


class CredentialStore:
    """Reads and replaces the shared password hash.

    Attributes:
        session_factory: Factory producing async sessions.
        rounds: bcrypt cost factor for new hashes.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        rounds: int = BCRYPT_ROUNDS,
    ) -> None:
        self.session_factory = session_factory
        self.rounds = rounds

    async def get_hash(self) -> str | None:
        """Return the stored hash, or None when no password is set."""
        try:
            async with session_scope(self.session_factory) as session:
                result = await session.execute(select(Credential.password_hash).limit(1))
                return result.scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to read credential: {exc}") from exc

    async def is_configured(self) -> bool:
        """Check whether a password has been set."""
        return await self.get_hash() is not None

    async def set_password(self, password: str) -> None:
        """Replace the shared password.

        Raises:
            InvalidInput: If the password is empty.
        """
        if not password or not password.strip():
            raise InvalidInput("Password cannot be empty")

        password_hash = await asyncio.to_thread(hash_password, password, self.rounds)
        try:
            async with session_scope(self.session_factory) as session:
                await session.execute(delete(Credential))
                session.add(Credential(id=1, password_hash=password_hash))
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to store credential: {exc}") from exc
        logger.info("Password updated")

    async def verify(self, password: str) -> bool:
        """Check a password against the stored hash (False when unset)."""
        password_hash = await self.get_hash()
        if password_hash is None or not password:
            return False
        return await asyncio.to_thread(check_password, password, password_hash)

    async def initialize_password(self, password: str) -> bool:
        """Set the password only if none is stored yet.

        The credential row has a fixed primary key, so of several concurrent
        callers exactly one insert succeeds.

        Returns:
            True if this call stored the password, False if one already existed.

        Raises:
            InvalidInput: If the password is empty.
        """
        if not password or not password.strip():
            raise InvalidInput("Password cannot be empty")

        password_hash = await asyncio.to_thread(hash_password, password, self.rounds)
        try:
            async with session_scope(self.session_factory) as session:
                session.add(Credential(id=1, password_hash=password_hash))
        except IntegrityError:
            return False
        except SQLAlchemyError as exc:
            raise StorageFailure(f"Failed to store credential: {exc}") from exc
        logger.info("No password configured, adopted first login password")
        return True

    async def verify_or_initialize(self, password: str) -> bool:
        """Check a password, adopting it as the password when none is set yet.

        Returns:
            True if the caller may start a session.
        """
        if not password:
            return False
        if not await self.is_configured() and await self.initialize_password(password):
            return True
        return await self.verify(password)
