"""
User Service

Account creation, lookup and the admin-side user lifecycle (role
changes, blocking).
"""
import logging
from typing import Optional, List

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from printhaus.core.exceptions import ConflictError, NotFoundError
from printhaus.core.security import get_password_hash, verify_password
from printhaus.models.user import User, UserType

logger = logging.getLogger(__name__)


class UserService:
    """Service for user management operations."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_user(self, user_id: int) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.id == user_id))
        return result.scalar_one_or_none()

    async def get_user_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def count_users(self) -> int:
        result = await self.db.execute(select(func.count(User.id)))
        return result.scalar_one()

    async def list_users(self, include_blocked: bool = True) -> List[User]:
        query = select(User).order_by(User.created_at.desc(), User.id.desc())
        if not include_blocked:
            query = query.where(User.is_blocked.is_(False))
        result = await self.db.execute(query)
        return list(result.scalars().all())

    async def create_user(
        self,
        email: str,
        password: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        user_type: Optional[str] = None,
    ) -> User:
        """
        Create a user account.

        The very first account on an empty database becomes an admin;
        everyone else signs up as a customer unless a type is given.
        """
        if await self.get_user_by_email(email):
            raise ConflictError("Email already registered", code="email_taken")

        if user_type is None:
            is_first = await self.count_users() == 0
            user_type = UserType.ADMIN.value if is_first else UserType.CUSTOMER.value

        user = User(
            email=email.lower(),
            hashed_password=get_password_hash(password),
            first_name=first_name,
            last_name=last_name,
            user_type=user_type,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User created: id={user.id} type={user.user_type}")
        return user

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the user when the credentials match, else None."""
        user = await self.get_user_by_email(email)
        if not user or not verify_password(password, user.hashed_password):
            return None
        return user

    async def update_user(
        self,
        user_id: int,
        email: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        user_type: Optional[str] = None,
        password: Optional[str] = None,
    ) -> User:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        if email is not None and email.lower() != user.email:
            if await self.get_user_by_email(email):
                raise ConflictError("Email already registered", code="email_taken")
            user.email = email.lower()
        if first_name is not None:
            user.first_name = first_name
        if last_name is not None:
            user.last_name = last_name
        if user_type is not None:
            user.user_type = user_type
        if password is not None:
            user.hashed_password = get_password_hash(password)

        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def set_user_type(self, user_id: int, user_type: str) -> User:
        return await self.update_user(user_id, user_type=user_type)

    async def set_blocked(self, user_id: int, is_blocked: bool) -> User:
        user = await self.get_user(user_id)
        if not user:
            raise NotFoundError("User", user_id)

        user.is_blocked = is_blocked
        await self.db.commit()
        await self.db.refresh(user)

        logger.info(f"User {user_id} {'blocked' if is_blocked else 'unblocked'}")
        return user
