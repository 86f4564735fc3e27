"""User service"""
from typing import List, Optional, Tuple
from datetime import datetime
from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession

from opensrs_gateway.models.domain import Domain
from opensrs_gateway.models.user import User, UserRole
from opensrs_gateway.schemas.user import UserCreate, UserUpdate
from opensrs_gateway.core.security import get_password_hash, verify_password


class UserService:
    """User service for database operations"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID"""
        result = await self.db.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        result = await self.db.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(User.username == username)
        )
        return result.scalar_one_or_none()

    async def get_by_login(self, login: str) -> Optional[User]:
        """Get user by email or username"""
        result = await self.db.execute(
            select(User).where(or_(User.email == login.lower(), User.username == login))
        )
        return result.scalar_one_or_none()

    async def create(self, user_create: UserCreate, role: UserRole = UserRole.USER) -> User:
        """Create new user"""
        credentials = user_create.opensrs_credentials
        user = User(
            username=user_create.username,
            email=user_create.email.lower(),
            password_hash=get_password_hash(user_create.password),
            first_name=user_create.first_name,
            last_name=user_create.last_name,
            phone=user_create.phone,
            address=user_create.address.model_dump() if user_create.address else None,
            opensrs_username=credentials.username if credentials else None,
            opensrs_api_key=credentials.api_key if credentials else None,
            opensrs_test_mode=credentials.test_mode if credentials else True,
            role=role,
        )
        self.db.add(user)
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def update(self, user: User, user_update: UserUpdate) -> User:
        """Update profile fields; the password is changed separately"""
        data = user_update.model_dump(exclude_unset=True)
        credentials = data.pop("opensrs_credentials", None)
        if "email" in data and data["email"]:
            data["email"] = data["email"].lower()

        for field, value in data.items():
            setattr(user, field, value)
        if credentials is not None:
            user.opensrs_username = credentials.get("username")
            if credentials.get("api_key"):
                user.opensrs_api_key = credentials["api_key"]
            user.opensrs_test_mode = credentials.get("test_mode", True)

        user.updated_at = datetime.utcnow()
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def change_password(self, user: User, current_password: str, new_password: str) -> bool:
        """Replace the password if ``current_password`` matches"""
        if not verify_password(current_password, user.password_hash):
            return False
        user.password_hash = get_password_hash(new_password)
        user.updated_at = datetime.utcnow()
        await self.db.flush()
        return True

    async def authenticate(self, login: str, password: str) -> Optional[User]:
        user = await self.get_by_login(login)
        if user is None or not verify_password(password, user.password_hash):
            return None
        return user

    async def update_last_login(self, user: User):
        """Update last login timestamp"""
        user.last_login = datetime.utcnow()
        await self.db.flush()

    async def set_active(self, user: User, is_active: bool) -> User:
        user.is_active = is_active
        user.updated_at = datetime.utcnow()
        await self.db.flush()
        await self.db.refresh(user)
        return user

    async def domain_count(self, user_id: int) -> int:
        result = await self.db.execute(
            select(func.count(Domain.id)).where(Domain.owner_id == user_id)
        )
        return result.scalar_one()

    async def search(
        self,
        query: Optional[str] = None,
        role: Optional[UserRole] = None,
        is_active: Optional[bool] = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[User], int]:
        """Search users by username, email or name, newest first"""
        conditions = []
        if query:
            pattern = f"%{query}%"
            conditions.append(or_(
                User.username.ilike(pattern),
                User.email.ilike(pattern),
                User.first_name.ilike(pattern),
                User.last_name.ilike(pattern),
            ))
        if role is not None:
            conditions.append(User.role == role)
        if is_active is not None:
            conditions.append(User.is_active == is_active)

        total = (await self.db.execute(
            select(func.count(User.id)).where(*conditions)
        )).scalar_one()
        result = await self.db.execute(
            select(User)
            .where(*conditions)
            .order_by(User.created_at.desc(), User.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        )
        return list(result.scalars().all()), total
