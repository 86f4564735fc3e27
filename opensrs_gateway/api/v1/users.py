"""User account endpoints"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from opensrs_gateway.api.responses import ok, pagination
from opensrs_gateway.core.database import get_db
from opensrs_gateway.core.security import get_current_admin
from opensrs_gateway.models.user import User, UserRole
from opensrs_gateway.schemas.user import (
    PasswordChange,
    UserCreate,
    UserProfile,
    UserResponse,
    UserUpdate,
)
from opensrs_gateway.services.user_service import UserService

logger = logging.getLogger(__name__)

router = APIRouter()


def _user_data(user: User) -> dict:
    return UserResponse.model_validate(user).model_dump(mode="json")


async def _get_user_or_404(user_service: UserService, user_id: int) -> User:
    user = await user_service.get_by_id(user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return user


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_user(
    user_create: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Create a user account"""
    user_service = UserService(db)

    if await user_service.get_by_email(user_create.email) or await user_service.get_by_username(user_create.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User with this email or username already exists"
        )

    user = await user_service.create(user_create)
    await db.commit()
    logger.info("Created user %s", user.username)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=ok(_user_data(user), message="User created successfully"),
    )


@router.get("")
async def search_users(
    q: Optional[str] = None,
    role: Optional[UserRole] = None,
    is_active: Optional[bool] = Query(None, alias="isActive"),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Search users (admin only)"""
    users, total = await UserService(db).search(q, role, is_active, page, limit)
    return ok({
        "users": [_user_data(user) for user in users],
        "searchQuery": {"q": q, "role": role.value if role else None, "isActive": is_active},
        "pagination": pagination(page, limit, total),
    })


@router.get("/{user_id}")
async def get_user(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get user by ID"""
    user = await _get_user_or_404(UserService(db), user_id)
    return ok(_user_data(user))


@router.put("/{user_id}")
async def update_user(
    user_id: int,
    user_update: UserUpdate,
    db: AsyncSession = Depends(get_db)
):
    """Update profile fields and OpenSRS sub-account settings"""
    user_service = UserService(db)
    user = await _get_user_or_404(user_service, user_id)

    if user_update.email and user_update.email.lower() != user.email:
        if await user_service.get_by_email(user_update.email):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="email already exists"
            )

    user = await user_service.update(user, user_update)
    await db.commit()
    return ok(_user_data(user), message="User updated successfully")


@router.put("/{user_id}/password")
async def change_password(
    user_id: int,
    password_change: PasswordChange,
    db: AsyncSession = Depends(get_db)
):
    """Change password after verifying the current one"""
    user_service = UserService(db)
    user = await _get_user_or_404(user_service, user_id)

    changed = await user_service.change_password(
        user, password_change.current_password, password_change.new_password
    )
    if not changed:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    await db.commit()
    return ok(message="Password changed successfully")


@router.get("/{user_id}/profile")
async def get_user_profile(
    user_id: int,
    db: AsyncSession = Depends(get_db)
):
    """Get user with the number of domains they own"""
    user_service = UserService(db)
    user = await _get_user_or_404(user_service, user_id)

    profile = UserProfile.model_validate(user)
    profile.domain_count = await user_service.domain_count(user.id)
    return ok(profile.model_dump(mode="json"))


@router.put("/{user_id}/deactivate")
async def deactivate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Deactivate a user (admin only)"""
    user_service = UserService(db)
    user = await user_service.set_active(await _get_user_or_404(user_service, user_id), False)
    await db.commit()
    return ok(_user_data(user), message="User deactivated successfully")


@router.put("/{user_id}/activate")
async def activate_user(
    user_id: int,
    db: AsyncSession = Depends(get_db),
    current_admin: User = Depends(get_current_admin)
):
    """Activate a user (admin only)"""
    user_service = UserService(db)
    user = await user_service.set_active(await _get_user_or_404(user_service, user_id), True)
    await db.commit()
    return ok(_user_data(user), message="User activated successfully")
