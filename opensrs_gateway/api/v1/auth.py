"""Authentication endpoints"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from opensrs_gateway.api.responses import ok
from opensrs_gateway.core.database import get_db
from opensrs_gateway.core.security import create_access_token, get_current_active_user
from opensrs_gateway.models.user import User
from opensrs_gateway.schemas.user import TokenResponse, UserLogin, UserResponse
from opensrs_gateway.services.user_service import UserService

router = APIRouter()


@router.post("/login")
async def login(
    user_login: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Login by email or username and return an access token"""
    user_service = UserService(db)

    user = await user_service.authenticate(user_login.login, user_login.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials"
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Account is deactivated"
        )

    await user_service.update_last_login(user)
    await db.commit()

    access_token = create_access_token({"sub": user.id, "username": user.username, "role": user.role.value})
    token = TokenResponse(access_token=access_token, user=UserResponse.model_validate(user))
    return ok(token.model_dump(mode="json"), message="Login successful")


@router.get("/me")
async def get_current_user_info(
    current_user: User = Depends(get_current_active_user)
):
    """Get current user information"""
    return ok(UserResponse.model_validate(current_user).model_dump(mode="json"))
