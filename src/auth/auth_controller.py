# src/auth/auth_controller.py

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.dependencies import get_current_user
from src.common.database.database import get_db_session
from src.common.schemas import ApiResponse
from src.common.utils.global_messages import GlobalMessages
from src.auth import auth_service, schemas
from src.models.models import User

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=ApiResponse[schemas.UserResponse], status_code=status.HTTP_201_CREATED)
async def register(
    register_data: schemas.RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
):
    """
    Register a new user account.

    - **email**: User's email address
    - **password**: Password (minimum 8 characters)
    - **name**: Display name
    - **user_type**: ADMIN or USER (defaults to USER)
    """
    user = await auth_service.register_user(register_data, db)
    return ApiResponse(message=GlobalMessages.USER_CREATED, data=schemas.UserResponse.model_validate(user))


@router.post("/login", response_model=ApiResponse[schemas.LoginResponse])
async def login(
    credentials: schemas.LoginRequest,
    db: AsyncSession = Depends(get_db_session)
):
    """
    Authenticate a user and return an access token.

    - **email**: User's email address
    - **password**: User's password
    """
    user, access_token = await auth_service.login_user(credentials.email, credentials.password, db)
    return ApiResponse(
        message=GlobalMessages.LOGIN_SUCCESS,
        data=schemas.LoginResponse(user=schemas.UserResponse.model_validate(user), access_token=access_token),
    )


@router.get("/check-session", response_model=ApiResponse[schemas.UserResponse])
async def check_session(current_user: User = Depends(get_current_user)):
    """Return the user the bearer token belongs to."""
    return ApiResponse(data=schemas.UserResponse.model_validate(current_user))
