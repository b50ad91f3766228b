# src/auth/auth_service.py

import logging
from datetime import datetime, timedelta, timezone
from typing import Tuple

import jwt
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from passlib.context import CryptContext

from src.common.config import settings
from src.common.database.gateway import TableGateway
from src.common.utils.exceptions import AuthError, ConflictError
from src.common.utils.global_messages import GlobalMessages
from src.models.models import User
from src.auth.schemas import RegisterRequest

log = logging.getLogger(__name__)

# Initialize the password context (bcrypt)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify that the provided password matches the hashed password."""
    return pwd_context.verify(plain_password, hashed_password)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: timedelta = None) -> str:
    """Create a JWT token including an expiration date."""
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta if expires_delta else timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token; any failure is an expired or invalid session."""
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except jwt.InvalidTokenError as e:
        raise AuthError(GlobalMessages.SESSION_INVALID) from e


async def get_user_by_email(email: str, db: AsyncSession):
    return await TableGateway(db, User).fetch_one(select(User).where(User.email == email.lower()))


async def register_user(request: RegisterRequest, db: AsyncSession) -> User:
    """Create a new user with a bcrypt-hashed password."""
    if await get_user_by_email(request.email, db):
        raise ConflictError(GlobalMessages.USER_ALREADY_EXISTS)

    gateway = TableGateway(db, User)
    user = await gateway.insert({
        "email": request.email.lower(),
        "password_hash": hash_password(request.password),
        "name": request.name.strip(),
        "user_type": request.user_type,
    })
    await gateway.commit()

    log.info("User %s registered as %s", user.id, user.user_type.value)
    return user


async def authenticate_user(email: str, password: str, db: AsyncSession) -> User:
    """Unknown emails and wrong passwords fail the same way."""
    user = await get_user_by_email(email, db)
    if not user or not verify_password(password, user.password_hash):
        log.warning("Failed login attempt for %s", email)
        raise AuthError(GlobalMessages.INVALID_CREDENTIALS)
    return user


async def login_user(email: str, password: str, db: AsyncSession) -> Tuple[User, str]:
    """Authenticate a user and return user with JWT access token."""
    user = await authenticate_user(email, password, db)

    access_token = create_access_token(
        data={"sub": str(user.id), "type": user.user_type.value},
        expires_delta=timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    return user, access_token
