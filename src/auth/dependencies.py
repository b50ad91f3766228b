# src/auth/dependencies.py

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from src.auth.auth_service import decode_access_token
from src.common.database.database import get_db_session
from src.common.database.gateway import TableGateway
from src.common.utils.exceptions import AuthError
from src.common.utils.global_messages import GlobalMessages
from src.models.models import User

# auto_error is off so a missing header gets the same 401 body as a bad token
bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db_session)
) -> User:
    """
    Dependency to retrieve the current user based on the JWT token provided in the Authorization header.
    """
    if credentials is None:
        raise AuthError(GlobalMessages.AUTH_REQUIRED)

    payload = decode_access_token(credentials.credentials)
    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise AuthError(GlobalMessages.SESSION_INVALID)

    user = await TableGateway(db, User).get(int(subject))
    if user is None:
        raise AuthError(GlobalMessages.SESSION_INVALID)
    return user
