import logging
from typing import Dict, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from guestbook.core import security
from guestbook.core.security import CredentialVerifier
from guestbook.core.exceptions import InvalidCredentialsError, UserAlreadyExistsError, UserNotFoundError
from guestbook.models import User
from guestbook.repository.user import user_repo
from guestbook.schemas.user import UserCreate, UserLogin

logger = logging.getLogger(__name__)


async def signup_user(db: AsyncSession, user_in: UserCreate) -> User:
    if await user_repo.get_by_username(db, username=user_in.username):
        raise UserAlreadyExistsError()
    try:
        user = await user_repo.create(
            db,
            username=user_in.username,
            hashed_password=security.get_password_hash(user_in.password),
        )
    except IntegrityError:
        # lost a race against a concurrent signup
        await db.rollback()
        raise UserAlreadyExistsError()
    logger.info(f"Created user {user.username}")
    return user


async def authenticate_user(
    db: AsyncSession,
    verifier: CredentialVerifier,
    login_in: UserLogin
) -> Dict[str, Any]:
    """
    Check username/password and issue an access token.
    """
    user = await user_repo.get_by_username(db, username=login_in.username)
    if not user or not security.verify_password(login_in.password, user.hashed_password):
        raise InvalidCredentialsError()

    return {
        "access_token": verifier.create_access_token(subject=user.username),
        "token_type": "bearer",
        "username": user.username,
    }


async def get_user(db: AsyncSession, username: str) -> User:
    user = await user_repo.get_by_username(db, username=username)
    if not user:
        raise UserNotFoundError()
    return user
