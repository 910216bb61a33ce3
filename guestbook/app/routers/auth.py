from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.database import get_db
from guestbook.core.deps import get_credential_verifier, get_current_username
from guestbook.core.rate_limit_config import get_rate_limiter
from guestbook.core.security import CredentialVerifier
from guestbook.schemas.token import Token
from guestbook.schemas.user import UserCreate, UserLogin, UserResponse
from guestbook.services.auth_service import signup_user, authenticate_user, get_user

router = APIRouter(tags=["auth"])

@router.post("/signup", response_model=UserResponse, status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_rate_limiter("/auth/signup"))])
async def signup(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """
    Register a guestbook owner.
    """
    return await signup_user(db, user_in)

@router.post("/login", response_model=Token, dependencies=[Depends(get_rate_limiter("/auth/login"))])
async def login(
    login_in: UserLogin,
    db: AsyncSession = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
):
    """
    Exchange username/password for a bearer token.
    """
    return await authenticate_user(db, verifier, login_in)

@router.get("/me", response_model=UserResponse)
async def read_current_user(
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db)
):
    return await get_user(db, username)
