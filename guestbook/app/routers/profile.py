from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.database import get_db
from guestbook.core.deps import get_current_username
from guestbook.core.rate_limit_config import get_rate_limiter
from guestbook.schemas.user import ProfileResponse, ProfileUpdate, ModerationSettings
from guestbook.services.profile_service import (
    get_public_profile,
    update_profile,
    get_moderation_settings,
    update_moderation_settings,
)

router = APIRouter(prefix="/profile", tags=["profile"])

# /settings is declared before /{username} so it is not captured as a username

@router.get("/settings", response_model=ModerationSettings)
async def read_my_settings(
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db)
):
    return await get_moderation_settings(db, username)

@router.put("/settings", response_model=ModerationSettings, dependencies=[Depends(get_rate_limiter("/profile"))])
async def update_my_settings(
    settings_in: ModerationSettings,
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db)
):
    """
    Turn manual approval of visitor entries on or off.
    """
    return await update_moderation_settings(db, username, settings_in)

@router.get("/{username}", response_model=ProfileResponse)
async def read_profile(
    username: str,
    db: AsyncSession = Depends(get_db)
):
    """
    Public presentation fields (custom CSS/HTML) of a guestbook.
    """
    return await get_public_profile(db, username)

@router.put("", response_model=ProfileResponse, dependencies=[Depends(get_rate_limiter("/profile"))])
async def update_my_profile(
    profile_in: ProfileUpdate,
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db)
):
    return await update_profile(db, username, profile_in)
