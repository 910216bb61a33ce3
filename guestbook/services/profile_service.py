from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.schemas.user import ProfileResponse, ProfileUpdate, ModerationSettings
from guestbook.services.auth_service import get_user
from guestbook.repository.user import user_repo


async def get_public_profile(db: AsyncSession, username: str) -> ProfileResponse:
    user = await get_user(db, username)
    # Empty strings instead of None keep page templates simple
    return ProfileResponse(
        custom_css=user.custom_css or "",
        custom_html=user.custom_html or "",
    )


async def update_profile(db: AsyncSession, username: str, profile_in: ProfileUpdate) -> ProfileResponse:
    user = await get_user(db, username)
    user.custom_css = profile_in.custom_css or ""
    user.custom_html = profile_in.custom_html or ""
    await user_repo.save(db, user)
    return ProfileResponse(custom_css=user.custom_css, custom_html=user.custom_html)


async def get_moderation_settings(db: AsyncSession, username: str) -> ModerationSettings:
    user = await get_user(db, username)
    return ModerationSettings(require_approval=user.require_approval)


async def update_moderation_settings(db: AsyncSession, username: str, settings_in: ModerationSettings) -> ModerationSettings:
    """Only affects entries submitted after the change."""
    user = await get_user(db, username)
    user.require_approval = settings_in.require_approval
    await user_repo.save(db, user)
    return ModerationSettings(require_approval=user.require_approval)
