from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select

from guestbook.models.user import User

class UserRepository:
    async def get_by_username(self, db: AsyncSession, *, username: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def get_by_domain(self, db: AsyncSession, *, domain: str) -> Optional[User]:
        result = await db.execute(select(User).where(User.custom_domain == domain))
        return result.scalars().first()

    async def get_require_approval(self, db: AsyncSession, *, username: str) -> bool:
        result = await db.execute(select(User.require_approval).where(User.username == username))
        # Unknown owner: nothing to moderate against
        return bool(result.scalar_one_or_none())

    async def create(self, db: AsyncSession, *, username: str, hashed_password: str) -> User:
        db_obj = User(username=username, hashed_password=hashed_password)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def save(self, db: AsyncSession, user: User) -> User:
        db.add(user)
        await db.commit()
        await db.refresh(user)
        return user

user_repo = UserRepository()
