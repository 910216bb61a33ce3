from typing import List, Optional
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.enums import EntryStatus
from guestbook.models.entry import GuestbookEntry


class EntryRepository:
    """
    Entry store. Every mutation is one statement whose WHERE clause carries
    the whole predicate, so the database serializes concurrent requests.
    """

    def _newest_first(self, stmt):
        # populate_existing: rows already in the session reflect the latest store state
        return (
            stmt.order_by(GuestbookEntry.created_at.desc(), GuestbookEntry.id.desc())
            .execution_options(populate_existing=True)
        )

    async def get(self, db: AsyncSession, entry_id: int) -> Optional[GuestbookEntry]:
        return await db.get(GuestbookEntry, entry_id, populate_existing=True)

    async def create(self, db: AsyncSession, **fields) -> GuestbookEntry:
        db_obj = GuestbookEntry(likes=0, **fields)
        db.add(db_obj)
        await db.commit()
        await db.refresh(db_obj)
        return db_obj

    async def list_public(self, db: AsyncSession, owner_username: str) -> List[GuestbookEntry]:
        stmt = select(GuestbookEntry).where(
            GuestbookEntry.owner_username == owner_username,
            GuestbookEntry.is_private.is_(False),
            GuestbookEntry.status == EntryStatus.APPROVED,
        )
        result = await db.execute(self._newest_first(stmt))
        return result.scalars().all()

    async def list_for_owner(self, db: AsyncSession, owner_username: str) -> List[GuestbookEntry]:
        stmt = select(GuestbookEntry).where(GuestbookEntry.owner_username == owner_username)
        result = await db.execute(self._newest_first(stmt))
        return result.scalars().all()

    async def increment_likes(self, db: AsyncSession, entry_id: int) -> bool:
        result = await db.execute(
            update(GuestbookEntry)
            .where(GuestbookEntry.id == entry_id)
            .values(likes=GuestbookEntry.likes + 1)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount > 0

    async def approve(self, db: AsyncSession, entry_id: int, owner_username: str) -> bool:
        result = await db.execute(
            update(GuestbookEntry)
            .where(
                GuestbookEntry.id == entry_id,
                GuestbookEntry.owner_username == owner_username,
                GuestbookEntry.status == EntryStatus.PENDING,
            )
            .values(status=EntryStatus.APPROVED)
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount > 0

    async def delete(self, db: AsyncSession, entry_id: int, owner_username: str) -> bool:
        # Replies are left in place; thread views drop them once the root is gone
        result = await db.execute(
            delete(GuestbookEntry)
            .where(
                GuestbookEntry.id == entry_id,
                GuestbookEntry.owner_username == owner_username,
            )
            .execution_options(synchronize_session=False)
        )
        await db.commit()
        return result.rowcount > 0

entry_repo = EntryRepository()
