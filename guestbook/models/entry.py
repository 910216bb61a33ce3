from sqlalchemy import Column, Integer, String, Boolean, DateTime, Text, Enum, Index
from sqlalchemy.sql import func
from guestbook.core.database import Base
from guestbook.core.enums import EntryStatus

class GuestbookEntry(Base):
    __tablename__ = "guestbook_entries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_username = Column(String(50), nullable=False, index=True)  # guestbook owner, immutable

    sender_name = Column(String(100), nullable=False)
    sender_website = Column(String(255), nullable=True)
    message = Column(Text, nullable=False)

    # NULL = root post; replies point at a root of the same owner
    parent_id = Column(Integer, nullable=True, index=True)

    is_private = Column(Boolean, default=False, nullable=False)
    is_owner = Column(Boolean, default=False, nullable=False)  # fixed at creation
    status = Column(
        Enum(EntryStatus, values_callable=lambda e: [m.value for m in e], name="entry_status"),
        default=EntryStatus.APPROVED,
        nullable=False,
    )
    likes = Column(Integer, default=0, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    __table_args__ = (
        Index("ix_guestbook_entries_owner_created", "owner_username", "created_at"),
    )
