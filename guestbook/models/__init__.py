# guestbook/models/__init__.py
from .user import User
from .entry import GuestbookEntry
from guestbook.core.enums import EntryStatus
from guestbook.core.database import Base


# exposed so create_all sees every table
__all__ = [
    "Base",
    "User",
    "GuestbookEntry",
    "EntryStatus",
]
