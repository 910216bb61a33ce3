from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, ConfigDict

from guestbook.core.enums import EntryStatus


class EntrySubmit(BaseModel):
    # Parsed by the engine after the spam trap, never by the router,
    # so a filled trap never produces a validation error.
    owner_username: Optional[str] = Field(None, max_length=50)
    sender_name: Optional[str] = Field(None, max_length=100)
    message: Optional[str] = Field(None, max_length=5000)
    sender_website: Optional[str] = Field(None, max_length=255)
    parent_id: Optional[int] = None
    is_private: bool = False
    bot_field: Optional[str] = Field(None, description="Hidden spam trap, must stay empty")


class SubmitResult(BaseModel):
    success: bool = True
    status: EntryStatus


class ActionResult(BaseModel):
    success: bool = True


class PublicEntryResponse(BaseModel):
    """Entry as shown on the public page."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    sender_name: str
    sender_website: Optional[str] = None
    message: str
    parent_id: Optional[int] = None
    likes: int
    is_owner: bool
    created_at: datetime


class EntryResponse(PublicEntryResponse):
    """Entry as shown on the owner dashboard."""
    owner_username: str
    is_private: bool
    status: EntryStatus


class PublicThreadResponse(BaseModel):
    root: PublicEntryResponse
    replies: List[PublicEntryResponse] = []


class ThreadResponse(BaseModel):
    root: EntryResponse
    replies: List[EntryResponse] = []
