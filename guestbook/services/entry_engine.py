"""
Entry engine: ingestion, moderation, visibility and mutation rules for
guestbook entries.

An engine is built per request around one session. Credential checks go
through the injected CredentialVerifier and moderation lookups through the
injected policy, so the engine itself never reads global settings.
"""
import logging
from datetime import datetime, timezone
from typing import Any, Callable, List, Mapping, Optional, Union

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.enums import EntryStatus
from guestbook.core.exceptions import (
    InvalidInputError,
    MissingFieldError,
    ParentNotFoundError,
    EntryNotFoundError,
    UnauthorizedError,
    StoreFailureError,
)
from guestbook.core.security import CredentialVerifier
from guestbook.models.entry import GuestbookEntry
from guestbook.repository.entry import EntryRepository, entry_repo
from guestbook.repository.user import user_repo
from guestbook.schemas.entry import EntrySubmit, SubmitResult

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_submission(raw: Mapping[str, Any]) -> EntrySubmit:
    try:
        return EntrySubmit.model_validate(raw)
    except ValidationError as e:
        error = e.errors()[0]
        field = ".".join(str(part) for part in error["loc"]) or "body"
        raise InvalidInputError(f"Invalid {field}: {error['msg']}") from e


class UserModerationPolicy:
    """Reads the owner's require_approval flag from the users table."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def requires_approval(self, owner_username: str) -> bool:
        return await user_repo.get_require_approval(self.db, username=owner_username)


class EntryEngine:
    def __init__(
        self,
        db: AsyncSession,
        verifier: CredentialVerifier,
        moderation=None,
        entries: EntryRepository = entry_repo,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.db = db
        self.verifier = verifier
        self.moderation = moderation or UserModerationPolicy(db)
        self.entries = entries
        self.clock = clock

    async def _store(self, awaitable):
        try:
            return await awaitable
        except SQLAlchemyError as e:
            logger.error(f"Entry store failure: {e}")
            await self.db.rollback()
            raise StoreFailureError(str(e)) from e

    def _require_identity(self, token: Optional[str]) -> str:
        username = self.verifier.verify(token)
        if username is None:
            raise UnauthorizedError()
        return username

    # --- Submission ---

    async def submit(
        self,
        submission: Union[EntrySubmit, Mapping[str, Any]],
        token: Optional[str] = None,
    ) -> SubmitResult:
        """
        Accepts a parsed EntrySubmit or the raw request body. Raw bodies are
        only parsed once the spam trap has been checked, so a trapped bot
        gets the success response whatever else it sent.
        """
        raw = submission.model_dump() if isinstance(submission, EntrySubmit) else submission

        # 1. Spam trap: discard silently, answer like a live post
        if raw.get("bot_field"):
            logger.info("Spam trap triggered, submission discarded")
            return SubmitResult(status=EntryStatus.APPROVED)

        submission = _parse_submission(raw)

        # 2. Required fields (no store access yet)
        owner_username = _clean(submission.owner_username)
        sender_name = _clean(submission.sender_name)
        message = _clean(submission.message)
        for field, value in (("owner_username", owner_username), ("sender_name", sender_name), ("message", message)):
            if value is None:
                raise MissingFieldError(field)

        # 3. Owner submissions bypass moderation; a bad token just means guest
        is_owner = self.verifier.verify(token) == owner_username

        parent_id = None
        if submission.parent_id is not None:
            parent_id = await self._resolve_parent(submission.parent_id, owner_username, is_owner)

        # 4. Moderation (non-owners only)
        if is_owner:
            status = EntryStatus.APPROVED
        elif await self._store(self.moderation.requires_approval(owner_username)):
            status = EntryStatus.PENDING
        else:
            status = EntryStatus.APPROVED

        # 5. Persist
        entry = await self._store(self.entries.create(
            self.db,
            owner_username=owner_username,
            sender_name=sender_name,
            sender_website=_clean(submission.sender_website),
            message=message,
            parent_id=parent_id,
            is_private=bool(submission.is_private),
            is_owner=is_owner,
            status=status,
            created_at=self.clock(),
        ))
        logger.info(f"Entry {entry.id} stored for {owner_username} (status={status.value}, owner={is_owner})")
        return SubmitResult(status=status)

    async def _resolve_parent(self, parent_id: int, owner_username: str, is_owner: bool) -> int:
        parent = await self._store(self.entries.get(self.db, parent_id))
        if parent is None or parent.owner_username != owner_username:
            raise ParentNotFoundError()
        # Visitors may only reply to what they can see
        if not is_owner and (parent.is_private or parent.status != EntryStatus.APPROVED):
            raise ParentNotFoundError()
        # Threads are two levels deep: a reply to a reply joins the root
        if parent.parent_id is not None:
            return parent.parent_id
        return parent.id

    # --- Listing ---

    async def list_public(self, owner_username: str) -> List[GuestbookEntry]:
        owner_username = _clean(owner_username)
        if owner_username is None:
            raise MissingFieldError("user")
        return await self._store(self.entries.list_public(self.db, owner_username))

    async def list_for_owner(self, token: Optional[str]) -> List[GuestbookEntry]:
        username = self._require_identity(token)
        return await self._store(self.entries.list_for_owner(self.db, username))

    async def list_entries(self, owner_username: Optional[str] = None, token: Optional[str] = None) -> List[GuestbookEntry]:
        """
        Public listing when an owner is named, owner listing when only a
        credential is given. Naming neither is an input error.
        """
        if owner_username is not None:
            return await self.list_public(owner_username)
        if token:
            return await self.list_for_owner(token)
        raise InvalidInputError("Either an owner username or a credential is required")

    # --- Mutations ---

    async def like(self, entry_id: int) -> None:
        # Public and unauthenticated: any id is accepted, unknown ids change nothing
        liked = await self._store(self.entries.increment_likes(self.db, entry_id))
        if not liked:
            logger.debug(f"Like for unknown entry {entry_id} ignored")

    async def approve(self, entry_id: int, token: Optional[str]) -> None:
        username = self._require_identity(token)
        # Foreign, unknown and already approved ids are silent no-ops
        changed = await self._store(self.entries.approve(self.db, entry_id, username))
        if changed:
            logger.info(f"Entry {entry_id} approved by {username}")

    async def delete(self, entry_id: int, token: Optional[str]) -> None:
        username = self._require_identity(token)
        deleted = await self._store(self.entries.delete(self.db, entry_id, username))
        if not deleted:
            raise EntryNotFoundError()
        logger.info(f"Entry {entry_id} deleted by {username}")
