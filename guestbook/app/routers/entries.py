from typing import Any, Dict, Optional
from fastapi import APIRouter, Body, Depends, Query, status

from guestbook.core.deps import get_entry_engine, get_optional_token
from guestbook.core.rate_limit_config import get_rate_limiter
from guestbook.schemas.entry import (
    SubmitResult,
    ActionResult,
    EntryResponse,
    PublicEntryResponse,
    ThreadResponse,
    PublicThreadResponse,
)
from guestbook.services.entry_engine import EntryEngine
from guestbook.services.thread_view import assemble_threads

router = APIRouter(prefix="/entries", tags=["entries"])


@router.get("", response_model=None, dependencies=[Depends(get_rate_limiter("/entries:list"))])
async def list_entries(
    user: Optional[str] = Query(default=None, description="Guestbook owner (public listing)"),
    token: Optional[str] = Depends(get_optional_token),
    engine: EntryEngine = Depends(get_entry_engine),
):
    """
    Public listing with `?user=`, otherwise the owner dashboard listing for
    the bearer token (includes pending and private entries).
    """
    entries = await engine.list_entries(owner_username=user, token=token)
    schema = PublicEntryResponse if user is not None else EntryResponse
    return [schema.model_validate(e) for e in entries]


@router.get("/threads", response_model=None, dependencies=[Depends(get_rate_limiter("/entries:list"))])
async def list_threads(
    user: Optional[str] = Query(default=None, description="Guestbook owner (public listing)"),
    token: Optional[str] = Depends(get_optional_token),
    engine: EntryEngine = Depends(get_entry_engine),
):
    """
    Same modes as the flat listing, grouped into root entries with their
    replies, newest first.
    """
    entries = await engine.list_entries(owner_username=user, token=token)
    if user is not None:
        entry_schema, thread_schema = PublicEntryResponse, PublicThreadResponse
    else:
        entry_schema, thread_schema = EntryResponse, ThreadResponse
    return [
        thread_schema(
            root=entry_schema.model_validate(t.root),
            replies=[entry_schema.model_validate(r) for r in t.replies],
        )
        for t in assemble_threads(entries)
    ]


@router.post("", response_model=SubmitResult, status_code=status.HTTP_201_CREATED, dependencies=[Depends(get_rate_limiter("/entries"))])
async def submit_entry(
    body: Dict[str, Any] = Body(..., description="EntrySubmit fields"),
    token: Optional[str] = Depends(get_optional_token),
    engine: EntryEngine = Depends(get_entry_engine),
):
    """
    Sign a guestbook (or reply to an entry). The response says whether the
    entry is live or waiting for approval.

    The body is taken as-is and parsed by the engine after the spam trap,
    so field errors are 400s rather than 422s.
    """
    return await engine.submit(body, token=token)


@router.post("/{entry_id}/like", response_model=ActionResult, dependencies=[Depends(get_rate_limiter("/entries/{entry_id}/like"))])
async def like_entry(
    entry_id: int,
    engine: EntryEngine = Depends(get_entry_engine),
):
    await engine.like(entry_id)
    return ActionResult()


@router.post("/{entry_id}/approve", response_model=ActionResult, dependencies=[Depends(get_rate_limiter("/entries/{entry_id}/approve"))])
async def approve_entry(
    entry_id: int,
    token: Optional[str] = Depends(get_optional_token),
    engine: EntryEngine = Depends(get_entry_engine),
):
    """
    Approve a pending entry. Reports success for entries that are already
    approved or not owned by the caller.
    """
    await engine.approve(entry_id, token)
    return ActionResult()


@router.delete("/{entry_id}", response_model=ActionResult, dependencies=[Depends(get_rate_limiter("/entries/{entry_id}:delete"))])
async def delete_entry(
    entry_id: int,
    token: Optional[str] = Depends(get_optional_token),
    engine: EntryEngine = Depends(get_entry_engine),
):
    await engine.delete(entry_id, token)
    return ActionResult()
