from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.database import get_db
from guestbook.core.deps import get_current_username, get_domain_provider
from guestbook.core.rate_limit_config import get_rate_limiter
from guestbook.schemas.domain import DomainConnect, DomainResolveResponse
from guestbook.schemas.entry import ActionResult
from guestbook.services.domain_service import (
    VercelDomainClient,
    resolve_domain,
    connect_domain,
    disconnect_domain,
)

router = APIRouter(prefix="/domain", tags=["domain"])

@router.get("", response_model=DomainResolveResponse)
async def resolve(
    domain: str = Query(..., description="Hostname to look up"),
    db: AsyncSession = Depends(get_db)
):
    """
    Find which guestbook a custom hostname belongs to.
    """
    return await resolve_domain(db, domain)

@router.post("", response_model=ActionResult, dependencies=[Depends(get_rate_limiter("/domain"))])
async def connect(
    body: DomainConnect,
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db),
    provider: VercelDomainClient = Depends(get_domain_provider),
):
    return await connect_domain(db, provider, username, body.custom_domain)

@router.delete("", response_model=ActionResult, dependencies=[Depends(get_rate_limiter("/domain"))])
async def disconnect(
    username: str = Depends(get_current_username),
    db: AsyncSession = Depends(get_db),
    provider: VercelDomainClient = Depends(get_domain_provider),
):
    return await disconnect_domain(db, provider, username)
