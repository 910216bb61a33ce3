import logging
from typing import Optional

import httpx
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from guestbook.core.config import settings
from guestbook.core.exceptions import (
    DomainAlreadyClaimedError,
    DomainNotConnectedError,
    DomainProviderError,
    InvalidInputError,
)
from guestbook.repository.user import user_repo
from guestbook.schemas.domain import DomainResolveResponse
from guestbook.services.auth_service import get_user

logger = logging.getLogger(__name__)


class VercelDomainClient:
    """Attaches and detaches domains on the hosting project."""

    def __init__(
        self,
        api_url: str,
        project_id: str,
        token: str,
        team_id: Optional[str] = None,
        timeout: float = 15,
    ):
        self.api_url = api_url.rstrip("/")
        self.project_id = project_id
        self.token = token
        self.team_id = team_id or None
        self.timeout = timeout

    @classmethod
    def from_settings(cls) -> "VercelDomainClient":
        return cls(
            api_url=settings.VERCEL_API_URL,
            project_id=settings.VERCEL_PROJECT_ID,
            token=settings.VERCEL_API_TOKEN,
            team_id=settings.VERCEL_TEAM_ID,
        )

    def _params(self) -> dict:
        return {"teamId": self.team_id} if self.team_id else {}

    async def add_domain(self, domain: str) -> None:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                res = await client.post(
                    f"{self.api_url}/{self.project_id}/domains",
                    params=self._params(),
                    headers={"Authorization": f"Bearer {self.token}"},
                    json={"name": domain},
                )
        except httpx.HTTPError as e:
            raise DomainProviderError(f"Hosting provider unreachable: {e}") from e
        if res.status_code >= 300:
            try:
                detail = res.json().get("error", {}).get("message")
            except ValueError:
                detail = None
            raise DomainProviderError(detail or "Failed to add domain to hosting provider")

    async def remove_domain(self, domain: str) -> bool:
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            res = await client.delete(
                f"{self.api_url}/{self.project_id}/domains/{domain}",
                params=self._params(),
                headers={"Authorization": f"Bearer {self.token}"},
            )
        return res.status_code < 300


def _normalize(domain: Optional[str]) -> str:
    domain = (domain or "").strip().lower().rstrip(".")
    if not domain:
        raise InvalidInputError("Domain is required")
    return domain


async def resolve_domain(db: AsyncSession, domain: str) -> DomainResolveResponse:
    user = await user_repo.get_by_domain(db, domain=_normalize(domain))
    if not user:
        raise DomainNotConnectedError()
    return DomainResolveResponse(username=user.username)


async def connect_domain(db: AsyncSession, provider: VercelDomainClient, username: str, domain: str) -> dict:
    domain = _normalize(domain)
    user = await get_user(db, username)

    claimed = await user_repo.get_by_domain(db, domain=domain)
    if claimed and claimed.username != username:
        raise DomainAlreadyClaimedError()

    # Provider first: only record domains the host accepted
    await provider.add_domain(domain)

    user.custom_domain = domain
    try:
        await user_repo.save(db, user)
    except IntegrityError:
        await db.rollback()
        raise DomainAlreadyClaimedError()
    logger.info(f"Domain {domain} connected to {username}")
    return {"success": True}


async def disconnect_domain(db: AsyncSession, provider: VercelDomainClient, username: str) -> dict:
    user = await get_user(db, username)
    current = user.custom_domain
    if not current:
        raise DomainNotConnectedError("No domain connected to this account")

    try:
        removed = await provider.remove_domain(current)
    except httpx.HTTPError as e:
        logger.warning(f"Hosting provider unreachable while removing {current}: {e}")
        removed = False
    if not removed:
        logger.warning(f"Could not delete {current} from hosting provider. It might already be gone.")

    user.custom_domain = None
    await user_repo.save(db, user)
    return {"success": True}
