from typing import Optional
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession

from guestbook.core.database import get_db
from guestbook.core.exceptions import UnauthorizedError
from guestbook.core.security import CredentialVerifier
from guestbook.services.entry_engine import EntryEngine
from guestbook.services.domain_service import VercelDomainClient

# auto_error=False: several endpoints accept an optional bearer token
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login", auto_error=False)

def get_credential_verifier() -> CredentialVerifier:
    return CredentialVerifier.from_settings()

def get_domain_provider() -> VercelDomainClient:
    return VercelDomainClient.from_settings()

async def get_entry_engine(
    db: AsyncSession = Depends(get_db),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> EntryEngine:
    return EntryEngine(db, verifier)

async def get_optional_token(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[str]:
    return token or None

async def get_current_username(
    token: Optional[str] = Depends(oauth2_scheme),
    verifier: CredentialVerifier = Depends(get_credential_verifier),
) -> str:
    """
    Verify the bearer token and return the owner's username.
    """
    username = verifier.verify(token)
    if username is None:
        raise UnauthorizedError()
    return username
