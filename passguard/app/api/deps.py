# passguard/app/api/deps.py
import logging
from typing import Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import ExpiredSignatureError, JWTError
from pydantic import ValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from passguard.app.core.config import settings
from passguard.app.db.base import get_db
from passguard.app.models.user import User
from passguard.app.schemas.user import TokenPayload
from passguard.app.security import jwt
from passguard.app.security.encryption import VaultCipher
from passguard.app.services.mailer import Mailer
from passguard.app.services.vault import VaultService
from passguard.app.services.vault_store import VaultStore

logger = logging.getLogger(__name__)

# auto_error=False: a missing header is answered with our own 401
bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
        db: AsyncSession = Depends(get_db),
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> User:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("No token provided")

    try:
        payload = jwt.decode_access_token(credentials.credentials)
        token_data = TokenPayload(**payload)
        user_id = int(token_data.sub)
    except ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise _unauthorized("Session expired. Please login again.")
    except (JWTError, ValidationError, TypeError, ValueError) as exc:
        logger.warning("Rejected invalid token: %s", exc)
        raise _unauthorized("Invalid token")

    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalars().first()

    if not user:
        logger.warning("Token subject %s has no account", user_id)
        raise _unauthorized("Invalid token")

    return user


def get_cipher(request: Request) -> VaultCipher:
    # Built once in the lifespan from ENCRYPTION_KEY
    return request.app.state.cipher


def get_vault_service(
        db: AsyncSession = Depends(get_db),
        cipher: VaultCipher = Depends(get_cipher),
) -> VaultService:
    return VaultService(VaultStore(db), cipher)


def get_mailer() -> Mailer:
    return Mailer(settings)
