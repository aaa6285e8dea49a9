from typing import Optional
from uuid import UUID

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from conpanion.adapter.services.delivery_client import HttpDeliveryClient
from conpanion.adapter.services.secret_store import YamlSecretStore
from conpanion.adapter.services.unit_of_work import SqlAlchemyUnitOfWork
from conpanion.api.utils.jwt import verify_jwt
from conpanion.app.services.delivery_client import IDeliveryClient
from conpanion.app.services.secret_store import (
    DELIVERY_SERVICE_KEY,
    DELIVERY_SERVICE_URL,
    ISecretStore,
)

engine = create_async_engine(ApplicationConfig.DB_URI, echo=False, future=True)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)

security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)

secret_store = YamlSecretStore(ApplicationConfig.SECRETS_FILE)


async def get_unit_of_work():
    async with AsyncSessionLocal() as session:
        yield SqlAlchemyUnitOfWork(session)


def get_secret_store() -> ISecretStore:
    return secret_store


def build_delivery_client(store: ISecretStore = secret_store) -> IDeliveryClient:
    """Delivery client from the secret store; raises MissingSecretError if unset"""
    return HttpDeliveryClient(
        base_url=store.require(DELIVERY_SERVICE_URL),
        service_key=store.require(DELIVERY_SERVICE_KEY),
        timeout=ApplicationConfig.DELIVERY_TIMEOUT_SECONDS,
    )


def get_delivery_client_provider():
    """Lazy provider so jobs that never call out do not need delivery secrets"""
    return build_delivery_client


def _user_id_from_token(token: str) -> UUID:
    payload = verify_jwt(token)
    if payload is None or "user_id" not in payload:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
        )
    return UUID(payload["user_id"])


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials = Depends(security),
) -> UUID:
    """
    Dependency to extract and verify JWT token from Authorization header.

    Returns:
        The authenticated user's ID

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    return _user_id_from_token(credentials.credentials)


async def get_optional_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
) -> Optional[UUID]:
    """Like get_current_user_id, but None when no token is sent"""
    if credentials is None:
        return None
    return _user_id_from_token(credentials.credentials)
