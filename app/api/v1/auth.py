"""Identity gate dependency applied to the admin API routers."""

from typing import Annotated

from fastapi import Depends, Header, HTTPException, Query, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.core.config import Settings, get_settings
from app.services.identity import verify_credentials

security = HTTPBearer(auto_error=False)


async def require_identity(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    settings: Annotated[Settings, Depends(get_settings)],
    api_key_header: Annotated[str | None, Header(alias="api_key", convert_underscores=False)] = None,
    api_key_query: Annotated[str | None, Query(alias="api_key")] = None,
) -> None:
    """
    Dependency: accept the request only when the API key (header or query
    parameter `api_key`) or the Bearer token verifies. Raises 401 otherwise.
    Bypassed when AUTH_ENABLED is false.
    """
    if not settings.AUTH_ENABLED:
        return
    api_key = api_key_header or api_key_query
    token = credentials.credentials if credentials is not None else None
    if not api_key and not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not await verify_credentials(api_key, token, settings):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
