"""Identity gate: decide whether an API key or bearer token is accepted."""

import logging
import time
from typing import TYPE_CHECKING

import httpx
import jwt

from app.core.security import decode_access_token

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)


class IdentityServiceError(Exception):
    """Raised when the identity service cannot be reached or answers with a non-JSON body."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


async def _verify_remote(
    api_key: str | None,
    token: str | None,
    settings: "Settings",
) -> bool:
    """POST credentials to the identity service; accepted iff 200 with success=true."""
    url = f"{settings.IDENTITY_SERVICE_URL}/verify"
    timeout = httpx.Timeout(settings.IDENTITY_REQUEST_TIMEOUT_SEC)
    start = time.perf_counter()
    try:
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(url, json={"api_key": api_key, "token": token})
    except httpx.TimeoutException as e:
        raise IdentityServiceError("Identity service request timed out.", cause=e) from e
    except httpx.HTTPError as e:
        raise IdentityServiceError("Identity service is unreachable.", cause=e) from e
    elapsed = time.perf_counter() - start

    if response.status_code != 200:
        logger.info(
            "Identity verification rejected",
            extra={"status_code": response.status_code, "latency_seconds": elapsed},
        )
        return False
    try:
        body = response.json()
    except ValueError as e:
        raise IdentityServiceError("Identity service response is not valid JSON.", cause=e) from e
    return isinstance(body, dict) and body.get("success") is True


def _verify_local(token: str | None) -> bool:
    """Accept a bearer JWT signed with JWT_SECRET that carries a subject."""
    if not token:
        return False
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        return False
    return bool(payload.get("sub"))


async def verify_credentials(
    api_key: str | None,
    token: str | None,
    settings: "Settings",
) -> bool:
    """
    True when the caller is authenticated.

    With IDENTITY_SERVICE_URL set, the identity service decides for both API
    keys and tokens; an unreachable service counts as a rejection. Without
    it, only bearer tokens can be verified (locally, as JWTs).
    """
    if not api_key and not token:
        return False
    if settings.IDENTITY_SERVICE_URL:
        try:
            return await _verify_remote(api_key, token, settings)
        except IdentityServiceError as e:
            logger.warning(
                "Identity verification failed",
                extra={"reason": e.message, "error_type": type(e.cause).__name__},
            )
            return False
    return _verify_local(token)
