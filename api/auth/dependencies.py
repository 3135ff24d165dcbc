"""
Auth dependencies applied to every route.

Basic auth is only enforced when a username or password is configured;
otherwise requests pass through unauthenticated.
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from . import security

logger = logging.getLogger(__name__)

REALM = "Authorization Required"

basic_scheme = HTTPBasic(auto_error=False, realm=REALM)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )


async def require_basic_auth(request: Request) -> None:
    settings = getattr(request.app.state, "settings", None)
    if settings is None or not settings.auth_enabled:
        return None

    # Header parsing only happens when auth is on; a malformed header is a 401.
    credentials: HTTPBasicCredentials | None = await basic_scheme(request)

    if credentials is None:
        raise _unauthorized()

    if not security.credentials_match(
        username=credentials.username,
        password=credentials.password,
        expected_username=settings.username,
        expected_password=settings.password,
    ):
        logger.warning("auth_failed path=%s", request.url.path)
        raise _unauthorized()
    return None
