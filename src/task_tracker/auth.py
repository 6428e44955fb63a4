from __future__ import annotations

import secrets
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from .settings import Settings, get_settings

_security = HTTPBasic(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Basic"},
    )


def _matches(given: str, expected: str) -> bool:
    return secrets.compare_digest(given.encode("utf-8"), expected.encode("utf-8"))


# PUBLIC_INTERFACE
def get_basic_auth_dependency(settings: Optional[Settings] = None):
    """
    Return a dependency guarding the task API with HTTP Basic Auth.

    The tracker is single-user, so one configured username/password pair is
    enough. When ENABLE_BASIC_AUTH is off the dependency does nothing.
    """
    settings = settings or get_settings()

    if not settings.enable_basic_auth:
        async def _open() -> None:
            return None

        return _open

    expected_user = settings.basic_auth_username
    expected_pass = settings.basic_auth_password

    async def _enforce(creds: Optional[HTTPBasicCredentials] = Depends(_security)) -> None:
        if creds is None:
            raise _unauthorized("Not authenticated")
        if expected_user is None or expected_pass is None:
            raise _unauthorized("Server authentication not configured")
        # Compare both fields before deciding
        user_ok = _matches(creds.username, expected_user)
        pass_ok = _matches(creds.password, expected_pass)
        if not (user_ok and pass_ok):
            raise _unauthorized("Invalid authentication credentials")

    return _enforce
