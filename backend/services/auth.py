"""Two-step sign-in and the session-backed identity dependencies.

Step one posts only the user id. General users get a token straight away;
administrator accounts answer with ``requirePassword`` and the caller must
complete step two with a password before anything is written to the session.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from fastapi import Depends, HTTPException, status

from config import ADMIN_DEPT_CODE, ADMIN_DISPLAY_NAME
from models import Identity, PortalView
from services.api_client import UNEXPECTED_RESPONSE, BackendClient, BackendError
from services.session_store import SessionStore, get_session_store
from services.validation import require_text

logger = logging.getLogger("portal.auth")


@dataclass(frozen=True)
class GeneralSuccess:
    identity: Identity


@dataclass(frozen=True)
class AdminChallenge:
    user_id: str
    is_admin: bool


@dataclass(frozen=True)
class Failed:
    message: str


LoginOutcome = Union[GeneralSuccess, AdminChallenge, Failed]
AdminLoginOutcome = Union[GeneralSuccess, Failed]


class LoginRequired(Exception):
    """No identity in the session; the browser is sent back to the sign-in page."""


def _nested(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


async def submit_user_id(client: BackendClient, store: SessionStore, user_id: str) -> LoginOutcome:
    user_id = require_text(user_id, "your user id")
    try:
        data = await client.login(user_id)
    except BackendError as exc:
        return Failed(exc.message)

    if data.get("requirePassword"):
        logger.info("Password challenge issued for %s", user_id)
        return AdminChallenge(user_id=user_id, is_admin=bool(data.get("isAdmin", False)))

    token = data.get("token")
    user = data.get("user")
    if not token or not isinstance(token, str) or not isinstance(user, dict):
        return Failed(UNEXPECTED_RESPONSE)

    identity = Identity(
        user_id=str(user.get("userId") or user_id),
        user_name=user.get("userName") or None,
        token=token,
        dept_code=user.get("deptCode") or None,
        is_admin=False,
    )
    store.write(identity)
    logger.info("User %s signed in", identity.user_id)
    return GeneralSuccess(identity)


async def submit_admin_password(
    client: BackendClient, store: SessionStore, user_id: str, password: str
) -> AdminLoginOutcome:
    user_id = require_text(user_id, "your user id")
    require_text(password, "the password")
    try:
        data = await client.admin_login(user_id, password)
    except BackendError as exc:
        return Failed(exc.message)

    token = data.get("token")
    if not token or not isinstance(token, str):
        logger.warning("Administrator login for %s returned no token", user_id)
        return Failed("Administrator login response did not include a token")

    user = _nested(data, "user")
    identity = Identity(
        user_id=str(data.get("userId") or user_id),
        user_name=user.get("userName") or ADMIN_DISPLAY_NAME,
        token=token,
        dept_code=user.get("deptCode") or ADMIN_DEPT_CODE,
        is_admin=True,
    )
    store.write(identity)
    logger.info("Administrator %s signed in", identity.user_id)
    return GeneralSuccess(identity)


def resolve_view(identity: Identity | None) -> PortalView:
    if identity is None:
        return PortalView.AUTH
    if identity.is_admin:
        return PortalView.ADMIN
    return PortalView.PATIENTS


def get_current_identity(store: SessionStore = Depends(get_session_store)) -> Identity:
    identity = store.read()
    if identity is None:
        raise LoginRequired()
    return identity


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    if not identity.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Administrator access required")
    return identity
