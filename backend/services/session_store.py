"""Per-browser-session storage of the signed-in identity.

The backing mapping is ``request.session`` (Starlette's signed session cookie),
so values survive page reloads but disappear with the browser session. Values
are stored as plain strings under their wire names.
"""
from __future__ import annotations

from collections.abc import MutableMapping
from typing import Any

from fastapi import Request

from models import Identity

SESSION_KEYS = ("token", "userId", "userName", "deptCode", "isAdmin")


class SessionStore:
    def __init__(self, storage: MutableMapping[str, Any]):
        self._storage = storage

    def read(self) -> Identity | None:
        user_id = self._storage.get("userId")
        if not user_id:
            return None
        return Identity(
            user_id=user_id,
            user_name=self._storage.get("userName") or None,
            token=self._storage.get("token") or "",
            dept_code=self._storage.get("deptCode") or None,
            is_admin=self._storage.get("isAdmin") == "true",
        )

    def write(self, identity: Identity) -> None:
        # Only one identity is held at a time; drop leftovers from a previous one.
        self.clear()
        self._storage["token"] = identity.token
        self._storage["userId"] = identity.user_id
        if identity.user_name:
            self._storage["userName"] = identity.user_name
        if identity.dept_code:
            self._storage["deptCode"] = identity.dept_code
        self._storage["isAdmin"] = "true" if identity.is_admin else "false"

    def clear(self) -> None:
        for key in SESSION_KEYS:
            self._storage.pop(key, None)

    @property
    def token(self) -> str | None:
        return self._storage.get("token") or None


def get_session_store(request: Request) -> SessionStore:
    return SessionStore(request.session)
