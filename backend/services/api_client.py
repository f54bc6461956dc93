from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from fastapi import Depends, Request
from pydantic import ValidationError

from config import API_BASE
from models import AdminSettings, ClncFlag, PatientInfo, SettingField, WebViewerRequest
from services.session_store import SessionStore, get_session_store

logger = logging.getLogger("portal.api")

UNEXPECTED_RESPONSE = "Unexpected response format"


class BackendError(Exception):
    """A failed call to the remote hospital API.

    ``status_code`` is None when the call never produced a usable HTTP status
    (transport failure) or when a 2xx body had the wrong shape.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def extract_error_message(body: str, fallback: str) -> str:
    """Pick the human-readable message out of an error response body."""
    try:
        data = json.loads(body)
    except ValueError:
        data = None
    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, str) and error:
            return error
    if body.strip():
        return body
    return fallback


class BackendClient:
    def __init__(self, http: httpx.AsyncClient, store: SessionStore, base_url: str = API_BASE):
        self._http = http
        self._store = store
        self._base_url = base_url.rstrip("/")

    def headers(self, authenticated: bool = True) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self._store.token if authenticated else None
        if token:
            headers["Authorization"] = f"Bearer {token}"
        return headers

    async def _request(
        self,
        method: str,
        path: str,
        *,
        fallback: str,
        body: Any = None,
        params: dict[str, Any] | None = None,
        authenticated: bool = True,
    ) -> httpx.Response:
        try:
            response = await self._http.request(
                method,
                f"{self._base_url}{path}",
                headers=self.headers(authenticated),
                json=body,
                params=params,
            )
        except httpx.HTTPError as exc:
            logger.warning("Backend %s %s unreachable: %s", method, path, exc.__class__.__name__)
            raise BackendError(fallback) from exc

        if response.is_success:
            return response

        message = extract_error_message(response.text, fallback)
        logger.warning("Backend %s %s failed with %s", method, path, response.status_code)
        raise BackendError(message, response.status_code)

    async def _json(self, method: str, path: str, **kwargs: Any) -> Any:
        response = await self._request(method, path, **kwargs)
        try:
            return response.json()
        except ValueError as exc:
            raise BackendError(UNEXPECTED_RESPONSE) from exc

    async def login(self, user_id: str) -> dict:
        data = await self._json(
            "POST", "/auth/login", body={"userId": user_id}, authenticated=False, fallback="Login failed"
        )
        if not isinstance(data, dict):
            raise BackendError(UNEXPECTED_RESPONSE)
        return data

    async def admin_login(self, user_id: str, password: str) -> dict:
        data = await self._json(
            "POST",
            "/admin/login",
            body={"userId": user_id, "password": password},
            authenticated=False,
            fallback="Administrator login failed",
        )
        if not isinstance(data, dict):
            raise BackendError(UNEXPECTED_RESPONSE)
        return data

    async def validate_token(self) -> Any:
        return await self._json("POST", "/auth/validate", fallback="Token validation failed")

    async def get_departments(self) -> list[str]:
        data = await self._json("GET", "/auth/departments", fallback="Failed to load departments")
        if not isinstance(data, list):
            raise BackendError(UNEXPECTED_RESPONSE)
        return [str(code) for code in data]

    async def get_patients(self, clnc_cnfrm_flag: ClncFlag) -> list[PatientInfo]:
        data = await self._json(
            "GET",
            "/patients",
            params={"clncCnfrmFlag": int(clnc_cnfrm_flag)},
            fallback="Failed to load patient list",
        )
        if not isinstance(data, list):
            raise BackendError(UNEXPECTED_RESPONSE)
        try:
            return [PatientInfo.model_validate(item) for item in data]
        except ValidationError as exc:
            raise BackendError(UNEXPECTED_RESPONSE) from exc

    async def get_admin_settings(self) -> AdminSettings:
        data = await self._json("GET", "/admin/settings", fallback="Failed to load settings")
        try:
            return AdminSettings.model_validate(data)
        except ValidationError as exc:
            raise BackendError(UNEXPECTED_RESPONSE) from exc

    async def update_setting(self, field: SettingField, value: str) -> None:
        await self._request(
            "POST",
            f"/admin/settings/{field.endpoint}",
            body={field.request_field: value},
            fallback=f"Failed to update {field.label}",
        )

    async def test_patient(self, resident_number: str, user_id: str) -> Any:
        return await self._json(
            "POST",
            "/admin/test-patient",
            body={"residentNumber": resident_number, "userId": user_id},
            fallback="Test request failed",
        )

    async def open_web_viewer(self, request: WebViewerRequest) -> str:
        data = await self._json(
            "POST", "/webviewer/open", body=request.to_wire(), fallback="Failed to open the web viewer"
        )
        url = data.get("webViewerUrl") if isinstance(data, dict) else None
        if not isinstance(url, str) or not url:
            raise BackendError(UNEXPECTED_RESPONSE)
        return url


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_backend_client(
    http: httpx.AsyncClient = Depends(get_http_client),
    store: SessionStore = Depends(get_session_store),
) -> BackendClient:
    return BackendClient(http, store)
