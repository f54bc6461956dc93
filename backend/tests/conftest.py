from __future__ import annotations

import json
from typing import Any

import httpx
import pytest
from fastapi.testclient import TestClient

from main import app
from services.api_client import BackendClient, get_http_client
from services.session_store import SessionStore

BACKEND_BASE = "http://backend.test/api"


class FakeBackend:
    """Stands in for the remote hospital API and records every request it receives."""

    def __init__(self, prefix: str = "/api"):
        self.prefix = prefix
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, status_code: int = 200, json_body: Any = None, text: str | None = None):
        if text is not None:
            response = httpx.Response(status_code, text=text)
        elif json_body is not None:
            response = httpx.Response(status_code, json=json_body)
        else:
            response = httpx.Response(status_code)
        self.routes[(method, path)] = response

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(self.prefix):
            path = path[len(self.prefix):]
        response = self.routes.get((request.method, path))
        if response is None:
            return httpx.Response(404, json={"error": f"no fake route for {request.method} {path}"})
        return httpx.Response(response.status_code, content=response.content, headers=response.headers)

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [
            request
            for request in self.requests
            if request.method == method and request.url.path == f"{self.prefix}{path}"
        ]

    @staticmethod
    def body(request: httpx.Request) -> Any:
        return json.loads(request.content)


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def fake_backend():
    return FakeBackend()


@pytest.fixture
def http_client(fake_backend):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_backend.handler))


@pytest.fixture
def storage():
    return {}


@pytest.fixture
def store(storage):
    return SessionStore(storage)


@pytest.fixture
def backend(http_client, store):
    return BackendClient(http_client, store, base_url=BACKEND_BASE)


@pytest.fixture
def client(http_client):
    app.dependency_overrides[get_http_client] = lambda: http_client
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def doctor_session(client, fake_backend):
    fake_backend.on(
        "POST", "/auth/login", json_body={"token": "t1", "user": {"userId": "doc1", "userName": "Dr. Kim", "deptCode": "ER"}}
    )
    fake_backend.on("GET", "/auth/departments", json_body=["ER", "IM"])
    response = client.post("/login", data={"user_id": "doc1"})
    assert response.status_code == 200, response.text
    return client


@pytest.fixture
def admin_session(client, fake_backend):
    fake_backend.on("POST", "/auth/login", json_body={"requirePassword": True, "isAdmin": True, "userId": "admin"})
    fake_backend.on("POST", "/admin/login", json_body={"userId": "admin", "token": "admin-jwt"})
    fake_backend.on("GET", "/admin/settings", json_body=SAMPLE_SETTINGS)
    challenge = client.post("/login", data={"user_id": "admin"})
    assert challenge.status_code == 200
    response = client.post("/login/admin", data={"user_id": "admin", "password": "s3cret"})
    assert response.status_code == 200, response.text
    return client


SAMPLE_SETTINGS = {
    "thirdPartyAuthUrl": "https://auth.example.org",
    "clientId": "portal-client",
    "clientSecret": "",
    "utilizationServiceNo": "U-100",
    "institutionCode": "37100123",
    "seedKey": "seed-abc",
}


@pytest.fixture
def sample_settings():
    return dict(SAMPLE_SETTINGS)


@pytest.fixture
def patients_for_view():
    return [
        {
            "patId": "P010",
            "patName": "Choi Yuna",
            "age": 58,
            "deptCode": "ER",
            "prsnIdPre": "660303",
            "clncCnfrmFlag": 0,
            "juminNum": "6603032345678",
            "encryptedResidentNumber": "enc-10",
        }
    ]
