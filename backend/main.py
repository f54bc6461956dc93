from contextlib import asynccontextmanager
import logging

import httpx
from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, RedirectResponse
from starlette.middleware.sessions import SessionMiddleware

from config import BACKEND_TIMEOUT, PORT, SESSION_SECRET
from models import PortalView
from routers.admin import render_admin_page, router as admin_router
from routers.auth import router as auth_router
from routers.patients import render_patients_page, router as patients_router
from routers.webviewer import router as webviewer_router
from services.api_client import BackendClient, get_backend_client
from services.auth import LoginRequired, resolve_view
from services.session_store import SessionStore, get_session_store
from templating import templates

logger = logging.getLogger("portal")


@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.http_client = httpx.AsyncClient(timeout=BACKEND_TIMEOUT)
    yield
    await app.state.http_client.aclose()


app = FastAPI(title="Hospital Staff Portal", version="0.1.0", lifespan=lifespan)
# No max_age: the cookie lives as long as the browser session.
app.add_middleware(SessionMiddleware, secret_key=SESSION_SECRET, max_age=None, same_site="lax")


@app.exception_handler(LoginRequired)
async def login_required_handler(request: Request, exc: LoginRequired):
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled server error for %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


@app.middleware("http")
async def no_cache_responses(request: Request, call_next):
    response = await call_next(request)
    response.headers["Cache-Control"] = "no-store, max-age=0"
    response.headers["Pragma"] = "no-cache"
    response.headers["Expires"] = "0"
    return response


app.include_router(auth_router)
app.include_router(patients_router)
app.include_router(admin_router)
app.include_router(webviewer_router)


@app.get("/")
async def index_page(
    request: Request,
    store: SessionStore = Depends(get_session_store),
    client: BackendClient = Depends(get_backend_client),
):
    identity = store.read()
    view = resolve_view(identity)
    if view is PortalView.AUTH:
        return templates.TemplateResponse(request, "login.html", {"user_id": "", "error": "", "challenge": None})
    if view is PortalView.ADMIN:
        return await render_admin_page(request, identity, client)
    return await render_patients_page(request, identity, client)


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(level=logging.INFO)
    uvicorn.run(app, host="0.0.0.0", port=PORT)
