from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import JSONResponse, RedirectResponse

from models import Identity
from services.api_client import BackendClient, BackendError, get_backend_client
from services.auth import AdminChallenge, Failed, get_current_identity, submit_admin_password, submit_user_id
from services.session_store import SessionStore, get_session_store
from services.validation import InputError
from templating import templates

router = APIRouter(tags=["auth"])


def _login_page(
    request: Request,
    *,
    user_id: str = "",
    error: str = "",
    challenge: AdminChallenge | None = None,
    admin_error: str = "",
    status_code: int = 200,
):
    return templates.TemplateResponse(
        request,
        "login.html",
        {"user_id": user_id, "error": error, "challenge": challenge, "admin_error": admin_error},
        status_code=status_code,
    )


@router.post("/login")
async def login(
    request: Request,
    user_id: str = Form(""),
    client: BackendClient = Depends(get_backend_client),
    store: SessionStore = Depends(get_session_store),
):
    try:
        outcome = await submit_user_id(client, store, user_id)
    except InputError as exc:
        return _login_page(request, user_id=user_id, error=str(exc), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)

    if isinstance(outcome, AdminChallenge):
        return _login_page(request, user_id=outcome.user_id, challenge=outcome)
    if isinstance(outcome, Failed):
        return _login_page(request, user_id=user_id, error=outcome.message)
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/login/admin")
async def admin_login(
    request: Request,
    user_id: str = Form(""),
    password: str = Form(""),
    client: BackendClient = Depends(get_backend_client),
    store: SessionStore = Depends(get_session_store),
):
    challenge = AdminChallenge(user_id=user_id.strip(), is_admin=True)
    try:
        outcome = await submit_admin_password(client, store, user_id, password)
    except InputError as exc:
        return _login_page(
            request,
            user_id=challenge.user_id,
            challenge=challenge,
            admin_error=str(exc),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    if isinstance(outcome, Failed):
        return _login_page(request, user_id=challenge.user_id, challenge=challenge, admin_error=outcome.message)
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout")
def logout(store: SessionStore = Depends(get_session_store)):
    store.clear()
    return RedirectResponse("/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/auth/validate")
async def validate(
    _identity: Identity = Depends(get_current_identity),
    client: BackendClient = Depends(get_backend_client),
):
    try:
        return await client.validate_token()
    except BackendError as exc:
        return JSONResponse(status_code=exc.status_code or status.HTTP_502_BAD_GATEWAY, content={"error": exc.message})
