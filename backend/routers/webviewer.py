from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import RedirectResponse

from models import WebViewerRequest
from services.api_client import BackendClient, BackendError, get_backend_client
from services.session_store import SessionStore, get_session_store
from services.validation import InputError, require_text, validate_resident_number
from services.viewer import build_test_viewer_request, build_viewer_request, launch_viewer
from templating import templates

router = APIRouter(tags=["webviewer"])

SESSION_ENDED = "Your session has ended. Please sign in again."
ADMIN_ONLY = "Administrator access required."


def viewer_closed(request: Request, message: str, status_code: int = status.HTTP_200_OK):
    """Page served into the pre-opened tab when no viewer URL can be given; it reports and closes itself."""
    return templates.TemplateResponse(request, "viewer_closed.html", {"message": message}, status_code=status_code)


async def open_in_tab(request: Request, client: BackendClient, viewer_request: WebViewerRequest):
    try:
        url = await launch_viewer(client, viewer_request)
    except BackendError as exc:
        return viewer_closed(request, exc.message)
    return RedirectResponse(url, status_code=status.HTTP_303_SEE_OTHER)


# These routes answer inside the pre-opened tab, so auth failures close it instead of redirecting.
@router.post("/webviewer/launch")
async def launch(
    request: Request,
    patient_id: str = Form(""),
    dept_code: str = Form(""),
    resident_number: str = Form(""),
    store: SessionStore = Depends(get_session_store),
    client: BackendClient = Depends(get_backend_client),
):
    identity = store.read()
    if identity is None:
        return viewer_closed(request, SESSION_ENDED, status.HTTP_401_UNAUTHORIZED)
    try:
        patient_id = require_text(patient_id, "a patient")
    except InputError as exc:
        return viewer_closed(request, str(exc), status.HTTP_422_UNPROCESSABLE_ENTITY)
    viewer_request = build_viewer_request(identity, patient_id, dept_code, resident_number)
    return await open_in_tab(request, client, viewer_request)


@router.post("/admin/test-viewer")
async def launch_test_viewer(
    request: Request,
    resident_number: str = Form(""),
    store: SessionStore = Depends(get_session_store),
    client: BackendClient = Depends(get_backend_client),
):
    identity = store.read()
    if identity is None:
        return viewer_closed(request, SESSION_ENDED, status.HTTP_401_UNAUTHORIZED)
    if not identity.is_admin:
        return viewer_closed(request, ADMIN_ONLY, status.HTTP_403_FORBIDDEN)
    try:
        number = validate_resident_number(resident_number)
    except InputError as exc:
        return viewer_closed(request, str(exc), status.HTTP_422_UNPROCESSABLE_ENTITY)
    return await open_in_tab(request, client, build_test_viewer_request(identity, number))
