from fastapi import APIRouter, Depends, Query, Request

from models import ClncFlag, Identity, PatientInfo
from services.api_client import BackendClient, BackendError, get_backend_client
from services.auth import get_current_identity
from templating import templates

router = APIRouter(prefix="/patients", tags=["patients"])


async def render_patients_page(
    request: Request,
    identity: Identity,
    client: BackendClient,
    clnc_cnfrm_flag: ClncFlag = ClncFlag.UNREVIEWED,
    search: bool = False,
):
    context = {
        "user": identity,
        "flags": list(ClncFlag),
        "selected_flag": clnc_cnfrm_flag,
        "departments": [],
        "patients": [],
        "searched": search,
        "load_error": "",
        "error": "",
    }
    try:
        context["departments"] = await client.get_departments()
    except BackendError as exc:
        context["load_error"] = f"Failed to load the department list: {exc.message}"
        return templates.TemplateResponse(request, "patients.html", context)

    if search:
        try:
            patients: list[PatientInfo] = await client.get_patients(clnc_cnfrm_flag)
            context["patients"] = patients
        except BackendError as exc:
            context["error"] = exc.message
    return templates.TemplateResponse(request, "patients.html", context)


@router.get("/search")
async def search_patients(
    request: Request,
    clnc_cnfrm_flag: int = Query(0, alias="clncCnfrmFlag", ge=0, le=2),
    identity: Identity = Depends(get_current_identity),
    client: BackendClient = Depends(get_backend_client),
):
    return await render_patients_page(request, identity, client, ClncFlag(clnc_cnfrm_flag), search=True)
