import json
import logging

from fastapi import APIRouter, Depends, Form, HTTPException, Request, status

from models import SETTING_FIELDS, SETTING_FIELDS_BY_KEY, AdminSettings, Identity
from services.api_client import BackendClient, BackendError, get_backend_client
from services.auth import require_admin
from services.validation import InputError, require_text, validate_resident_number
from templating import templates

router = APIRouter(prefix="/admin", tags=["admin"])
logger = logging.getLogger("portal.admin")


async def render_admin_page(
    request: Request,
    identity: Identity,
    client: BackendClient,
    *,
    message: str = "",
    error: str = "",
    test_result: str = "",
    resident_number: str = "",
    status_code: int = status.HTTP_200_OK,
):
    settings: AdminSettings | None = None
    try:
        settings = await client.get_admin_settings()
    except BackendError as exc:
        error = error or f"Failed to load settings: {exc.message}"
    return templates.TemplateResponse(
        request,
        "admin.html",
        {
            "user": identity,
            "settings": settings,
            "fields": SETTING_FIELDS,
            "message": message,
            "error": error,
            "test_result": test_result,
            "resident_number": resident_number,
        },
        status_code=status_code,
    )


@router.get("/view")
async def admin_view(
    request: Request,
    identity: Identity = Depends(require_admin),
    client: BackendClient = Depends(get_backend_client),
):
    return await render_admin_page(request, identity, client)


@router.post("/settings/{field_key}")
async def update_setting(
    request: Request,
    field_key: str,
    value: str = Form(""),
    identity: Identity = Depends(require_admin),
    client: BackendClient = Depends(get_backend_client),
):
    field = SETTING_FIELDS_BY_KEY.get(field_key)
    if field is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Unknown setting")

    try:
        value = require_text(value, field.label)
    except InputError as exc:
        return await render_admin_page(
            request, identity, client, error=str(exc), status_code=status.HTTP_422_UNPROCESSABLE_ENTITY
        )

    try:
        await client.update_setting(field, value)
    except BackendError as exc:
        return await render_admin_page(request, identity, client, error=exc.message)

    logger.info("Setting %s updated by %s", field.key, identity.user_id)
    return await render_admin_page(request, identity, client, message=f"{field.label} was updated.")


@router.post("/test-patient")
async def test_patient(
    request: Request,
    resident_number: str = Form(""),
    identity: Identity = Depends(require_admin),
    client: BackendClient = Depends(get_backend_client),
):
    try:
        number = validate_resident_number(resident_number)
    except InputError as exc:
        return await render_admin_page(
            request,
            identity,
            client,
            error=str(exc),
            resident_number=resident_number,
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        )

    try:
        result = await client.test_patient(number, identity.user_id)
    except BackendError as exc:
        return await render_admin_page(request, identity, client, error=exc.message, resident_number=resident_number)

    return await render_admin_page(
        request,
        identity,
        client,
        message="Test request completed.",
        test_result=json.dumps(result, indent=2, ensure_ascii=False),
        resident_number=resident_number,
    )
