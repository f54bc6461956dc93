import logging

from config import DEV_MODE, INSTITUTION_TYPE, TEST_DEPT_CODE, TEST_PATIENT_ID
from models import Identity, WebViewerRequest
from services.api_client import BackendClient

logger = logging.getLogger("portal.viewer")


def build_viewer_request(identity: Identity, patient_id: str, dept_code: str, resident_number: str) -> WebViewerRequest:
    return WebViewerRequest(
        third_party_user_id=identity.user_id,
        patient_id=patient_id,
        dept_code=dept_code,
        resident_number=resident_number,
        third_party_institution_type=INSTITUTION_TYPE,
        dev_mode=DEV_MODE,
    )


def build_test_viewer_request(identity: Identity, resident_number: str) -> WebViewerRequest:
    return build_viewer_request(
        identity,
        patient_id=TEST_PATIENT_ID,
        dept_code=identity.dept_code or TEST_DEPT_CODE,
        resident_number=resident_number,
    )


async def launch_viewer(client: BackendClient, request: WebViewerRequest) -> str:
    """Ask the backend for a viewer URL; the caller navigates the already-open tab to it."""
    url = await client.open_web_viewer(request)
    logger.info("Viewer issued for patient %s by %s", request.patient_id, request.third_party_user_id)
    return url
