import os

PORT = int(os.getenv("PORTAL_PORT", "3000"))
API_BASE = os.getenv("PORTAL_API_URL", "http://localhost:8080/api").rstrip("/")
SESSION_SECRET = os.getenv("PORTAL_SESSION_SECRET", "portal-dev-secret-change-me")
HOSPITAL_NAME = os.getenv("PORTAL_HOSPITAL_NAME", "Hospital Staff Portal")

_timeout_raw = os.getenv("PORTAL_BACKEND_TIMEOUT", "").strip()
BACKEND_TIMEOUT: float | None = float(_timeout_raw) if _timeout_raw else None

INSTITUTION_TYPE = os.getenv("PORTAL_INSTITUTION_TYPE", "20")
DEV_MODE = os.getenv("PORTAL_DEV_MODE", "0")

ADMIN_DISPLAY_NAME = "Administrator"
ADMIN_DEPT_CODE = "ADMIN"

TEST_PATIENT_ID = "TEST_PATIENT"
TEST_DEPT_CODE = "TEST_DEPT"

VIEWER_WINDOW_FEATURES = "width=1280,height=800,scrollbars=yes,resizable=yes"
