from pathlib import Path

from fastapi.templating import Jinja2Templates

from config import HOSPITAL_NAME, VIEWER_WINDOW_FEATURES

templates = Jinja2Templates(directory=str(Path(__file__).parent / "templates"))
templates.env.globals["hospital_name"] = HOSPITAL_NAME
templates.env.globals["viewer_window_features"] = VIEWER_WINDOW_FEATURES
