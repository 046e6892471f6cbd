from pathlib import Path

from fastapi.templating import Jinja2Templates

from spacetraveling.services.rich_text import as_html
from spacetraveling.settings import settings

TEMPLATES_DIR = Path(__file__).parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["rich_text"] = as_html
templates.env.globals["site_name"] = settings.SITE_NAME
templates.env.globals["utterances_repo"] = settings.UTTERANCES_REPO
templates.env.globals["utterances_theme"] = settings.UTTERANCES_THEME
