"""
Jinja2 renderer for the resource library pages.
"""

import logging
from pathlib import Path
from urllib.parse import urlencode

from fastapi.templating import Jinja2Templates

logger = logging.getLogger(__name__)

TEMPLATES_DIR = Path(__file__).parent.parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

LIBRARY_PATH = "/resourcelibrary"


class ResourceLibraryRenderer:
    """Renders renderables (objects with ``template_name`` and ``export_for_template``)."""

    def __init__(self, base_url: str = LIBRARY_PATH):
        self.base_url = base_url

    def library_url(self, **params) -> str:
        params = {key: value for key, value in params.items() if value is not None}
        return f"{self.base_url}?{urlencode(params)}" if params else self.base_url

    def render(self, renderable) -> str:
        context = renderable.export_for_template(self)
        logger.debug(f"Rendering {renderable.template_name}")
        return templates.get_template(renderable.template_name).render(context)

    def render_page(self, page, body: str) -> str:
        return templates.get_template("page.html").render(page=page, body=body)
