"""Jinja2 adapter: turns surface view-models into markup."""
from __future__ import annotations

from pathlib import Path

from fastapi.templating import Jinja2Templates

from storefront.core.constants import MSG_CLEAR_CONFIRM
from storefront.core.order_math import format_currency
from storefront.views.render import SurfaceView
from storefront.views.surfaces import BADGE_ID

TEMPLATES_DIR = Path(__file__).resolve().parent / "templates"

templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["money"] = format_currency
templates.env.globals["BADGE_ID"] = BADGE_ID
templates.env.globals["CLEAR_CONFIRM"] = MSG_CLEAR_CONFIRM


def render_surface_html(view: SurfaceView) -> str:
    """Markup for one surface; names and prices are autoescaped."""
    return templates.get_template("_surface.html").render(view=view)
