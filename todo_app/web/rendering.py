"""
➡️ But : Transformer une vue (ensemble fermé `View`) + des données en HTML.

render(view, **data) -> str : rendu Jinja2 brut.
render_page(view, status_code, **data) -> HTMLResponse : prêt à être renvoyé par une route ;
si le template plante, on renvoie un 500 en texte brut plutôt que de propager.
"""

import logging
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from fastapi.responses import HTMLResponse, PlainTextResponse, Response
from jinja2 import Environment, FileSystemLoader, TemplateError, select_autoescape

logger = logging.getLogger(__name__)

templates_path = Path(__file__).parent / "templates"
jinja_env = Environment(
    loader=FileSystemLoader(templates_path),
    autoescape=select_autoescape(["html"]),
)


class View(str, Enum):
    HOME = "auth/home.html"
    REGISTER = "auth/register.html"
    LOGIN = "auth/login.html"
    TODO_LIST = "todos/todo_list.html"
    TODO_CREATE_MODAL = "partials/todo_creation_modal.html"
    TODO_UPDATE_MODAL = "partials/todo_update_modal.html"
    ERROR = "error/error.html"


# valeurs attendues par base.html, pour que chaque vue puisse les omettre
_PAGE_DEFAULTS = {
    "title": "",
    "username": "",
    "messages_status": "",
    "messages": "",
    "from_protected": False,
    "is_error": False,
}


def render(view: View, **data) -> str:
    template = jinja_env.get_template(view.value)
    return template.render(**{**_PAGE_DEFAULTS, **data})


def render_page(view: View, status_code: int = 200, **data) -> Response:
    try:
        html = render(view, **data)
    except TemplateError as e:
        logger.exception("Failed to render template %s", view.value)
        return PlainTextResponse(f"Failed to render template. Error: {e}", status_code=500)
    return HTMLResponse(content=html, status_code=status_code)


def render_error(status_code: int, reason: str, *, link: str = "/", username: str = "") -> Response:
    return render_page(
        View.ERROR,
        status_code,
        title=f"Error {status_code}",
        reason=reason,
        link=link,
        username=username,
        is_error=True,
    )


def format_datetime(tz_name: str, dt: datetime) -> str:
    """
    Convertit un timestamp UTC naïf (tel que stocké en base) vers le fuseau `tz_name`,
    au format RFC 822 ("19 Oct 26 14:03 +0200").
    Fuseau vide ou inconnu → UTC.
    """
    try:
        tz = ZoneInfo(tz_name) if tz_name else timezone.utc
    except (ZoneInfoNotFoundError, ValueError):
        tz = timezone.utc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(tz).strftime("%d %b %y %H:%M %z")
