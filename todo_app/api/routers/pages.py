from fastapi import APIRouter, Depends

from todo_app.api.dependencies import RequestContext, get_context
from todo_app.web.rendering import View, render_page
from todo_app.web.sessions import get_flag

router = APIRouter(tags=["pages"])

HEALTH_MESSAGE = "Full stack Web App using FastAPI, Jinja2, HTMX, JWT & SQLite"


@router.get("/", summary="Page d'accueil", include_in_schema=False)
def home(ctx: RequestContext = Depends(get_context)):
    return render_page(View.HOME, title="Home", from_protected=get_flag(ctx.session))


@router.get("/healthchecker", summary="État de l'application")
def health_checker():
    return {"status": "success", "message": HEALTH_MESSAGE}
