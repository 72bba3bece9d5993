"""
➡️ But : Endpoints d'inscription / connexion / déconnexion.

Les échecs d'authentification ne sont pas des pages d'erreur : on redirige
(303) vers le formulaire avec un message flash.
"""

import logging
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Form, Header
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse, Response

from todo_app.api.dependencies import (
    RequestContext,
    get_app_state,
    get_auth_service,
    get_context,
    get_todo_service,
    require_context,
)
from todo_app.core.config import Settings
from todo_app.core.errors import AppError
from todo_app.core.state import AppState
from todo_app.features.authentication.schemas import LoginIn, RegisterIn
from todo_app.features.authentication.services import AuthService
from todo_app.features.todos.services import TodoService
from todo_app.security.tokens import issue_token
from todo_app.web.rendering import View, render_error, render_page
from todo_app.web.sessions import ERROR, SUCCESS, flash, get_flag, pop_messages, set_flag, set_timezone

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


def _redirect(url: str) -> RedirectResponse:
    return RedirectResponse(url, status_code=303)


def _set_token_cookie(response: Response, token: str, settings: Settings, *, max_age: int) -> None:
    response.set_cookie(
        key=settings.AUTH_COOKIE_NAME,
        value=token,
        httponly=True,
        samesite=settings.AUTH_COOKIE_SAMESITE,
        secure=settings.AUTH_COOKIE_SECURE,
        max_age=max_age,
        path=settings.AUTH_COOKIE_PATH,
    )


def _form_page(view: View, title: str, ctx: RequestContext) -> Response:
    messages_status, messages = pop_messages(ctx.session)
    return render_page(
        view,
        title=title,
        messages_status=messages_status,
        messages=messages,
        from_protected=get_flag(ctx.session),
    )


# -----------------------------
# Register
# -----------------------------
@router.get("/register", summary="Page d'inscription", include_in_schema=False)
def register_page(ctx: RequestContext = Depends(get_context)):
    return _form_page(View.REGISTER, "Register", ctx)


@router.post("/register", summary="Créer un compte")
async def register_user(
    form: Annotated[RegisterIn, Form()],
    ctx: RequestContext = Depends(get_context),
    state: AppState = Depends(get_app_state),
    svc: AuthService = Depends(get_auth_service),
):
    try:
        async with state.lock.read():
            await run_in_threadpool(svc.create_user, form.email, form.password, form.username)
    except AppError as e:
        logger.info("Registration refused: %s", e.kind.value)
        flash(ctx.session, ERROR, f"Something went wrong: {e.detail}")
        return _redirect("/register")

    flash(ctx.session, SUCCESS, "You have successfully registered!!")
    return _redirect("/login")


# -----------------------------
# Login
# -----------------------------
@router.get("/login", summary="Page de connexion", include_in_schema=False)
def login_page(ctx: RequestContext = Depends(get_context)):
    return _form_page(View.LOGIN, "Login", ctx)


@router.post("/login", summary="Se connecter", description="Pose le token en cookie httpOnly et charge le cache des todos.")
async def login_user(
    form: Annotated[LoginIn, Form()],
    x_timezone: Optional[str] = Header(default=None),
    ctx: RequestContext = Depends(get_context),
    state: AppState = Depends(get_app_state),
    auth_svc: AuthService = Depends(get_auth_service),
    todo_svc: TodoService = Depends(get_todo_service),
):
    if x_timezone is None:
        flash(ctx.session, ERROR, "Something went wrong: missing x-timezone header.")
        return _redirect("/login")
    set_timezone(ctx.session, x_timezone)

    try:
        async with state.lock.read():
            user = await run_in_threadpool(auth_svc.check_email_password, form.email, form.password)
    except AppError as e:
        logger.info("Login refused: %s", e.kind.value)
        flash(ctx.session, ERROR, f"Something went wrong: {e.detail}")
        return _redirect("/login")

    token = issue_token(user.id, state.settings.jwt)

    try:
        async with state.lock.read():
            todos = await run_in_threadpool(todo_svc.get_all_todos, user.id)
    except AppError as e:
        return render_error(e.status_code, e.detail, link="/")

    async with state.lock.write():
        state.cache.replace_all(user.id, todos)

    logger.info("User %s logged in", user.id)
    flash(ctx.session, SUCCESS, "You have successfully logged in!!")
    response = _redirect("/todo/list")
    _set_token_cookie(response, token, state.settings, max_age=state.settings.AUTH_COOKIE_MAX_AGE)
    return response


# -----------------------------
# Logout
# -----------------------------
@router.post("/logout", summary="Se déconnecter")
async def logout(
    ctx: RequestContext = Depends(require_context),
    state: AppState = Depends(get_app_state),
):
    set_flag(ctx.session, False)
    async with state.lock.write():
        state.cache.evict(ctx.user.id)

    flash(ctx.session, SUCCESS, "You have successfully logged out!!")
    response = _redirect("/login")
    # max-age négatif : le navigateur supprime le cookie
    _set_token_cookie(response, "", state.settings, max_age=-state.settings.AUTH_COOKIE_MAX_AGE)
    return response
