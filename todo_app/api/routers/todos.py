"""
➡️ But : Définir les endpoints des todos (toutes protégées par le gate).

Chaque mutation suit le même schéma :
1. appel DB sous verrou de lecture (dans le threadpool)
2. verrou relâché
3. mise à jour du cache sous verrou d'écriture (courte section)
4. flash + redirection vers /todo/list

Si la DB échoue sur edit/update/delete, l'id est retiré du cache : la ligne
n'existe peut-être plus.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Form, Query
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import RedirectResponse

from todo_app.api.dependencies import RequestContext, get_app_state, get_todo_service, require_context
from todo_app.core.errors import AppError
from todo_app.core.state import AppState
from todo_app.features.todos.schemas import TodoEditIn, TodoIn
from todo_app.features.todos.services import TodoService, parse_checkbox, validate_title
from todo_app.web.rendering import View, format_datetime, render_error, render_page
from todo_app.web.sessions import SUCCESS, flash, get_flag, get_timezone, pop_messages

router = APIRouter(tags=["todos"])

LIST_URL = "/todo/list"


def _redirect_to_list() -> RedirectResponse:
    return RedirectResponse(LIST_URL, status_code=303)


async def _prune(state: AppState, todo_id: int) -> None:
    async with state.lock.write():
        state.cache.remove(todo_id)


@router.get("/todo/list", summary="Lister les todos de l'utilisateur connecté")
async def todo_list(
    ctx: RequestContext = Depends(require_context),
    state: AppState = Depends(get_app_state),
    svc: TodoService = Depends(get_todo_service),
):
    user = ctx.user
    async with state.lock.read():
        loaded = state.cache.has(user.id)
        todos = state.cache.read_all(user.id)

    if not loaded:
        # token encore valide mais cache vide (redémarrage du process) : on recharge
        try:
            async with state.lock.read():
                todos = await run_in_threadpool(svc.get_all_todos, user.id)
        except AppError as e:
            return render_error(e.status_code, e.detail, link="/", username=user.username)
        async with state.lock.write():
            state.cache.replace_all(user.id, todos)

    messages_status, messages = pop_messages(ctx.session)
    full_title = f"{user.username.capitalize()}'s Task List"
    return render_page(
        View.TODO_LIST,
        title=full_title,
        title_page=full_title,
        username=user.username,
        todos=todos,
        messages_status=messages_status,
        messages=messages,
        from_protected=get_flag(ctx.session),
    )


@router.get("/create", summary="Modale de création")
def todo_create_modal(ctx: RequestContext = Depends(require_context)):
    return render_page(View.TODO_CREATE_MODAL)


@router.post("/create", summary="Créer un todo")
async def todo_add(
    form: Annotated[TodoIn, Form()],
    ctx: RequestContext = Depends(require_context),
    state: AppState = Depends(get_app_state),
    svc: TodoService = Depends(get_todo_service),
):
    try:
        title = validate_title(form.title)
    except AppError as e:
        return render_error(e.status_code, e.detail, link=LIST_URL, username=ctx.user.username)

    try:
        async with state.lock.read():
            todo = await run_in_threadpool(svc.add_todo, ctx.user.id, title, form.description)
    except AppError as e:
        # création ratée : le cache ne bouge pas
        return render_error(e.status_code, e.detail, link=LIST_URL, username=ctx.user.username)

    async with state.lock.write():
        state.cache.insert_front(todo)

    flash(ctx.session, SUCCESS, "Task created successfully!!")
    return _redirect_to_list()


@router.get("/edit", summary="Modale d'édition")
async def todo_edit_modal(
    todo_id: int = Query(..., alias="id"),
    ctx: RequestContext = Depends(require_context),
    state: AppState = Depends(get_app_state),
    svc: TodoService = Depends(get_todo_service),
):
    try:
        async with state.lock.read():
            todo = await run_in_threadpool(svc.get_todo_by_id, todo_id)
    except AppError as e:
        await _prune(state, todo_id)
        return render_page(View.TODO_UPDATE_MODAL, e.status_code, is_error=True, reason=e.detail)

    return render_page(
        View.TODO_UPDATE_MODAL,
        todo=todo,
        datetime=format_datetime(get_timezone(ctx.session), todo.created_at),
    )


@router.post("/edit", summary="Mettre à jour un todo")
async def todo_patch(
    form: Annotated[TodoEditIn, Form()],
    todo_id: int = Query(..., alias="id"),
    ctx: RequestContext = Depends(require_context),
    state: AppState = Depends(get_app_state),
    svc: TodoService = Depends(get_todo_service),
):
    try:
        title = validate_title(form.title)
        status = parse_checkbox(form.status)
    except AppError as e:
        return render_error(e.status_code, e.detail, link=LIST_URL, username=ctx.user.username)

    try:
        async with state.lock.read():
            await run_in_threadpool(
                svc.update_todo, todo_id, title=title, description=form.description, status=status
            )
    except AppError as e:
        await _prune(state, todo_id)
        return render_error(e.status_code, e.detail, link=LIST_URL, username=ctx.user.username)

    async with state.lock.write():
        state.cache.update_in_place(todo_id, title, form.description, status)

    flash(ctx.session, SUCCESS, "Task successfully updated!!")
    return _redirect_to_list()


@router.delete("/delete", summary="Supprimer un todo")
async def todo_delete(
    todo_id: int = Query(..., alias="id"),
    ctx: RequestContext = Depends(require_context),
    state: AppState = Depends(get_app_state),
    svc: TodoService = Depends(get_todo_service),
):
    try:
        async with state.lock.read():
            await run_in_threadpool(svc.remove_todo, todo_id)
    except AppError as e:
        await _prune(state, todo_id)
        return render_error(e.status_code, e.detail, link=LIST_URL, username=ctx.user.username)

    await _prune(state, todo_id)
    flash(ctx.session, SUCCESS, "Task successfully deleted!!")
    return _redirect_to_list()
