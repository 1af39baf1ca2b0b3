from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse
from starlette.datastructures import FormData

from formgen.errors import StorageError
from formgen.render import render_error, render_form, render_submitted
from formgen.schema import FormSchema
from formgen.store import ResponseStore
from formgen.submission import handle_submission
from formgen.validation import DEFAULT_MAX_LENGTH

logger = logging.getLogger(__name__)


def form_values(form_data: FormData) -> dict[str, str]:
    """Keep text values only; the last one wins for repeated keys."""
    values: dict[str, str] = {}
    for key, value in form_data.multi_items():
        if isinstance(value, str):
            values[key] = value
    return values


def create_form_router(
    schema: FormSchema,
    store: ResponseStore,
    form_route: str = "/",
    submit_route: str = "/submit",
    max_length: int = DEFAULT_MAX_LENGTH,
    name: str = "formgen",
) -> APIRouter:
    """Router serving ``schema`` on ``form_route`` and storing posts from
    ``submit_route``. It can be included into any FastAPI application."""
    router = APIRouter()
    form_name = f"{name}_form"
    submit_name = f"{name}_submit"

    @router.get(form_route, response_class=HTMLResponse, name=form_name, tags=["form"])
    async def show_form(request: Request) -> HTMLResponse:
        action = request.url_for(submit_name).path
        return HTMLResponse(render_form(schema, action=action))

    @router.post(submit_route, response_class=HTMLResponse, name=submit_name, tags=["form"])
    async def submit_form(request: Request) -> HTMLResponse:
        form_url = request.url_for(form_name).path
        values = form_values(await request.form())
        try:
            result = handle_submission(schema, values, store, max_length)
        except StorageError:
            logger.exception("Failed to store response in %s", store.path)
            return HTMLResponse(
                render_error(schema, "Your answers could not be saved. Please try again later.", form_url),
                status_code=500,
            )

        if not result.stored:
            return HTMLResponse(
                render_form(
                    schema,
                    errors=result.errors,
                    values=values,
                    action=request.url_for(submit_name).path,
                ),
                status_code=400,
            )
        return HTMLResponse(render_submitted(schema, form_url))

    return router
