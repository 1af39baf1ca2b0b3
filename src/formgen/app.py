from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from formgen.config import Settings, load_config
from formgen.routes import create_form_router
from formgen.schema import FormSchema
from formgen.store import ResponseStore


def create_app(
    settings: Settings | None = None,
    schema: FormSchema | None = None,
    store: ResponseStore | None = None,
) -> FastAPI:
    """Build the application. Configuration and corrupt-store errors are
    raised from here so the process never starts serving."""
    settings = settings or Settings()
    if schema is None:
        schema = load_config(
            settings.config_path,
            output_override=settings.output_path,
            max_length=settings.max_value_length,
        )
    if store is None:
        store = ResponseStore(schema.output_path)
        store.load()

    app = FastAPI(
        title=schema.title,
        openapi_tags=[
            {"name": "form", "description": "Form page and submissions (HTML)"},
            {"name": "system", "description": "System"},
        ],
    )
    app.state.settings = settings
    app.state.schema = schema
    app.state.store = store

    app.include_router(
        create_form_router(
            schema,
            store,
            form_route=settings.form_route,
            submit_route=settings.submit_route,
            max_length=settings.max_value_length,
        )
    )

    @app.get("/healthz", tags=["system"])
    async def healthz() -> JSONResponse:
        return JSONResponse({"status": "ok", "responses": len(store)})

    return app
