from formgen.routes.form import create_form_router

__all__ = ["create_form_router"]
