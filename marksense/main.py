"""Entrada principal de la app FastAPI (configura middlewares, excepciones y routers)."""
import logging
from typing import Optional

from fastapi import FastAPI

from marksense.api.router import api_router
from marksense.container import ServiceContainer, build_container
from marksense.core.config import Settings, settings as default_settings
from marksense.core.exceptions import register_exception_handlers
from marksense.core.logging import setup_logging
from marksense.core.middleware import add_middlewares

_log = logging.getLogger("marksense.startup")


def create_app(container: Optional[ServiceContainer] = None, settings: Optional[Settings] = None) -> FastAPI:
    """Arma la app. Si no se pasa `container`, se construye en el startup."""
    settings = settings or default_settings
    setup_logging(settings.log_level)
    app = FastAPI(title=settings.app_name)
    app.state.container = container

    add_middlewares(app, settings)
    register_exception_handlers(app)

    @app.on_event("startup")
    async def on_startup():
        if app.state.container is None:
            app.state.container = await build_container(settings)
            app.state.owns_container = True
        _log.info("%s listo (prefijo=%s)", settings.app_name, settings.api_prefix_normalized or "/")

    @app.on_event("shutdown")
    async def on_shutdown():
        if getattr(app.state, "owns_container", False):
            await app.state.container.aclose()

    @app.get("/", include_in_schema=False)
    async def root():
        return {"message": "MarkSense API is running!"}

    # Monta routers bajo el prefijo configurado
    app.include_router(api_router, prefix=settings.api_prefix_normalized)
    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run("marksense.main:app", host="0.0.0.0", port=default_settings.port)


if __name__ == "__main__":
    run()
