from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from marketplace import __version__
from marketplace.core.config import Settings, get_settings
from marketplace.core.container import ApplicationContainer
from marketplace.core.logging import configure_logging
from marketplace.interfaces.http import create_api_router
from marketplace.interfaces.http.errors import register_exception_handlers
from marketplace.interfaces.http.middleware import install_rate_limiting, install_request_logging


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)
    container = ApplicationContainer.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        yield
        await container.shutdown()

    app = FastAPI(
        title=settings.project_name,
        description="Marketplace backend: users, stores, items and purchase transactions",
        version=__version__,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.container = container

    register_exception_handlers(app, expose_detail=settings.expose_error_detail)
    install_rate_limiting(app, container.rate_limiter, settings.rate_limit)
    install_request_logging(app)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors.allow_origins,
        allow_credentials=settings.cors.allow_credentials,
        allow_methods=settings.cors.allow_methods,
        allow_headers=settings.cors.allow_headers,
        expose_headers=settings.cors.expose_headers,
        max_age=settings.cors.max_age,
    )

    image_dir = settings.storage.image_dir
    image_dir.mkdir(parents=True, exist_ok=True)
    app.mount(settings.storage.image_url_prefix, StaticFiles(directory=str(image_dir)), name="uploads")

    app.include_router(create_api_router())
    return app


def run() -> None:
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "marketplace.main:create_app",
        factory=True,
        host=settings.server.host,
        port=settings.server.port,
        reload=settings.server.reload,
    )


if __name__ == "__main__":
    run()
