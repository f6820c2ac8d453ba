from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from gigmarket.api.v1.router import v1_router
from gigmarket.core.config import get_settings
from gigmarket.core.errors import register_exception_handlers
from gigmarket.core.logging import configure_logging
from gigmarket.core.middleware import RequestIdMiddleware


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # Middleware: Request ID
    app.add_middleware(RequestIdMiddleware, header_name=settings.request_id_header)

    register_exception_handlers(app)

    # API v1
    app.include_router(v1_router, prefix=settings.api_prefix)

    return app


app = create_app()
