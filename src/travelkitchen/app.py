from __future__ import annotations

import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from travelkitchen.shared.config.settings import settings
from travelkitchen.shared.logging.logger import setup_logging
from travelkitchen.shared.persistence.mongo import ensure_indexes
from travelkitchen.shared.api.errors import install_error_handlers

from travelkitchen.shared.api.health import router as health_router
from travelkitchen.features.recipes.api.routes import router as recipes_router
from travelkitchen.features.ideas.api.routes import router as ideas_router
from travelkitchen.features.seo.api.routes import router as seo_router

log = logging.getLogger("app")


def _split(value: str) -> list:
    if not value or value == "*":
        return ["*"]
    return [v.strip() for v in value.split(",") if v.strip()]


def create_app() -> FastAPI:
    setup_logging()
    app = FastAPI(title="Travel Kitchen", version="1.0.0")

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_split(settings.CORS_ALLOW_ORIGINS),
        allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
        allow_methods=_split(settings.CORS_ALLOW_METHODS),
        allow_headers=_split(settings.CORS_ALLOW_HEADERS),
    )

    install_error_handlers(app)

    # Routers
    app.include_router(health_router)
    app.include_router(seo_router)
    app.include_router(recipes_router, prefix="/v1")
    app.include_router(ideas_router,   prefix="/v1")

    @app.on_event("startup")
    async def _on_startup():
        try:
            ensure_indexes()
        except Exception:
            log.warning("ensure_indexes failed", exc_info=True)

    return app

# Uvicorn/Gunicorn entry point
app = create_app()
