"""Main FastAPI application"""

from fastapi import FastAPI

from storefront.core.config import settings
from storefront.core.events import lifespan
from storefront.core.middleware import setup_middleware
from storefront.api.health import router as health_router
from storefront.api.v1 import api_router

def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.APP_NAME,
        description="Storefront sign-in, sessions and anonymous cart hand-over",
        version=settings.APP_VERSION,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan
    )

    # Setup middleware
    setup_middleware(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(api_router, prefix="/api/v1")

    return app

app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "storefront.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        workers=1 if settings.DEBUG else settings.WORKERS
    )
