"""
Main application module for the steel HTTP service.

This file sets up the FastAPI application, configures CORS so browser
clients can make cross-origin requests and exposes a simple health
check endpoint.  The mesh router is included under the ``/api``
namespace.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .api.routes_meshes import router as meshes_router


def create_app() -> FastAPI:
    """Factory to create and configure the FastAPI application.

    Returns:
        FastAPI: The configured FastAPI application instance.
    """
    app = FastAPI(title="steel", description="A tool to tinker with STL files")

    # Allow all origins by default.  In production you should restrict
    # this to the domains that are allowed to access your API.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Health check endpoint for monitoring and deployment probes.
    @app.get("/api/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    app.include_router(meshes_router, prefix="/api", tags=["meshes"])

    return app


# Create the application instance.  Uvicorn imports this when running
# `uvicorn steel.main:app`.
app = create_app()
