"""FastAPI application factory."""

from fastapi import FastAPI

from instasight import __version__
from instasight.web.routes import analysis, facebook, oauth


def create_app() -> FastAPI:
    """Create the web application with all routers registered."""
    app = FastAPI(title="Instasight", version=__version__)

    app.include_router(oauth.router)
    app.include_router(facebook.router)
    app.include_router(analysis.router)

    @app.get("/healthz", include_in_schema=False)
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()
