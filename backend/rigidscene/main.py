"""FastAPI entry point for the rigidscene backend."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from rigidscene import __version__
from rigidscene.models.settings import settings
from rigidscene.routers import scene

app = FastAPI(title="rigidscene API", version=__version__)

# CORS middleware - must be added before routes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ALLOW_ORIGINS or ["http://localhost:9002"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    max_age=3600,  # Cache preflight for 1 hour
)

app.include_router(scene.router)


@app.get("/health", tags=["health"])
async def health() -> dict[str, str]:
    """Basic health-check endpoint."""
    return {"status": "ok", "env": settings.APP_ENV}
