"""FastAPI application main entry point."""

from __future__ import annotations

import logging
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from dotenv import load_dotenv

load_dotenv()

from .middleware import register_error_handlers
from .routes import assistant, files, insights, memos, notifications, system, todos
from ..services.config import get_config

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vault Dashboard API",
    description="Dashboard over a GitHub-hosted Obsidian vault",
    version="0.1.0",
)

config = get_config()

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "http://localhost:3000",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)

# Mount routers
app.include_router(files.router, tags=["files"])
app.include_router(todos.router, tags=["todos"])
app.include_router(memos.router, tags=["memos"])
app.include_router(insights.router, tags=["insights"])
app.include_router(notifications.router, tags=["notifications"])
app.include_router(assistant.router, tags=["assistant"])
app.include_router(system.router, tags=["system"])

if not config.is_connected:
    logger.warning("GitHub token or repository not configured; vault routes will return 401")


@app.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "healthy"}


frontend_dist = Path(__file__).resolve().parents[3] / "frontend" / "dist"
if frontend_dist.exists():
    app.mount(
        "/assets", StaticFiles(directory=str(frontend_dist / "assets")), name="assets"
    )

    @app.get("/{full_path:path}")
    async def serve_spa(full_path: str):
        """Serve the dashboard SPA for all non-API routes."""
        file_path = frontend_dist / full_path
        if full_path and file_path.is_file():
            return FileResponse(file_path)
        return FileResponse(frontend_dist / "index.html")

    logger.info(f"Serving frontend SPA from: {frontend_dist}")
else:
    logger.warning(f"Frontend dist not found at: {frontend_dist}")

    @app.get("/")
    async def root():
        """API health check endpoint."""
        return {"status": "ok", "service": "Vault Dashboard API"}


__all__ = ["app"]
