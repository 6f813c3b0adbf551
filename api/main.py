"""FastAPI application entry point."""

import logging
import tomllib
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import connect, crud, health, sql, tables
from core.config import settings

logging.basicConfig(level=settings.LOG_LEVEL, format="%(levelname)s: %(message)s")


def _get_version() -> str:
    """Project version from pyproject.toml, or "dev" when it cannot be read."""
    pyproject_path = Path(__file__).parent.parent / "pyproject.toml"
    try:
        with open(pyproject_path, "rb") as f:
            version = tomllib.load(f).get("project", {}).get("version")
    except (OSError, tomllib.TOMLDecodeError):
        return "dev"
    return f"v{version}" if version else "dev"


APP_VERSION = _get_version()

app = FastAPI(
    title="DB Admin API",
    description="Browse and edit PostgreSQL, MySQL and libsql databases",
    version=APP_VERSION,
)

# CORS - open by default. Requests carry their own connection URL.
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(health.router)
app.include_router(connect.router, prefix="/api")
app.include_router(tables.router, prefix="/api")
app.include_router(crud.router, prefix="/api")
app.include_router(sql.router, prefix="/api")


@app.get("/api/info")
async def api_info():
    """API info endpoint."""
    return {
        "name": "DB Admin API",
        "version": APP_VERSION,
    }


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "name": "DB Admin API",
        "version": APP_VERSION,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.API_HOST, port=settings.API_PORT)
