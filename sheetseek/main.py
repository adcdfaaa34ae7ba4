"""FastAPI application entry point."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from sheetseek.config import get_settings
from sheetseek.dependencies import logger
from sheetseek.index import FileIndex
from sheetseek.index.router import router as index_router
from sheetseek.search.router import router as search_router

VERSION = "0.1.0"


def create_app() -> FastAPI:
    """Build the application with its own, empty FileIndex."""
    settings = get_settings()

    app = FastAPI(title="SheetSeek", version=VERSION)
    app.state.file_index = FileIndex()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(index_router)
    app.include_router(search_router)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Health check endpoint."""
        return {
            "status": "healthy",
            "version": VERSION,
            "xlsx_dir": str(get_settings().xlsx_dir),
        }

    @app.get("/")
    async def root() -> dict[str, str]:
        """Root endpoint with API info."""
        return {"name": "SheetSeek", "version": VERSION, "docs": "/docs"}

    return app


app = create_app()

logger.info("app_startup", extra={"host": get_settings().host, "port": get_settings().port})
