"""
FastAPI Application - SoulyCore backend API
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import settings, ensure_directories
from database import init_engine, close_engine
from database.init import run_migrations
from utils import logger, init_logging
from .errors import register_error_handlers
from .routes import router

APP_NAME = "SoulyCore"
APP_VERSION = "0.5.22"

# Run migrations BEFORE app starts (outside async context)
init_logging(app_name="api")
ensure_directories()

if settings.AUTO_MIGRATE:
    try:
        run_migrations()
    except Exception as e:
        logger.error(f"Migration failed: {e}")
        # Don't raise - let the app start anyway, migrations may have already been applied


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown events."""
    # Startup
    logger.info("Starting API server")
    
    await init_engine()
    yield
    # Shutdown
    await close_engine()
    logger.info("Shutting down API server")


def create_app() -> FastAPI:
    """Build the application with middleware, error handlers and routes."""
    app = FastAPI(
        title=APP_NAME,
        description="Route handlers behind the SoulyCore chat, memory and developer panels",
        version=APP_VERSION,
        lifespan=lifespan
    )
    
    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_error_handlers(app)
    
    # Include routes
    app.include_router(router, prefix="/api")
    
    @app.get("/")
    async def root():
        """Root endpoint."""
        return {
            "name": APP_NAME,
            "version": APP_VERSION,
            "status": "running"
        }
    
    return app


app = create_app()
