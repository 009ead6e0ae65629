import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .config import Settings, get_settings
from .exceptions import MissingFileError, ResumePipelineError
from .routers import resume_router
from .services.cloudinary_service import configure_cloudinary
from .services.pipeline import build_pipeline
from .services.uploads import ensure_upload_dir

logger = logging.getLogger(__name__)

# Every stage failure shares one body; the concrete error only goes to the log
PIPELINE_FAILURE_BODY = {"error": "Upload to Cloudinary failed"}
MISSING_FILE_BODY = {"error": "No file uploaded"}


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        ensure_upload_dir(settings.upload_dir)
        configure_cloudinary(settings)
        logger.info(f"Starting {settings.app_name} with {settings.redacted()}")
        yield

    app = FastAPI(
        title=settings.app_name,
        description="Resume ATS analysis and portfolio generation API",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,  # Disable docs in production
        redoc_url="/redoc" if settings.debug else None,
    )
    app.state.settings = settings
    app.state.pipeline = build_pipeline(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(MissingFileError)
    async def missing_file_handler(request: Request, exc: MissingFileError):
        return JSONResponse(status_code=400, content=MISSING_FILE_BODY)

    @app.exception_handler(ResumePipelineError)
    async def pipeline_error_handler(request: Request, exc: ResumePipelineError):
        logger.error(f"Upload failed on {request.url.path}: {type(exc).__name__}: {exc}")
        return JSONResponse(status_code=500, content=PIPELINE_FAILURE_BODY)

    app.include_router(resume_router)
    return app


app = create_app()
