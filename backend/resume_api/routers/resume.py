"""
Resume Router - ATS analysis and portfolio generation from an uploaded PDF
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Request, UploadFile
from fastapi.responses import JSONResponse

from ..config import Settings
from ..services.pipeline import ResumePipeline
from ..services.prompts import TaskVariant
from ..services.uploads import transient_upload

router = APIRouter(tags=["Resume"])


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_pipeline(request: Request) -> ResumePipeline:
    return request.app.state.pipeline


async def run_variant(
    file: Optional[UploadFile],
    variant: TaskVariant,
    pipeline: ResumePipeline,
    settings: Settings,
) -> JSONResponse:
    # The local copy is removed when the block exits, success or failure
    async with transient_upload(file, settings.upload_dir) as document:
        artifact = await pipeline.run(document, variant)
    return JSONResponse(status_code=200, content=artifact)


@router.get("/")
async def root():
    return {"mess": "running"}


@router.post("/upload")
async def analyze_resume(
    file: Optional[UploadFile] = File(None),
    pipeline: ResumePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    """
    Score an uploaded resume the way an applicant tracking system would.

    Returns job_position, ats_score, matched/missing keywords, suggestions
    and recommendations.
    """
    return await run_variant(file, TaskVariant.ATS_MATCH, pipeline, settings)


@router.post("/generate")
@router.post("/gererate", include_in_schema=False)
async def generate_portfolio(
    file: Optional[UploadFile] = File(None),
    pipeline: ResumePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    """
    Generate a portfolio website from the resume as separate html, css and
    javascript strings. Also served on the legacy misspelled path.
    """
    return await run_variant(file, TaskVariant.PORTFOLIO_MULTI_ASSET, pipeline, settings)


@router.post("/generate/single")
async def generate_single_page_portfolio(
    file: Optional[UploadFile] = File(None),
    pipeline: ResumePipeline = Depends(get_pipeline),
    settings: Settings = Depends(get_app_settings),
):
    """Generate a single self-contained HTML portfolio page from the resume."""
    return await run_variant(file, TaskVariant.PORTFOLIO_SINGLE_FILE, pipeline, settings)
