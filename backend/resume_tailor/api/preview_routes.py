import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from resume_tailor.models.api_models import ErrorResponse, PreviewInput, PreviewResponse, error_body
from resume_tailor.services.workflow_manager import get_optimization_preview

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=PreviewResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def preview_endpoint(req: PreviewInput):
    """Projected score change without the rewritten resume."""
    if not req.resume_text or not req.job_description:
        return JSONResponse(status_code=400, content=error_body("Resume text and job description are required"))

    try:
        preview = get_optimization_preview(req.resume_text, req.job_description)
    except Exception as e:
        logger.exception("Optimization preview failed")
        return JSONResponse(status_code=500, content=error_body("Preview generation failed", str(e)))

    return PreviewResponse(data=preview)
