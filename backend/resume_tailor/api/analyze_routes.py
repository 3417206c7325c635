import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from resume_tailor.models.api_models import AnalyzeData, AnalyzeInput, AnalyzeResponse, ErrorResponse, error_body
from resume_tailor.services.workflow_manager import analyze_resume

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=AnalyzeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_endpoint(req: AnalyzeInput):
    """ATS score for a resume, optionally against a target role."""
    if not req.resume_text:
        return JSONResponse(status_code=400, content=error_body("Resume text is required"))

    try:
        result = analyze_resume(req.resume_text, req.target_role)
    except Exception as e:
        logger.exception("Resume analysis failed")
        return JSONResponse(status_code=500, content=error_body("Analysis failed", str(e)))

    return AnalyzeResponse(
        data=AnalyzeData(
            score=result.score,
            breakdown=result.breakdown,
            recommendations=result.recommendations,
            passes_ats=result.passes_ats,
        )
    )
