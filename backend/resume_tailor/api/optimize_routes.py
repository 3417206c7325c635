import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from resume_tailor.models.api_models import ErrorResponse, OptimizeData, OptimizeInput, OptimizeResponse, error_body
from resume_tailor.services.workflow_executor import WorkflowExecutor
from resume_tailor.services.workflow_manager import optimize_resume_for_job
from resume_tailor.utils.dependencies import get_workflow_executor

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=OptimizeResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def optimize_endpoint(
    req: OptimizeInput,
    executor: WorkflowExecutor = Depends(get_workflow_executor),
):
    """Optimize a resume for one job posting."""
    if not req.resume_text or not req.job_description:
        return JSONResponse(status_code=400, content=error_body("Resume text and job description are required"))

    try:
        result = await optimize_resume_for_job(
            req.resume_text,
            req.job_description,
            level=req.optimization_level,
            use_ai=req.use_ai,
            executor=executor,
            target_role=req.target_role,
            company=req.company,
        )
    except Exception as e:
        logger.exception("Resume optimization failed")
        return JSONResponse(status_code=500, content=error_body("Optimization failed", str(e)))

    return OptimizeResponse(
        data=OptimizeData(
            optimized_resume=result.optimized_resume,
            ats_score=result.improvements.after_score,
            improvement=result.improvements.improvement,
            key_changes=result.improvements.key_changes,
            processing_time=result.processing_time,
            recommendations=result.recommendations,
        )
    )


@router.get("")
async def describe_endpoints():
    """List the resume optimization endpoints."""
    return {
        "message": "Resume Optimization API",
        "endpoints": {
            "POST /api/optimize": "Optimize resume for job posting",
            "POST /api/analyze": "Analyze resume ATS score",
            "POST /api/preview": "Get optimization preview",
        },
    }
