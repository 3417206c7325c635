import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from resume_tailor.config import settings
from resume_tailor.api import (
    optimize_routes,
    analyze_routes,
    preview_routes,
    workflow_routes,
)
from resume_tailor.models.api_models import error_body

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title=settings.app_name,
    version="0.1.0",
    description="Heuristic ATS scoring, keyword gap analysis and resume tailoring",
)

# ── CORS ────────────────────────────────────────────────────────────────────

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Errors ──────────────────────────────────────────────────────────────────


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies (wrong types, unknown optimization level) are client errors."""
    return JSONResponse(status_code=400, content=error_body("Invalid request", str(exc.errors())))


# ── Routers ─────────────────────────────────────────────────────────────────

app.include_router(optimize_routes.router, prefix="/api/optimize", tags=["Optimization"])
app.include_router(analyze_routes.router, prefix="/api/analyze", tags=["Analysis"])
app.include_router(preview_routes.router, prefix="/api/preview", tags=["Preview"])
app.include_router(workflow_routes.router, prefix="/api/workflows", tags=["Workflows"])

# ── Health Check ────────────────────────────────────────────────────────────


@app.get("/api/health")
async def health_check():
    return {"status": "healthy", "app": settings.app_name, "version": "0.1.0"}
