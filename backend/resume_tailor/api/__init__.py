from resume_tailor.api import (
    optimize_routes,
    analyze_routes,
    preview_routes,
    workflow_routes,
)

__all__ = [
    "optimize_routes",
    "analyze_routes",
    "preview_routes",
    "workflow_routes",
]
