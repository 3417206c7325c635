from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App
    app_name: str = "Resume Tailor"
    log_level: str = "INFO"

    # CORS
    frontend_url: str = "http://localhost:3000"

    # n8n workflow service (optional, everything works locally without it)
    n8n_webhook_url: str = "http://localhost:5678"
    n8n_api_key: Optional[str] = None
    workflow_retries: int = 2
    workflow_backoff_seconds: float = 1.0
    workflow_health_timeout: float = 5.0

    # Default for requests that don't set useAI
    ai_enhancement_enabled: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()


# ── Workflow Registry ───────────────────────────────────────────────────────

WORKFLOWS = {
    "KEYWORD_EXTRACTION": {
        "id": "keyword-extraction",
        "name": "AI Keyword Extraction",
        "description": "Extract and prioritize keywords from job descriptions",
        "webhook_path": "/webhook/keyword-extraction",
        "input_schema": {
            "jobDescription": "string",
            "industryFocus": "string?",
            "roleLevel": "string?",
        },
        "output_schema": {
            "technicalKeywords": "string[]",
            "softSkills": "string[]",
            "requirements": "string[]",
            "priorities": "object",
        },
        "timeout": 30.0,
    },
    "RESUME_ENHANCEMENT": {
        "id": "resume-enhancement",
        "name": "AI Resume Enhancement",
        "description": "Enhance resume content with AI-powered improvements",
        "webhook_path": "/webhook/resume-enhancement",
        "input_schema": {
            "resumeText": "string",
            "targetKeywords": "string[]",
            "jobDescription": "string",
            "enhancementLevel": "string",
        },
        "output_schema": {
            "enhancedResume": "string",
            "improvements": "string[]",
            "confidenceScore": "number",
        },
        "timeout": 45.0,
    },
    "CONTENT_OPTIMIZATION": {
        "id": "content-optimization",
        "name": "AI Content Optimization",
        "description": "Optimize resume sections for ATS and human readability",
        "webhook_path": "/webhook/content-optimization",
        "input_schema": {
            "sectionContent": "string",
            "sectionType": "string",
            "targetKeywords": "string[]",
            "jobContext": "string",
        },
        "output_schema": {
            "optimizedContent": "string",
            "keywordDensity": "number",
            "readabilityScore": "number",
            "suggestions": "string[]",
        },
        "timeout": 25.0,
    },
    "SKILL_MATCHING": {
        "id": "skill-matching",
        "name": "AI Skill Matching",
        "description": "Match candidate skills with job requirements",
        "webhook_path": "/webhook/skill-matching",
        "input_schema": {
            "candidateSkills": "string[]",
            "jobRequirements": "string[]",
            "industryContext": "string",
        },
        "output_schema": {
            "matchScore": "number",
            "matchedSkills": "string[]",
            "missingSkills": "string[]",
            "skillGaps": "string[]",
            "recommendations": "string[]",
        },
        "timeout": 20.0,
    },
    "BULLET_POINT_GENERATOR": {
        "id": "bullet-point-generator",
        "name": "AI Bullet Point Generator",
        "description": "Generate impactful bullet points for experience sections",
        "webhook_path": "/webhook/bullet-point-generator",
        "input_schema": {
            "originalBullet": "string",
            "role": "string",
            "company": "string",
            "achievements": "string[]",
            "targetKeywords": "string[]",
        },
        "output_schema": {
            "enhancedBullets": "string[]",
            "impactMetrics": "string[]",
            "actionVerbs": "string[]",
        },
        "timeout": 20.0,
    },
    "COVER_LETTER_GENERATOR": {
        "id": "cover-letter-generator",
        "name": "AI Cover Letter Generator",
        "description": "Generate a cover letter from a resume and job posting",
        "webhook_path": "/webhook/cover-letter-generator",
        "input_schema": {
            "resumeText": "string",
            "jobDescription": "string",
            "companyName": "string",
            "roleTitle": "string",
            "personalInfo": "object?",
        },
        "output_schema": {
            "coverLetter": "string",
            "keyHighlights": "string[]",
            "personalizedElements": "string[]",
        },
        "timeout": 35.0,
    },
}

# ── Scoring Thresholds ──────────────────────────────────────────────────────

SCORING_THRESHOLDS = {
    "passing_score": 70,
    "critical_importance": 8,
    "max_importance": 15,
    "keyword_recommendation_cutoff": 70,
    "section_recommendation_cutoff": 80,
    "density_high_pct": 3.0,
    "density_low_pct": 0.5,
    "max_recommendations": 5,
}
