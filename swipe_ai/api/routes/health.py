"""Health check endpoints for load balancers"""
from fastapi import APIRouter, Request
from swipe_ai.config import settings

router = APIRouter()


@router.get("/health")
async def health_check(request: Request):
    """Health check endpoint, including browser state"""
    browser = getattr(request.app.state, "browser", None)
    return {
        "status": "UP",
        "service": settings.SERVICE_NAME,
        "components": {
            "browser": {
                # The browser launches on first capture, so "idle" is healthy
                "status": "UP" if browser is not None and browser.is_healthy() else "IDLE",
            },
            "anthropic": {"configured": bool(settings.ANTHROPIC_API_KEY)},
            "gemini": {"configured": bool(settings.GOOGLE_GEMINI_API_KEY)},
        },
    }


@router.get("/info")
async def info():
    """Service info endpoint"""
    from swipe_ai import __version__
    return {
        "service": settings.SERVICE_NAME,
        "version": __version__,
        "description": "Swipe AI Service - competitor landing page to new CRO-optimized page",
        "models": {
            "text": settings.CLAUDE_MODEL,
            "vision": settings.GEMINI_MODEL,
        },
    }
