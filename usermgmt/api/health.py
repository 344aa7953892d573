"""
Health check endpoint
"""
from fastapi import APIRouter
from fastapi.responses import PlainTextResponse

router = APIRouter()


@router.get("/", response_class=PlainTextResponse, tags=["Health"])
async def health_check():
    """Simple API health check."""
    return "API is running"
