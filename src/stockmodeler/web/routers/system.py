"""System endpoints: health check."""

from fastapi import APIRouter

from stockmodeler.web.schemas import HealthResponse

router = APIRouter(tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health():
    """API health check."""
    return HealthResponse(status="ok")
