# login_logger/api/health.py
from fastapi import APIRouter, Request
from login_logger.models import HealthResponse
from login_logger.utils import utcnow, isoformat_utc

router = APIRouter(tags=["health"])

@router.get("/", response_model=HealthResponse)
async def health_check(request: Request):
    """Проверка состояния API"""
    return HealthResponse(
        service=request.app.state.settings.service_name,
        time=isoformat_utc(utcnow()),
    )
