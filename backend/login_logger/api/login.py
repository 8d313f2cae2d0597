# login_logger/api/login.py
from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
import logging
from login_logger.utils import get_client_ip

logger = logging.getLogger(__name__)

router = APIRouter(tags=["login"])

@router.post("/login", status_code=201)
async def log_login(request: Request):
    """Принять событие входа, записать в журнал и разослать уведомления"""
    settings = request.app.state.settings
    pipeline = request.app.state.pipeline

    raw = await request.body()
    client_ip = get_client_ip(request, settings.trust_proxy_headers)

    outcome = await pipeline.process(raw, client_ip)
    return JSONResponse(status_code=outcome.status_code, content=outcome.body)
