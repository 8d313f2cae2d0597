# login_logger/models/responses.py
from pydantic import BaseModel
from typing import Any, Optional


class LoginAccepted(BaseModel):
    ok: bool = True


class ErrorResponse(BaseModel):
    """Тело ответа с ошибкой; details опускается, если не задан"""
    error: str
    details: Optional[Any] = None

    def to_body(self) -> dict:
        return self.model_dump(exclude_none=True)


class HealthResponse(BaseModel):
    ok: bool = True
    service: str
    time: str
