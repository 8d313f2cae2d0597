# login_logger/utils/network.py
from fastapi import Request


def get_client_ip(request: Request, trust_proxy_headers: bool = False) -> str:
    """Извлечь IP клиента.

    Заголовки X-Real-IP / X-Forwarded-For от nginx учитываются только если
    сервис стоит за доверенным прокси, иначе их может подделать клиент.
    """
    if trust_proxy_headers:
        forwarded = (
            request.headers.get("x-real-ip")
            or request.headers.get("x-forwarded-for", "").split(",")[0].strip()
        )
        if forwarded:
            return forwarded
    return request.client.host if request.client else "unknown"
