import logging
from typing import Dict

from course_alignment.core.config import settings
from course_alignment.core.errors import MethodNotAllowed

logger = logging.getLogger("request_validator")

WRITE_METHOD = "POST"
PREFLIGHT_METHOD = "OPTIONS"


def cors_headers() -> Dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.CORS_ALLOW_ORIGIN,
        "Access-Control-Allow-Methods": settings.CORS_ALLOW_METHODS,
        "Access-Control-Allow-Headers": settings.CORS_ALLOW_HEADERS,
        "Access-Control-Max-Age": str(settings.CORS_MAX_AGE),
    }


def is_preflight(method: str) -> bool:
    """
    Phân loại HTTP method của request.
    - OPTIONS (preflight): True, caller trả 200 rỗng ngay.
    - POST: False, tiếp tục phân tích.
    - Method khác: ném MethodNotAllowed.
    """
    method = (method or "").upper()
    if method == PREFLIGHT_METHOD:
        return True
    if method != WRITE_METHOD:
        logger.warning(f"⛔ Rejected method: {method}")
        raise MethodNotAllowed(method)
    return False
