from fastapi import APIRouter, Depends, Request, Response
from pydantic import ValidationError
import json
import logging

from course_alignment.core.common import is_preflight
from course_alignment.core.errors import AnalysisError, InvalidAnalysisRequest
from course_alignment.schemas.analysis import AnalysisRequest
from course_alignment.services.llm_service import ClaudeGateway, get_model_gateway
from course_alignment.services.prompt_service import prompt_service
from course_alignment.services.result_normalizer import normalize_reply
from course_alignment.services.standards_service import StandardsService, get_standards_service

logger = logging.getLogger("analysis_endpoint")

router = APIRouter()

# Đăng ký mọi method chuẩn để tự trả 405 theo format riêng
ROUTE_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


async def _read_payload(request: Request) -> AnalysisRequest:
    try:
        raw = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise InvalidAnalysisRequest(f"Request body is not valid JSON: {e}") from e

    try:
        return AnalysisRequest.model_validate(raw)
    except ValidationError as e:
        raise InvalidAnalysisRequest(str(e)) from e


@router.api_route("/analyze", methods=ROUTE_METHODS)
async def analyze_course(
    request: Request,
    gateway: ClaudeGateway = Depends(get_model_gateway),
    standards: StandardsService = Depends(get_standards_service),
):
    # 1. Preflight -> 200 rỗng, method lạ -> 405
    if is_preflight(request.method):
        return Response(status_code=200)

    # 2. Validate body trước khi làm bất cứ việc gì khác
    payload = await _read_payload(request)
    logger.info(
        f"🚀 [Received Request] course='{payload.course_name}' grade={payload.grade_level} "
        f"subject='{payload.subject}' assignments={len(payload.assignments)} files={len(payload.files_data)}"
    )

    try:
        # 3. Tài liệu chuẩn kiến thức
        standards_text = standards.load(payload.grade_level, payload.subject)

        # 4. Ghép prompt + file đính kèm
        composed = prompt_service.build_analysis_prompt(payload, standards_text)

        # 5. Gọi Claude (1 lần duy nhất)
        reply = await gateway.send(composed)

        # 6. Làm sạch + parse kết quả
        result = normalize_reply(reply)

    except AnalysisError:
        raise
    except Exception as e:
        logger.error(f"❌ [System Error] {e}", exc_info=True)
        raise AnalysisError(str(e)) from e

    logger.info(f"✅ [Success] course='{payload.course_name}' score={result.score}")
    return result.to_response()
