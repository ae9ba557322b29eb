import json
import logging
import re
from typing import Any, Dict
from pydantic import ValidationError
from course_alignment.core.errors import MalformedAnalysis
from course_alignment.schemas.analysis import AnalysisResult

logger = logging.getLogger("result_normalizer")

# Mở fence (```json, ```python, ``` ...) hoặc đóng fence, kèm xuống dòng nếu có
CODE_FENCE = re.compile(r"```[A-Za-z0-9_+-]*[ \t]*\n?")


def extract_text(reply: Dict[str, Any]) -> str:
    """
    Lấy các block type == "text" trong reply của Claude, nối bằng "\\n".
    Các block khác (tool_use, document, ...) bị bỏ qua.
    """
    content = reply.get("content") if isinstance(reply, dict) else None
    if not isinstance(content, list):
        raise MalformedAnalysis("Claude reply has no content blocks")

    texts = [
        block.get("text", "")
        for block in content
        if isinstance(block, dict) and block.get("type") == "text"
    ]
    return "\n".join(texts)


def strip_code_fences(text: str) -> str:
    """Bỏ toàn bộ markdown code fence, rồi trim khoảng trắng hai đầu."""
    return CODE_FENCE.sub("", text).strip()


def parse_analysis(cleaned_text: str) -> AnalysisResult:
    try:
        data = json.loads(cleaned_text)
    except json.JSONDecodeError as e:
        logger.error(f"❌ Analysis is not valid JSON: {e}")
        raise MalformedAnalysis(str(e)) from e

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        logger.error(f"❌ Analysis does not match the expected structure: {e}")
        raise MalformedAnalysis(str(e)) from e


def normalize_reply(reply: Dict[str, Any]) -> AnalysisResult:
    text = extract_text(reply)
    return parse_analysis(strip_code_fences(text))
