from typing import Dict, Optional, Tuple, Type


class AnalysisError(Exception):
    """Base class for every failure surfaced by the analyze endpoint."""

    def __init__(self, message: str = "Analysis failed"):
        super().__init__(message)
        self.message = message


class MethodNotAllowed(AnalysisError):
    def __init__(self, method: str):
        super().__init__(f"Method {method} is not allowed")
        self.method = method


class InvalidAnalysisRequest(AnalysisError):
    pass


class StandardsNotFound(AnalysisError):
    def __init__(self, grade_level: str, subject: str, expected_path: str):
        super().__init__(
            f"No standards reference for grade {grade_level} {subject}. "
            f"Expected file: {expected_path}"
        )
        self.grade_level = grade_level
        self.subject = subject
        self.expected_path = expected_path


class GatewayError(AnalysisError):
    """Claude API trả về status lỗi (hoặc chưa cấu hình được)."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class GatewayTransportError(GatewayError):
    """Timeout / mất kết nối: không có status code từ upstream."""

    def __init__(self, message: str):
        super().__init__(message, status_code=None, body="")


class MalformedAnalysis(AnalysisError):
    pass


# Bảng ánh xạ: loại lỗi -> (HTTP status, nhãn lỗi, có kèm message hay không)
# Thứ tự quan trọng: lớp con phải đứng trước lớp cha.
ERROR_RESPONSES: Tuple[Tuple[Type[AnalysisError], int, str, bool], ...] = (
    (MethodNotAllowed, 405, "Method not allowed", False),
    (InvalidAnalysisRequest, 400, "Invalid request", True),
    (StandardsNotFound, 400, "Standards file not found", True),
    (GatewayError, 500, "Analysis failed", True),
    (MalformedAnalysis, 500, "Analysis failed", True),
    (AnalysisError, 500, "Analysis failed", True),
)


def error_response_for(exc: AnalysisError) -> Tuple[int, Dict[str, str]]:
    for error_type, status_code, label, with_message in ERROR_RESPONSES:
        if isinstance(exc, error_type):
            body = {"error": label}
            if with_message:
                body["message"] = exc.message
            return status_code, body
    return 500, {"error": "Analysis failed", "message": str(exc)}
