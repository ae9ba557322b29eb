import logging
import sys
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from course_alignment.core.config import settings
from course_alignment.core.common import cors_headers
from course_alignment.core.errors import AnalysisError, MethodNotAllowed, error_response_for
from course_alignment.api.api import api_router

# --- CẤU HÌNH LOGGING TẬP TRUNG ---
# Format log: [Thời gian] [Mức độ] [Tên Module] Nội dung
LOG_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"

# Log ra stdout để platform (Docker / serverless) bắt được
logging.basicConfig(
    level=logging.INFO,
    format=LOG_FORMAT,
    handlers=[
        logging.StreamHandler(sys.stdout)
    ],
    force=True
)

logger = logging.getLogger(__name__)
# ----------------------------------

app = FastAPI(title=settings.PROJECT_NAME)


# CORS mở cho mọi response, kể cả response lỗi
@app.middleware("http")
async def add_cors_headers(request: Request, call_next):
    response = await call_next(request)
    response.headers.update(cors_headers())
    return response


@app.exception_handler(AnalysisError)
async def analysis_error_handler(request: Request, exc: AnalysisError):
    status_code, body = error_response_for(exc)
    logger.error(f"⚠️ [{status_code}] {request.method} {request.url.path} -> {type(exc).__name__}: {exc.message}")
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    # Method không chuẩn (TRACE, ...) do router Starlette tự chặn
    if exc.status_code == 405:
        return await analysis_error_handler(request, MethodNotAllowed(request.method))
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


app.include_router(api_router, prefix=settings.API_PREFIX)

@app.on_event("startup")
async def startup_event():
    logger.info("🚀 Course alignment service started")
    logger.info(f"🔧 Config: Model={settings.MODEL_NAME}, Max Output Tokens={settings.MAX_OUTPUT_TOKENS}")
