import os
from pydantic_settings import BaseSettings
from typing import Optional

# Thư mục chuẩn kiến thức đi kèm package
PACKAGE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

class Settings(BaseSettings):
    PROJECT_NAME: str = "Course Standards Alignment"
    API_PREFIX: str = "/api"

    # --- Claude API ---
    ANTHROPIC_API_KEY: Optional[str] = None
    ANTHROPIC_API_URL: str = "https://api.anthropic.com/v1/messages"
    ANTHROPIC_VERSION: str = "2023-06-01"
    MODEL_NAME: str = "claude-sonnet-4-20250514"

    MAX_OUTPUT_TOKENS: int = 4000
    REQUEST_TIMEOUT: float = 120.0

    # --- Standards reference files ---
    STANDARDS_DIR: str = os.path.join(PACKAGE_DIR, "data", "standards")

    # --- CORS ---
    CORS_ALLOW_ORIGIN: str = "*"
    CORS_ALLOW_METHODS: str = "POST, OPTIONS"
    CORS_ALLOW_HEADERS: str = "Content-Type"
    CORS_MAX_AGE: int = 86400

    class Config:
        env_file = ".env"
        extra = "ignore"

settings = Settings()
