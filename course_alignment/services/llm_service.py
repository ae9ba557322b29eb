import httpx
import json
import logging
from typing import Any, Dict, List, Optional, Union
from course_alignment.core.config import settings
from course_alignment.core.errors import GatewayError, GatewayTransportError
from course_alignment.services.prompt_service import ComposedPrompt

# Cấu hình logger
logger = logging.getLogger("model_gateway")
logger.setLevel(logging.INFO)

class ClaudeGateway:
    """
    Gửi đúng MỘT request tới Claude Messages API cho mỗi lượt phân tích.
    Không retry, không cache: mỗi lần gọi tự mở và đóng client riêng.
    """

    def __init__(
        self,
        api_key: Optional[str],
        api_url: str = "https://api.anthropic.com/v1/messages",
        api_version: str = "2023-06-01",
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4000,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.api_key = api_key
        self.api_url = api_url
        self.api_version = api_version
        self.model = model
        self.max_tokens = max_tokens
        self.timeout = timeout
        # Cho phép test thay transport (httpx.MockTransport)
        self.transport = transport

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "x-api-key": self.api_key,
            "anthropic-version": self.api_version,
        }

    def build_content(self, composed: ComposedPrompt) -> Union[str, List[Dict[str, Any]]]:
        # Không có file -> content là chuỗi thuần
        if not composed.attachments:
            return composed.instruction

        # Có file -> các block document đứng trước, block text cuối cùng
        blocks: List[Dict[str, Any]] = [
            {
                "type": "document",
                "source": {
                    "type": "base64",
                    "media_type": doc.media_type,
                    "data": doc.data,
                },
            }
            for doc in composed.attachments
        ]
        blocks.append({"type": "text", "text": composed.instruction})
        return blocks

    def build_payload(self, composed: ComposedPrompt) -> Dict[str, Any]:
        return {
            "model": self.model,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "user", "content": self.build_content(composed)}
            ],
        }

    async def send(self, composed: ComposedPrompt) -> Dict[str, Any]:
        if not self.api_key:
            raise GatewayError("ANTHROPIC_API_KEY is not configured")

        payload = self.build_payload(composed)
        logger.info(
            f"🤖 Calling Claude: model={self.model}, max_tokens={self.max_tokens}, "
            f"attachments={len(composed.attachments)}"
        )

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                response = await client.post(self.api_url, json=payload, headers=self._headers())
        except httpx.TimeoutException as e:
            logger.error(f"⏱️ Claude API timeout after {self.timeout}s: {e}")
            raise GatewayTransportError(f"Claude API request timed out: {e}") from e
        except httpx.RequestError as e:
            logger.error(f"🔌 Claude API transport error: {e}")
            raise GatewayTransportError(f"Claude API request failed: {e}") from e

        if not response.is_success:
            logger.error(f"Claude API error: {response.status_code} {response.text}")
            raise GatewayError(
                f"Claude API error: {response.status_code}",
                status_code=response.status_code,
                body=response.text,
            )

        try:
            return response.json()
        except json.JSONDecodeError as e:
            logger.error(f"Claude API returned a non-JSON body: {response.text[:200]}")
            raise GatewayError(
                f"Claude API returned an unreadable reply: {e}",
                status_code=response.status_code,
                body=response.text,
            ) from e


def get_model_gateway() -> ClaudeGateway:
    """Dependency: dựng gateway từ cấu hình, API key được inject tại đây."""
    return ClaudeGateway(
        api_key=settings.ANTHROPIC_API_KEY,
        api_url=settings.ANTHROPIC_API_URL,
        api_version=settings.ANTHROPIC_VERSION,
        model=settings.MODEL_NAME,
        max_tokens=settings.MAX_OUTPUT_TOKENS,
        timeout=settings.REQUEST_TIMEOUT,
    )
