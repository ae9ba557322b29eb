"""
Shared fixtures for the course alignment service.
Claude API is replaced by an httpx.MockTransport, standards files live in tmp_path.
Zero network calls.
"""
import json
import httpx
import pytest
from fastapi.testclient import TestClient

from course_alignment.main import app
from course_alignment.services.llm_service import ClaudeGateway, get_model_gateway
from course_alignment.services.standards_service import StandardsService, get_standards_service

SAMPLE_ANALYSIS = {
    "score": 90,
    "summary": "Strong coverage of ratios and expressions, geometry is thin.",
    "domains": {
        "7.RP (Ratios)": 95,
        "7.NS (Number System)": 80,
        "7.EE (Expressions)": 100,
        "7.G (Geometry)": 40,
        "7.SP (Statistics)": 60.5,
    },
    "standardsMet": [
        {
            "code": "7.RP.1",
            "description": "Compute unit rates",
            "evidence": "Unit Rates Quiz asks for unit prices.",
        }
    ],
    "standardsNotMet": [
        {
            "code": "7.G.3",
            "description": "Cross-sections of 3D figures",
            "importance": "Foundation for high school geometry",
            "impact": "Students cannot visualize slices of solids.",
        }
    ],
    "recommendations": [
        {
            "priority": "HIGH",
            "standard": "7.G.3",
            "action": "Add a cross-section lab.",
            "timeframe": "Next unit",
            "rationale": "No assignment covers it.",
        }
    ],
}


def claude_reply(*texts, extra_blocks=None):
    """Build a Messages API reply body whose content holds the given text blocks."""
    content = [{"type": "text", "text": t} for t in texts]
    if extra_blocks:
        content = extra_blocks + content
    return {
        "id": "msg_test",
        "type": "message",
        "role": "assistant",
        "model": "claude-sonnet-4-20250514",
        "content": content,
        "stop_reason": "end_turn",
    }


class FakeClaude:
    """Records outbound requests and answers with a canned response."""

    def __init__(self):
        self.calls = []
        self.status_code = 200
        self.body = claude_reply("```json\n" + json.dumps(SAMPLE_ANALYSIS) + "\n```")
        self.error = None

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    def last_payload(self):
        return json.loads(self.calls[-1].content)


@pytest.fixture
def fake_claude():
    return FakeClaude()


@pytest.fixture
def gateway(fake_claude):
    return ClaudeGateway(
        api_key="test-key",
        api_url="https://claude.test/v1/messages",
        model="claude-sonnet-4-20250514",
        max_tokens=4000,
        timeout=5.0,
        transport=httpx.MockTransport(fake_claude.handler),
    )


@pytest.fixture
def standards_dir(tmp_path):
    directory = tmp_path / "standards"
    directory.mkdir()
    (directory / "grade7_mathematics.txt").write_text(
        "7.RP - Ratios and Proportional Relationships\n   - 7.RP.1: Compute unit rates\n",
        encoding="utf-8",
    )
    return directory


@pytest.fixture
def client(gateway, standards_dir):
    app.dependency_overrides[get_model_gateway] = lambda: gateway
    app.dependency_overrides[get_standards_service] = lambda: StandardsService(str(standards_dir))
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def analysis_request():
    return {
        "courseName": "Math 7 - Period 2",
        "gradeLevel": 7,
        "subject": "Mathematics",
        "assignments": [
            {
                "title": "Unit Rates Quiz",
                "description": "Compute unit prices from grocery ads",
                "type": "quiz",
                "maxPoints": 20,
                "materials": [{"id": 1}, {"id": 2}],
            },
            {
                "title": "Integer Operations Homework",
                "type": "homework",
                "maxPoints": 10,
                "materialCount": 0,
            },
        ],
    }
