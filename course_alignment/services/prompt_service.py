import json
import logging
from typing import Dict, List, NamedTuple, Optional
from course_alignment.schemas.analysis import AnalysisRequest, Document

logger = logging.getLogger("prompt_service")

OUTPUT_SCHEMA = """{
  "score": <number 0-100>,
  "summary": "<brief analysis>",
  "domains": {
    "<domain code and short name>": <percentage 0-100>
  },
  "standardsMet": [
    {
      "code": "<exact standard code>",
      "description": "<what the standard requires>",
      "evidence": "<which assignment addresses this and how>"
    }
  ],
  "standardsNotMet": [
    {
      "code": "<exact standard code>",
      "description": "<what the standard requires>",
      "importance": "<why this matters>",
      "impact": "<impact on student learning>"
    }
  ],
  "recommendations": [
    {
      "priority": "<CRITICAL|HIGH|MEDIUM>",
      "standard": "<standard code(s)>",
      "action": "<specific action to take>",
      "timeframe": "<when to implement>",
      "rationale": "<why this is important>"
    }
  ]
}"""


class ComposedPrompt(NamedTuple):
    instruction: str
    attachments: List[Document]


class PromptService:
    def _assignment_details(self, request: AnalysisRequest) -> str:
        details = [
            {
                "title": a.title,
                "description": a.description,
                "type": a.type,
                "points": a.max_points,
                "attachments": a.material_count,
            }
            for a in request.assignments
        ]
        return json.dumps(details, indent=2, ensure_ascii=False)

    def _documents_block(self, documents: List[Document]) -> str:
        """
        Liệt kê tên file đính kèm, nhóm theo bài tập (giữ thứ tự xuất hiện đầu tiên).
        """
        if not documents:
            return ""

        grouped: Dict[str, List[str]] = {}
        for doc in documents:
            grouped.setdefault(doc.assignment_title, []).append(doc.file_name)

        lines = [f"ATTACHED DOCUMENTS ({len(documents)} total, provided as PDFs above):"]
        for index, (title, names) in enumerate(grouped.items(), start=1):
            lines.append(f"{index}. {title}")
            for name in names:
                lines.append(f"   - {name}")
        lines.append(
            "Use the content of these documents as evidence when deciding "
            "which standards each assignment addresses."
        )
        return "\n".join(lines) + "\n\n"

    def build_analysis_prompt(
        self,
        request: AnalysisRequest,
        standards_text: Optional[str] = None,
    ) -> ComposedPrompt:
        grade = request.grade_level
        subject = request.subject

        # 1. Khối chuẩn kiến thức
        if standards_text:
            standards_block = standards_text.strip()
        else:
            standards_block = (
                f"No reference document was supplied. Use the official "
                f"California Common Core State Standards for Grade {grade} {subject}."
            )

        # 2. Prompt hoàn chỉnh (không chứa thời gian hay dữ liệu ngẫu nhiên)
        prompt = f"""You are an expert in California Common Core State Standards for Grade {grade} {subject}.

Analyze this course's alignment with CA Common Core Standards:

COURSE: {request.course_name}
GRADE LEVEL: {grade}
SUBJECT: {subject}

ASSIGNMENTS ({len(request.assignments)} total):
{self._assignment_details(request)}

{self._documents_block(request.files_data)}REFERENCE STANDARDS:
{standards_block}

Provide a JSON response (ONLY JSON, no markdown) with this EXACT structure:
{OUTPUT_SCHEMA}

Be thorough and specific. List ALL standards that are not met."""

        logger.info(
            f"📝 Prompt built: {len(prompt)} chars, "
            f"{len(request.assignments)} assignments, {len(request.files_data)} documents"
        )

        return ComposedPrompt(instruction=prompt, attachments=list(request.files_data))

prompt_service = PromptService()
