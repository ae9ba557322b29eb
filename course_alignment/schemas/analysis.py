import base64
import binascii
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Any, Dict, List, Literal, Optional, Union

PDF_MEDIA_TYPE = "application/pdf"

# ============================ REQUEST ============================

class Assignment(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., min_length=1, description="Tên bài tập")
    description: Optional[str] = None
    type: str = Field("assignment", description="Loại bài tập (quiz, homework, ...)")
    max_points: Optional[float] = Field(None, alias="maxPoints", ge=0)
    material_count: int = Field(0, alias="materialCount", ge=0)

    @model_validator(mode="before")
    @classmethod
    def count_materials(cls, data: Any) -> Any:
        # Client cũ gửi cả mảng "materials", chỉ cần số lượng
        if isinstance(data, dict) and "materialCount" not in data and "material_count" not in data:
            materials = data.get("materials")
            if isinstance(materials, list):
                data = {**data, "materialCount": len(materials)}
        return data


class Document(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(..., alias="fileName", min_length=1)
    assignment_title: str = Field(..., alias="assignmentTitle")
    data: str = Field(..., alias="base64", description="Nội dung PDF mã hóa base64")
    media_type: Literal["application/pdf"] = PDF_MEDIA_TYPE

    @field_validator("data")
    @classmethod
    def check_base64(cls, value: str) -> str:
        try:
            base64.b64decode(value, validate=True)
        except (binascii.Error, ValueError):
            raise ValueError("base64 content could not be decoded")
        return value


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    course_name: str = Field(..., alias="courseName")
    grade_level: Union[str, int] = Field(..., alias="gradeLevel")
    subject: str
    assignments: List[Assignment] = Field(..., min_length=1)
    files_data: List[Document] = Field(default_factory=list, alias="filesData")

    @field_validator("grade_level")
    @classmethod
    def normalize_grade(cls, value: Union[str, int]) -> str:
        value = str(value).strip()
        if not value:
            raise ValueError("gradeLevel must not be empty")
        return value

    @field_validator("files_data", mode="before")
    @classmethod
    def default_files(cls, value: Any) -> Any:
        return [] if value is None else value

# ============================ RESULT ============================

class StandardMet(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    code: str
    description: str
    evidence: str


class StandardNotMet(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    code: str
    description: str
    importance: str
    impact: str


class Recommendation(BaseModel):
    model_config = ConfigDict(strict=True, extra="forbid")

    priority: Literal["CRITICAL", "HIGH", "MEDIUM"]
    standard: str
    action: str
    timeframe: str
    rationale: str


class AnalysisResult(BaseModel):
    """Báo cáo mức độ bao phủ chuẩn kiến thức của khóa học."""

    # Chỉ nhận đúng tên key camelCase, không map từ tên field
    model_config = ConfigDict(strict=True, extra="forbid")

    score: Union[int, float]
    summary: str
    domains: Dict[str, Union[int, float]]
    standards_met: List[StandardMet] = Field(..., alias="standardsMet")
    standards_not_met: List[StandardNotMet] = Field(..., alias="standardsNotMet")
    recommendations: List[Recommendation]

    @field_validator("score")
    @classmethod
    def check_score(cls, value: Union[int, float]) -> Union[int, float]:
        if not 0 <= value <= 100:
            raise ValueError(f"score {value} is outside 0-100")
        return value

    @field_validator("domains")
    @classmethod
    def check_percentages(cls, value: Dict[str, Union[int, float]]) -> Dict[str, Union[int, float]]:
        for label, percentage in value.items():
            if not 0 <= percentage <= 100:
                raise ValueError(f"domain '{label}' percentage {percentage} is outside 0-100")
        return value

    def to_response(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
