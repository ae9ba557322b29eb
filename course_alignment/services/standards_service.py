import os
import re
import logging
from course_alignment.core.config import settings
from course_alignment.core.errors import StandardsNotFound

logger = logging.getLogger("standards_service")

# Ký tự không hợp lệ trong tên file (kể cả "/", "\\", ".")
UNSAFE_CHARS = re.compile(r"[^a-z0-9_-]")

class StandardsService:
    """
    Tra cứu tài liệu chuẩn kiến thức theo (khối lớp, môn học).
    Mỗi cặp tương ứng một file text: grade<khối>_<môn>.txt
    """

    def __init__(self, standards_dir: str = None):
        self.standards_dir = standards_dir or settings.STANDARDS_DIR

    def _clean(self, value) -> str:
        # khoảng trắng -> "_", ký tự lạ (/, .., ...) -> "-"
        value = str(value).strip().lower().replace(" ", "_")
        return UNSAFE_CHARS.sub("-", value)

    def _file_name(self, grade_level: str, subject: str) -> str:
        grade_clean = self._clean(grade_level)
        subject_clean = self._clean(subject)
        return f"grade{grade_clean}_{subject_clean}.txt"

    def get_path(self, grade_level: str, subject: str) -> str:
        return os.path.join(self.standards_dir, self._file_name(grade_level, subject))

    def load(self, grade_level: str, subject: str) -> str:
        file_path = self.get_path(grade_level, subject)

        if not os.path.isfile(file_path):
            logger.warning(f"📂 Standards file missing: {file_path}")
            raise StandardsNotFound(str(grade_level), subject, file_path)

        with open(file_path, "r", encoding="utf-8") as f:
            content = f.read().strip()

        logger.info(f"📚 Loaded standards for grade {grade_level} {subject} ({len(content)} chars)")
        return content

standards_service = StandardsService()

def get_standards_service() -> StandardsService:
    return standards_service
