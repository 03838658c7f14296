# =============================================================================
# greenmaster_core/ai/insights.py
# GreenMaster AI operations built on the gateway
# =============================================================================
"""
Five operations:
- course_summary: strategic report for one course
- analyze_log: short insight on a single field log
- analyze_document: PDF/image/text -> one structured log draft per course
- course_details: public facts about a course, mapped onto our enums
- search: natural-language question over the current snapshots
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Sequence

from greenmaster_core.ai.gateway import AIGateway, Attachment
from greenmaster_core.ai.prompts import (
    ANALYST_SYSTEM,
    ANALYZED_LOG_SHAPE,
    COURSE_DETAILS_PROMPT,
    COURSE_DETAILS_SHAPE,
    COURSE_SUMMARY_PROMPT,
    DOCUMENT_EXTRACTION_PROMPT,
    LOG_ANALYSIS_PROMPT,
    SEARCH_NOT_FOUND,
    SEARCH_PROMPT,
)
from greenmaster_core.errors import AIInputError
from greenmaster_core.models import (
    CourseType,
    Department,
    GolfCourse,
    GrassType,
    LogEntry,
    Person,
)

logger = logging.getLogger(__name__)

ALLOWED_UPLOAD_TYPES = (
    "application/pdf",
    "image/jpeg",
    "image/png",
    "image/webp",
    "image/heic",
    "image/heif",
)
MAX_UPLOAD_BYTES = 10 * 1024 * 1024
SEARCH_LOG_LIMIT = 20


# =============================================================================
# INPUT / OUTPUT TYPES
# =============================================================================

@dataclass(frozen=True)
class DocumentInput:
    """An uploaded file or pasted text to extract log drafts from."""
    data: Optional[bytes] = None
    mime_type: Optional[str] = None
    text: Optional[str] = None
    filename: str = "upload"


def validate_document_input(doc: DocumentInput) -> Optional[Attachment]:
    """Return the attachment to send (None for pasted text); raise AIInputError otherwise."""
    if doc.data:
        if doc.mime_type not in ALLOWED_UPLOAD_TYPES:
            raise AIInputError(
                f"지원하지 않는 파일 형식({doc.mime_type})입니다. "
                "PDF 또는 이미지 파일(JPG, PNG, WEBP, HEIC)만 업로드 가능합니다.",
                details={"mime_type": doc.mime_type},
            )
        if len(doc.data) > MAX_UPLOAD_BYTES:
            size_mb = len(doc.data) / (1024 * 1024)
            raise AIInputError(
                f"파일 크기가 10MB를 초과했습니다 ({size_mb:.1f}MB). 더 작은 파일을 업로드해주세요.",
                details={"size_bytes": len(doc.data)},
            )
        return Attachment(data=doc.data, mime_type=doc.mime_type, filename=doc.filename)
    if doc.text and doc.text.strip():
        return None
    raise AIInputError("분석할 데이터(파일 또는 텍스트)가 없습니다.")


@dataclass
class AnalyzedLogDraft:
    """One extracted log draft; the user reviews it before saving."""
    title: str
    content: str
    date: str
    department: Department
    course_name: str
    tags: List[str]
    summary_report: str
    project_name: Optional[str] = None
    contact_person: Optional[str] = None
    delivery_date: Optional[str] = None
    participants: List[str] = field(default_factory=list)
    weather: Optional[str] = None
    key_issues: List[str] = field(default_factory=list)
    course_info: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_response(cls, data: Dict[str, Any]) -> AnalyzedLogDraft:
        return cls(
            title=data["title"],
            content=data["content"],
            date=data["date"],
            department=Department(data["department"]),
            course_name=data["courseName"],
            tags=[str(t) for t in data["tags"]],
            summary_report=data["summary_report"],
            project_name=data.get("project_name"),
            contact_person=data.get("contact_person"),
            delivery_date=data.get("delivery_date"),
            participants=[str(p) for p in data.get("participants") or []],
            weather=data.get("weather"),
            key_issues=[str(i) for i in data.get("key_issues") or []],
            course_info=data.get("course_info") or {},
        )

    def to_log_document(self, course_id: str, author: str) -> Dict[str, Any]:
        """Stored log document for this draft (id assigned on save)."""
        content = self.content
        if self.summary_report:
            content = f"{content}\n\n[AI 요약]\n{self.summary_report}"
        if self.key_issues:
            content += "\n\n[핵심 이슈]\n" + "\n".join(f"- {issue}" for issue in self.key_issues)
        doc = {
            "date": self.date,
            "author": author,
            "department": self.department.value,
            "courseId": course_id,
            "courseName": self.course_name,
            "title": self.title,
            "content": content,
            "tags": list(self.tags),
        }
        if self.contact_person:
            doc["contactPerson"] = self.contact_person
        return doc


@dataclass
class CourseDetails:
    address: str
    holes: int
    type: CourseType
    grass_type: GrassType
    description: str
    lat: Optional[float] = None
    lng: Optional[float] = None


def map_course_type(text: Optional[str]) -> CourseType:
    return CourseType.MEMBER if text and "회원" in text else CourseType.PUBLIC


def map_grass_type(text: Optional[str]) -> GrassType:
    text = text or ""
    if "벤트" in text:
        return GrassType.BENTGRASS
    if "캔터키" in text or "켄터키" in text:
        return GrassType.KENTUCKY
    if any(word in text for word in ("한국", "조이시아", "금잔디", "중지")):
        return GrassType.ZOYSIA
    return GrassType.MIXED


# =============================================================================
# OPERATIONS
# =============================================================================

class GreenMasterInsights:
    """AI features of the dashboard."""

    def __init__(self, gateway: AIGateway):
        self.gateway = gateway

    @property
    def is_available(self) -> bool:
        return self.gateway.is_configured

    def course_summary(
        self,
        course: GolfCourse,
        logs: Sequence[LogEntry],
        people: Sequence[Person],
    ) -> str:
        course_logs = [log for log in logs if log.course_id == course.id]
        course_people = [p for p in people if p.current_course_id == course.id]
        people_info = " | ".join(
            f"{p.name}({p.current_role}, 친밀도: {int(p.affinity)}, 특징: {p.notes})"
            for p in course_people
        ) or "(없음)"
        logs_info = "\n".join(
            f"[{log.date}] {log.department.value} - {log.title}: {log.content}"
            for log in course_logs
        ) or "(없음)"
        prompt = COURSE_SUMMARY_PROMPT.format(
            course_name=course.name,
            open_year=course.open_year,
            holes=course.holes,
            course_type=course.type.value,
            grass_type=course.grass_type.value,
            description=course.description,
            people=people_info,
            logs=logs_info,
        )
        return self.gateway.generate_text(prompt, system=ANALYST_SYSTEM)

    def analyze_log(self, log: LogEntry) -> str:
        prompt = LOG_ANALYSIS_PROMPT.format(
            date=log.date,
            department=log.department.value,
            title=log.title,
            content=log.content,
            tags=", ".join(log.tags or []) or "없음",
        )
        return self.gateway.generate_text(prompt, system=ANALYST_SYSTEM)

    def analyze_document(
        self,
        document: DocumentInput,
        existing_course_names: Sequence[str] = (),
    ) -> List[AnalyzedLogDraft]:
        attachment = validate_document_input(document)
        text_block = ""
        if attachment is None:
            text_block = f"\n[입력된 텍스트 데이터 (엑셀 복사, 이메일, 채팅 로그 등)]\n{document.text}\n"
        prompt = DOCUMENT_EXTRACTION_PROMPT.format(
            course_names=", ".join(existing_course_names),
            today=date.today().isoformat(),
            text_block=text_block,
        )
        items = self.gateway.generate_structured(
            prompt,
            ANALYZED_LOG_SHAPE,
            attachments=[attachment] if attachment else None,
        )
        drafts = [AnalyzedLogDraft.from_response(item) for item in items]
        logger.info(f"Extracted {len(drafts)} log drafts from {document.filename}")
        return drafts

    def course_details(self, course_name: str) -> CourseDetails:
        if not course_name.strip():
            raise AIInputError("골프장 이름을 입력해주세요.")
        data = self.gateway.generate_structured(
            COURSE_DETAILS_PROMPT.format(course_name=course_name.strip()),
            COURSE_DETAILS_SHAPE,
        )
        return CourseDetails(
            address=data["address"],
            holes=int(data["holes"] or 18),
            type=map_course_type(data["type"]),
            grass_type=map_grass_type(data["grassType"]),
            description=data["description"] or "",
            lat=data.get("lat"),
            lng=data.get("lng"),
        )

    def search(
        self,
        query: str,
        logs: Sequence[LogEntry],
        courses: Sequence[GolfCourse],
        people: Sequence[Person],
    ) -> str:
        if not query.strip():
            raise AIInputError("검색어를 입력해주세요.")
        recent = sorted(logs, key=lambda log: (log.date, log.created_at or 0), reverse=True)
        context = json.dumps({
            "courses": [
                {"name": c.name, "type": c.type.value, "desc": c.description} for c in courses
            ],
            "people": [
                {"name": p.name, "role": p.current_role, "notes": p.notes} for p in people
            ],
            "recent_logs": [
                {"date": log.date, "course": log.course_name, "title": log.title, "content": log.content}
                for log in recent[:SEARCH_LOG_LIMIT]
            ],
        }, ensure_ascii=False)
        prompt = SEARCH_PROMPT.format(query=query.strip(), context=context, not_found=SEARCH_NOT_FOUND)
        return self.gateway.generate_text(prompt, fast=True, temperature=0.2)
