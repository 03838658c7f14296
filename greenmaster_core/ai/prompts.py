# =============================================================================
# greenmaster_core/ai/prompts.py
# Prompt templates (Korean output)
# =============================================================================

from __future__ import annotations

from datetime import date

from greenmaster_core.ai.shapes import FieldSpec, OutputShape
from greenmaster_core.models import Department


def _today() -> str:
    return date.today().isoformat()


ANALYST_SYSTEM = (
    "당신은 골프장 관리 전문가이자 비즈니스 전략가입니다. "
    "주어진 데이터에 근거해 한국어로, 전문적인 보고서 톤으로 답변하세요."
)

COURSE_SUMMARY_PROMPT = """\
'{course_name}' 골프장의 정보, 주요 인물, 최근 업무 일지를 분석하여
"전략적 경영 및 코스 관리 인사이트 보고서"를 약 600자 내외로 작성하세요.
단순 요약이 아니라 이면의 맥락을 읽어내는 분석이어야 합니다.

1. 종합 현황 진단 및 리스크: 코스 상태, 공사 진행, 일정 지연/예산 초과/민원 등 위험 요소
2. 비즈니스 기회: 일지에서 드러난 니즈를 바탕으로 한 계약/납품/컨설팅 기회
3. 경쟁 구도: 경쟁사 활동 징후와 대응 전술
4. 인적 네트워크 활용: 우호적 인물 활용 방안, 비우호적 인물 설득 논리
5. Action Plan: 가장 시급한 과제 3가지 (우선순위 순)

[골프장 개요]
- 이름: {course_name} ({open_year}년 개장)
- 규모: {holes}홀 ({course_type})
- 잔디: {grass_type}
- 특징: {description}

[주요 인물]
{people}

[최근 업무 일지]
{logs}
"""

LOG_ANALYSIS_PROMPT = """\
아래 업무 일지에서 의사결정에 도움이 되는 핵심 인사이트를 총 300자 이내로 추출하세요.
각 섹션 제목은 굵게 표시하세요.

1. 핵심 요약: 업무의 본질과 현재 상황 한 줄
2. 숨겨진 함의/리스크: 부정적 징후, 경쟁사 위협, 놓친 기회
   (건설사업: 견적 단계는 수익성과 수주 확률, 공사 단계는 공기 지연과 안전/품질 리스크.
    영업: 계약 성사 확률과 경쟁사 움직임)
3. 추천 액션: 담당자가 바로 취할 행동 2가지

[업무 일지]
- 날짜/부서: {date} / {department}
- 제목: {title}
- 내용: {content}
- 태그: {tags}
"""

DOCUMENT_EXTRACTION_PROMPT = """\
이 데이터는 골프장 관리, 건설 공사, 영업 일지 또는 메신저 대화 내용입니다.
내용을 분석하여 업무 일지 초안을 추출하세요.

- 여러 골프장의 내용이 섞여 있으면 골프장별로 분리하여 각각 별도 객체로 만드세요.
- 등록된 골프장 목록: [{course_names}]
  문서의 골프장 이름이 목록의 이름과 유사하면 목록의 정확한 이름을 사용하고,
  목록에 없으면 문서에 나온 이름을 그대로 사용하세요.
- date가 없으면 오늘({today})을 사용하세요.
- department는 문맥으로 추론하세요 (비용/계약: 영업, 시공/공사: 건설사업, 자문: 컨설팅).
- tags는 5~7개, key_issues는 해당 골프장에 특화된 이슈 3~5개.
- summary_report는 문제, 맥락, 필요한 조치를 담은 3~4문장 보고.
- course_info는 목록에 없는 새 골프장일 때만 채우고 (address, holes, type), 아니면 {{}}.
{text_block}"""

COURSE_DETAILS_PROMPT = """\
한국 골프장 "{course_name}"의 정보를 지도 서비스나 공식 웹사이트에서 찾는다고 가정하고 정리하세요.
- address: 도로명 주소 우선
- lat, lng: 대략적인 위도/경도 (소수점 6자리)
- holes: 총 홀 수
- type: 회원제 또는 대중제
- grassType: 한국잔디, 벤트그라스, 캔터키블루그라스, 혼합 중 하나 (모르면 혼합)
- description: 지형적 특징, 난이도, 주요 이슈 2문장 내외
"""

SEARCH_PROMPT = """\
You are the internal search engine of a golf course management system.
Answer the user's question strictly from the database context below.

[User Query]: "{query}"

[Database Context]:
{context}

- If the answer is found, summarize it clearly in Korean and cite the source
  (e.g. "2024-05-20 일지에 따르면...").
- If it is not in the data, answer exactly: "{not_found}"
- Be concise and professional.
"""

SEARCH_NOT_FOUND = "시스템 데이터에서 관련 정보를 찾을 수 없습니다."

ANALYZED_LOG_SHAPE = OutputShape(
    name="analyzed_log",
    many=True,
    fields=(
        FieldSpec("title", required=True, description="구체적인 제목"),
        FieldSpec("content", required=True, description="업무 내용 요약"),
        FieldSpec("date", default=_today, description="YYYY-MM-DD"),
        FieldSpec(
            "department",
            choices=tuple(d.value for d in Department),
            default=Department.SALES.value,
        ),
        FieldSpec("courseName", required=True, description="골프장 이름"),
        FieldSpec("tags", kind="array", default=list),
        FieldSpec("summary_report", required=True, description="심층 요약 리포트"),
        FieldSpec("project_name"),
        FieldSpec("contact_person"),
        FieldSpec("delivery_date"),
        FieldSpec("participants", kind="array", default=list),
        FieldSpec("weather"),
        FieldSpec("key_issues", kind="array", default=list),
        FieldSpec("course_info", kind="object", default=dict),
    ),
)

COURSE_DETAILS_SHAPE = OutputShape(
    name="course_details",
    fields=(
        FieldSpec("address", required=True),
        FieldSpec("holes", kind="number", default=18),
        FieldSpec("type", default=""),
        FieldSpec("grassType", default=""),
        FieldSpec("description", default=""),
        FieldSpec("lat", kind="number"),
        FieldSpec("lng", kind="number"),
    ),
)
