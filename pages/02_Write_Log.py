# =============================================================================
# pages/02_Write_Log.py - Field log entry, AI document import, schedule entry
# =============================================================================
from __future__ import annotations
from datetime import date

import streamlit as st

from greenmaster_core.ai import ALLOWED_UPLOAD_TYPES, DocumentInput, map_course_type, map_grass_type
from greenmaster_core.errors.handlers import ErrorContext
from greenmaster_core.models import Department, EventSource, EventType
from greenmaster_core.store import FORM_LOG, FORM_SCHEDULE
from greenmaster_core.ui.app_state import render_sidebar, require_login
from greenmaster_core.ui.theme import apply_css, page_header

st.set_page_config(page_title="Write Log - GreenMaster", page_icon="📝", layout="wide")
apply_css()

ctx = require_login()
render_sidebar(ctx)
sync = ctx.sync
user = ctx.user

page_header("업무 일지 작성", "현장 방문, 미팅, 공사 내용을 기록합니다")

courses = sync.courses
course_by_name = {c.name: c for c in courses}

log_tab, ai_tab, schedule_tab = st.tabs(["직접 작성", "AI 문서 분석", "일정 등록"])

# =============================================================================
# MANUAL LOG
# =============================================================================
with log_tab:
    draft = ctx.drafts.load(FORM_LOG) or {}
    if draft:
        st.caption("저장된 임시 작성본을 불러왔습니다.")

    if not courses:
        st.warning("등록된 골프장이 없습니다. 골프장 페이지에서 먼저 등록해주세요.")
    else:
        names = list(course_by_name)
        departments = list(Department)
        with st.form("log_form"):
            c1, c2, c3 = st.columns(3)
            log_date = c1.date_input("날짜", value=date.fromisoformat(draft.get("date", date.today().isoformat())))
            course_name = c2.selectbox(
                "골프장", names,
                index=names.index(draft["courseName"]) if draft.get("courseName") in names else 0,
            )
            department = c3.selectbox(
                "부서", departments, format_func=lambda d: d.value,
                index=departments.index(Department(draft["department"])) if draft.get("department") else departments.index(user.department),
            )
            title = st.text_input("제목", value=draft.get("title", ""))
            content = st.text_area("내용", value=draft.get("content", ""), height=200)
            c4, c5 = st.columns(2)
            tags = c4.text_input("태그 (쉼표로 구분)", value=draft.get("tags", ""))
            contact = c5.text_input("담당자", value=draft.get("contactPerson", ""))

            b1, b2, b3 = st.columns(3)
            submit = b1.form_submit_button("저장", use_container_width=True)
            keep = b2.form_submit_button("임시 저장", use_container_width=True)
            discard = b3.form_submit_button("초기화", use_container_width=True)

        values = {
            "date": log_date.isoformat(),
            "courseName": course_name,
            "department": department.value,
            "title": title,
            "content": content,
            "tags": tags,
            "contactPerson": contact,
        }
        if keep:
            ctx.drafts.save(FORM_LOG, values)
            st.toast("임시 저장되었습니다.")
        if discard:
            ctx.drafts.clear(FORM_LOG)
            st.rerun()
        if submit:
            if not title.strip() or not content.strip():
                st.warning("제목과 내용을 입력해주세요.")
            else:
                course = course_by_name[course_name]
                with ErrorContext("업무 일지 저장", show_success=True) as op:
                    sync.add_log({
                        "date": values["date"],
                        "author": user.name,
                        "department": department,
                        "courseId": course.id,
                        "courseName": course.name,
                        "title": title.strip(),
                        "content": content.strip(),
                        "tags": [t.strip() for t in tags.split(",") if t.strip()],
                        "contactPerson": contact.strip() or None,
                    })
                if not op.failed:
                    ctx.drafts.clear(FORM_LOG)

# =============================================================================
# AI DOCUMENT IMPORT
# =============================================================================
with ai_tab:
    if not ctx.capabilities.can_use_ai:
        st.info("AI 기능은 상급자 권한에서만 사용할 수 있습니다.")
    elif not ctx.insights.is_available:
        st.info("AI API Key가 설정되지 않았습니다.")
    else:
        uploaded = st.file_uploader(
            "PDF 또는 이미지 (최대 10MB)",
            type=["pdf", "jpg", "jpeg", "png", "webp", "heic", "heif"],
        )
        pasted = st.text_area("또는 텍스트 붙여넣기 (이메일, 메신저, 엑셀 등)", height=150)
        if st.button("분석 시작"):
            if uploaded is not None:
                doc = DocumentInput(data=uploaded.getvalue(), mime_type=uploaded.type, filename=uploaded.name)
            else:
                doc = DocumentInput(text=pasted)
            with ErrorContext("문서 분석"):
                with st.spinner("AI가 문서를 분석하고 있습니다..."):
                    st.session_state["_gm_ai_drafts"] = ctx.insights.analyze_document(doc, list(course_by_name))

        st.caption(f"지원 형식: {', '.join(ALLOWED_UPLOAD_TYPES)}")

        for idx, item in enumerate(st.session_state.get("_gm_ai_drafts", [])):
            with st.expander(f"{item.course_name} · {item.title}", expanded=True):
                st.write(item.content)
                st.markdown(f"**요약 리포트**: {item.summary_report}")
                if item.key_issues:
                    st.markdown("\n".join(f"- {issue}" for issue in item.key_issues))
                if st.button("일지로 저장", key=f"save_ai_{idx}"):
                    with ErrorContext("AI 일지 저장", show_success=True):
                        course = course_by_name.get(item.course_name)
                        if course is None:
                            info = item.course_info or {}
                            course_id = sync.add_course({
                                "name": item.course_name,
                                "holes": int(info.get("holes") or 18),
                                "type": map_course_type(info.get("type")),
                                "openYear": "",
                                "address": info.get("address", ""),
                                "grassType": map_grass_type(info.get("grassType")),
                                "area": "",
                                "description": "AI 문서 분석으로 자동 등록됨",
                            })
                        else:
                            course_id = course.id
                        sync.add_log(item.to_log_document(course_id, user.name))

# =============================================================================
# SCHEDULE
# =============================================================================
with schedule_tab:
    sched = ctx.drafts.load(FORM_SCHEDULE) or {}
    with st.form("event_form"):
        e_title = st.text_input("일정 제목", value=sched.get("title", ""))
        c1, c2, c3 = st.columns(3)
        e_date = c1.date_input("날짜 ", value=date.fromisoformat(sched.get("date", date.today().isoformat())))
        e_time = c2.text_input("시간", value=sched.get("time", ""), placeholder="14:00")
        e_type = c3.selectbox("유형", list(EventType), format_func=lambda t: t.value)
        e_location = st.text_input("장소", value=sched.get("location", ""))
        e_course = st.selectbox("관련 골프장", ["-"] + list(course_by_name))
        s1, s2 = st.columns(2)
        e_submit = s1.form_submit_button("등록", use_container_width=True)
        e_keep = s2.form_submit_button("임시 저장", use_container_width=True)

    if e_keep:
        ctx.drafts.save(FORM_SCHEDULE, {
            "title": e_title, "date": e_date.isoformat(), "time": e_time, "location": e_location,
        })
        st.toast("임시 저장되었습니다.")
    if e_submit:
        if not e_title.strip():
            st.warning("일정 제목을 입력해주세요.")
        else:
            with ErrorContext("일정 등록", show_success=True) as op:
                sync.add_event({
                    "title": e_title.strip(),
                    "date": e_date.isoformat(),
                    "source": EventSource.MANUAL,
                    "time": e_time.strip() or None,
                    "location": e_location.strip() or None,
                    "type": e_type,
                    "courseId": course_by_name[e_course].id if e_course != "-" else None,
                })
            if not op.failed:
                ctx.drafts.clear(FORM_SCHEDULE)
