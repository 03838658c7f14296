# =============================================================================
# pages/03_Courses.py - Golf courses, financials and materials
# =============================================================================
from __future__ import annotations
from datetime import date

import plotly.express as px
import streamlit as st

from greenmaster_core.errors.handlers import ErrorContext, safe_execute
from greenmaster_core.models import CourseType, GrassType, MaterialCategory
from greenmaster_core.reporting import financial_table, logs_table, materials_by_category
from greenmaster_core.ui.app_state import render_sidebar, require_login
from greenmaster_core.ui.theme import PRIMARY_COLOR, SUBTLE_TEXT, apply_css, log_card, page_header

st.set_page_config(page_title="Courses - GreenMaster", page_icon="⛳", layout="wide")
apply_css()

ctx = require_login()
render_sidebar(ctx)
caps = ctx.capabilities
sync = ctx.sync

page_header("골프장 관리", "코스 정보, 재무, 자재 현황")

# =============================================================================
# ADD COURSE
# =============================================================================
with st.expander("➕ 골프장 등록", expanded=False):
    lookup = st.session_state.get("_gm_course_lookup")
    if caps.can_use_ai and ctx.insights.is_available:
        lookup_name = st.text_input("AI로 정보 조회할 골프장 이름")
        if st.button("AI 조회") and lookup_name:
            with ErrorContext("골프장 정보 조회"):
                with st.spinner("조회 중..."):
                    details = ctx.insights.course_details(lookup_name)
                st.session_state["_gm_course_lookup"] = {"name": lookup_name, "details": details}
                st.rerun()

    prefill = lookup["details"] if lookup else None
    course_types = list(CourseType)
    grass_types = list(GrassType)
    with st.form("course_form", clear_on_submit=True):
        c1, c2, c3 = st.columns(3)
        name = c1.text_input("이름", value=lookup["name"] if lookup else "")
        holes = c2.number_input("홀 수", min_value=9, max_value=72, step=9, value=prefill.holes if prefill else 18)
        open_year = c3.text_input("개장 연도")
        c4, c5, c6 = st.columns(3)
        course_type = c4.selectbox(
            "유형", course_types, format_func=lambda t: t.value,
            index=course_types.index(prefill.type) if prefill else 0,
        )
        grass_type = c5.selectbox(
            "잔디", grass_types, format_func=lambda g: g.value,
            index=grass_types.index(prefill.grass_type) if prefill else 0,
        )
        area = c6.text_input("면적")
        address = st.text_input("주소", value=prefill.address if prefill else "")
        description = st.text_area("설명", value=prefill.description if prefill else "")
        if st.form_submit_button("등록"):
            if not name.strip():
                st.warning("골프장 이름을 입력해주세요.")
            else:
                course = {
                    "name": name.strip(),
                    "holes": int(holes),
                    "type": course_type,
                    "openYear": open_year.strip(),
                    "address": address.strip(),
                    "grassType": grass_type,
                    "area": area.strip(),
                    "description": description.strip(),
                }
                if prefill and prefill.lat is not None and prefill.lng is not None:
                    course.update(lat=prefill.lat, lng=prefill.lng)
                with ErrorContext("골프장 등록", show_success=True):
                    sync.add_course(course)
                    st.session_state.pop("_gm_course_lookup", None)

# =============================================================================
# COURSE DETAIL
# =============================================================================
courses = sync.courses
if not courses:
    st.info("등록된 골프장이 없습니다.")
    st.stop()

by_id = {c.id: c for c in courses}
course_id = st.selectbox("골프장 선택", list(by_id), format_func=lambda cid: by_id[cid].name)
course = by_id[course_id]

info_tab, logs_tab, finance_tab, materials_tab = st.tabs(["기본 정보", "업무 일지", "재무", "자재"])

with info_tab:
    m1, m2, m3, m4 = st.columns(4)
    m1.metric("홀", course.holes)
    m2.metric("유형", course.type.value)
    m3.metric("잔디", course.grass_type.value)
    m4.metric("개장", course.open_year or "-")
    st.markdown(f"**주소**: {course.address or '-'}")
    st.write(course.description)
    if course.issues:
        st.markdown("**이슈**\n" + "\n".join(f"- {issue}" for issue in course.issues))

    with st.form(f"edit_course_{course.id}"):
        new_desc = st.text_area("설명 수정", value=course.description)
        new_address = st.text_input("주소 수정", value=course.address)
        b1, b2 = st.columns(2)
        save = b1.form_submit_button("저장", use_container_width=True)
        remove = b2.form_submit_button("삭제", use_container_width=True, disabled=not caps.is_admin)
    if save:
        with ErrorContext("골프장 수정", show_success=True):
            sync.update_course(course.id, {"description": new_desc, "address": new_address})
    if remove:
        with ErrorContext("골프장 삭제"):
            sync.delete_course(course.id)
            st.rerun()

    if caps.can_use_ai and ctx.insights.is_available and st.button("🤖 AI 전략 리포트"):
        with st.spinner("리포트 생성 중..."):
            report = safe_execute(
                ctx.insights.course_summary, course, sync.logs, sync.people,
                default="", error_message="AI 리포트 생성에 실패했습니다",
            )
        if report:
            st.markdown(report)

with logs_tab:
    course_logs = [log for log in sync.logs if log.course_id == course.id]
    table = logs_table(course_logs)
    if table.empty:
        st.caption("기록된 업무 일지가 없습니다.")
    by_log = {log.id: log for log in course_logs}
    for log_id in table["id"]:
        log = by_log[log_id]
        log_card(log.title, f"{log.date} · {log.department.value} · {log.author}", log.content, log.tags)

with finance_tab:
    if not caps.can_view_full_data:
        st.info("재무 정보는 중급자 이상 권한에서 조회할 수 있습니다.")
    else:
        df = financial_table(sync.financials, courses, course_id=course.id)
        if df.empty:
            st.caption("등록된 재무 데이터가 없습니다.")
        else:
            fig = px.bar(df, x="year", y=["revenue", "profit"], barmode="group",
                         color_discrete_sequence=[PRIMARY_COLOR, SUBTLE_TEXT])
            fig.update_layout(height=320, margin=dict(l=10, r=10, t=10, b=10), legend_title_text="")
            st.plotly_chart(fig, use_container_width=True)
            st.dataframe(df.drop(columns=["id", "course_id"]), use_container_width=True, hide_index=True)

        with st.form(f"financial_form_{course.id}", clear_on_submit=True):
            f1, f2, f3 = st.columns(3)
            year = f1.number_input("연도", min_value=1990, max_value=2100, value=date.today().year)
            revenue = f2.number_input("매출 (백만원)", min_value=0.0, step=10.0)
            profit = f3.number_input("영업이익 (백만원)", step=10.0)
            if st.form_submit_button("저장"):
                existing = next(
                    (r for r in sync.financials if r.course_id == course.id and int(r.year) == int(year)),
                    None,
                )
                with ErrorContext("재무 데이터 저장", show_success=True):
                    fields = {"courseId": course.id, "year": int(year), "revenue": revenue, "profit": profit}
                    if existing:
                        sync.update_financial(existing.id, fields)
                    else:
                        sync.add_financial(fields)

        if not df.empty and caps.is_admin:
            years = dict(zip(df["id"], df["year"]))
            to_delete = st.selectbox("삭제할 연도", list(years), format_func=lambda rid: str(years[rid]))
            if st.button("재무 데이터 삭제"):
                with ErrorContext("재무 데이터 삭제"):
                    sync.delete_financial(to_delete)
                    st.rerun()

with materials_tab:
    records = [m for m in sync.materials if m.course_id == course.id]
    summary = materials_by_category(records)
    if summary.empty:
        st.caption("등록된 자재가 없습니다.")
    else:
        st.dataframe(summary, use_container_width=True, hide_index=True)
        for record in records:
            cols = st.columns([3, 2, 2, 1])
            cols[0].markdown(f"**{record.name}** ({record.category.value})")
            cols[1].write(f"{record.quantity:g} {record.unit}")
            cols[2].write(record.supplier or "-")
            if cols[3].button("삭제", key=f"del_mat_{record.id}"):
                with ErrorContext("자재 삭제"):
                    sync.delete_material(record.id)
                    st.rerun()

    with st.form(f"material_form_{course.id}", clear_on_submit=True):
        r1, r2, r3, r4 = st.columns(4)
        category = r1.selectbox("분류", list(MaterialCategory), format_func=lambda c: c.value)
        mat_name = r2.text_input("품목")
        quantity = r3.number_input("수량", min_value=0.0, step=1.0)
        unit = r4.text_input("단위", value="kg")
        supplier = st.text_input("공급처")
        notes = st.text_input("비고")
        if st.form_submit_button("자재 등록"):
            if not mat_name.strip():
                st.warning("품목명을 입력해주세요.")
            else:
                with ErrorContext("자재 등록", show_success=True):
                    sync.add_material({
                        "courseId": course.id,
                        "category": category,
                        "name": mat_name.strip(),
                        "quantity": quantity,
                        "unit": unit.strip(),
                        "lastUpdated": date.today().isoformat(),
                        "supplier": supplier.strip(),
                        "notes": notes.strip(),
                    })
