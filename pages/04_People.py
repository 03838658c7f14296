# =============================================================================
# pages/04_People.py - Contacts, career history and the relationship map
# =============================================================================
from __future__ import annotations
from datetime import date

import streamlit as st

from greenmaster_core.errors.handlers import ErrorContext
from greenmaster_core.models import AffinityLevel
from greenmaster_core.relationships import (
    ConnectionFilter,
    ConnectionStatus,
    RoleCategory,
    build_connections,
    layout_hubs,
    tenure,
)
from greenmaster_core.store import FORM_PERSON
from greenmaster_core.ui.app_state import render_sidebar, require_login
from greenmaster_core.ui.relationship_chart import relationship_figure
from greenmaster_core.ui.theme import apply_css, page_header

st.set_page_config(page_title="People - GreenMaster", page_icon="👥", layout="wide")
apply_css()

ctx = require_login()
render_sidebar(ctx)
sync = ctx.sync

page_header("인물 관리", "골프장 관계자와 이력, 관계도")

if not ctx.capabilities.can_view_full_data:
    st.info("인물 정보는 중급자 이상 권한에서 조회할 수 있습니다.")
    st.stop()

AFFINITY_LABELS = {
    AffinityLevel.HOSTILE: "적대 (-2)",
    AffinityLevel.UNFRIENDLY: "비우호 (-1)",
    AffinityLevel.NEUTRAL: "중립 (0)",
    AffinityLevel.FRIENDLY: "우호 (+1)",
    AffinityLevel.ALLY: "핵심 우군 (+2)",
}
CATEGORY_LABELS = {
    RoleCategory.COURSE: "코스관리",
    RoleCategory.MANAGEMENT: "경영진",
    RoleCategory.OPERATIONS: "운영",
    RoleCategory.OTHER: "기타",
}
STATUS_LABELS = {ConnectionStatus.CURRENT: "현직", ConnectionStatus.PAST: "전직"}

courses = sync.courses
course_names = {c.id: c.name for c in courses}
people = sync.people

list_tab, add_tab, map_tab = st.tabs(["인물 목록", "인물 등록", "관계도"])

# =============================================================================
# LIST / EDIT
# =============================================================================
with list_tab:
    search = st.text_input("이름 또는 직책 검색")
    shown = [p for p in people if not search or search in p.name or search in p.current_role]
    if not shown:
        st.caption("조건에 맞는 인물이 없습니다.")

    for person in shown:
        where = course_names.get(person.current_course_id, "소속 미상")
        with st.expander(f"{person.name} · {person.current_role} · {where} · {AFFINITY_LABELS[person.affinity]}"):
            st.markdown(f"📞 {person.phone or '-'}")
            if person.current_role_start_date:
                st.caption(f"현 직책 재직 {tenure(person.current_role_start_date)}")
            st.write(person.notes)
            if person.careers:
                st.markdown("**경력**")
                for career in person.careers:
                    period = f"{career.start_date} ~ {career.end_date or '현재'}"
                    st.markdown(f"- {career.course_name} / {career.role} ({period}, {tenure(career.start_date, career.end_date)})")

            with st.form(f"edit_person_{person.id}"):
                levels = list(AffinityLevel)
                e1, e2 = st.columns(2)
                new_role = e1.text_input("직책", value=person.current_role)
                new_affinity = e2.selectbox(
                    "친밀도", levels, index=levels.index(person.affinity),
                    format_func=lambda lv: AFFINITY_LABELS[lv],
                )
                new_phone = st.text_input("연락처", value=person.phone)
                new_notes = st.text_area("메모", value=person.notes)
                b1, b2 = st.columns(2)
                save = b1.form_submit_button("저장", use_container_width=True)
                remove = b2.form_submit_button("삭제", use_container_width=True, disabled=not ctx.capabilities.is_admin)
            if save:
                with ErrorContext("인물 수정", show_success=True):
                    sync.update_person(person.id, {
                        "currentRole": new_role.strip(),
                        "affinity": new_affinity,
                        "phone": new_phone.strip(),
                        "notes": new_notes,
                    })
            if remove:
                with ErrorContext("인물 삭제"):
                    sync.delete_person(person.id)
                    st.rerun()

# =============================================================================
# ADD (merges into an existing person with the same name)
# =============================================================================
with add_tab:
    draft = ctx.drafts.load(FORM_PERSON) or {}
    course_ids = [""] + list(course_names)
    levels = list(AffinityLevel)
    with st.form("person_form"):
        p1, p2 = st.columns(2)
        name = p1.text_input("이름", value=draft.get("name", ""))
        phone = p2.text_input("연락처", value=draft.get("phone", ""))
        p3, p4, p5 = st.columns(3)
        role = p3.text_input("현 직책", value=draft.get("currentRole", ""))
        course_id = p4.selectbox(
            "현 소속 골프장", course_ids,
            index=course_ids.index(draft["currentCourseId"]) if draft.get("currentCourseId") in course_ids else 0,
            format_func=lambda cid: course_names.get(cid, "-"),
        )
        start = p5.text_input("직책 시작일 (YYYY-MM)", value=draft.get("currentRoleStartDate", ""))
        affinity = st.select_slider(
            "친밀도", options=levels, value=AffinityLevel(draft.get("affinity", 0)),
            format_func=lambda lv: AFFINITY_LABELS[lv],
        )
        notes = st.text_area("메모", value=draft.get("notes", ""))
        s1, s2 = st.columns(2)
        submit = s1.form_submit_button("등록", use_container_width=True)
        keep = s2.form_submit_button("임시 저장", use_container_width=True)

    values = {
        "name": name.strip(),
        "phone": phone.strip(),
        "currentRole": role.strip(),
        "currentCourseId": course_id or None,
        "currentRoleStartDate": start.strip() or None,
        "affinity": int(affinity),
        "notes": notes,
    }
    if keep:
        ctx.drafts.save(FORM_PERSON, {k: v for k, v in values.items() if v is not None})
        st.toast("임시 저장되었습니다.")
    if submit:
        if not values["name"]:
            st.warning("이름을 입력해주세요.")
        else:
            careers = []
            if course_id:
                careers.append({
                    "courseId": course_id,
                    "courseName": course_names[course_id],
                    "role": values["currentRole"],
                    "startDate": values["currentRoleStartDate"] or date.today().isoformat()[:7],
                })
            with ErrorContext("인물 등록", show_success=True) as op:
                sync.add_person({**values, "careers": careers})
            if not op.failed:
                ctx.drafts.clear(FORM_PERSON)

# =============================================================================
# RELATIONSHIP MAP
# =============================================================================
with map_tab:
    f1, f2, f3, f4 = st.columns(4)
    affinity_choice = f1.selectbox("친밀도", [None] + list(AffinityLevel),
                                   format_func=lambda lv: "전체" if lv is None else AFFINITY_LABELS[lv])
    category_choice = f2.selectbox("직군", [None] + list(RoleCategory),
                                   format_func=lambda c: "전체" if c is None else CATEGORY_LABELS[c])
    status_choice = f3.selectbox("재직", [None] + list(ConnectionStatus),
                                 format_func=lambda s: "전체" if s is None else STATUS_LABELS[s])
    term = f4.text_input("인물 검색")

    flt = ConnectionFilter(affinity=affinity_choice, category=category_choice, status=status_choice, search=term)
    hubs = layout_hubs(courses, build_connections(people, flt))
    if not hubs:
        st.caption("표시할 연결이 없습니다.")
    else:
        st.plotly_chart(relationship_figure(hubs), use_container_width=True)
        for hub in hubs:
            st.markdown(f"**{hub.course.name}** · 현직 {hub.current_count}명 · 전직 {hub.past_count}명")
