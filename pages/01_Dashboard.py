# =============================================================================
# pages/01_Dashboard.py - Recent activity, schedule and AI search
# =============================================================================
from __future__ import annotations
import streamlit as st

from greenmaster_core.errors.handlers import ErrorContext
from greenmaster_core.reporting import issue_logs, logs_table
from greenmaster_core.ui.app_state import render_sidebar, require_login
from greenmaster_core.ui.theme import apply_css, log_card, page_header

st.set_page_config(page_title="Dashboard - GreenMaster", page_icon="📊", layout="wide")
apply_css()

ctx = require_login()
render_sidebar(ctx)
caps = ctx.capabilities
sync = ctx.sync

page_header("대시보드", "최근 현장 활동과 일정")

logs = sync.logs
if not caps.can_view_full_data:
    logs = issue_logs(logs)
    st.info("하급자 권한은 골프장 이슈만 조회할 수 있습니다.")

# =============================================================================
# KPIs
# =============================================================================
k1, k2, k3, k4 = st.columns(4)
k1.metric("업무 일지", len(logs))
k2.metric("골프장", len(sync.courses))
k3.metric("인물", len(sync.people) if caps.can_view_full_data else "-")
k4.metric("일정", len(sync.events))

# =============================================================================
# AI SEARCH
# =============================================================================
if caps.can_use_ai:
    with st.expander("🤖 AI 검색", expanded=False):
        if not ctx.insights.is_available:
            st.caption("AI API Key가 설정되지 않았습니다.")
        query = st.text_input("질문", placeholder="예: 스카이뷰 CC 배수 공사 현황은?")
        if st.button("검색", disabled=not ctx.insights.is_available) and query:
            with ErrorContext("AI 검색"):
                with st.spinner("검색 중..."):
                    answer = ctx.insights.search(query, sync.logs, sync.courses, sync.people)
                st.markdown(answer)

# =============================================================================
# RECENT LOGS / EVENTS
# =============================================================================
left, right = st.columns([2, 1])

with left:
    st.subheader("최근 업무 일지")
    table = logs_table(logs)
    departments = sorted(table["department"].unique()) if not table.empty else []
    selected = st.multiselect("부서 필터", departments)
    if selected:
        table = table[table["department"].isin(selected)]
    by_id = {log.id: log for log in logs}
    for log_id in table["id"].head(20):
        log = by_id[log_id]
        log_card(
            log.title,
            f"{log.date} · {log.course_name} · {log.department.value} · {log.author}",
            log.content,
            log.tags,
        )
        if caps.can_use_ai and ctx.insights.is_available:
            if st.button("AI 분석", key=f"analyze_{log.id}"):
                with ErrorContext("일지 분석"):
                    with st.spinner("분석 중..."):
                        st.markdown(ctx.insights.analyze_log(log))

with right:
    st.subheader("일정")
    for event in sorted(sync.events, key=lambda e: (e.date, e.time or ""), reverse=True):
        st.markdown(
            f"**{event.title}**  \n{event.date} {event.time or ''} · {event.location or '-'}"
            f"  \n<span class='gm-tag'>{event.source.value}</span>",
            unsafe_allow_html=True,
        )
