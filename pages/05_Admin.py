# =============================================================================
# pages/05_Admin.py - Account approval, roles, the to-do board and the system log
# =============================================================================
from __future__ import annotations
import pandas as pd
import streamlit as st

from greenmaster_core.errors.handlers import ErrorContext
from greenmaster_core.models import Department, UserRole, UserStatus
from greenmaster_core.reporting import audit_trail_table
from greenmaster_core.ui.app_state import render_sidebar, require_login
from greenmaster_core.ui.theme import apply_css, page_header

st.set_page_config(page_title="Admin - GreenMaster", page_icon="🛡️", layout="wide")
apply_css()

ctx = require_login()
render_sidebar(ctx)
sync = ctx.sync

page_header("관리자", "계정 승인, 권한 관리, 할 일, 시스템 로그")

if not ctx.capabilities.is_admin:
    st.error("관리자 권한이 필요합니다.")
    st.stop()

users = sync.users
pending = [u for u in users if u.status == UserStatus.PENDING]

todos = sync.todos
open_todos = sum(1 for item in todos if not item.is_completed)

approval_tab, users_tab, todo_tab, audit_tab = st.tabs(
    [f"승인 대기 ({len(pending)})", "사용자", f"할 일 ({open_todos})", "시스템 로그"]
)

with approval_tab:
    if not pending:
        st.caption("승인 대기 중인 계정이 없습니다.")
    for user in pending:
        c1, c2, c3 = st.columns([4, 1, 1])
        c1.markdown(f"**{user.name}** · {user.email} · {user.department.value}")
        if c2.button("승인", key=f"approve_{user.id}", use_container_width=True):
            with ErrorContext("계정 승인"):
                sync.update_user_status(user.id, UserStatus.APPROVED)
                st.rerun()
        if c3.button("거절", key=f"reject_{user.id}", use_container_width=True):
            with ErrorContext("계정 거절"):
                sync.update_user_status(user.id, UserStatus.REJECTED)
                st.rerun()

with users_tab:
    roles = list(UserRole)
    departments = list(Department)
    statuses = list(UserStatus)
    for user in sorted(users, key=lambda u: u.name):
        with st.expander(f"{user.name} · {user.role.value} · {user.status.value}"):
            st.caption(user.email)
            c1, c2, c3 = st.columns(3)
            role = c1.selectbox("권한", roles, index=roles.index(user.role),
                                format_func=lambda r: r.value, key=f"role_{user.id}")
            dept = c2.selectbox("부서", departments, index=departments.index(user.department),
                                format_func=lambda d: d.value, key=f"dept_{user.id}")
            status = c3.selectbox("상태", statuses, index=statuses.index(user.status),
                                  format_func=lambda s: s.value, key=f"status_{user.id}")
            if st.button("변경 저장", key=f"save_user_{user.id}"):
                with ErrorContext("사용자 정보 변경", show_success=True):
                    if role != user.role:
                        sync.update_user_role(user.id, role)
                    if dept != user.department:
                        sync.update_user_department(user.id, dept)
                    if status != user.status:
                        sync.update_user_status(user.id, status)

with todo_tab:
    with st.form("todo_add", clear_on_submit=True):
        c1, c2 = st.columns([5, 1])
        text = c1.text_input("새 할 일", placeholder="할 일을 입력하세요", label_visibility="collapsed")
        if c2.form_submit_button("추가", use_container_width=True) and text.strip():
            with ErrorContext("할 일 추가"):
                sync.add_todo(text, ctx.user.name)
                st.rerun()

    if not todos:
        st.caption("등록된 할 일이 없습니다.")
    for item in todos:
        c1, c2, c3 = st.columns([6, 1, 1])
        done = c1.checkbox(
            f"~~{item.text}~~" if item.is_completed else item.text,
            value=item.is_completed,
            key=f"todo_done_{item.id}",
            help=f"{item.author} · {pd.to_datetime(item.created_at, unit='ms'):%Y-%m-%d %H:%M}",
        )
        if done != item.is_completed:
            with ErrorContext("할 일 상태 변경"):
                sync.toggle_todo(item.id)
                st.rerun()
        with c2.popover("수정", use_container_width=True):
            new_text = st.text_input("내용", value=item.text, key=f"todo_text_{item.id}")
            if st.button("저장", key=f"todo_save_{item.id}") and new_text.strip() and new_text != item.text:
                with ErrorContext("할 일 수정"):
                    sync.update_todo(item.id, {"text": new_text.strip()})
                    st.rerun()
        if c3.button("삭제", key=f"todo_del_{item.id}", use_container_width=True):
            with ErrorContext("할 일 삭제"):
                sync.delete_todo(item.id)
                st.rerun()

with audit_tab:
    trail = audit_trail_table(sync.audit_events)
    if trail.empty:
        st.caption("기록된 시스템 로그가 없습니다.")
    else:
        actions = st.multiselect("작업 필터", sorted(trail["action"].unique()))
        if actions:
            trail = trail[trail["action"].isin(actions)]
        st.dataframe(trail, use_container_width=True, hide_index=True)
