from __future__ import annotations
import streamlit as st

from greenmaster_core.errors.handlers import ErrorContext
from greenmaster_core.models import Department
from greenmaster_core.ui.app_state import get_app_context, render_sidebar
from greenmaster_core.ui.theme import apply_css, page_header

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="GreenMaster - Login",
    page_icon="⛳",
    layout="centered",
)
apply_css()

ctx = get_app_context()
render_sidebar(ctx)

page_header("GreenMaster", "골프장 영업·현장 인텔리전스 플랫폼")

if ctx.mock_mode:
    st.info("원격 데이터베이스가 설정되지 않아 로컬 저장소(Mock mode)로 동작 중입니다.")

# ============================================================================
# AUTHENTICATED
# ============================================================================
if ctx.session.is_authenticated:
    user = ctx.user
    st.success(f"{user.name}님, 환영합니다.")
    st.write(f"부서: {user.department.value} · 권한: {user.role.value}")

    c1, c2 = st.columns(2)
    with c1:
        st.page_link("pages/01_Dashboard.py", label="대시보드", icon="📊")
        st.page_link("pages/02_Write_Log.py", label="업무 일지 작성", icon="📝")
    with c2:
        st.page_link("pages/03_Courses.py", label="골프장", icon="⛳")
        st.page_link("pages/04_People.py", label="인물 / 관계도", icon="👥")
    if ctx.capabilities.is_admin:
        st.page_link("pages/05_Admin.py", label="관리자", icon="🛡️")
    st.stop()

# ============================================================================
# LOGIN / REGISTER
# ============================================================================
login_tab, register_tab = st.tabs(["로그인", "회원가입"])

with login_tab:
    with st.form("login_form"):
        email = st.text_input("이메일", placeholder="name@company.com")
        submitted = st.form_submit_button("로그인", use_container_width=True)
    if submitted:
        with ErrorContext("로그인") as op:
            ctx.session.login(email)
        if not op.failed:
            st.rerun()

with register_tab:
    with st.form("register_form"):
        name = st.text_input("이름")
        reg_email = st.text_input("이메일 ", placeholder="name@company.com")
        department = st.selectbox("부서", list(Department), format_func=lambda d: d.value)
        registered = st.form_submit_button("가입 신청", use_container_width=True)
    if registered:
        if not name.strip() or not reg_email.strip():
            st.warning("이름과 이메일을 입력해주세요.")
        else:
            with ErrorContext("회원가입") as op:
                ctx.session.register(name, reg_email, department)
            if not op.failed:
                st.success("가입 신청이 완료되었습니다. 관리자 승인 후 로그인할 수 있습니다.")
