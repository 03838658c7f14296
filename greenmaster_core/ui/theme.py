import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#0d9488"
SECONDARY_COLOR  = "#065f46"
SUCCESS_COLOR    = "#16a34a"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#dc2626"
TEXT_COLOR       = "#1e293b"
SUBTLE_TEXT      = "#64748b"
GRID_COLOR       = "#e2e8f0"
BACKGROUND_COLOR = "#f8fafc"
CARD_BG_LIGHT    = "#ffffff"


def apply_css():
    """Shared page styling; call right after st.set_page_config()."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Pretendard','Noto Sans KR','Segoe UI',sans-serif;
        }}
        .gm-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            color: white; padding: 1.4rem 1.8rem; border-radius: 14px; margin-bottom: 1.5rem;
            box-shadow: 0 6px 24px rgba(13,148,136,.25);
        }}
        .gm-header h1 {{ color: white; margin: 0; font-size: 1.6rem; }}
        .gm-header p {{ color: rgba(255,255,255,.85); margin: .3rem 0 0 0; }}
        .gm-card {{
            background: {CARD_BG_LIGHT}; padding: 1rem 1.2rem; border-radius: 12px; margin: .5rem 0;
            border: 1px solid {GRID_COLOR}; box-shadow: 0 2px 6px rgba(0,0,0,0.05);
        }}
        .gm-card .gm-meta {{ color: {SUBTLE_TEXT}; font-size: .85rem; }}
        .gm-tag {{
            display: inline-block; padding: 2px 8px; margin-right: 4px; border-radius: 999px;
            background: #ccfbf1; color: {SECONDARY_COLOR}; font-size: .75rem; font-weight: 600;
        }}
        .stButton button {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            color: white; border: none; border-radius: 10px; font-weight: 600;
        }}
        .stButton button:disabled {{ background: #cbd5e1; color: #64748b; }}
        </style>
    """, unsafe_allow_html=True)


def page_header(title: str, subtitle: str = ""):
    sub = f"<p>{subtitle}</p>" if subtitle else ""
    st.markdown(f"<div class='gm-header'><h1>{title}</h1>{sub}</div>", unsafe_allow_html=True)


def log_card(title: str, meta: str, body: str, tags=None):
    tag_html = "".join(f"<span class='gm-tag'>#{t}</span>" for t in (tags or []))
    st.markdown(
        f"<div class='gm-card'><strong>{title}</strong>"
        f"<div class='gm-meta'>{meta}</div><p>{body}</p>{tag_html}</div>",
        unsafe_allow_html=True,
    )
