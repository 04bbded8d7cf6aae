import streamlit as st

# === COLOR PALETTE (honeybee amber) ===
PRIMARY_COLOR    = "#FBBF24"
SECONDARY_COLOR  = "#F59E0B"
ACCENT_DARK      = "#78350F"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1e293b"
SUBTLE_TEXT      = "#64748b"
GRID_COLOR       = "#fde68a"
BACKGROUND_COLOR = "#fffbeb"
CARD_BG_LIGHT    = "#ffffff"

STATUS_COLORS = {
    "In Progress": WARNING_COLOR,
    "Completed": SUCCESS_COLOR,
    "Sent": "#3b82f6",
}


def apply_css():
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Inter','Segoe UI',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 1.6rem; border-radius: 20px; margin-bottom: 1.5rem; color: {ACCENT_DARK};
            box-shadow: 0 8px 24px rgba(251,191,36,.3);
        }}
        .main-header h1 {{ color: {ACCENT_DARK}; margin: 0; font-weight: 900; letter-spacing: 1px; }}
        .child-card {{
            background: {CARD_BG_LIGHT}; padding: 1rem 1.2rem; border-radius: 16px; margin: .5rem 0;
            border: 1px solid {GRID_COLOR}; box-shadow: 0 2px 6px rgba(0,0,0,0.05);
        }}
        .status-pill {{
            display: inline-block; padding: 2px 10px; border-radius: 999px;
            font-size: 11px; font-weight: 700; color: white; text-transform: uppercase;
        }}
        .stButton button {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            color: {ACCENT_DARK}; border: none; border-radius: 12px; padding: .45rem 1.1rem; font-weight: 700;
        }}
        .stButton button:disabled {{ background: #e2e8f0; color: #94a3b8; cursor: not-allowed; }}
        h1,h2,h3,h4 {{ color: {TEXT_COLOR}; font-weight: 700; }}
        h3 {{ color: {ACCENT_DARK}; }}
        [data-testid="stSidebar"] {{ background-color: {CARD_BG_LIGHT}; border-right: 1px solid {GRID_COLOR}; }}
        </style>
    """, unsafe_allow_html=True)


def page_header(title: str, subtitle: str = "") -> None:
    sub = f"<p style='margin:.3rem 0 0 0;font-weight:600;opacity:.8'>{subtitle}</p>" if subtitle else ""
    st.markdown(f"<div class='main-header'><h1>{title}</h1>{sub}</div>", unsafe_allow_html=True)


def status_pill(status: str) -> str:
    color = STATUS_COLORS.get(status, SUBTLE_TEXT)
    return f"<span class='status-pill' style='background:{color}'>{status}</span>"
