import streamlit as st

# === COLOR PALETTE ===
PRIMARY_COLOR    = "#0ea5e9"
SECONDARY_COLOR  = "#6366f1"
SUCCESS_COLOR    = "#10b981"
WARNING_COLOR    = "#f59e0b"
DANGER_COLOR     = "#ef4444"
TEXT_COLOR       = "#1f2937"
SUBTLE_TEXT      = "#4b5563"
GRID_COLOR       = "#e5e7eb"
BACKGROUND_COLOR = "#f8fafc"
CARD_BG_LIGHT    = "#ffffff"

# Sync badge label -> color
BADGE_COLORS = {
    "Synced": SUCCESS_COLOR,
    "Sync pending": WARNING_COLOR,
    "Offline": DANGER_COLOR,
}


def apply_css():
    """Global styles for the tracker pages."""
    st.markdown(f"""
        <style>
        .main {{
            background-color: {BACKGROUND_COLOR};
            color: {TEXT_COLOR};
            font-family: 'Segoe UI','Inter',sans-serif;
        }}
        .main-header {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            padding: 1.6rem; border-radius: 16px; margin-bottom: 1.5rem;
        }}
        .metric-card {{
            background: {CARD_BG_LIGHT}; padding: 18px; border-radius: 10px;
            box-shadow: 0 2px 8px rgba(0,0,0,0.08); margin: 8px 0; border: 1px solid {GRID_COLOR};
        }}
        .sync-badge {{
            display: inline-flex; align-items: center; gap: 6px;
            padding: 4px 12px; border-radius: 999px; font-size: .85rem; font-weight: 600;
            color: white;
        }}
        .stButton button {{
            background: linear-gradient(135deg, {PRIMARY_COLOR} 0%, {SECONDARY_COLOR} 100%);
            color: white; border: none; border-radius: 10px; font-weight: 600;
        }}
        </style>
    """, unsafe_allow_html=True)
