import plotly.graph_objects as go
import streamlit as st
from .theme import PRIMARY_COLOR, TEXT_COLOR, SUBTLE_TEXT, GRID_COLOR, CARD_BG_LIGHT


def header(title: str, subtitle: str, icon: str = "💧"):
    st.markdown(f"""
        <div class="main-header">
            <div style="display:flex;gap:1.2rem;align-items:center;">
                <div style="font-size:2.6rem;">{icon}</div>
                <div>
                    <h1 style="margin:0; font-size:2.1rem; color:white;">{title}</h1>
                    <p style="margin:.35rem 0 0 0;color:rgba(255,255,255,.85);font-size:1rem">{subtitle}</p>
                </div>
            </div>
        </div>
    """, unsafe_allow_html=True)


def add_grid(fig):
    """Shared axis/grid styling for plotly figures."""
    fig.update_xaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     showline=True, linecolor=GRID_COLOR,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_yaxes(showgrid=True, gridcolor=GRID_COLOR, zeroline=False,
                     showline=True, linecolor=GRID_COLOR,
                     tickfont=dict(color=SUBTLE_TEXT), title_font=dict(color=TEXT_COLOR))
    fig.update_layout(plot_bgcolor=CARD_BG_LIGHT, paper_bgcolor=CARD_BG_LIGHT,
                      font=dict(family="Segoe UI, sans-serif", size=12, color=TEXT_COLOR))
    return fig


def daily_totals_chart(totals: dict, title: str, unit: str = "ml", goal: float = None) -> go.Figure:
    """Bar chart of per-day totals with an optional goal line."""
    fig = go.Figure(go.Bar(
        x=list(totals.keys()),
        y=list(totals.values()),
        marker_color=PRIMARY_COLOR,
        name=title,
    ))
    if goal:
        fig.add_hline(y=goal, line_dash="dash", line_color=SUBTLE_TEXT,
                      annotation_text=f"Goal {goal:g} {unit}")
    fig.update_layout(title=title, yaxis_title=unit, xaxis_title="Date", height=360)
    return add_grid(fig)
