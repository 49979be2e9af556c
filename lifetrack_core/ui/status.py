"""
Sync status badge and offline controls for the sidebar.
"""
from typing import Dict

import streamlit as st

from lifetrack_core.offline.status import SyncStatusSummary
from .theme import BADGE_COLORS, SUBTLE_TEXT


def render_sync_badge(summary: SyncStatusSummary):
    """Colored pill: Synced / Sync pending / Offline."""
    color = BADGE_COLORS.get(summary.label, SUBTLE_TEXT)
    st.markdown(
        f'<span class="sync-badge" style="background:{color};">● {summary.label}</span>',
        unsafe_allow_html=True,
    )
    if summary.local_only_count:
        st.caption(f"{summary.local_only_count} entries saved on this device only")
    if summary.pending_count:
        st.caption(f"{summary.pending_count} changes waiting to sync")


def render_connectivity_details(status: Dict):
    """Connectivity details from ConnectivityPolicy.get_status_display()."""
    with st.expander("Connection details"):
        st.write(f"**Status:** {status['status']}")
        st.write(f"**Last check:** {status['last_check'] or 'never'}")
        st.write(f"**Last online:** {status['last_online'] or 'never'}")
        if status["failures"]:
            st.write(f"**Failed checks:** {status['failures']}")
