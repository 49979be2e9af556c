from __future__ import annotations
import streamlit as st

from lifetrack_core.config import Repositories, Settings, build_repositories, load_settings
from lifetrack_core.domain import ContainerType
from lifetrack_core.errors import ConfigurationError
from lifetrack_core.logging import setup_logging
from lifetrack_core.offline import summarize_sync_status
from lifetrack_core.ui.components import daily_totals_chart, header
from lifetrack_core.ui.status import render_connectivity_details, render_sync_badge
from lifetrack_core.ui.theme import apply_css
from lifetrack_core.utils import get_current_date

DAILY_GOAL_ML = 2000

# ============================================================================
# PAGE CONFIGURATION
# ============================================================================
st.set_page_config(
    page_title="LifeTrack - Water Intake",
    page_icon="💧",
    layout="wide",
)


def _load_settings() -> Settings:
    """Streamlit secrets take precedence over .env / environment."""
    try:
        secrets = st.secrets.to_dict()
    except FileNotFoundError:
        secrets = {}
    if "supabase" in secrets or "lifetrack" in secrets:
        return Settings.from_mapping(secrets)
    return load_settings()


@st.cache_resource
def get_repositories() -> Repositories:
    settings = _load_settings()
    setup_logging(settings.log_level, log_to_file=settings.log_to_file)
    repos = build_repositories(settings)
    repos.policy.start_monitoring()
    repos.engine.start()
    return repos


apply_css()

try:
    repos = get_repositories()
except ConfigurationError as e:
    st.error(f"Configuration problem: {e.message}")
    st.stop()

# ============================================================================
# SIDEBAR - CONNECTIVITY
# ============================================================================
with st.sidebar:
    st.subheader("Sync")
    offline = st.toggle("Offline mode", value=repos.policy.manual_offline)
    if offline != repos.policy.manual_offline:
        repos.policy.set_manual_offline(offline)

    if st.button("Sync now", disabled=not repos.policy.allows_remote):
        results = repos.engine.sync_all()
        st.success(f"Synced {sum(results.values())} pending changes")

    render_connectivity_details(repos.policy.get_status_display())

# ============================================================================
# MAIN - WATER TRACKER
# ============================================================================
header("Water Intake", "Logged on this device first, synced when you are online")

user_id = st.text_input("User", value="demo-user")
today = get_current_date()

entries = repos.water.get_water_intakes_by_date(user_id, today)
render_sync_badge(summarize_sync_status(
    entries,
    pending_count=repos.water.pending_count,
    allows_remote=repos.policy.allows_remote,
))

col1, col2 = st.columns([1, 2])

with col1:
    st.markdown("### Log a drink")
    container = st.selectbox("Container", ContainerType.ALL)
    amount = st.number_input(
        "Amount (ml)",
        min_value=0,
        value=ContainerType.default_size(container),
        step=50,
    )
    if st.button("Add"):
        result = repos.water.add_water_intake(user_id, today, container, amount=int(amount))
        if result:
            st.toast("Saved" if result.metadata["synced"] else "Saved offline, will sync later")
            st.rerun()
        else:
            st.error(result.error)

    total_today = sum(entry.amount for entry in entries)
    st.metric("Today", f"{total_today} ml", f"{total_today - DAILY_GOAL_ML} ml vs goal")

with col2:
    totals = repos.water.get_weekly_water_intake_totals(user_id)
    if totals:
        st.plotly_chart(
            daily_totals_chart(totals, "Last 7 days", goal=DAILY_GOAL_ML),
            use_container_width=True,
        )
    else:
        st.info("No water logged in the last week")

st.markdown("### Today's entries")
for entry in entries:
    cols = st.columns([3, 2, 1])
    cols[0].write(f"{entry.container_type} · {entry.amount} ml")
    cols[1].caption("on this device only" if entry.is_local else "synced")
    if cols[2].button("Delete", key=f"delete-{entry.id}"):
        repos.water.delete(entry.id)
        st.rerun()
