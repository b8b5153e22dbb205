from pathlib import Path

import streamlit as st

from daycal.config import get_settings
from daycal.data_loader import load_events
from daycal.errors import CalendarError
from daycal.log import configure_logging, get_logger
from daycal.render import DAY_CSS, RenderConfig, build_day_view, render_day_html

settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger("daycal.app")

# --- PAGE ---
st.set_page_config(page_title="Day Calendar", page_icon="📅", layout="centered")

st.markdown("""
<style>
#MainMenu {visibility: hidden;}
footer {visibility: hidden;}
.main .block-container { padding: 0.5rem 0.6rem 3rem 0.6rem; }
h1 { text-align:center; font-size:1.35rem; }
</style>
""", unsafe_allow_html=True)
st.markdown(DAY_CSS, unsafe_allow_html=True)


@st.cache_data(ttl=settings.cache_ttl_seconds)
def cached_events(path: str, mtime_ns: int) -> list[dict]:
    # mtime_ns only keys the cache
    return load_events(Path(path))


st.title("Day Calendar")

# --- VIEW SETTINGS ---
controls = st.columns(3)
origin_hour = controls[0].number_input("First hour", min_value=0, max_value=23, value=settings.origin_hour)
hours_in_day = controls[1].number_input("Hours shown", min_value=1, max_value=24, value=settings.hours_in_day)
pixels_per_hour = controls[2].number_input(
    "Pixels per hour", min_value=20.0, max_value=240.0, value=float(settings.pixels_per_hour), step=5.0
)
compact = st.checkbox("Trim to events", value=False)

try:
    events_file = settings.events_file
    mtime_ns = events_file.stat().st_mtime_ns if events_file.exists() else 0
    records = cached_events(str(events_file), mtime_ns)

    config = RenderConfig(
        origin_hour=int(origin_hour),
        hours_in_day=int(hours_in_day),
        pixels_per_hour=float(pixels_per_hour),
        min_event_height_px=18.0,
        compact=compact,
    )
    view = build_day_view(records, config)

    st.caption(f"{len(view.events)} events from {events_file.name}")
    if view.events:
        st.markdown(render_day_html(view), unsafe_allow_html=True)
    else:
        st.info("No events for this day.")
except CalendarError as exc:
    logger.warning("Cannot render calendar: %s", exc)
    st.error(str(exc))
