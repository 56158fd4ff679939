"""AlmanacClock: Streamlit app for the three-ring sky clock."""

import datetime
import html
import json

import streamlit as st
import streamlit.components.v1 as components
from dotenv import load_dotenv
from streamlit_js_eval import streamlit_js_eval

load_dotenv()

from almanacclock.angles import format_clock_time  # noqa: E402
from almanacclock.compute import compute_clock_state  # noqa: E402
from almanacclock.config import load_settings  # noqa: E402
from almanacclock.errors import InvalidInputError  # noqa: E402
from almanacclock.events import event_from_dict  # noqa: E402
from almanacclock.i18n import t  # noqa: E402
from almanacclock.location import (  # noqa: E402
    GeocodingError,
    geocode_address,
    observer_context,
)
from almanacclock.logging_setup import setup_logging  # noqa: E402
from almanacclock.models import GeoLocation  # noqa: E402
from almanacclock.renderers.svg_clock import render_svg_html  # noqa: E402
from almanacclock.solar import format_day_length  # noqa: E402

setup_logging(load_settings().log_level)

# --- Language detection (browser-first via streamlit-js-eval) ---
# navigator.language is read once and cached in session_state.
# On the first run the JS call returns None; the rerun triggered by
# streamlit_js_eval fills it in, at which point _lang is set correctly.
if "lang" not in st.session_state:
    _browser_lang: str | None = streamlit_js_eval(
        js_expressions="navigator.language", key="_lang_detect", height=0
    )
    if _browser_lang is not None:
        st.session_state.lang = "ko" if _browser_lang.lower().startswith("ko") else "en"

_lang: str = st.session_state.get("lang", "en")

st.set_page_config(
    page_title=t("page_title", _lang),
    page_icon="✦",
    layout="wide",
)

# --- Session state initialization ---

if "clock_state" not in st.session_state:
    st.session_state.clock_state = None
if "error_msg" not in st.session_state:
    st.session_state.error_msg = None

st.markdown(
    """
    <style>
    iframe[src*="streamlit_js_eval"] { display: none !important; }
    html, body, [data-testid="stAppViewContainer"], [data-testid="stMain"] {
        background-color: #0a1628 !important;
    }
    [data-testid="stHeader"], [data-testid="stToolbar"] {
        display: none !important;
    }
    [data-testid="stSidebar"] {
        background-color: #0f1d33 !important;
    }
    label, [data-testid="stWidgetLabel"] p {
        color: #aaaaaa !important;
        font-size: 0.85rem !important;
    }
    .panel {
        color: #e2e8f0;
        border-top: 1px solid rgba(201,169,110,0.18);
        padding: 0.6rem 0;
        font-size: 0.9rem;
        line-height: 1.6;
    }
    .panel h4 { color: #c9a96e; margin: 0 0 0.3rem; }
    .error-box {
        border: 1px solid #ff6b6b;
        color: #ff9999;
        border-radius: 6px;
        padding: 0.6rem 1rem;
    }
    </style>
    """,
    unsafe_allow_html=True,
)

# --- Input panel ---
with st.sidebar:
    use_coords = st.toggle(t("label_use_coords", _lang), value=True)
    if use_coords:
        lat = st.number_input(t("label_lat", _lang), min_value=-90.0, max_value=90.0, value=45.0)
        lng = st.number_input(t("label_lng", _lang), min_value=-180.0, max_value=180.0, value=-93.0)
        address = ""
    else:
        address = st.text_input(t("label_place", _lang), value="Minneapolis, MN")
    _now = datetime.datetime.now()
    date_val = st.date_input(t("label_date", _lang), value=_now.date())
    time_val = st.time_input(t("label_time", _lang), value=_now.time().replace(second=0, microsecond=0))
    events_file = st.file_uploader(t("label_events", _lang), type=["json"])
    submitted = st.button(t("btn_show_clock", _lang), key="submit_btn", use_container_width=True)

# --- Form submission handler ---
if submitted:
    when_str = f"{date_val.strftime('%Y-%m-%d')} {time_val.strftime('%H:%M')}"
    st.session_state.error_msg = None
    with st.spinner(t("loading_compute", _lang)):
        try:
            if use_coords:
                location = GeoLocation(lat=lat, lng=lng)
            else:
                location = geocode_address(address)
            events = ()
            if events_file is not None:
                events = tuple(event_from_dict(r) for r in json.load(events_file))
            context = observer_context(location, when_str)
            st.session_state.clock_state = compute_clock_state(context, events)
        except GeocodingError as e:
            st.session_state.error_msg = t("error_address", _lang).format(error=html.escape(str(e)))
        except (InvalidInputError, json.JSONDecodeError) as e:
            st.session_state.error_msg = t("error_input", _lang).format(error=html.escape(str(e)))

# --- Error message ---
if st.session_state.error_msg:
    st.markdown(f"<div class='error-box'>{st.session_state.error_msg}</div>", unsafe_allow_html=True)

state = st.session_state.clock_state
if state is None:
    st.markdown(
        f"<div style='height:60vh; display:flex; align-items:center; justify-content:center;"
        f" color:#334466; font-size:1.2rem;'>{t('placeholder', _lang)}</div>",
        unsafe_allow_html=True,
    )
    st.stop()

chart_col, info_col = st.columns([3, 2])
with chart_col:
    components.html(render_svg_html(state, lang=_lang), height=760, scrolling=False)

with info_col:
    lng_ = state.context.location.lng
    sun = state.solar.events
    sun_rows = [
        f"{label}: {format_clock_time(dt, lng_)}"
        for label, dt in (
            ("Dawn", sun.dawn),
            ("Sunrise", sun.sunrise),
            ("Solar noon", sun.solar_noon),
            ("Sunset", sun.sunset),
            ("Dusk", sun.dusk),
        )
        if dt is not None
    ]
    st.markdown(
        f"<div class='panel'><h4>{t('sun_times', _lang)} · {state.solar.period}</h4>"
        f"{'<br>'.join(sun_rows)}<br>"
        f"{t('day_length', _lang)}: {format_day_length(state.solar.day_length)}</div>",
        unsafe_allow_html=True,
    )

    moon = state.lunar
    moon_rows = [f"{moon.phase_name} · {moon.illumination_percent}%"]
    if moon.moon.moonrise is not None:
        moon_rows.append(f"Moonrise: {format_clock_time(moon.moon.moonrise, lng_)}")
    if moon.moon.moonset is not None:
        moon_rows.append(f"Moonset: {format_clock_time(moon.moon.moonset, lng_)}")
    moon_rows.append(
        f"<b>{html.escape(moon.traditional_moon.name)}</b>: {html.escape(moon.traditional_moon.description)}"
    )
    if moon.is_blue_moon_month:
        moon_rows.append(t("blue_moon", _lang))
    st.markdown(
        f"<div class='panel'><h4>{t('moon', _lang)}</h4>{'<br>'.join(moon_rows)}</div>",
        unsafe_allow_html=True,
    )

    annual = state.annual
    eclipses = (
        "<br>".join(html.escape(e.name) for e in annual.eclipses) or t("none", _lang)
    )
    st.markdown(
        f"<div class='panel'><h4>{t('year', _lang)} · {annual.sign.name}</h4>"
        f"{t('day_of_year', _lang).format(day=annual.day_of_year, total=annual.days_in_year)}<br>"
        f"<i>{t('eclipses', _lang)}</i><br>{eclipses}</div>",
        unsafe_allow_html=True,
    )
