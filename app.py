# app.py

import streamlit as st
from dotenv import load_dotenv

load_dotenv()

from core.config import settings
from core.errors import ConfigurationError, PlantsDoctorError
from core.forum_manager import ForumManager
from core.gateway import SUPPORTED_LANGUAGES
from core.llm import build_gateway
from core.schedule_manager import ScheduleManager
from core.session_manager import SessionManager
from views.community import CommunityView
from views.detector import DEFAULT_TRANSLATION_LANGUAGE, DetectorView
from views.learn import LearnView
from views.weather import WeatherView

# --- Page & State Configuration ---
st.set_page_config(page_title="Plants Doctor", page_icon="🌿", layout="wide")

NAVIGATION = ["Detector", "AI Chatbot", "Social Forum", "Weather", "Scheduler", "Learn"]


def initialize_session_state():
    """Initializes all necessary session state variables."""
    if "session_manager" not in st.session_state:
        st.session_state.session_manager = SessionManager()
    if "schedule_manager" not in st.session_state:
        st.session_state.schedule_manager = ScheduleManager()
    if "forum_manager" not in st.session_state:
        st.session_state.forum_manager = ForumManager()
    if "active_post_id" not in st.session_state:
        st.session_state.active_post_id = None

    # Views need the gateway, which needs an API key
    if "views" not in st.session_state:
        try:
            gateway = build_gateway(settings)
        except ConfigurationError as e:
            st.session_state.config_error = e.user_message
            return
        st.session_state.views = {
            "detector": DetectorView(gateway),
            "weather": WeatherView(gateway),
            "learn": LearnView(gateway),
            "community": CommunityView(gateway),
        }


# --- Authentication Logic ---
def show_login_page():
    """Displays the sign-in, sign-up and verification forms."""
    sessions: SessionManager = st.session_state.session_manager
    st.title("Plants Doctor 🌿")
    st.caption("Your AI-powered farming companion.")

    if sessions.pending_user:
        show_verification_form(sessions)
        return

    if settings.federated_login_enabled and hasattr(st, "login"):
        if st.button("Continue with Google"):
            st.login("google")
        st.divider()

    login_tab, signup_tab = st.tabs(["Sign In", "Sign Up"])

    with login_tab:
        with st.form("login_form"):
            email = st.text_input("Email Address", key="login_email")
            password = st.text_input("Password", type="password", key="login_password")
            if st.form_submit_button("Sign In with Email"):
                try:
                    sessions.sign_in(email, password)
                    st.rerun()
                except PlantsDoctorError as e:
                    st.error(e.user_message)

    with signup_tab:
        with st.form("signup_form"):
            name = st.text_input("Full Name", key="signup_name")
            email = st.text_input("Email Address", key="signup_email")
            password = st.text_input("Password", type="password", key="signup_password")
            if st.form_submit_button("Sign Up with Email"):
                try:
                    sessions.sign_up(name, email, password)
                    st.rerun()
                except PlantsDoctorError as e:
                    st.error(e.user_message)


def show_verification_form(sessions: SessionManager):
    st.subheader("Verify your email")
    st.write(f"Enter the 6-digit code sent to **{sessions.pending_user.email}**.")
    with st.form("verification_form"):
        code = st.text_input("Verification code", max_chars=6)
        if st.form_submit_button("Verify"):
            error = sessions.verify(code)
            if error:
                st.error(error)
            else:
                st.rerun()
    if st.button("Back"):
        sessions.cancel_verification()
        st.rerun()


def sync_federated_login():
    """Picks up a completed OIDC login; Streamlit has already verified the token."""
    user_info = getattr(st, "user", None)
    sessions: SessionManager = st.session_state.session_manager
    if user_info is not None and getattr(user_info, "is_logged_in", False) and not sessions.is_authenticated:
        try:
            sessions.login_with_claims(user_info.to_dict())
        except PlantsDoctorError as e:
            st.error(e.user_message)


# --- Feature Views ---
def show_detector(view: DetectorView):
    st.header("Plant Disease Detector")
    st.caption("Upload or snap a photo of a plant leaf for an AI-powered diagnosis.")

    left, right = st.columns(2)
    with left:
        uploaded = st.file_uploader(
            "Upload an image", type=["png", "jpg", "jpeg", "webp"],
            key="detector_upload",
        )
        with st.expander("📷 Use Camera"):
            snapshot = st.camera_input("Take a photo of the leaf")

        try:
            if snapshot is not None and snapshot.getvalue() != st.session_state.get("last_frame"):
                st.session_state.last_frame = snapshot.getvalue()
                view.select_image(snapshot.getvalue(), snapshot.type, from_camera=True)
            elif uploaded is not None and uploaded.getvalue() != st.session_state.get("last_upload"):
                st.session_state.last_upload = uploaded.getvalue()
                view.select_image(uploaded.getvalue(), uploaded.type)
        except PlantsDoctorError as e:
            st.error(e.user_message)

        if view.image_data:
            st.image(view.image_data, caption="Plant preview", width=320)

        if st.button("Detect Disease", disabled=not view.image_data or view.state.is_loading, type="primary"):
            with st.spinner("Analyzing..."):
                view.detect()

    with right:
        if view.state.error:
            st.error(view.state.error)
        elif view.analysis is None:
            st.info("Analysis results will appear here.")
        else:
            show_analysis_report(view)


def show_analysis_report(view: DetectorView):
    analysis = view.analysis
    if analysis.is_healthy:
        st.success(f"**{analysis.disease_name}** - Your plant appears healthy!")
    else:
        st.warning(f"**{analysis.disease_name}** - A potential issue was detected.")
    st.write(analysis.description)

    if analysis.causes:
        st.subheader("Causes")
        st.markdown("\n".join(f"- {c}" for c in analysis.causes))

    treatments = analysis.treatment_recommendations
    if treatments.organic or treatments.chemical:
        organic, chemical = st.columns(2)
        with organic:
            st.subheader("Organic Treatment")
            st.markdown("\n".join(f"- {t}" for t in treatments.organic) or "_None_")
        with chemical:
            st.subheader("Chemical Treatment")
            st.markdown("\n".join(f"- {t}" for t in treatments.chemical) or "_None_")

    st.subheader("Translate Report")
    codes = list(SUPPORTED_LANGUAGES)
    language = st.selectbox(
        "Language", codes, index=codes.index(DEFAULT_TRANSLATION_LANGUAGE),
        format_func=lambda code: SUPPORTED_LANGUAGES[code],
    )
    if st.button("Translate", disabled=view.translation.is_loading):
        with st.spinner("Translating..."):
            view.translate_report(language)
    if view.translation.error:
        st.error(view.translation.error)
    elif view.translation.result:
        st.info(view.translation.result)


def show_community(view: CommunityView):
    st.header("AI Chatbot")
    for message in view.messages:
        with st.chat_message("human" if message.role == "user" else "ai",
                             avatar="🧑‍🌾" if message.role == "user" else "🌿"):
            st.markdown(message.text)

    if view.voice.error:
        st.error(view.voice.error)

    if hasattr(st, "audio_input"):
        recording = st.audio_input("Ask by voice")
        if recording is not None and recording.getvalue() != st.session_state.get("last_recording"):
            st.session_state.last_recording = recording.getvalue()
            with st.spinner("Listening..."):
                view.send_voice(recording.getvalue(), recording.type or "audio/wav")
            st.rerun()

    if prompt := st.chat_input("Ask about crops, pests, soil..."):
        with st.spinner("Plants Doctor is thinking..."):
            view.send(prompt)
        st.rerun()


def show_social_forum():
    forum: ForumManager = st.session_state.forum_manager
    user = st.session_state.session_manager.user
    st.header("Social Forum")
    st.caption("Connect with other farmers, ask questions, and share your knowledge.")

    post = forum.get_post(st.session_state.active_post_id) if st.session_state.active_post_id else None
    if post is None:
        with st.expander("➕ Create Post"):
            with st.form("create_post_form", clear_on_submit=True):
                title = st.text_input("Title")
                content = st.text_area("Content")
                if st.form_submit_button("Post"):
                    try:
                        forum.create_post(user, title, content)
                        st.rerun()
                    except PlantsDoctorError as e:
                        st.error(e.user_message)

        for p in forum.posts():
            with st.container(border=True):
                st.markdown(f"**{p.title}**  \n{p.author.name} · {p.timestamp[:10]}")
                st.caption(p.content[:140])
                if st.button(f"{len(p.replies)} replies", key=f"open_{p.id}"):
                    st.session_state.active_post_id = p.id
                    st.rerun()
        return

    if st.button("← Back to all posts"):
        st.session_state.active_post_id = None
        st.rerun()
    st.subheader(post.title)
    st.caption(f"{post.author.name} · {post.timestamp[:16].replace('T', ' ')}")
    st.write(post.content)
    st.markdown(f"**Replies ({len(post.replies)})**")
    for reply in post.replies:
        with st.chat_message("user", avatar=reply.author.picture):
            st.markdown(f"**{reply.author.name}**  \n{reply.content}")
    with st.form("reply_form", clear_on_submit=True):
        content = st.text_area("Write a reply")
        if st.form_submit_button("Reply"):
            try:
                forum.add_reply(post.id, user, content)
                st.rerun()
            except PlantsDoctorError as e:
                st.error(e.user_message)


def show_weather(view: WeatherView):
    st.header("Weather Forecast")
    share = st.checkbox("Share my location", value=True)
    by_place, by_coords = st.tabs(["Place", "Coordinates"])
    with by_place:
        place = st.text_input("Village, town or city")
        if st.button("Get Forecast", key="weather_place", disabled=view.state.is_loading):
            with st.spinner("Loading weather data for your location..."):
                view.fetch_for_place(place, share)
    with by_coords:
        lat = st.number_input("Latitude", min_value=-90.0, max_value=90.0, value=0.0, format="%.4f")
        lon = st.number_input("Longitude", min_value=-180.0, max_value=180.0, value=0.0, format="%.4f")
        if st.button("Get Forecast", key="weather_coords", disabled=view.state.is_loading):
            with st.spinner("Loading weather data for your location..."):
                view.fetch(lat, lon, share)

    if view.state.error:
        st.error(view.state.error)
        return
    weather = view.weather
    if weather is None:
        return

    st.subheader(f"Current conditions - {view.location_label}")
    current = weather.current
    cols = st.columns(6)
    cols[0].metric("Temperature", f"{current.temp_c:.0f}°C")
    cols[1].metric("Condition", current.condition)
    cols[2].metric("Humidity", f"{current.humidity:.0f}%")
    cols[3].metric("Wind", f"{current.wind_kph:.0f} km/h")
    cols[4].metric("Precipitation", f"{current.precip_mm:.1f} mm")
    cols[5].metric("UV Index", f"{current.uv_index:.0f}")

    st.subheader("3-Day Forecast")
    for col, day in zip(st.columns(len(weather.forecast)), weather.forecast):
        col.metric(f"{day.day} ({day.date})", f"{day.max_temp_c:.0f}° / {day.min_temp_c:.0f}°")
        col.caption(f"{day.condition} · {day.chance_of_rain:.0f}% rain")

    st.subheader("Soil")
    soil_temp, soil_moisture = st.columns(2)
    soil_temp.metric("Soil temperature (10cm)", f"{weather.soil.temperature_c:.1f}°C")
    soil_moisture.metric("Soil moisture", f"{weather.soil.moisture_percent:.0f}%")


def show_scheduler():
    schedule: ScheduleManager = st.session_state.schedule_manager
    st.header("Farming Scheduler")
    st.caption("Plan and track your agricultural tasks.")

    left, right = st.columns([1, 2])
    with left:
        selected = st.date_input("Select Date")
        with st.form("add_task_form", clear_on_submit=True):
            st.markdown("**Add New Task**")
            title = st.text_input("Title")
            task_date = st.date_input("Date", value=selected)
            description = st.text_area("Description (Optional)")
            if st.form_submit_button("Add Task"):
                try:
                    schedule.add_event(task_date.isoformat(), title, description)
                    st.rerun()
                except PlantsDoctorError as e:
                    st.error(e.user_message)
    with right:
        st.subheader(f"Tasks for: {selected.strftime('%A, %B %d, %Y')}")
        events = schedule.events_for(selected.isoformat())
        if not events:
            st.info("No tasks scheduled for this day.")
        for event in events:
            with st.container(border=True):
                st.markdown(f"**{event.title}**")
                if event.description:
                    st.caption(event.description)


def show_learn(view: LearnView):
    st.header("Learning Hub")
    if view.state.status == "idle":
        with st.spinner("Fetching learning resources..."):
            view.load()
    if st.button("Refresh", disabled=view.state.is_loading):
        with st.spinner("Fetching learning resources..."):
            view.load()

    if view.state.error:
        st.error(view.state.error)
    for resource in view.resources:
        with st.container(border=True):
            st.subheader(resource.title)
            st.write(resource.summary)
            st.markdown("\n".join(f"- {t}" for t in resource.techniques))
            st.caption(f"Source: {resource.source}")


# --- Main Interface ---
def show_main_interface():
    sessions: SessionManager = st.session_state.session_manager
    user = sessions.user

    with st.sidebar:
        st.image(user.picture, width=48)
        st.header(f"Welcome, {user.name.split(' ')[0]}!")
        active_view = st.radio("Navigate", NAVIGATION, label_visibility="collapsed")
        if st.button("Logout"):
            sessions.logout()
            if getattr(st, "user", None) is not None and getattr(st.user, "is_logged_in", False):
                st.logout()
            for key in list(st.session_state.keys()):
                del st.session_state[key]
            st.rerun()

    views = st.session_state.get("views")
    if active_view == "Social Forum":
        show_social_forum()
    elif active_view == "Scheduler":
        show_scheduler()
    elif views is None:
        st.error(st.session_state.config_error)
    elif active_view == "Detector":
        show_detector(views["detector"])
    elif active_view == "AI Chatbot":
        show_community(views["community"])
    elif active_view == "Weather":
        show_weather(views["weather"])
    elif active_view == "Learn":
        show_learn(views["learn"])


# --- Application Entry Point ---
initialize_session_state()
sync_federated_login()

if st.session_state.session_manager.is_authenticated:
    show_main_interface()
else:
    show_login_page()
