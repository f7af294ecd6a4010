from datetime import datetime

import streamlit as st

from medical_rules import (
    DURATION_LABELS,
    categorize_severity,
    category_icon,
    format_duration,
)
from tracker.config import configure_logging, get_settings
from tracker.errors import TrackerError
from tracker.insights_engine import (
    advanced_patterns,
    daily_severity_frame,
    filter_history,
    frequency_frame,
    group_by_time,
    history_frame,
    real_time_stats,
    summarize_group,
    symptom_predictions,
    wellness_frame,
)
from tracker.reports import (
    CSV_MIME,
    DOCX_MIME,
    PDF_MIME,
    create_history_csv,
    create_history_docx,
    create_history_pdf,
)
from tracker.session import SessionContext
from tracker.storage import Storage
from tracker.suggestion_engine import SuggestionEngine, rule_based_suggestions
from tracker.symptom_matcher import SYMPTOM_DATABASE, SymptomMatcher
from tracker.whatsapp_engine import high_severity, prepare_emergency_alert

settings = get_settings()
configure_logging(settings.log_level)

st.set_page_config(page_title="HealthTrack Pro", page_icon="🩺", layout="wide")


# =====================================================
# SHARED RESOURCES
# =====================================================

@st.cache_resource
def get_engine(knowledge_path):
    engine = SuggestionEngine()
    engine.load_knowledge(knowledge_path)
    return engine


@st.cache_resource
def get_storage(db_path):
    return Storage(db_path)


storage = get_storage(settings.db_path)
engine = get_engine(settings.knowledge_path)

if "tracker" not in st.session_state:
    st.session_state.tracker = SessionContext(
        storage=storage,
        matcher=SymptomMatcher(extra_stop_words=settings.extra_stop_words),
        country_code=settings.country_code,
    )
if "emergency_records" not in st.session_state:
    st.session_state.emergency_records = []

tracker = st.session_state.tracker
matcher = tracker.matcher


# =====================================================
# MAIN HEADER
# =====================================================

st.markdown(
    "<h1 style='text-align:center; color:#333;'>🩺 HealthTrack Pro</h1>",
    unsafe_allow_html=True,
)
st.write(
    "<p style='text-align:center;'>Log symptoms, spot patterns & get health suggestions.</p>",
    unsafe_allow_html=True,
)
st.caption(
    "This tool gives general information only and is not a substitute for professional medical advice."
)


# =====================================================
# NEW USER SETUP
# =====================================================

if tracker.profile.needs_setup:
    with st.expander("👋 Welcome! Set up your emergency contact", expanded=True):
        setup_name = st.text_input("Your name", key="setup_name")
        setup_number = st.text_input("WhatsApp number (e.g. 9876543210)", key="setup_number")
        c1, c2 = st.columns(2)
        with c1:
            if st.button("Save Profile"):
                try:
                    profile = tracker.update_profile(setup_name, setup_number)
                    st.success(f"✅ Profile saved. Emergency alerts go to {profile.whatsapp_number}")
                except TrackerError as e:
                    st.error(str(e))
        with c2:
            if st.button("Skip for now"):
                tracker.skip_setup()
                st.info("You can add your WhatsApp number later in Settings.")


# =====================================================
# LOG SYMPTOMS
# =====================================================

st.markdown("---")
st.header("📝 Log Symptoms")

known_names = [s.name for s in SYMPTOM_DATABASE]
chosen = st.multiselect("Select symptoms", known_names, key="chosen_symptoms")
free_text = st.text_input(
    "Or describe them (comma separated, e.g. 'headache, scratchy throat')",
    key="free_text",
)

if free_text.strip():
    hits = matcher.search(free_text.split(",")[-1], chosen)
    if hits:
        st.caption("Did you mean: " + ", ".join(f"{s.icon} {s.name}" for s in hits))
if chosen:
    hints = matcher.consider_adding(chosen[-1], chosen)
    if hints:
        st.caption("Consider adding: " + ", ".join(h.title() for h in hints))

severity = st.slider("Severity", min_value=1, max_value=10, value=5)
st.caption(f"Severity level: {categorize_severity(severity)}")
duration = st.selectbox(
    "Duration",
    options=list(DURATION_LABELS),
    format_func=format_duration,
)
notes = st.text_area("Notes (optional)")

if st.button("Log Symptom"):
    tracker.clear_selection()
    for name in chosen:
        tracker.select(name)
    if free_text.strip():
        tracker.process_symptom_input(free_text)

    try:
        logged = tracker.log_symptoms(severity, duration, notes)
        if len(logged) == 1:
            st.success("Symptom logged successfully!")
        else:
            st.success(f"{len(logged)} symptoms logged successfully!")
        st.session_state.emergency_records = tracker.emergencies(logged)
        st.session_state.emergency_link = prepare_emergency_alert(
            tracker.profile, high_severity(logged), storage
        )
    except TrackerError as e:
        st.error(str(e))


# =====================================================
# EMERGENCY BANNER
# =====================================================

if st.session_state.emergency_records:
    flagged = st.session_state.emergency_records
    st.error(
        "🚨 **Emergency symptoms detected:** "
        + ", ".join(f"{r.name} ({r.severity}/10)" for r in flagged)
        + ". Seek immediate medical attention. Call 108 for an ambulance if needed."
    )
    if st.session_state.get("emergency_link"):
        st.link_button("📱 Send WhatsApp Emergency Alert", st.session_state.emergency_link)
    elif not tracker.profile.whatsapp_number:
        st.warning("Add a WhatsApp number in Settings to send emergency alerts.")
    if st.button("Dismiss alert"):
        st.session_state.emergency_records = []
        st.rerun()


# =====================================================
# HISTORY
# =====================================================

st.markdown("---")
st.header("📅 Symptom History")

history_filter = st.selectbox(
    "Show",
    options=["all", "today", "week", "month"],
    format_func=lambda f: {"all": "All time", "today": "Today", "week": "Last 7 days", "month": "Last 30 days"}[f],
)

groups = group_by_time(filter_history(tracker.symptoms, history_filter))
if not groups:
    st.info("No symptoms logged yet.")

for group in groups:
    summary = summarize_group(group)
    label = "symptom" if summary["count"] == 1 else "symptoms"
    st.markdown(
        f"**{summary['timestamp'].strftime('%Y-%m-%d at %H:%M')}** "
        f"· {summary['count']} {label} · Average Severity: **{summary['average_severity']}/10**"
    )
    for record in group["symptoms"]:
        col1, col2 = st.columns([5, 1])
        with col1:
            st.write(f"- {record.name}: {record.severity}/10")
        with col2:
            if st.button("🗑", key=f"delete_{record.id}"):
                tracker.remove_symptom(record.id)
                st.rerun()
    st.caption("Duration: " + ", ".join(summary["durations"]))
    for note in summary["notes"]:
        st.caption(f'"{note}"')

if tracker.symptoms:
    with st.expander("Reset all data"):
        st.warning("This deletes every logged symptom.")
        if st.button("Delete all symptoms"):
            tracker.reset()
            st.session_state.emergency_records = []
            st.rerun()


# =====================================================
# INSIGHTS
# =====================================================

st.markdown("---")
st.header("📊 Health Insights")

if not tracker.symptoms:
    st.info("Start logging symptoms to see intelligent pattern analysis.")
else:
    stats = real_time_stats(tracker.symptoms)
    c1, c2, c3, c4 = st.columns(4)
    c1.metric("Today", stats["today_count"])
    c2.metric("Last 7 days", stats["week_count"])
    c3.metric("Avg severity (week)", stats["avg_severity_week"])
    c4.metric("Most common", stats["most_common_symptom"])

    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Symptom Frequency")
        st.bar_chart(frequency_frame(tracker.symptoms))
    with col2:
        st.subheader("Severity (last 30 days)")
        st.line_chart(daily_severity_frame(tracker.symptoms))

    st.subheader("Wellness Score (last 7 days)")
    st.line_chart(wellness_frame(tracker.symptoms))

    st.subheader("🔍 Pattern Analysis")
    for pattern in advanced_patterns(tracker.symptoms):
        st.markdown(f"**{pattern['title']}** ({pattern['priority'].upper()})")
        st.write(pattern["description"])
        if pattern["recommendation"]:
            st.caption(f"💡 {pattern['recommendation']}")
        st.caption(f"Confidence: {pattern['confidence']}% · {pattern['timeframe']}")

    predictions = symptom_predictions(tracker.symptoms)
    if predictions:
        st.subheader("🔮 Symptom Predictions")
        for p in predictions:
            st.write(f"- **{p['symptom']}**: {p['probability']}% ({p['timeframe']})")
            st.caption(p["prevention"])


# =====================================================
# SUGGESTIONS
# =====================================================

st.markdown("---")
st.header("🧠 Health Suggestions")

suggestions = engine.generate_suggestions(tracker.today(), tracker.recent(7))
if not suggestions:
    suggestions = rule_based_suggestions(tracker.symptoms)

dismissed = set(storage.dismissed_ids())
suggestions = [s for s in suggestions if s.id not in dismissed]

if not suggestions:
    st.success("Great Health Status! No specific recommendations at this time.")

for s in suggestions:
    header = f"{category_icon(s.category)} {s.title} · {s.priority.upper()}"
    if s.confidence:
        header += f" · {s.confidence}%"
    with st.expander(header, expanded=s.priority == "critical"):
        if s.priority == "critical":
            st.error(s.description)
        else:
            st.write(s.description)
        if s.reasoning:
            st.markdown(f"**Why this matters:** {s.reasoning}")
        if s.actions:
            st.markdown("**Recommended actions:**")
            for action in s.actions:
                st.write(f"- {action}")
        if s.health_info:
            for key in ("description", "common_causes", "prevention", "warning_signs", "early_symptoms", "progression"):
                value = s.health_info.get(key)
                if value:
                    text = ", ".join(value) if isinstance(value, list) else value
                    st.caption(f"**{key.replace('_', ' ').title()}:** {text}")
        if s.disease_info:
            for key in ("stage", "risk_factors", "complications", "prognosis"):
                value = s.disease_info.get(key)
                if value:
                    text = ", ".join(value) if isinstance(value, list) else value
                    st.caption(f"**{key.replace('_', ' ').title()}:** {text}")
        if s.medications:
            st.markdown("**Medication options:** " + ", ".join(s.medications))
            st.caption("⚠️ Always consult a healthcare provider before taking medications.")
        if s.timeframe:
            st.caption(f"⏱ {s.timeframe}")

        c1, c2 = st.columns(2)
        with c1:
            if st.button("👍 Helpful", key=f"helpful_{s.id}"):
                storage.mark_helpful(s.id)
                st.success("Thanks for the feedback!")
        with c2:
            if st.button("✖ Dismiss", key=f"dismiss_{s.id}"):
                storage.dismiss_suggestion(s.id)
                st.rerun()


# =====================================================
# REPORTS
# =====================================================

st.markdown("---")
st.header("📄 Export Symptom History")

if not tracker.symptoms:
    st.info("Nothing to export yet.")
else:
    st.dataframe(history_frame(tracker.symptoms), use_container_width=True)
    stamp = datetime.now().strftime("%Y%m%d")
    col1, col2, col3 = st.columns(3)
    with col1:
        st.download_button(
            label="⬇ Download as DOCX",
            data=create_history_docx(tracker.profile, tracker.symptoms),
            file_name=f"symptom_history_{stamp}.docx",
            mime=DOCX_MIME,
        )
    with col2:
        st.download_button(
            label="⬇ Download as PDF",
            data=create_history_pdf(tracker.profile, tracker.symptoms),
            file_name=f"symptom_history_{stamp}.pdf",
            mime=PDF_MIME,
        )
    with col3:
        st.download_button(
            label="⬇ Download as CSV",
            data=create_history_csv(tracker.symptoms),
            file_name=f"symptom_history_{stamp}.csv",
            mime=CSV_MIME,
        )


# =====================================================
# SETTINGS
# =====================================================

st.markdown("---")
st.header("⚙️ Settings")

with st.form("settings_form"):
    profile_name = st.text_input("Name", value=tracker.profile.name)
    profile_number = st.text_input("WhatsApp number", value=tracker.profile.whatsapp_number)
    if st.form_submit_button("Save Settings"):
        try:
            tracker.update_profile(profile_name, profile_number)
            st.success("Settings saved.")
        except TrackerError as e:
            st.error(str(e))

alerts = storage.emergency_logs()
if alerts:
    st.caption(f"{len(alerts)} emergency alert(s) prepared so far; last at {alerts[-1]['timestamp']}.")
