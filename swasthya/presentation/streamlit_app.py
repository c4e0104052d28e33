import asyncio
import logging
import os

import streamlit as st

from swasthya.domain.models import AssessmentRequest, AssessmentResult, HIGH_RISK, LOW_RISK, MEDIUM_RISK
from swasthya.domain.rules import LANGUAGE_NAMES, resolve_language
from swasthya.infrastructure.config import Settings
from swasthya.infrastructure.factory import build_assessment_use_case


logger = logging.getLogger(__name__)


DISCLAIMER = (
    "⚕️ **DISCLAIMER:** This is NOT medical advice and NOT a diagnosis. "
    "If you experience emergency symptoms, seek immediate care (call 108)."
)

COMMON_SYMPTOMS = [
    "Fever",
    "Cough",
    "Cold",
    "Headache",
    "Body ache",
    "Stomach pain",
    "Diarrhea",
    "Vomiting",
    "Chest pain",
    "Breathing difficulty",
    "Skin rash",
    "Fatigue",
]

GENDERS = ["Female", "Male", "Other"]

LANGUAGE_CODES = ["en", "hi", "mr"]

RISK_ICONS = {LOW_RISK: "🟢", MEDIUM_RISK: "🟡", HIGH_RISK: "🔴"}


def _require_mistral_key(settings: Settings) -> bool:
    if not settings.mistral_api_key:
        st.error(
            "❌ **Mistral API Key Missing**\n\n"
            "Add `MISTRAL_API_KEY` to `.streamlit/secrets.toml` or as an environment variable."
        )
        return False
    return True


def _render_sidebar(settings: Settings):
    st.sidebar.title("⚙️ Settings")
    st.sidebar.markdown("### Model")
    st.sidebar.caption(f"**Model:** {settings.mistral_model}")
    language = st.sidebar.selectbox(
        "Guidance language",
        LANGUAGE_CODES,
        format_func=lambda code: LANGUAGE_NAMES[code],
    )
    st.session_state["language"] = language


def format_assessment_markdown(result: AssessmentResult) -> str:
    """Render a result as Markdown for the results panel."""
    lines = ["# 📋 Health Guidance\n"]

    if result.timed_out:
        lines.append("⏳ **The service took too long to respond.** Please try again.\n")
    elif result.error:
        lines.append("⚠️ **The service is temporarily unavailable.** Please try again.\n")

    icon = RISK_ICONS.get(result.risk_level, "⚪")
    lines.append(f"**Risk level:** {icon} {result.risk_level}\n")
    lines.append(result.summary + "\n")

    if result.recommendations:
        lines.append("## 📝 Recommendations")
        for item in result.recommendations:
            lines.append(item)
        lines.append("")

    if result.cultural_tips:
        lines.append("## 🏡 Home Care Tips")
        lines.append(result.cultural_tips + "\n")

    if result.warning_signs:
        lines.append("## 🚨 Warning Signs")
        lines.append(result.warning_signs + "\n")

    lines.append("---")
    lines.append("⚠️ **Reminder:** This is NOT medical advice. Always consult a licensed healthcare professional.")
    return "\n".join(lines)


def main():
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))

    st.set_page_config(
        page_title="Swasthya Sahayak",
        page_icon="⚕️",
        layout="centered",
        initial_sidebar_state="expanded",
    )

    settings = Settings()
    if not _require_mistral_key(settings):
        st.stop()

    _render_sidebar(settings)

    st.markdown("# 🏥 Swasthya Sahayak")
    st.info(DISCLAIMER)

    with st.form("assessment"):
        symptoms = st.multiselect("Main symptoms", COMMON_SYMPTOMS)
        age = st.number_input("Age", min_value=1, max_value=120, value=30)
        gender = st.selectbox("Gender", GENDERS)
        description = st.text_area("Describe how you feel (optional)")
        submitted = st.form_submit_button("Get guidance")

    if submitted:
        request = AssessmentRequest(
            symptoms=symptoms,
            age=int(age),
            gender=gender,
            description=description,
            target_language=resolve_language(st.session_state.get("language")),
        )
        # One client per run: the async HTTP session must not outlive its event loop
        use_case = build_assessment_use_case(settings)
        with st.spinner("🔬 Preparing your guidance..."):
            result = asyncio.run(use_case.generate_assessment(request))
        st.markdown(format_assessment_markdown(result))


if __name__ == "__main__":
    main()
