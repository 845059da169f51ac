"""Streamlit frontend for Rival Report.

Replaceable UI layer; all display logic lives here.
Report generation is invoked through the HTTP API only.
"""

from __future__ import annotations

import os

import streamlit as st

from app.domain.report import REPORT_FILENAME, STANDARD_SECTIONS
from frontend.client import ReportClient, ReportClientError

_FORMAT_LABELS = {
    "detailed": "Detailed",
    "summary": "Summary",
    "presentation": "Presentation-style",
}

# ── Page config (must be first Streamlit call) ─────────────────────────────
st.set_page_config(
    page_title="Rival Report",
    page_icon="📄",
    layout="centered",
)

_STATE_DEFAULTS: dict = {
    "competitors": [""],
    "pdf": None,
}

for _key, _val in _STATE_DEFAULTS.items():
    if _key not in st.session_state:
        st.session_state[_key] = _val


@st.cache_resource(show_spinner=False)
def _client() -> ReportClient:
    return ReportClient(os.getenv("REPORT_API_URL", "http://127.0.0.1:8000"))


st.title("AI-Powered Competitive Intelligence Report Generator")

# ── Competitors ────────────────────────────────────────────────────────────
st.subheader("Competitors")
for index, value in enumerate(list(st.session_state.competitors)):
    cols = st.columns([6, 1])
    st.session_state.competitors[index] = cols[0].text_input(
        f"Competitor {index + 1}",
        value=value,
        key=f"competitor_{index}",
        label_visibility="collapsed",
        placeholder=f"Competitor {index + 1}",
    )
    if index > 0 and cols[1].button("Remove", key=f"remove_{index}"):
        st.session_state.competitors.pop(index)
        st.rerun()

if st.button("Add Competitor", use_container_width=True):
    st.session_state.competitors.append("")
    st.rerun()

# ── Sections and format ────────────────────────────────────────────────────
st.subheader("Report Sections")
section_cols = st.columns(2)
selected_sections = [
    section
    for index, section in enumerate(STANDARD_SECTIONS)
    if section_cols[index % 2].checkbox(section, value=True, key=f"section_{index}")
]

st.subheader("Report Format")
report_format = st.selectbox(
    "Report Format",
    options=list(_FORMAT_LABELS),
    format_func=_FORMAT_LABELS.get,
    label_visibility="collapsed",
)

# ── Run ────────────────────────────────────────────────────────────────────
if st.button("Generate AI-Powered Report", type="primary", use_container_width=True):
    competitors = [item.strip() for item in st.session_state.competitors if item.strip()]
    if not competitors:
        st.warning("Add at least one competitor before generating a report.")
    else:
        st.session_state.pdf = None
        client = _client()
        with st.status("Generating report…", expanded=True) as status_box:
            try:
                job = client.start(competitors, selected_sections, report_format)
                failed = False
                for update in client.progress(job["events_url"]):
                    if update.error:
                        failed = True
                        st.error(update.error)
                    elif update.message:
                        st.write(update.message)
                if failed:
                    status_box.update(label="Report generation failed", state="error")
                else:
                    st.session_state.pdf = client.document(job["document_url"])
                    status_box.update(label="Report ready", state="complete")
            except ReportClientError as exc:
                status_box.update(label="Report generation failed", state="error")
                st.error(str(exc))

if st.session_state.pdf:
    st.download_button(
        "Download PDF",
        data=st.session_state.pdf,
        file_name=REPORT_FILENAME,
        mime="application/pdf",
        use_container_width=True,
    )
