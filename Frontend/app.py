import logging

import streamlit as st

from quizgen.utils.config import get_settings
from quizgen_ui.client import BACKEND_URL, BackendClient
from quizgen_ui.state import QuizSession
from quizgen_ui.upload import upload_and_generate

logging.basicConfig(level=get_settings().log_level)
logger = logging.getLogger(__name__)

st.set_page_config(page_title="PDF Quiz Generator", layout="centered")

# Initialize session state
session = QuizSession(st.session_state)
for key, default in {"is_loading": False, "notice": None}.items():
    if key not in st.session_state:
        st.session_state[key] = default

client = BackendClient(BACKEND_URL)


def show_notice():
    """Toast the outcome of the last upload, once"""
    notice = st.session_state.notice
    if notice:
        kind, message = notice
        st.toast(message, icon="✅" if kind == "success" else "❌")
        st.session_state.notice = None


def upload_form():
    is_loading = st.session_state.is_loading
    with st.form("upload_form"):
        uploaded_file = st.file_uploader(
            "Upload a PDF",
            type="pdf",
            key=f"pdf_{session.uploader_key}",
            disabled=is_loading,
        )
        submitted = st.form_submit_button(
            "Generating Quiz..." if is_loading else "Generate Quiz",
            disabled=is_loading,
        )
    session.pdf_file = uploaded_file

    if submitted:
        if uploaded_file is None:
            st.toast("Please select a PDF file", icon="❌")
            return
        # rerun first so the form renders disabled while we wait
        st.session_state.is_loading = True
        st.rerun()

    if is_loading:
        with st.spinner("Generating Quiz..."):
            outcome = upload_and_generate(uploaded_file, client)
        st.session_state.is_loading = False
        if outcome.success:
            session.load(outcome.questions)
            st.session_state.notice = ("success", outcome.message)
        else:
            logger.error(f"Upload failed: {outcome.message}")
            st.session_state.notice = ("error", outcome.message)
        st.rerun()


def question_view():
    question = session.current_question
    st.subheader(f"Question {session.current_index + 1} of {session.total}")
    st.markdown(f"**{question.question}**")

    choice = st.radio(
        "Choose an answer:",
        question.options,
        index=None,
        key=f"option_{session.uploader_key}_{session.current_index}",
    )
    session.select(choice)

    label = "Submit Answer" if session.can_submit else "Select an option"
    if st.button(label, disabled=not session.can_submit, use_container_width=True):
        session.submit()
        st.rerun()


def completion_view():
    st.header("Quiz Completed!")
    st.markdown(f"### Your Score: {session.score} / {session.total}")
    st.caption(f"({session.score_percentage}% correct)")

    with st.expander("Review answers"):
        for number, q in enumerate(session.questions, start=1):
            status = "✅" if q.is_correct else "❌"
            st.markdown(f"{status} **Q{number}:** {q.question}")
            st.markdown(f"- Your answer: **{q.selected}**")
            st.markdown(f"- Correct answer: **{q.answer}**")
            st.divider()

    if st.button("Upload another PDF"):
        session.reset()
        st.rerun()


# UI Components
st.title("📄 PDF Quiz Generator")
show_notice()

if not session.has_quiz:
    upload_form()
elif session.finished:
    completion_view()
else:
    question_view()
