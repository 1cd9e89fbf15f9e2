"""
Live Component Preview - Streamlit Application

Edit a React component, see it rendered live, and ask the assistant to modify
it. Two editors are shown: a simple component and a stateful counter.
"""

import asyncio
import logging

import streamlit as st
import streamlit.components.v1 as components

from livepreview.config import ConfigError, get_config
from livepreview.examples import EXAMPLES
from livepreview.session import EditorSession


# Page configuration
st.set_page_config(
    page_title="Live Component Preview",
    page_icon="⚛️",
    layout="wide",
)

PREVIEW_HEIGHT = 250

PREVIEW_PAGE = """<!DOCTYPE html>
<html>
<head>
<script src="https://cdn.tailwindcss.com"></script>
</head>
<body>
<div class="p-4 min-h-[200px] flex items-center justify-center">{markup}</div>
</body>
</html>"""


def validate_config() -> bool:
    """Validate configuration and show error if invalid."""
    try:
        config = get_config()
    except ConfigError as e:
        st.error(f"⚠️ Configuration Error\n\n{str(e)}")
        return False
    logging.basicConfig(
        level=config.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    return True


def get_session(name: str) -> EditorSession:
    """Create the editor for an example once per browser session and render it."""
    key = f"editor_{name}"
    if key not in st.session_state:
        session = EditorSession(EXAMPLES[name])
        asyncio.run(session.start())
        st.session_state[key] = session
    return st.session_state[key]


def display_preview(session: EditorSession, name: str):
    """Show the loading, error or rendered panel for the current status."""
    snapshot = session.snapshot

    if snapshot.status not in ("ready", "error"):
        label = "Loading..." if snapshot.status == "loading" else "Rendering..."
        st.info(f"⏳ {label}")
    elif snapshot.error:
        st.error("Error")
        st.code(snapshot.error, language="text")
        if st.button("Retry", key=f"retry_{name}"):
            asyncio.run(session.retry())
            st.rerun()
    elif snapshot.preview is not None:
        components.html(
            PREVIEW_PAGE.format(markup=snapshot.preview.html),
            height=PREVIEW_HEIGHT,
            scrolling=True,
        )


def apply_suggestion(state, name: str):
    """Copy the picked suggestion into the instruction box."""
    choice = state.get(f"suggestion_{name}")
    if choice:
        state[f"instruction_{name}"] = choice


def display_editor(session: EditorSession, name: str):
    """Show the instruction controls and the source editor for one session."""
    snapshot = session.snapshot

    st.selectbox(
        "Suggestions",
        options=[""] + session.suggestions,
        key=f"suggestion_{name}",
        on_change=apply_suggestion,
        args=(st.session_state, name),
    )
    typed = st.text_input(
        "Instruction",
        placeholder="Tell AI how to modify the code...",
        key=f"instruction_{name}",
    )
    if typed != snapshot.assistant_prompt:
        session.commit_instruction(typed)

    label = "Updating..." if snapshot.is_updating else "Update with AI"
    if st.button(label, key=f"update_{name}", disabled=snapshot.is_updating, use_container_width=True):
        with st.spinner("Processing AI response..."):
            asyncio.run(session.submit_instruction())
        st.rerun()

    if st.button("Save Prompt", key=f"save_{name}", use_container_width=True):
        session.save_prompt()
        st.rerun()

    if st.button("Undo Last Change", key=f"undo_{name}", use_container_width=True):
        asyncio.run(session.undo())
        st.rerun()

    code = st.text_area(
        "Source",
        value=snapshot.source_code,
        height=PREVIEW_HEIGHT,
        key=f"source_{name}_{len(snapshot.undo_stack)}_{hash(snapshot.source_code)}",
    )
    if code != snapshot.source_code:
        asyncio.run(session.edit_source_directly(code))
        st.rerun()

    if snapshot.streaming_buffer:
        st.caption("Processing AI response...")


def main():
    st.title("⚛️ Live Component Preview")

    if not validate_config():
        return

    for name, heading in (("simple", "Simple Component"), ("complex", "Complex Component")):
        st.subheader(heading)
        session = get_session(name)
        left, right = st.columns(2)
        with left:
            display_editor(session, name)
        with right:
            display_preview(session, name)


if __name__ == "__main__":
    main()
