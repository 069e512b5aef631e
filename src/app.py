import logging
import streamlit as st
import moral_tales.utils.pdf_generator as pdf

from html import escape
from moral_tales.model.options import (
    LANGUAGE_OPTIONS,
    MAX_STORY_LENGTH,
    MIN_STORY_LENGTH,
    TOPIC_OPTIONS,
    VOICE_STYLE_OPTIONS,
    VoiceStyle,
)
from moral_tales.model.result import Fatal
from moral_tales.model.story import StoryPart, StoryRequest
from moral_tales.session import StoryView, progress_update
from moral_tales.settings import Settings, configure_logging
from moral_tales.utils.speech import speech_player_html
from moral_tales.weaver import StoryWeaver

settings = Settings.from_env()
configure_logging(settings.log_level)
logger = logging.getLogger("moral_tales.app")

st.set_page_config(page_title="Kid's Story Generator", page_icon="📖", layout="centered")

# ---------- CSS ----------
PAGE_CSS = """
<style>
@import url('https://fonts.googleapis.com/css2?family=Nunito:wght@400;800&display=swap');

div.block-container { padding-top: 35px !important; }
h1 { margin-top: 0px !important; color: #0D9488; text-align: center; font-family: 'Nunito', sans-serif; }

.story { background: rgba(240,253,250,.6); border-radius: 16px; padding: 24px; }
.story p { font-family: 'Nunito', sans-serif; font-size: 1.15rem; line-height: 1.7; color: #374151;
           white-space: pre-wrap; margin-bottom: 1rem; }
.story img { display: block; width: 100%; max-width: 640px; margin: 24px auto; border-radius: 8px;
             box-shadow: 0 10px 30px rgba(0,0,0,.15); }

.skeleton { background: #E5E7EB; border-radius: 6px; margin-bottom: 12px; animation: pulse 1.5s infinite; }
.skeleton.line { height: 22px; }
.skeleton.picture { aspect-ratio: 16 / 9; margin: 16px 0 24px; }
@keyframes pulse { 0%, 100% { opacity: 1; } 50% { opacity: .5; } }
</style>
"""
st.markdown(PAGE_CSS, unsafe_allow_html=True)

DEFAULT_REQUEST = StoryRequest()

SKELETON_HTML = """
<div>
  <div class="skeleton line" style="width:100%"></div>
  <div class="skeleton line" style="width:83%"></div>
  <div class="skeleton picture"></div>
  <div class="skeleton line" style="width:100%"></div>
  <div class="skeleton line" style="width:66%"></div>
</div>
"""


# ---------- Helpers ----------
def part_html(part: StoryPart, number: int) -> str:
    safe = escape(part.paragraph or "")
    body = f"<p>{safe}</p>"
    if part.has_image:
        body += f'<img src="{part.image_url}" alt="Illustration for the story, scene {number}">'
    return body


def story_html(parts) -> str:
    return '<div class="story">' + "".join(part_html(p, i) for i, p in enumerate(parts, 1)) + "</div>"


@st.cache_resource
def get_weaver() -> StoryWeaver:
    return StoryWeaver(settings)


def request_story():
    ss = st.session_state
    request = StoryRequest(
        topic=ss.topic,
        language=ss.language,
        length=int(ss.length),
        include_images=bool(ss.include_images),
    )
    ss.view.begin(request)


def generate_story(view: StoryView):
    progress = st.progress(0.0, text="Creating your storybook...")

    def on_progress(stage: str, payload: dict):
        fraction, text = progress_update(stage, payload)
        progress.progress(min(max(fraction, 0.0), 1.0), text=text)

    result = None
    try:
        with st.spinner("Creating your storybook..."):
            result = get_weaver().run(view.request, progress_callback=on_progress)
    except Exception as e:
        logger.exception("Story generation crashed")
        result = Fatal(message=f"An unknown error occurred. {e}")
    finally:
        # a rerun or stop request raised mid-run never reaches finish()
        if result is None:
            logger.warning("Story generation was interrupted before it finished")
            view.interrupt()
    view.finish(result)


# ---------- STATE ----------
if "view" not in st.session_state:
    st.session_state.view = StoryView()
view: StoryView = st.session_state.view

# ---------- FORM ----------
st.title("Kid's Story Generator 🧒📖🔊")
st.caption("Create magical stories for your little ones with the power of AI.")

if not settings.has_api_key:
    st.warning("GEMINI_API_KEY is not set: story generation is disabled until it is configured.")

with st.form("story_form", border=False):
    col_a, col_b = st.columns(2)
    with col_a:
        st.selectbox("Step 1: Select a Moral / Topic", TOPIC_OPTIONS, key="topic",
                     index=TOPIC_OPTIONS.index(DEFAULT_REQUEST.topic.value))
        st.selectbox("Step 3: Select Voice Style", VOICE_STYLE_OPTIONS, key="voice_style",
                     index=VOICE_STYLE_OPTIONS.index(VoiceStyle.CARTOON_GIRL.value))
    with col_b:
        st.selectbox("Step 2: Select Language", LANGUAGE_OPTIONS, key="language",
                     index=LANGUAGE_OPTIONS.index(DEFAULT_REQUEST.language.value))
        st.number_input("Step 4: Number of Parts", min_value=MIN_STORY_LENGTH, max_value=MAX_STORY_LENGTH,
                        value=DEFAULT_REQUEST.length, step=1, key="length")
    st.toggle("Include Images", value=DEFAULT_REQUEST.include_images, key="include_images")
    st.form_submit_button(
        "⏳ Creating your storybook..." if view.is_generating else "🔄 Generate Story",
        on_click=request_story,
        disabled=view.is_generating,
        key="generate",
        type="primary",
        width="stretch",
    )
view.voice_style = VoiceStyle(st.session_state.voice_style)

# ---------- GENERATION ----------
if view.is_generating:
    st.markdown(SKELETON_HTML, unsafe_allow_html=True)
    generate_story(view)
    st.rerun()

if view.error:
    if view.is_partial:
        st.warning(view.error)
    else:
        st.error(f"**Oh no! Something went wrong.**\n\n{view.error}")

# ---------- STORY ----------
if view.has_story:
    st.subheader("✅ Your Magical Story")
    c_play, c_pdf = st.columns([3, 2])
    with c_play:
        if view.can_play:
            st.iframe(
                speech_player_html(view.full_story, view.request.language, view.voice_style),
                height=56,
                alt="Read the story aloud",
            )
    with c_pdf:
        pdf_clicked = st.button("📄 Prepare PDF", disabled=not view.can_export, width="stretch")

    if pdf_clicked:
        try:
            with st.spinner("Building your PDF..."):
                data = pdf.generate_story_pdf(view.parts)
        except Exception as e:
            logger.error(f"PDF generation failed: {e}")
            st.error(f"Sorry, could not generate the PDF. {e}")
        else:
            st.download_button(
                "⬇️ Download PDF",
                data=data,
                file_name=pdf.PDF_FILE_NAME,
                mime="application/pdf",
                width="stretch",
            )

    st.markdown(story_html(view.parts), unsafe_allow_html=True)

st.caption("Powered by AI | Safe for Kids")
