import sys
import logging
from pathlib import Path

import streamlit as st

# Ensure src is importable
sys.path.insert(0, str(Path(__file__).parent / "src"))

from bisaya_translator.config import configure_logging, get_settings
from bisaya_translator.app_state import can_extract, can_translate
from bisaya_translator.controller import TranslatorController
from bisaya_translator.gemini_client import GeminiClient
from bisaya_translator.image_utils import IMAGE_EXTENSIONS, ImageUpload
from bisaya_translator.storage import JsonFileStore

settings = get_settings()
configure_logging(settings)
logger = logging.getLogger(__name__)


def get_controller() -> TranslatorController:
    return st.session_state['controller']


def init_state():
    """Initialize session state."""
    if 'controller' not in st.session_state:
        store = JsonFileStore(settings.storage_path)
        st.session_state['controller'] = TranslatorController(
            store,
            client_factory=lambda: GeminiClient(settings),
        )
        logger.info(f"New session, custom translations stored in {settings.storage_path}")
    if 'uploaded_file_id' not in st.session_state:
        st.session_state['uploaded_file_id'] = None


# -------------------- widget callbacks --------------------

def on_source_text_change():
    get_controller().set_source_text(st.session_state['source_text_input'])


def on_new_english_change():
    get_controller().set_new_english(st.session_state['new_english_input'])


def on_new_bisaya_change():
    get_controller().set_new_bisaya(st.session_state['new_bisaya_input'])


def on_add_translation():
    controller = get_controller()
    state = controller.add_translation(
        st.session_state.get('new_english_input', ''),
        st.session_state.get('new_bisaya_input', ''),
    )
    st.session_state['new_english_input'] = state.new_english
    st.session_state['new_bisaya_input'] = state.new_bisaya


def on_delete_translation(index: int):
    get_controller().delete_translation(index)


# -------------------- sections --------------------

def render_source_section():
    controller = get_controller()
    st.header("Step 1: Get English Text")
    st.caption("Upload an image to extract text, or type/paste text directly in the box below.")

    uploaded = st.file_uploader("Upload an Image", type=IMAGE_EXTENSIONS)
    if uploaded is not None:
        file_id = getattr(uploaded, 'file_id', None) or f"{uploaded.name}:{uploaded.size}"
        if file_id != st.session_state['uploaded_file_id']:
            st.session_state['uploaded_file_id'] = file_id
            controller.select_image(ImageUpload.from_uploaded_file(uploaded))

    state = controller.state
    if state.image_url:
        st.markdown(
            f'<div class="image-preview"><img src="{state.image_url}" alt="Uploaded preview" '
            f'style="max-width: 100%; max-height: 400px;"></div>',
            unsafe_allow_html=True,
        )

    label = 'Reading...' if state.is_extracting else 'Read Text from Image'
    if st.button(label, disabled=not can_extract(state)):
        with st.spinner("Extracting text..."):
            controller.extract_text()


def render_translation_section():
    controller = get_controller()
    st.header("Step 2: Translate")

    st.subheader("English Text")
    # Push the controller's value into the widget before it is created in this run
    st.session_state['source_text_input'] = controller.state.source_text
    st.text_area(
        "English text to translate",
        key='source_text_input',
        on_change=on_source_text_change,
        placeholder="Text from image will appear here, or you can paste your own text to translate.",
        height=200,
        label_visibility="collapsed",
    )

    state = controller.state
    label = 'Translating...' if state.is_translating else 'Translate to Bisaya'
    if st.button(label, disabled=not can_translate(state)):
        with st.spinner("Translating text..."):
            controller.translate_text()

    st.subheader("Translated Bisaya Text")
    st.text_area(
        "Translated Bisaya Text",
        value=controller.state.translated_text,
        placeholder="Translated text will appear here...",
        height=200,
        disabled=True,
        label_visibility="collapsed",
    )


def render_custom_translations():
    controller = get_controller()
    st.header("Custom Translations")

    col_en, col_bis, col_add = st.columns([3, 3, 1])
    with col_en:
        st.text_input(
            "English word",
            key='new_english_input',
            on_change=on_new_english_change,
            placeholder="English word (e.g., church)",
            label_visibility="collapsed",
        )
    with col_bis:
        st.text_input(
            "Bisaya translation",
            key='new_bisaya_input',
            on_change=on_new_bisaya_change,
            placeholder="Bisaya translation (e.g., iglesya)",
            label_visibility="collapsed",
        )
    with col_add:
        st.button("Add", on_click=on_add_translation)

    for i, item in enumerate(controller.state.custom_translations):
        col_item, col_del = st.columns([6, 1])
        with col_item:
            st.markdown(f"**{item.english}** → {item.bisaya}")
        with col_del:
            st.button(
                "×",
                key=f"delete_{i}",
                on_click=on_delete_translation,
                args=(i,),
                help=f"Delete custom translation for {item.english}",
            )


def main():
    st.set_page_config(page_title="Image Translator")
    init_state()

    st.title("Image Translator")
    render_source_section()
    st.markdown("---")
    render_translation_section()
    st.markdown("---")
    render_custom_translations()

    error = get_controller().state.error
    if error:
        st.error(error)


if __name__ == "__main__":
    main()
