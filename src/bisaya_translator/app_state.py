"""
Session view state and its transitions.

``AppState`` is immutable; every transition is a plain function that takes
a state (plus arguments) and returns the next state, so the whole UI flow
can be exercised without a rendering surface.

Each output field (source text from extraction, translated text from
translation) carries a request sequence number. A result for a request
that has since been superseded by a newer request on the same field is
dropped.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Sequence, Tuple

from bisaya_translator.custom_translations import (
    CustomTranslation,
    add_custom_translation,
    delete_custom_translation,
)
from bisaya_translator.image_utils import ImageUpload

MISSING_IMAGE_MESSAGE = "Please upload an image first."
MISSING_TEXT_MESSAGE = "There is no text to translate."
EXTRACTION_FALLBACK_MESSAGE = "An unknown error occurred during text extraction."
TRANSLATION_FALLBACK_MESSAGE = "An unknown error occurred during translation."
SAVE_FAILED_MESSAGE = "Failed to save custom translations."


@dataclass(frozen=True)
class AppState:
    image: Optional[ImageUpload] = None
    image_url: Optional[str] = None
    source_text: str = ""
    translated_text: str = ""
    is_extracting: bool = False
    is_translating: bool = False
    error: Optional[str] = None
    custom_translations: Tuple[CustomTranslation, ...] = ()
    new_english: str = ""
    new_bisaya: str = ""
    extraction_seq: int = 0
    translation_seq: int = 0


def can_extract(state: AppState) -> bool:
    return state.image is not None and not state.is_extracting


def can_translate(state: AppState) -> bool:
    return bool(state.source_text) and not state.is_translating


# -------------------- inputs --------------------

def select_image(state: AppState, image: ImageUpload) -> AppState:
    """A new image always clears both texts and any error."""
    return replace(
        state,
        image=image,
        image_url=image.to_data_url(),
        source_text="",
        translated_text="",
        error=None,
    )


def set_source_text(state: AppState, text: str) -> AppState:
    return replace(state, source_text=text)


def set_new_english(state: AppState, text: str) -> AppState:
    return replace(state, new_english=text)


def set_new_bisaya(state: AppState, text: str) -> AppState:
    return replace(state, new_bisaya=text)


def set_error(state: AppState, message: Optional[str]) -> AppState:
    return replace(state, error=message)


# -------------------- extraction --------------------

def start_extraction(state: AppState) -> AppState:
    return replace(
        state,
        is_extracting=True,
        error=None,
        source_text="",
        translated_text="",
        extraction_seq=state.extraction_seq + 1,
    )


def finish_extraction(state: AppState, seq: int, text: str) -> AppState:
    if seq != state.extraction_seq:
        return state
    return replace(state, source_text=text, is_extracting=False)


def fail_extraction(state: AppState, seq: int, message: str) -> AppState:
    if seq != state.extraction_seq:
        return state
    return replace(state, error=message or EXTRACTION_FALLBACK_MESSAGE, is_extracting=False)


# -------------------- translation --------------------

def start_translation(state: AppState) -> AppState:
    return replace(
        state,
        is_translating=True,
        error=None,
        translated_text="",
        translation_seq=state.translation_seq + 1,
    )


def finish_translation(state: AppState, seq: int, text: str) -> AppState:
    if seq != state.translation_seq:
        return state
    return replace(state, translated_text=text, is_translating=False)


def fail_translation(state: AppState, seq: int, message: str) -> AppState:
    # source_text is left as it is
    if seq != state.translation_seq:
        return state
    return replace(state, error=message or TRANSLATION_FALLBACK_MESSAGE, is_translating=False)


# -------------------- custom translations --------------------

def set_custom_translations(state: AppState, translations: Sequence[CustomTranslation]) -> AppState:
    return replace(state, custom_translations=tuple(translations))


def add_translation(state: AppState) -> AppState:
    """Append the two form buffers as a rule; a blank side makes this a no-op."""
    updated = add_custom_translation(state.custom_translations, state.new_english, state.new_bisaya)
    if len(updated) == len(state.custom_translations):
        return state
    return replace(state, custom_translations=tuple(updated), new_english="", new_bisaya="")


def delete_translation(state: AppState, index: int) -> AppState:
    if not 0 <= index < len(state.custom_translations):
        return state
    return replace(
        state,
        custom_translations=tuple(delete_custom_translation(state.custom_translations, index)),
    )
