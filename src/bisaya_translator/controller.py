"""
Controller tying ``AppState`` transitions to Gemini calls and storage.

The controller owns the current state. Every mutator applies one
transition, writes the custom translation list through to storage when it
changed, and notifies listeners so the UI can re-render. A list that
cannot be saved never becomes the current state; the previous state is
kept with an error instead.
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, List, Optional

from bisaya_translator import app_state as transitions
from bisaya_translator.app_state import AppState
from bisaya_translator.custom_translations import load_custom_translations, save_custom_translations
from bisaya_translator.image_utils import ImageUpload
from bisaya_translator.storage import KeyValueStore

logger = logging.getLogger(__name__)

Listener = Callable[[AppState], None]


def error_message(exc: BaseException, fallback: str) -> str:
    """Human-readable message for a failed call."""
    return str(exc) or fallback


class TranslatorController:
    """Holds the session state for one user of the app."""

    def __init__(
        self,
        store: KeyValueStore,
        client: Optional[Any] = None,
        client_factory: Optional[Callable[[], Any]] = None,
        executor: Optional[ThreadPoolExecutor] = None,
    ):
        """
        Args:
            store: key-value storage for the custom translation list
            client: object with ``extract_text`` / ``translate_text`` (e.g. GeminiClient)
            client_factory: builds the client on first use when ``client`` is not given,
                so a missing API key surfaces as an action error instead of at startup
            executor: used by the ``submit_*`` methods; one is created on demand
        """
        self.store = store
        self._client = client
        self._client_factory = client_factory
        self._executor = executor
        self._owns_executor = executor is None
        self._lock = threading.RLock()
        self._listeners: List[Listener] = []
        self._state = AppState(custom_translations=tuple(load_custom_translations(store)))
        logger.info(f"Loaded {len(self._state.custom_translations)} custom translations")

    @property
    def state(self) -> AppState:
        with self._lock:
            return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a re-render callback. Returns a function that removes it."""
        self._listeners.append(listener)
        return lambda: self._listeners.remove(listener)

    def _apply(self, transition: Callable[..., AppState], *args: Any) -> AppState:
        with self._lock:
            previous = self._state
            current = transition(previous, *args)
            if current.custom_translations is not previous.custom_translations:
                try:
                    save_custom_translations(self.store, current.custom_translations)
                except Exception as e:
                    # The shown list must never differ from the stored one
                    logger.exception("Failed to save custom translations")
                    current = transitions.set_error(previous, f"{transitions.SAVE_FAILED_MESSAGE} {e}")
            self._state = current
        if current is not previous:
            for listener in list(self._listeners):
                listener(current)
        return current

    def _get_client(self) -> Any:
        if self._client is None:
            if self._client_factory is None:
                raise RuntimeError("No Gemini client configured")
            self._client = self._client_factory()
        return self._client

    def _get_executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="gemini")
        return self._executor

    def close(self) -> None:
        if self._executor is not None and self._owns_executor:
            self._executor.shutdown(wait=False)
            self._executor = None

    # -------------------- inputs --------------------

    def select_image(self, image: ImageUpload) -> AppState:
        logger.info(f"Selected image {image.name} ({image.mime_type})")
        return self._apply(transitions.select_image, image)

    def set_source_text(self, text: str) -> AppState:
        return self._apply(transitions.set_source_text, text)

    def set_new_english(self, text: str) -> AppState:
        return self._apply(transitions.set_new_english, text)

    def set_new_bisaya(self, text: str) -> AppState:
        return self._apply(transitions.set_new_bisaya, text)

    # -------------------- extraction --------------------

    def _begin_extraction(self) -> Optional[AppState]:
        with self._lock:
            if self._state.image is None:
                self._apply(transitions.set_error, transitions.MISSING_IMAGE_MESSAGE)
                return None
            return self._apply(transitions.start_extraction)

    def _run_extraction(self, seq: int, image: ImageUpload) -> AppState:
        try:
            text = self._get_client().extract_text(image)
        except Exception as e:
            logger.exception("Text extraction failed")
            return self._apply(
                transitions.fail_extraction, seq,
                error_message(e, transitions.EXTRACTION_FALLBACK_MESSAGE),
            )
        return self._apply(transitions.finish_extraction, seq, text)

    def extract_text(self) -> AppState:
        """Run extraction for the selected image and wait for the result."""
        started = self._begin_extraction()
        if started is None:
            return self.state
        return self._run_extraction(started.extraction_seq, started.image)

    def submit_extract_text(self) -> Optional["Future[AppState]"]:
        """Start extraction in the background. Returns None if no image is selected."""
        started = self._begin_extraction()
        if started is None:
            return None
        return self._get_executor().submit(self._run_extraction, started.extraction_seq, started.image)

    # -------------------- translation --------------------

    def _begin_translation(self) -> Optional[AppState]:
        with self._lock:
            if not self._state.source_text:
                self._apply(transitions.set_error, transitions.MISSING_TEXT_MESSAGE)
                return None
            return self._apply(transitions.start_translation)

    def _run_translation(self, seq: int, source_text: str, rules) -> AppState:
        try:
            text = self._get_client().translate_text(source_text, rules)
        except Exception as e:
            logger.exception("Translation failed")
            return self._apply(
                transitions.fail_translation, seq,
                error_message(e, transitions.TRANSLATION_FALLBACK_MESSAGE),
            )
        return self._apply(transitions.finish_translation, seq, text)

    def translate_text(self) -> AppState:
        """Translate the current source text and wait for the result."""
        started = self._begin_translation()
        if started is None:
            return self.state
        return self._run_translation(
            started.translation_seq, started.source_text, started.custom_translations
        )

    def submit_translate_text(self) -> Optional["Future[AppState]"]:
        """Start translation in the background. Returns None if there is no source text."""
        started = self._begin_translation()
        if started is None:
            return None
        return self._get_executor().submit(
            self._run_translation,
            started.translation_seq, started.source_text, started.custom_translations,
        )

    # -------------------- custom translations --------------------

    def add_translation(self, english: Optional[str] = None, bisaya: Optional[str] = None) -> AppState:
        """Add a rule from the form buffers (or from the given values)."""
        with self._lock:
            if english is not None:
                self._apply(transitions.set_new_english, english)
            if bisaya is not None:
                self._apply(transitions.set_new_bisaya, bisaya)
            return self._apply(transitions.add_translation)

    def delete_translation(self, index: int) -> AppState:
        return self._apply(transitions.delete_translation, index)
