"""
Gemini client for text extraction and Bisaya translation.

Each operation is exactly one ``generate_content`` request. There is no
retry: a failed call raises and the caller decides what to show.
"""

import logging
from typing import Any, Optional, Sequence

from google import genai
from google.genai import types

from bisaya_translator.config import Settings
from bisaya_translator.custom_translations import CustomTranslation
from bisaya_translator.image_utils import ImageUpload
from bisaya_translator.prompts import EXTRACTION_INSTRUCTION, build_translation_prompt

logger = logging.getLogger(__name__)


def image_to_part(image: ImageUpload) -> types.Part:
    """Wrap the image as inline data (sent base64-encoded by the SDK)."""
    return types.Part.from_bytes(data=image.data, mime_type=image.mime_type)


class GeminiClient:
    """Thin wrapper around ``genai.Client`` for the two calls the app makes."""

    def __init__(self, settings: Settings, client: Optional[Any] = None):
        """
        Args:
            settings: application settings (API key and model names)
            client: pre-built client, mainly for tests. When omitted a
                ``genai.Client`` is created from the configured API key.
        """
        self.extraction_model = settings.extraction_model
        self.translation_model = settings.translation_model
        if client is None:
            client = genai.Client(api_key=settings.require_api_key())
            logger.info(f"Initialized Gemini client (extraction={self.extraction_model}, "
                        f"translation={self.translation_model})")
        self.client = client

    def extract_text(self, image: ImageUpload) -> str:
        """Ask the vision model for the English text visible in ``image``."""
        logger.info(f"Extracting text from {image.name} ({image.mime_type}, {len(image.data)} bytes)")
        response = self.client.models.generate_content(
            model=self.extraction_model,
            contents=types.Content(
                role="user",
                parts=[types.Part.from_text(text=EXTRACTION_INSTRUCTION), image_to_part(image)],
            ),
        )
        text = response.text or ""
        logger.info(f"Extraction returned {len(text)} chars")
        return text

    def translate_text(self, source_text: str, custom_translations: Sequence[CustomTranslation] = ()) -> str:
        """Translate ``source_text`` to Bisaya, passing custom rules in the prompt."""
        prompt = build_translation_prompt(source_text, custom_translations)
        logger.info(f"Translating {len(source_text)} chars with {len(custom_translations)} custom rules")
        logger.debug(f"Translation prompt: {prompt}")
        response = self.client.models.generate_content(
            model=self.translation_model,
            contents=types.Content(role="user", parts=[types.Part.from_text(text=prompt)]),
        )
        text = response.text or ""
        logger.info(f"Translation returned {len(text)} chars")
        return text
