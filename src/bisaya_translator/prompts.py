"""Prompt text sent to Gemini for extraction and translation."""

from typing import Sequence

from bisaya_translator.custom_translations import CustomTranslation

EXTRACTION_INSTRUCTION = (
    "Extract all the English words from this image. "
    "If no text is found, return an empty response."
)


def format_rule(rule: CustomTranslation) -> str:
    return f"'{rule.english.strip()}' must be translated as '{rule.bisaya.strip()}'"


def build_translation_prompt(source_text: str, custom_translations: Sequence[CustomTranslation] = ()) -> str:
    """
    Build the English -> Bisaya translation prompt.

    Custom rules are only embedded as instructions. Whether the model
    honours them (and how it resolves overlapping or conflicting rules)
    is up to the model; nothing here checks the output.
    """
    if not custom_translations:
        return f'Translate the following English text to Bisaya: "{source_text}"'

    rules = ", ".join(format_rule(t) for t in custom_translations)
    return (
        "Translate the following English text to Bisaya. "
        f"You must follow these translation rules strictly: {rules}. "
        "Do not deviate from these rules. "
        f'The text to translate is: "{source_text}"'
    )
