"""
Custom translation rules (English -> Bisaya overrides).

The list is ordered and identified by position; duplicates are allowed.
It is persisted as a JSON array under a single storage key and rewritten
in full after every change.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Sequence

from bisaya_translator.storage import KeyValueStore

logger = logging.getLogger(__name__)

STORAGE_KEY = "customTranslations"


def _text(value: Any) -> str:
    # JSON null reads as an empty field, not the string "None"
    return "" if value is None else str(value)


@dataclass(frozen=True)
class CustomTranslation:
    english: str
    bisaya: str

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CustomTranslation":
        return cls(english=_text(d.get("english")), bisaya=_text(d.get("bisaya")))

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)


def load_custom_translations(store: KeyValueStore, key: str = STORAGE_KEY) -> List[CustomTranslation]:
    """
    Read the stored list.

    A missing key gives an empty list. Unreadable content is logged and
    also gives an empty list; the error never reaches the caller.
    """
    try:
        raw = store.get_item(key)
        if not raw:
            return []
        data = json.loads(raw)
        if not isinstance(data, list):
            raise ValueError(f"expected a JSON array, got {type(data).__name__}")
        return [CustomTranslation.from_dict(item) for item in data]
    except (ValueError, TypeError, AttributeError, OSError) as e:
        # json.JSONDecodeError is a ValueError
        logger.error(f"Failed to parse custom translations from storage: {e}")
        return []


def save_custom_translations(
    store: KeyValueStore,
    translations: Sequence[CustomTranslation],
    key: str = STORAGE_KEY,
) -> None:
    """Serialize the full list and overwrite the stored value."""
    store.set_item(key, json.dumps([t.to_dict() for t in translations], ensure_ascii=False))


def add_custom_translation(
    translations: Sequence[CustomTranslation],
    english: str,
    bisaya: str,
) -> List[CustomTranslation]:
    """Return a new list with the trimmed pair appended (unchanged copy if either side is blank)."""
    english = (english or "").strip()
    bisaya = (bisaya or "").strip()
    if not english or not bisaya:
        return list(translations)
    return [*translations, CustomTranslation(english=english, bisaya=bisaya)]


def delete_custom_translation(translations: Sequence[CustomTranslation], index: int) -> List[CustomTranslation]:
    """Return a new list without the entry at ``index``."""
    return [t for i, t in enumerate(translations) if i != index]
