"""
Localization helpers.

Message catalogs are JSON files in ``menucup/messages/<locale>.json``.
The visitor's locale comes from the NEXT_LOCALE cookie; anything
unsupported falls back to the default locale.
"""

import json
import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from menucup.core.config import get_settings

logger = logging.getLogger(__name__)

MESSAGES_DIR = Path(__file__).parent / "messages"


def resolve_locale(value: Optional[str]) -> str:
    """Return ``value`` if supported, otherwise the default locale."""
    settings = get_settings()
    code = (value or "").strip().lower()
    if code in settings.supported_locales_list:
        return code
    return settings.default_locale


@lru_cache()
def load_messages(locale: str) -> dict:
    path = MESSAGES_DIR / f"{locale}.json"
    if not path.exists():
        logger.warning(f"No message catalog for locale '{locale}'")
        return {}
    with path.open(encoding="utf-8") as fh:
        return json.load(fh)


def _lookup(messages: dict, key: str) -> Optional[str]:
    node = messages
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return None
        node = node[part]
    return node if isinstance(node, str) else None


class Translator:
    """
    Dotted-key message lookup for one locale.

    Missing keys fall back to the default locale, then to the key itself.
    """

    def __init__(self, locale: str):
        self.locale = resolve_locale(locale)
        self.messages = load_messages(self.locale)
        self.fallback = load_messages(get_settings().default_locale)

    def __call__(self, key: str) -> str:
        return _lookup(self.messages, key) or _lookup(self.fallback, key) or key
