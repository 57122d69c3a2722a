"""Titles and messages for coverage annotations, by locale."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Mapping, Optional, Union

DEFAULT_LOCALE = "en"

MESSAGE_KEYS = (
    "notCoveredStatementTitle",
    "notCoveredStatementMessage",
    "notCoveredBranchTitle",
    "notCoveredBranchMessage",
    "notCoveredFunctionTitle",
    "notCoveredFunctionMessage",
)

EN_MESSAGES = {
    "notCoveredStatementTitle": "🧾 Statement is not covered",
    "notCoveredStatementMessage": "Warning! Not covered statement",
    "notCoveredBranchTitle": "🌿 Branch is not covered",
    "notCoveredBranchMessage": "Warning! Not covered branch",
    "notCoveredFunctionTitle": "🕹️ Function is not covered",
    "notCoveredFunctionMessage": "Warning! Not covered function",
}


class MessageCatalog:
    """Looks up display strings by message key in the active locale.

    Instances are callable, so they can be passed wherever a `key -> string'
    function is expected.  Lookups fall back from e.g. "pt-BR" to "pt", then to
    the default locale, and finally to the key itself.
    """

    def __init__(self, locale: Optional[str] = None):
        self.locale = locale or DEFAULT_LOCALE
        self.tables: Dict[str, Dict[str, str]] = {DEFAULT_LOCALE: dict(EN_MESSAGES)}

    def update(self, messages: Mapping[str, str], locale: Optional[str] = None) -> None:
        """Adds (or replaces) messages for a locale, the active one by default."""
        self.tables.setdefault(locale or self.locale, {}).update(messages)

    def load(self, path: Union[str, Path]) -> None:
        """Loads messages from a JSON file.

        The file may hold either a flat {key: message} object, applied to the
        active locale, or an object of {locale: {key: message}} tables.
        """
        with Path(path).open(encoding="utf-8") as f:
            data = json.load(f)

        if not isinstance(data, dict):
            raise ValueError(f"{path}: expected a JSON object of messages")

        if all(isinstance(v, str) for v in data.values()):
            self.update(data)
            return

        for locale, messages in data.items():
            if not isinstance(messages, dict):
                raise ValueError(f"{path}: messages for locale {locale!r} must be an object")
            for key, message in messages.items():
                if not isinstance(message, str):
                    raise ValueError(f"{path}: message {key!r} for locale {locale!r} must be a string")
            self.update(messages, locale)

    def _candidate_locales(self):
        yield self.locale
        for sep in ("-", "_"):
            if sep in self.locale:
                yield self.locale.split(sep)[0]
        yield DEFAULT_LOCALE

    def __call__(self, key: str) -> str:
        for locale in self._candidate_locales():
            table = self.tables.get(locale)
            if table and key in table:
                return table[key]

        return key


def default_messages(key: str) -> str:
    """Returns the built-in English message for `key'."""
    return EN_MESSAGES.get(key, key)
