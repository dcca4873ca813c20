"""
Collation for name and title sorting.

A collation maps a string to a sort key. Two are provided:

- casefold_collation: Unicode-normalized, case-insensitive. Same result
  on every machine; the default.
- locale_collation(name): the C library's ordering for a named locale
  (accents and language rules), when that locale is installed.
"""

import locale
import unicodedata
from typing import Any, Callable

import structlog


logger = structlog.get_logger(__name__)

Collation = Callable[[str], Any]


def casefold_collation(text: str) -> tuple[str, str]:
    """Case-insensitive key; the raw NFKC text breaks ties deterministically."""
    normalized = unicodedata.normalize("NFKC", text)
    return normalized.casefold(), normalized


def locale_collation(name: str) -> Collation:
    """
    Build a collation for the locale `name` (e.g. 'en_US.UTF-8').

    setlocale is process-wide, so LC_COLLATE stays switched for the
    life of the process. Falls back to casefold_collation when the
    locale is not installed.
    """
    try:
        locale.setlocale(locale.LC_COLLATE, name)
    except locale.Error as e:
        logger.warning("collation_locale_unavailable", locale=name, error=str(e))
        return casefold_collation

    def collate(text: str) -> tuple[str, str]:
        return locale.strxfrm(text), text

    return collate
