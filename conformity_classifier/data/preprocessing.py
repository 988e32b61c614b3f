# conformity_classifier/data/preprocessing.py
from __future__ import annotations

import re
import unicodedata
from typing import Any, Iterable, List

_WHITESPACE_RE = re.compile(r"\s+")


def clean_text(text: Any) -> str:
    """Basic text cleaning applied before featurization.

    Procurement names are short, so preprocessing stays minimal:

        - Convert non-string inputs to empty string.
        - Apply NFC normalization so composed and decomposed Cyrillic
          letters (e.g. "й") produce the same n-grams.
        - Strip leading/trailing whitespace.
        - Collapse multiple whitespace characters into a single space.

    Lowercasing is left to the vectorizers.

    Args:
        text: Raw text value.

    Returns:
        Cleaned text string.
    """
    if not isinstance(text, str):
        return ""

    stripped = unicodedata.normalize("NFC", text).strip()

    if not stripped:
        return ""

    # Normalize internal whitespace (spaces, tabs, newlines) to a single space
    return _WHITESPACE_RE.sub(" ", stripped)


def normalize_texts(texts: Iterable[Any]) -> List[str]:
    """Apply clean_text to every element; first step of the model pipeline."""
    return [clean_text(t) for t in texts]
