"""
Text utility functions for word and cell normalization.
"""

import math
import re
import unicodedata
from typing import Any


def normalize_text(text: str) -> str:
    """
    Collapse whitespace and strip a piece of text.

    Args:
        text: Raw text to normalize

    Returns:
        Normalized text
    """
    if not text:
        return ""

    text = re.sub(r"\s+", " ", text)
    return text.strip()


def clean_cell(value: Any) -> str:
    """
    Coerce a spreadsheet cell into a trimmed string.

    Empty cells arrive as None from csv and as NaN from pandas;
    numeric cells (ids typed as numbers) are stringified.

    Args:
        value: Raw cell value

    Returns:
        Trimmed string, empty for missing cells
    """
    if value is None:
        return ""
    if isinstance(value, float):
        if math.isnan(value):
            return ""
        if value.is_integer():
            return str(int(value))
    return normalize_text(str(value))


def normalize_header(name: Any) -> str:
    """Lowercase a column header and drop spaces, dashes and underscores."""
    return re.sub(r"[\s_\-]+", "", clean_cell(name)).lower()


def slugify(text: str) -> str:
    """
    Build a URL slug from a name.

    Args:
        text: Source text

    Returns:
        Lowercase ASCII slug
    """
    # Vietnamese d-stroke has no decomposition
    text = text.replace("đ", "d").replace("Đ", "D")
    ascii_text = unicodedata.normalize("NFKD", text).encode(
        "ascii", "ignore"
    ).decode("ascii")
    slug = re.sub(r"[^a-zA-Z0-9]+", "-", ascii_text).strip("-").lower()
    return slug
