import re
from typing import Any


def normalize_text(text: str) -> str:
    """Normalize free text submitted through the form.

    Converts different line break formats to standard newlines,
    collapses runs of spaces/tabs into single spaces, and reduces
    excessive blank lines.

    Args:
        text: Raw text to normalize.

    Returns:
        str: Normalized and trimmed text.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def is_blank(value: Any) -> bool:
    """Return True for values a form field treats as not provided.

    ``None`` and strings that are empty after trimming are blank; numbers
    (including ``0``) and any other value are not.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False
