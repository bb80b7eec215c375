"""Cleanup for untrusted identity strings before they are used as store keys or values."""
import re
from typing import Optional, Union

_CONTROL_CHARS = re.compile(r"[\x00-\x1f\x7f]")


def sanitize_identity(text: Optional[Union[str, bytes]]) -> str:
    """
    Strip control characters (U+0000-U+001F, U+007F) and surrounding whitespace,
    then make sure the result survives a UTF-8 round trip.

    Input that is not valid UTF-8 (undecodable bytes, lone surrogates) comes back
    as an empty string rather than a partially repaired one.
    """
    if not text:
        return ""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError:
            return ""

    cleaned = _CONTROL_CHARS.sub("", text).strip()
    try:
        return cleaned.encode("utf-8").decode("utf-8")
    except UnicodeError:
        return ""
