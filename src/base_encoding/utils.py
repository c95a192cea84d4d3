import codecs
from typing import Iterable, List, Optional

from .errors import InvalidConfigurationError

PREFERRED_ENCODINGS: List[str] = [
    "utf-8",
    "gb18030",
    "big5",
    "shift_jis",
    "cp1252",
    "latin-1",
]


def decode_bytes_best_effort(data: bytes, preferred_encoding: Optional[str] = None, encodings: Optional[Iterable[str]] = None) -> str:
    """
    Render decoded bytes as text for display.

    The preferred encoding (if any) is tried first, then ``encodings`` or the
    default list. If none of them fits, the first candidate is used with
    replacement characters so display never fails.
    """
    candidates: List[str] = []
    seen = set()
    for enc in [preferred_encoding, *(encodings or PREFERRED_ENCODINGS)]:
        if enc and enc.lower() not in seen:
            candidates.append(enc)
            seen.add(enc.lower())
    for enc in candidates:
        try:
            return data.decode(enc)
        except (UnicodeDecodeError, LookupError):
            continue
    return data.decode(candidates[0] if candidates else "utf-8", errors="replace")


def unescape(text: str) -> str:
    r"""Turn backslash escapes typed on a command line (``\n``, ``\r\n``) into characters."""
    try:
        return codecs.decode(text, "unicode_escape")
    except UnicodeDecodeError as exc:
        raise InvalidConfigurationError(f"Invalid escape sequence in {text!r}: {exc.reason}") from None
