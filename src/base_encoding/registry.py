from typing import Dict

from .alphabet import Alphabet
from .engine import BASE_16, BASE_32, BASE_32_HEX, BASE_64, BASE_64_URL, BaseEncoding
from .errors import InvalidConfigurationError


def registry() -> Dict[str, BaseEncoding]:
    return {
        "base16": BASE_16,
        "base32": BASE_32,
        "base32hex": BASE_32_HEX,
        "base64": BASE_64,
        "base64url": BASE_64_URL,
    }


def normalize_name(name: str) -> str:
    return name.strip().lower().replace("-", "").replace("_", "")


def lookup(name: str) -> BaseEncoding:
    """
    Return the named encoding.

    Names are matched case-insensitively and ignore '-' and '_', so
    "base64url", "Base64-URL" and "BASE_64_URL" are the same variant.
    """
    codecs = registry()
    try:
        return codecs[normalize_name(name)]
    except KeyError:
        raise InvalidConfigurationError(
            f"Unsupported base type: {name} (expected one of {', '.join(codecs)})"
        ) from None


def custom_encoding(symbols: str, case_sensitive: bool = True) -> BaseEncoding:
    """Build an encoding over a custom 16, 32 or 64 symbol alphabet."""
    return BaseEncoding(Alphabet(symbols, case_sensitive=case_sensitive))
