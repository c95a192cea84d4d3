"""
RFC 4648 Base16 / Base32 / Base32-Hex / Base64 / Base64-URL codecs.

Usage::

    >>> from base_encoding import BASE_64
    >>> BASE_64.encode(b"foobar")
    'Zm9vYmFy'
    >>> BASE_64.without_padding().encode(b"foob")
    'Zm9vYg'
"""
from .alphabet import PADDING_CHAR, Alphabet
from .config import CodecConfig, load_config, save_config
from .engine import BASE_16, BASE_32, BASE_32_HEX, BASE_64, BASE_64_URL, BaseEncoding, Separator
from .errors import (
    BaseEncodingError,
    InvalidConfigurationError,
    InvalidLengthError,
    InvalidPaddingError,
    OutOfRangeError,
    UnknownCharacterError,
)
from .history import log_event
from .registry import custom_encoding, lookup, registry
from .utils import decode_bytes_best_effort

__all__ = [
    "PADDING_CHAR",
    "Alphabet",
    "BaseEncoding",
    "Separator",
    "BASE_16",
    "BASE_32",
    "BASE_32_HEX",
    "BASE_64",
    "BASE_64_URL",
    "BaseEncodingError",
    "InvalidConfigurationError",
    "InvalidLengthError",
    "InvalidPaddingError",
    "OutOfRangeError",
    "UnknownCharacterError",
    "CodecConfig",
    "load_config",
    "save_config",
    "custom_encoding",
    "lookup",
    "registry",
    "log_event",
    "decode_bytes_best_effort",
]
