import math
import string
from dataclasses import dataclass, field
from typing import Dict, Optional

from .errors import InvalidConfigurationError

PADDING_CHAR = "="
SUPPORTED_SIZES = (16, 32, 64)

BASE16_SYMBOLS = "0123456789ABCDEF"
BASE32_SYMBOLS = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
BASE32_HEX_SYMBOLS = "0123456789ABCDEFGHIJKLMNOPQRSTUV"
BASE64_SYMBOLS = string.ascii_uppercase + string.ascii_lowercase + string.digits + "+/"
BASE64_URL_SYMBOLS = string.ascii_uppercase + string.ascii_lowercase + string.digits + "-_"


def _ascii_upper(char: str) -> str:
    # str.upper() would also fold non-ASCII letters (and may change length).
    if "a" <= char <= "z":
        return chr(ord(char) - 32)
    return char


@dataclass(frozen=True)
class Alphabet:
    """
    One RFC 4648 style symbol set and its block arithmetic.

    The derived constants only depend on the number of symbols:
    ``bits_per_char`` is log2 of the size, and a block is the smallest
    ``bytes_per_block`` bytes <-> ``chars_per_block`` characters pair that
    converts without leftover bits (1 <-> 2 for Base16, 5 <-> 8 for Base32,
    3 <-> 4 for Base64).
    """

    symbols: str
    case_sensitive: bool = True
    bits_per_char: int = field(init=False, repr=False)
    chars_per_block: int = field(init=False, repr=False)
    bytes_per_block: int = field(init=False, repr=False)
    max_padding_length: int = field(init=False, repr=False)
    _values: Dict[str, int] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        symbols = self.symbols
        if len(symbols) not in SUPPORTED_SIZES:
            raise InvalidConfigurationError(
                f"Alphabet must have 16, 32 or 64 symbols, got {len(symbols)}"
            )
        if len(set(symbols)) != len(symbols):
            raise InvalidConfigurationError("Alphabet symbols must be distinct")
        if PADDING_CHAR in symbols:
            raise InvalidConfigurationError(f"Padding character {PADDING_CHAR!r} can not be a symbol")
        if not self.case_sensitive and "".join(_ascii_upper(c) for c in symbols) != symbols:
            raise InvalidConfigurationError("Case-insensitive alphabets must be upper-case")

        bits = int(round(math.log2(len(symbols))))
        gcd = math.gcd(8, bits)
        chars_per_block = 8 // gcd
        object.__setattr__(self, "bits_per_char", bits)
        object.__setattr__(self, "chars_per_block", chars_per_block)
        object.__setattr__(self, "bytes_per_block", bits // gcd)
        object.__setattr__(self, "max_padding_length", chars_per_block - 8 // bits)
        object.__setattr__(self, "_values", {c: i for i, c in enumerate(symbols)})

    @property
    def size(self) -> int:
        return len(self.symbols)

    @property
    def requires_padding(self) -> bool:
        return self.max_padding_length > 0

    def encode(self, value: int) -> str:
        return self.symbols[value & (len(self.symbols) - 1)]

    def decode(self, char: str) -> Optional[int]:
        """Return the value of ``char``, or None if it is not a symbol."""
        if not self.case_sensitive:
            char = _ascii_upper(char)
        return self._values.get(char)

    def __contains__(self, char: object) -> bool:
        return isinstance(char, str) and self.decode(char) is not None


BASE_16 = Alphabet(BASE16_SYMBOLS, case_sensitive=False)
BASE_32 = Alphabet(BASE32_SYMBOLS, case_sensitive=False)
BASE_32_HEX = Alphabet(BASE32_HEX_SYMBOLS, case_sensitive=False)
BASE_64 = Alphabet(BASE64_SYMBOLS, case_sensitive=True)
BASE_64_URL = Alphabet(BASE64_URL_SYMBOLS, case_sensitive=True)
