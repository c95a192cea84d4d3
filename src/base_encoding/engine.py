"""
Configurable RFC 4648 encoder/decoder.

A :class:`BaseEncoding` pairs an :class:`~base_encoding.alphabet.Alphabet`
with three options (padding, separator, unknown-character tolerance). Values
are immutable: every option method returns a new encoding, so the module
level constants can be shared freely between threads.
"""
from dataclasses import dataclass, replace
from typing import List, NamedTuple, Optional, Union

from . import alphabet as alphabets
from .alphabet import PADDING_CHAR, Alphabet
from .errors import (
    InvalidConfigurationError,
    InvalidLengthError,
    InvalidPaddingError,
    OutOfRangeError,
    UnknownCharacterError,
)

BytesLike = Union[bytes, bytearray, memoryview]

# Only the low `count` bits of an accumulator are live; at most 13 of them.
_ACC_MASK = 0xFFFF


class Separator(NamedTuple):
    text: str
    interval: int


def _check_range(size: int, offset: int, length: Optional[int]) -> int:
    if length is None:
        length = size - offset
    if offset < 0 or length < 0 or offset + length > size:
        raise OutOfRangeError(offset, length, size)
    return length


@dataclass(frozen=True)
class BaseEncoding:
    alphabet: Alphabet
    omit_padding: Optional[bool] = None
    ignore_unknown: bool = False
    separator: Optional[Separator] = None

    def __post_init__(self) -> None:
        if self.omit_padding is None:
            object.__setattr__(self, "omit_padding", not self.alphabet.requires_padding)
        if self.separator is not None:
            text, interval = self.separator
            if interval <= 0:
                raise InvalidConfigurationError(f"Separator interval must be positive, got {interval}")
            for char in text:
                if char == PADDING_CHAR or char in self.alphabet:
                    raise InvalidConfigurationError(f"Invalid separator character: {char!r}")
            object.__setattr__(self, "separator", Separator(text, interval))

    @property
    def pads(self) -> bool:
        """True when encoded output carries (and decoding expects) padding."""
        return self.alphabet.requires_padding and not self.omit_padding

    def with_separator(self, text: str, interval: int) -> "BaseEncoding":
        return replace(self, separator=Separator(text, interval))

    def without_padding(self) -> "BaseEncoding":
        return replace(self, omit_padding=True)

    def ignore_unknown_characters(self) -> "BaseEncoding":
        return replace(self, ignore_unknown=True)

    def encoded_length(self, length: int) -> int:
        """Exact size of ``encode()`` output for ``length`` input bytes."""
        if length < 0:
            raise OutOfRangeError(0, length, 0)
        alphabet = self.alphabet
        if self.pads:
            blocks = -(-length // alphabet.bytes_per_block)
            chars = blocks * alphabet.chars_per_block
        else:
            chars = -(-length * 8 // alphabet.bits_per_char)
        if self.separator is not None and chars > 0:
            text, interval = self.separator
            chars += ((chars - 1) // interval) * len(text)
        return chars

    def encode(self, data: BytesLike, offset: int = 0, length: Optional[int] = None) -> str:
        length = _check_range(len(data), offset, length)
        alphabet = self.alphabet
        bits = alphabet.bits_per_char
        mask = (1 << bits) - 1
        out: List[str] = []
        acc = 0
        count = 0
        for byte in bytes(data[offset:offset + length]):
            acc = ((acc << 8) | byte) & _ACC_MASK
            count += 8
            while count >= bits:
                count -= bits
                out.append(alphabet.encode((acc >> count) & mask))
        if count > 0:
            out.append(alphabet.encode((acc & ((1 << count) - 1)) << (bits - count)))
        if self.pads:
            out.append(PADDING_CHAR * (-len(out) % alphabet.chars_per_block))
        encoded = "".join(out)
        if self.separator is None:
            return encoded
        text, interval = self.separator
        return text.join(encoded[i:i + interval] for i in range(0, len(encoded), interval))

    def decode(self, text: str, offset: int = 0, length: Optional[int] = None) -> bytes:
        length = _check_range(len(text), offset, length)
        text = text[offset:offset + length]
        if self.separator is not None and self.separator.text:
            text = text.replace(self.separator.text, "")
        alphabet = self.alphabet
        bits = alphabet.bits_per_char
        pads = self.pads
        out = bytearray()
        acc = 0
        count = 0
        symbols = 0
        padding = 0
        for position, char in enumerate(text):
            if pads and char == PADDING_CHAR:
                padding = self._count_padding(text, position)
                break
            value = alphabet.decode(char)
            if value is None:
                if self.ignore_unknown:
                    continue
                raise UnknownCharacterError(char, position)
            acc = ((acc << bits) | value) & _ACC_MASK
            count += bits
            symbols += 1
            while count >= 8:
                count -= 8
                out.append((acc >> count) & 0xFF)
        # Alphabets that never pad still can not end on half a byte.
        if pads or not alphabet.requires_padding:
            total = symbols + padding
            if total % alphabet.chars_per_block:
                raise InvalidLengthError(total, alphabet.chars_per_block)
        return bytes(out)

    def _count_padding(self, text: str, start: int) -> int:
        padding = 0
        for position in range(start, len(text)):
            char = text[position]
            if char == PADDING_CHAR:
                padding += 1
            elif not self.ignore_unknown or char in self.alphabet:
                raise InvalidPaddingError(char, position)
        return padding


BASE_16 = BaseEncoding(alphabets.BASE_16)
BASE_32 = BaseEncoding(alphabets.BASE_32)
BASE_32_HEX = BaseEncoding(alphabets.BASE_32_HEX)
BASE_64 = BaseEncoding(alphabets.BASE_64)
BASE_64_URL = BaseEncoding(alphabets.BASE_64_URL)
