class BaseEncodingError(ValueError):
    """Base class for every error raised by the codec."""


class OutOfRangeError(BaseEncodingError, IndexError):
    """Raised when an offset/length pair does not fit the input."""

    def __init__(self, offset: int, length: int, size: int) -> None:
        super().__init__(f"Range [{offset}, {offset}+{length}) is out of bounds for input of size {size}")
        self.offset = offset
        self.length = length
        self.size = size


class InvalidConfigurationError(BaseEncodingError):
    """Raised for bad separators, intervals, alphabets or variant names."""


class UnknownCharacterError(BaseEncodingError):
    def __init__(self, char: str, position: int) -> None:
        super().__init__(f"Unknown character {char!r} at position {position}")
        self.char = char
        self.position = position


class InvalidPaddingError(BaseEncodingError):
    def __init__(self, char: str, position: int) -> None:
        super().__init__(f"Invalid character {char!r} after padding at position {position}")
        self.char = char
        self.position = position


class InvalidLengthError(BaseEncodingError):
    def __init__(self, symbols: int, block: int) -> None:
        super().__init__(f"Invalid input length: {symbols} symbols is not a multiple of {block}")
        self.symbols = symbols
        self.block = block
