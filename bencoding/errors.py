from typing import Optional


class BencodeError(Exception):
    """
        Base class of every error raised while decoding or encoding bencode.

        Decode errors know the byte offset where the problem was detected,
        encode errors leave it as None.
    """
    def __init__(self, message: str, position: Optional[int] = None):
        self.message = message
        self.position = position
        if position is not None:
            message = f"{message} at position {position}"
        super().__init__(message)


class DecodeError(BencodeError, ValueError):
    pass


class UnexpectedEof(BencodeError, EOFError):
    def __init__(self, position: Optional[int] = None):
        super().__init__("Unexpected end of input", position)


class TrailingCharacters(DecodeError):
    def __init__(self, position: int, remaining: int):
        self.remaining = remaining
        super().__init__(f"{remaining} unexpected trailing bytes after the value", position)


class UnexpectedCharType(DecodeError):
    def __init__(self, char: int, position: int):
        self.char = char
        super().__init__(f"Unexpected type character {bytes([char])!r}", position)


class NoFoundColon(DecodeError):
    def __init__(self, position: int):
        super().__init__("Symbol ':' was expected but not found", position)


class NoFoundOpeningDelimiter(DecodeError):
    def __init__(self, delimiter: bytes, position: int):
        self.delimiter = delimiter
        super().__init__(f"Opening symbol {delimiter!r} was expected but not found", position)


class NoFoundClosingDelimiter(DecodeError):
    def __init__(self, delimiter: bytes, position: int):
        self.delimiter = delimiter
        super().__init__(f"Closing symbol {delimiter!r} was expected but not found", position)


class ParseIntError(DecodeError):
    pass


class WrongLengthOfString(DecodeError):
    def __init__(self, length: int, available: int, position: int):
        self.length = length
        self.available = available
        super().__init__(f"String declares {length} bytes but only {available} remain", position)


class InputNotUtf8(DecodeError):
    def __init__(self, position: int):
        super().__init__("A string containing invalid UTF-8 was read as text", position)


class NestingTooDeep(DecodeError):
    def __init__(self, max_depth: int, position: Optional[int] = None):
        self.max_depth = max_depth
        super().__init__(f"Nesting exceeds the maximum depth of {max_depth}", position)


class DuplicateKey(DecodeError):
    def __init__(self, key: bytes, position: int):
        self.key = key
        super().__init__(f"Duplicate dictionary key {key!r}", position)


class InvalidType(BencodeError, TypeError):
    """
        The wire shape is valid bencode but not what the target accepts
    """
    pass


class ExpectedInt(InvalidType):
    pass


class ExpectedNull(InvalidType):
    pass


class MissingField(InvalidType):
    def __init__(self, field: str, target: str, position: Optional[int] = None):
        self.field = field
        super().__init__(f"Missing field '{field}' for {target}", position)


class UnsupportedValueType(BencodeError, TypeError):
    def __init__(self, value_type):
        self.value_type = value_type
        name = getattr(value_type, "__name__", None) or repr(value_type)
        super().__init__(f"Type '{name}' cannot be represented in bencode")
