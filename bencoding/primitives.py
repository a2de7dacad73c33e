from collections import namedtuple

from bencoding.cursor import Cursor
from bencoding.errors import (InputNotUtf8, NoFoundClosingDelimiter, NoFoundColon,
                              NoFoundOpeningDelimiter, ParseIntError, UnsupportedValueType,
                              WrongLengthOfString)

# Indicates start of integers
TOKEN_INTEGER = b"i"

# Indicates start of list
TOKEN_LIST = b"l"

# Indicates start of dict
TOKEN_DICT = b"d"

# Indicate end of lists, dicts and integer values
TOKEN_END = b"e"

# Delimits string length from string data
TOKEN_STRING_SEPARATOR = b":"

TOKEN_MINUS = b"-"

IntWidth = namedtuple("IntWidth", ["name", "minimum", "maximum"])

I8 = IntWidth("i8", -2**7, 2**7 - 1)
I16 = IntWidth("i16", -2**15, 2**15 - 1)
I32 = IntWidth("i32", -2**31, 2**31 - 1)
I64 = IntWidth("i64", -2**63, 2**63 - 1)
U8 = IntWidth("u8", 0, 2**8 - 1)
U16 = IntWidth("u16", 0, 2**16 - 1)
U32 = IntWidth("u32", 0, 2**32 - 1)
U64 = IntWidth("u64", 0, 2**64 - 1)
# Python integers are unbounded, BIG accepts whatever the wire holds
BIG = IntWidth("big", None, None)


def read_integer(cursor: Cursor, width: IntWidth = BIG, negative: bool = False,
                 terminator: bytes = TOKEN_END) -> int:
    """
        Read the run of ASCII digits at the cursor and parse it into `width`.

        :param negative: negate the parsed value before the range check, a
                         minus sign already consumed by the caller
        :param terminator: the byte expected after the digits, only used to
                           report a run that reaches the end of the input
    """
    start = cursor.position
    end = cursor.scan_digits(terminator)
    digits = bytes(cursor.advance(end - start))
    if not digits:
        raise ParseIntError("Expected a decimal number", start)
    if len(digits) > 1 and digits[0:1] == b"0":
        raise ParseIntError(f"Leading zeros are not allowed in {digits.decode()}", start)

    if width.minimum is not None and width.maximum is not None and \
            len(digits) > len(str(max(-width.minimum, width.maximum))):
        raise ParseIntError(f"{len(digits)} digit number does not fit in {width.name}", start)
    try:
        value = int(digits)
    except ValueError:
        # the interpreter caps the length of decimal strings it converts
        raise ParseIntError(f"{len(digits)} digit number is too long to parse", start)
    if negative:
        value = -value
    if (width.minimum is not None and value < width.minimum) or \
            (width.maximum is not None and value > width.maximum):
        raise ParseIntError(f"{value} does not fit in {width.name}", start)
    return value


def _expect(cursor: Cursor, token: bytes, error):
    position = cursor.position
    if cursor.read_byte() != token[0]:
        raise error(token, position)


def parse_signed(cursor: Cursor, width: IntWidth = I64) -> int:
    """
        Parse `i[-]<digits>e` into `width`. Unsigned widths go through the
        same path, a negative value is then a range error. A bare `-0` is
        tolerated and yields 0.
    """
    _expect(cursor, TOKEN_INTEGER, NoFoundOpeningDelimiter)
    negative = False
    if cursor.peek() == TOKEN_MINUS[0]:
        cursor.read_byte()
        negative = True
    value = read_integer(cursor, width, negative)
    _expect(cursor, TOKEN_END, NoFoundClosingDelimiter)
    return value


def parse_bytes(cursor: Cursor) -> memoryview:
    """
        Parse `<length>:<payload>` and return the payload as a view into the
        input buffer
    """
    length = read_integer(cursor, terminator=TOKEN_STRING_SEPARATOR)
    position = cursor.position
    if cursor.read_byte() != TOKEN_STRING_SEPARATOR[0]:
        raise NoFoundColon(position)
    if length > cursor.remaining:
        raise WrongLengthOfString(length, cursor.remaining, cursor.position)
    return cursor.advance(length)


def decode_utf8(data: memoryview, position: int) -> str:
    try:
        return str(data, "utf-8")
    except UnicodeDecodeError:
        raise InputNotUtf8(position)


def parse_str(cursor: Cursor) -> str:
    position = cursor.position
    return decode_utf8(parse_bytes(cursor), position)


def encode_int(value: int) -> bytes:
    try:
        return bytes(f"i{value}e", encoding="ascii")
    except ValueError:
        # too many digits for the interpreter to write out as text
        raise UnsupportedValueType(type(value))


def encode_bytes(value) -> bytes:
    res = bytearray()
    res += str.encode(str(len(value)))
    res += TOKEN_STRING_SEPARATOR
    res += value
    return bytes(res)


def encode_str(value: str) -> bytes:
    # the length prefix counts encoded bytes, not characters
    return encode_bytes(value.encode("utf-8"))
