from typing import Iterator, Optional, Tuple

from bencoding.cursor import DIGITS, Cursor
from bencoding.errors import (DuplicateKey, InvalidType, NestingTooDeep, NoFoundClosingDelimiter,
                              NoFoundOpeningDelimiter, TrailingCharacters, UnexpectedCharType)
from bencoding.primitives import (BIG, I64, TOKEN_DICT, TOKEN_END, TOKEN_INTEGER, TOKEN_LIST,
                                  IntWidth, decode_utf8, parse_bytes, parse_signed, parse_str)
from bencoding.sorteddict import SortedDict

DEFAULT_MAX_DEPTH = 100


class Visitor:
    """
        Receives the values found by the Decoder.

        The decoder looks at the next tag byte and calls the matching method,
        a subclass implements the ones for the shapes it can be built from.
        Anything left unimplemented fails with `invalid_type`.

        `int_width` is the range integers are parsed into and `text` asks for
        byte strings to be validated as UTF-8 and handed to `visit_str`
        instead of `visit_bytes`.
    """
    expecting = "a bencode value"
    int_width: IntWidth = I64
    text = False
    invalid_type = InvalidType

    def _invalid(self, found: str):
        return self.invalid_type(f"Invalid type: {found}, expected {self.expecting}")

    def visit_int(self, value: int):
        raise self._invalid(f"integer {value}")

    def visit_bytes(self, value: memoryview):
        raise self._invalid("byte string")

    def visit_str(self, value: str):
        raise self._invalid(f"string {value!r}")

    def visit_seq(self, access: "SeqAccess"):
        raise self._invalid("list")

    def visit_map(self, access: "MapAccess"):
        raise self._invalid("dictionary")


class ValueVisitor(Visitor):
    """
        Builds plain Python values: int, bytes, list and SortedDict
    """
    expecting = "any bencode value"

    def visit_int(self, value: int) -> int:
        return value

    def visit_bytes(self, value: memoryview) -> bytes:
        return bytes(value)

    def visit_str(self, value: str) -> str:
        return value

    def visit_seq(self, access: "SeqAccess") -> list:
        return list(access.elements(self))

    def visit_map(self, access: "MapAccess") -> SortedDict:
        res = SortedDict()
        for key, value in access.entries(self, self):
            res.append(key, value)
        res.sort()
        return res


class IgnoredVisitor(Visitor):
    """
        Walks over a value of any shape and throws it away
    """
    int_width = BIG

    def visit_int(self, value):
        return None

    def visit_bytes(self, value):
        return None

    def visit_seq(self, access):
        for _ in access.elements(self):
            pass

    def visit_map(self, access):
        for _ in access.entries(self, self):
            pass


class SeqAccess:
    """
        Hands the elements of a list to a visitor one at a time
    """
    def __init__(self, decoder: "Decoder"):
        self._decoder = decoder

    def has_next(self) -> bool:
        return self._decoder._cursor.peek() != TOKEN_END[0]

    def next_element(self, visitor: Optional[Visitor] = None):
        return self._decoder.decode_any(visitor)

    def elements(self, visitor: Optional[Visitor] = None) -> Iterator:
        while self.has_next():
            yield self.next_element(visitor)

    def skip_rest(self):
        ignored = IgnoredVisitor()
        while self.has_next():
            self.next_element(ignored)


class MapAccess:
    """
        Hands the entries of a dictionary to a visitor, each key must be
        followed by exactly one call to `next_value`
    """
    def __init__(self, decoder: "Decoder"):
        self._decoder = decoder
        self._seen = set()
        self._pending_value = False

    def has_next(self) -> bool:
        return self._decoder._cursor.peek() != TOKEN_END[0]

    def next_key(self, visitor: Optional[Visitor] = None):
        if visitor is None:
            visitor = ValueVisitor()
        cursor = self._decoder._cursor
        position = cursor.position
        c = cursor.peek()
        if c not in DIGITS:
            raise UnexpectedCharType(c, position)
        raw = parse_bytes(cursor)
        if self._decoder.strict:
            key = bytes(raw)
            if key in self._seen:
                raise DuplicateKey(key, position)
            self._seen.add(key)
        self._pending_value = True
        if visitor.text:
            return visitor.visit_str(decode_utf8(raw, position))
        return visitor.visit_bytes(raw)

    def next_value(self, visitor: Optional[Visitor] = None):
        self._pending_value = False
        return self._decoder.decode_any(visitor)

    def entries(self, key_visitor: Optional[Visitor] = None,
                value_visitor: Optional[Visitor] = None) -> Iterator[Tuple]:
        while self.has_next():
            key = self.next_key(key_visitor)
            yield key, self.next_value(value_visitor)

    def skip_rest(self):
        ignored = IgnoredVisitor()
        if self._pending_value:
            self.next_value(ignored)
        while self.has_next():
            self.next_key(ignored)
            self.next_value(ignored)


class Decoder:
    """
        Decodes a bencoded buffer, reporting what it finds to a visitor
    """
    def __init__(self, data, max_depth: int = DEFAULT_MAX_DEPTH, strict: bool = False):
        """
            :param data: the bencoded input, bytes, bytearray or memoryview
            :param max_depth: the number of nested lists and dictionaries
                              accepted before failing with NestingTooDeep
            :param strict: reject dictionaries that repeat a key
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError("Argument 'data' must be of type bytes")
        self._cursor = Cursor(data)
        self.max_depth = max_depth
        self.strict = strict
        self._depth = 0

    @property
    def position(self) -> int:
        return self._cursor.position

    def decode(self, visitor: Optional[Visitor] = None):
        """
            Decodes the whole buffer as a single value

            :return The value built by `visitor`, plain Python values when
                    no visitor is given
        """
        value = self.decode_any(visitor)
        self.finish()
        return value

    def decode_prefix(self, visitor: Optional[Visitor] = None):
        """
            Decodes one value from the current position and leaves whatever
            follows it unread

            :return A tuple of the value and the number of bytes consumed
        """
        start = self._cursor.position
        value = self.decode_any(visitor)
        return value, self._cursor.position - start

    def finish(self):
        if not self._cursor.at_end:
            raise TrailingCharacters(self._cursor.position, self._cursor.remaining)

    def decode_any(self, visitor: Optional[Visitor] = None):
        if visitor is None:
            visitor = ValueVisitor()
        c = self._cursor.peek()
        if c in DIGITS:
            if visitor.text:
                return self.decode_str(visitor)
            return self.decode_bytes(visitor)
        elif c == TOKEN_INTEGER[0]:
            return self.decode_int(visitor)
        elif c == TOKEN_LIST[0]:
            return self.decode_seq(visitor)
        elif c == TOKEN_DICT[0]:
            return self.decode_map(visitor)
        else:
            raise UnexpectedCharType(c, self._cursor.position)

    def decode_int(self, visitor: Visitor):
        return visitor.visit_int(parse_signed(self._cursor, visitor.int_width))

    def decode_bytes(self, visitor: Visitor):
        return visitor.visit_bytes(parse_bytes(self._cursor))

    def decode_str(self, visitor: Visitor):
        return visitor.visit_str(parse_str(self._cursor))

    def decode_seq(self, visitor: Visitor):
        self._open(TOKEN_LIST)
        try:
            access = SeqAccess(self)
            value = visitor.visit_seq(access)
            access.skip_rest()
        finally:
            self._depth -= 1
        self._close()
        return value

    def decode_map(self, visitor: Visitor):
        self._open(TOKEN_DICT)
        try:
            access = MapAccess(self)
            value = visitor.visit_map(access)
            access.skip_rest()
        finally:
            self._depth -= 1
        self._close()
        return value

    def _open(self, token: bytes):
        position = self._cursor.position
        if self._cursor.read_byte() != token[0]:
            raise NoFoundOpeningDelimiter(token, position)
        if self._depth >= self.max_depth:
            raise NestingTooDeep(self.max_depth, position)
        self._depth += 1

    def _close(self):
        position = self._cursor.position
        if self._cursor.read_byte() != TOKEN_END[0]:
            raise NoFoundClosingDelimiter(TOKEN_END, position)
