"""
    Encoding and decoding of bencoded values.

        encode("spam")                          -> b"4:spam"
        decode(b"l4:spam4:eggse")               -> [b"spam", b"eggs"]
        decode(b"l4:spam4:eggse", List[str])    -> ["spam", "eggs"]
"""
from bencoding.decoder import (DEFAULT_MAX_DEPTH, Decoder, IgnoredVisitor, MapAccess, SeqAccess,
                               ValueVisitor, Visitor)
from bencoding.encoder import Encoder
from bencoding.errors import (BencodeError, DecodeError, DuplicateKey, ExpectedInt, ExpectedNull,
                              InputNotUtf8, InvalidType, MissingField, NestingTooDeep,
                              NoFoundClosingDelimiter, NoFoundColon, NoFoundOpeningDelimiter,
                              ParseIntError, TrailingCharacters, UnexpectedCharType, UnexpectedEof,
                              UnsupportedValueType, WrongLengthOfString)
from bencoding.primitives import BIG, I8, I16, I32, I64, U8, U16, U32, U64, IntWidth
from bencoding.projection import visitor_for
from bencoding.sorteddict import SortedDict

__version__ = "1.0.0"


def decode(data, target=None, *, max_depth: int = DEFAULT_MAX_DEPTH, strict: bool = False):
    """
        Decodes a complete bencoded buffer

        :param data: bytes, bytearray or memoryview holding exactly one value
        :param target: what to build, see `bencoding.projection.visitor_for`.
                       None gives int, bytes, list and SortedDict values
        :param max_depth: maximum nesting of lists and dictionaries
        :param strict: reject dictionaries that repeat a key
        :return The decoded value
    """
    return Decoder(data, max_depth=max_depth, strict=strict).decode(visitor_for(target))


def encode(value, *, max_depth: int = DEFAULT_MAX_DEPTH) -> bytes:
    """
        Encodes `value` in canonical bencode
    """
    return Encoder(value, max_depth=max_depth).encode()
