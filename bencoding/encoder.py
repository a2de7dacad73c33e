import dataclasses
from collections.abc import Mapping
from enum import Enum

from bencoding.decoder import DEFAULT_MAX_DEPTH
from bencoding.errors import NestingTooDeep, UnsupportedValueType
from bencoding.primitives import (TOKEN_DICT, TOKEN_END, TOKEN_LIST, encode_bytes, encode_int,
                                  encode_str)
from bencoding.projection import field_key
from bencoding.sorteddict import SortedDict, key_bytes


class Encoder:
    """
        Encodes a python object into bencoding format

        Supported values are bytes-like objects, str (as UTF-8), int, lists
        and tuples, mappings with str or bytes keys, dataclass instances and
        objects with a `__bencode__` method returning one of those.
        Dictionary keys are always written in ascending byte order.
    """
    def __init__(self, data, max_depth: int = DEFAULT_MAX_DEPTH):
        self.data = data
        self.max_depth = max_depth

    def encode(self) -> bytes:
        # nothing is returned unless the whole value could be encoded
        result = bytearray()
        self._encode_data_type(self.data, result, 0)
        return bytes(result)

    def _encode_data_type(self, data, result: bytearray, depth: int):
        # bool is a subclass of int and IntEnum of both, so these come first
        if isinstance(data, (bool, float, Enum)) or data is None:
            raise UnsupportedValueType(type(data))
        elif isinstance(data, int):
            result += encode_int(int(data))
        elif isinstance(data, str):
            result += encode_str(data)
        elif isinstance(data, (bytes, bytearray)):
            result += encode_bytes(data)
        elif isinstance(data, memoryview):
            result += encode_bytes(data.tobytes())
        elif isinstance(data, (list, tuple)):
            self._encode_list(data, result, depth)
        elif isinstance(data, (Mapping, SortedDict)):
            self._encode_dict(data.items(), result, depth)
        elif dataclasses.is_dataclass(data) and not isinstance(data, type):
            self._encode_dataclass(data, result, depth)
        elif hasattr(data, "__bencode__"):
            self._encode_data_type(data.__bencode__(), result, self._enter(depth))
        else:
            raise UnsupportedValueType(type(data))

    def _enter(self, depth: int) -> int:
        if depth >= self.max_depth:
            raise NestingTooDeep(self.max_depth)
        return depth + 1

    def _encode_list(self, data, result: bytearray, depth: int):
        depth = self._enter(depth)
        result += TOKEN_LIST
        for item in data:
            self._encode_data_type(item, result, depth)
        result += TOKEN_END

    def _encode_dict(self, items, result: bytearray, depth: int):
        depth = self._enter(depth)
        pairs = []
        for key, value in items:
            if not isinstance(key, (str, bytes)):
                raise UnsupportedValueType(type(key))
            pairs.append((key_bytes(key), value))
        pairs.sort(key=lambda pair: pair[0])

        result += TOKEN_DICT
        for key, value in pairs:
            result += encode_bytes(key)
            self._encode_data_type(value, result, depth)
        result += TOKEN_END

    def _encode_dataclass(self, data, result: bytearray, depth: int):
        items = [(field_key(f), getattr(data, f.name)) for f in dataclasses.fields(data)]
        # bencode has no null, absent optional fields are left out
        self._encode_dict([(k, v) for k, v in items if v is not None], result, depth)
