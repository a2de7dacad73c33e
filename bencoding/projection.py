"""
    Decoding straight into application types.

    `visitor_for` turns a type hint into a Visitor for the Decoder:

        decode(b"li1ei2ee", List[int])          -> [1, 2]
        decode(b"d4:name3:bobe", Person)        -> Person(name="bob")
        decode(b"i300e", Annotated[int, U8])    -> ParseIntError

    Dataclass fields are matched by name, or by `metadata={"bencode": key}`
    when the dictionary key is not a valid identifier.
"""
import dataclasses
import types
from collections.abc import Mapping, Sequence
from enum import Enum
from typing import Annotated, Any, List, Union, get_args, get_origin, get_type_hints

from bencoding.decoder import IgnoredVisitor, MapAccess, SeqAccess, ValueVisitor, Visitor
from bencoding.errors import (ExpectedInt, ExpectedNull, InvalidType, MissingField,
                              UnsupportedValueType)
from bencoding.primitives import I64, IntWidth
from bencoding.sorteddict import SortedDict

_UNION_TYPES = tuple(t for t in (Union, getattr(types, "UnionType", None)) if t is not None)


class IntVisitor(Visitor):
    expecting = "an integer"
    invalid_type = ExpectedInt

    def __init__(self, width: IntWidth = I64):
        self.int_width = width

    def visit_int(self, value: int) -> int:
        return value


class BytesVisitor(Visitor):
    expecting = "a byte string"

    def visit_bytes(self, value: memoryview) -> bytes:
        return bytes(value)


class StrVisitor(Visitor):
    expecting = "a UTF-8 string"
    text = True

    def visit_str(self, value: str) -> str:
        return value


class NullVisitor(Visitor):
    expecting = "null, which bencode cannot express"
    invalid_type = ExpectedNull


class ListVisitor(Visitor):
    expecting = "a list"

    def __init__(self, item: Visitor, factory=list):
        self.item = item
        self.factory = factory

    def visit_seq(self, access: SeqAccess):
        return self.factory(access.elements(self.item))


class TupleVisitor(Visitor):
    """
        A fixed length list whose elements each have their own type
    """
    def __init__(self, items: List[Visitor]):
        self.items = items
        self.expecting = f"a list of {len(items)} elements"

    def visit_seq(self, access: SeqAccess) -> tuple:
        res = []
        for item in self.items:
            if not access.has_next():
                raise InvalidType(f"Invalid length {len(res)}, expected {self.expecting}")
            res.append(access.next_element(item))
        if access.has_next():
            raise InvalidType(f"Too many elements, expected {self.expecting}")
        return tuple(res)


class DictVisitor(Visitor):
    expecting = "a dictionary"

    def __init__(self, key: Visitor, value: Visitor, factory=dict):
        self.key = key
        self.value = value
        self.factory = factory

    def visit_map(self, access: MapAccess):
        res = self.factory(access.entries(self.key, self.value))
        if isinstance(res, SortedDict):
            res.sort()
        return res


def field_key(field: dataclasses.Field) -> str:
    return field.metadata.get("bencode", field.name)


def _is_optional(hint) -> bool:
    return get_origin(hint) in _UNION_TYPES and type(None) in get_args(hint)


class DataclassVisitor(Visitor):
    """
        Builds a dataclass from a dictionary. Keys may come in any order,
        keys without a matching field are skipped. A missing field falls
        back to its default, or to None when it is Optional.
    """
    def __init__(self, cls: type):
        self.cls = cls
        self.expecting = f"a dictionary for {cls.__name__}"

    def visit_map(self, access: MapAccess):
        hints = get_type_hints(self.cls, include_extras=True)
        fields = {field_key(f): f for f in dataclasses.fields(self.cls) if f.init}
        key_visitor = BytesVisitor()
        values = {}
        while access.has_next():
            raw = access.next_key(key_visitor)
            try:
                field = fields.get(raw.decode("utf-8"))
            except UnicodeDecodeError:
                field = None
            if field is None:
                access.next_value(IgnoredVisitor())
            else:
                values[field.name] = access.next_value(visitor_for(hints[field.name]))

        for key, field in fields.items():
            if field.name in values:
                continue
            if field.default is not dataclasses.MISSING or \
                    field.default_factory is not dataclasses.MISSING:
                continue
            if _is_optional(hints[field.name]):
                values[field.name] = None
            else:
                raise MissingField(key, self.cls.__name__)
        return self.cls(**values)


def _width_of(args) -> IntWidth:
    for arg in args:
        if isinstance(arg, IntWidth):
            return arg
    return I64


def visitor_for(target: Any = None) -> Visitor:
    """
        Return the Visitor that decodes into `target`

        :param target: a type hint, a Visitor instance, or None for plain
                       Python values
    """
    if isinstance(target, Visitor):
        return target
    if target is None or target is Any or target is object:
        return ValueVisitor()
    if target is type(None):
        return NullVisitor()

    origin = get_origin(target)
    args = get_args(target)

    if origin is Annotated:
        inner = args[0]
        if inner is int:
            return IntVisitor(_width_of(args[1:]))
        return visitor_for(inner)

    if origin in _UNION_TYPES:
        members = [a for a in args if a is not type(None)]
        if len(members) != 1:
            # an untagged union cannot be told apart on the wire
            raise UnsupportedValueType(target)
        return visitor_for(members[0])

    if origin is not None:
        if origin is tuple:
            if len(args) == 2 and args[1] is Ellipsis:
                return ListVisitor(visitor_for(args[0]), tuple)
            return TupleVisitor([visitor_for(a) for a in args])
        if origin in (list, Sequence):
            return ListVisitor(visitor_for(args[0] if args else None))
        if origin is SortedDict:
            return DictVisitor(StrVisitor(), visitor_for(args[0] if args else None), SortedDict)
        if origin in (dict, Mapping):
            key, value = args if args else (bytes, None)
            return DictVisitor(_key_visitor(key), visitor_for(value))
        raise UnsupportedValueType(target)

    if isinstance(target, type):
        if issubclass(target, Visitor):
            return target()
        if issubclass(target, (bool, float, Enum)):
            raise UnsupportedValueType(target)
        if dataclasses.is_dataclass(target):
            return DataclassVisitor(target)
        if target is int:
            return IntVisitor()
        if target is bytes:
            return BytesVisitor()
        if target is str:
            return StrVisitor()
        if target in (list, tuple):
            return ListVisitor(ValueVisitor(), target)
        if target is dict:
            return DictVisitor(BytesVisitor(), ValueVisitor())
        if target is SortedDict:
            return DictVisitor(StrVisitor(), ValueVisitor(), SortedDict)
    raise UnsupportedValueType(target)


def _key_visitor(key) -> Visitor:
    if key is str:
        return StrVisitor()
    if key is bytes or key is Any:
        return BytesVisitor()
    raise UnsupportedValueType(key)
