from collections.abc import Mapping
from typing import Generic, Iterable, Iterator, List, Tuple, TypeVar, Union

Key = Union[str, bytes]
V = TypeVar("V")


def key_bytes(key: Key) -> bytes:
    """
        The bytes a dictionary key occupies on the wire, which is also what
        canonical ordering compares
    """
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)


class SortedDict(Generic[V]):
    """
        A dictionary that is always read in bencode's canonical key order.

        Pairs are kept in a plain list. Mutations only mark the list dirty,
        every read sorts it first, so iteration, lookups, equality, display
        and encoding all observe ascending keys. Keys are compared by their
        UTF-8 bytes, so a str key and the bytes it encodes to are the same
        key for ordering and equality. The sort is stable, so duplicate keys
        keep their relative positions.
    """
    def __init__(self, pairs: Union[Iterable[Tuple[Key, V]], Mapping, None] = None):
        self._pairs: List[Tuple[Key, V]] = []
        self._sorted = True
        if pairs is not None:
            if isinstance(pairs, Mapping):
                pairs = pairs.items()
            for key, value in pairs:
                self.append(key, value)

    @classmethod
    def with_capacity(cls, capacity: int) -> "SortedDict[V]":
        """
            Python lists grow on demand, the capacity is only a hint
        """
        if capacity < 0:
            raise ValueError("Capacity must not be negative")
        return cls()

    def append(self, key: Key, value: V):
        if not isinstance(key, (str, bytes)):
            raise TypeError(f"Dictionary keys must be str or bytes, not {type(key).__name__}")
        self._pairs.append((key, value))
        self._sorted = False

    def sort(self):
        if not self._sorted:
            self._pairs.sort(key=lambda pair: key_bytes(pair[0]))
            self._sorted = True

    def _find(self, key: Key) -> int:
        self.sort()
        for index, (k, _) in enumerate(self._pairs):
            if k == key:
                return index
        return -1

    def pairs(self) -> List[Tuple[Key, V]]:
        self.sort()
        return list(self._pairs)

    def items(self) -> Iterator[Tuple[Key, V]]:
        self.sort()
        return iter(list(self._pairs))

    def keys(self) -> List[Key]:
        return [k for k, _ in self.items()]

    def values(self) -> List[V]:
        return [v for _, v in self.items()]

    def get(self, key: Key, default=None):
        index = self._find(key)
        if index < 0:
            return default
        return self._pairs[index][1]

    def __getitem__(self, key: Key) -> V:
        index = self._find(key)
        if index < 0:
            raise KeyError(key)
        return self._pairs[index][1]

    def __setitem__(self, key: Key, value: V):
        index = self._find(key)
        if index < 0:
            self.append(key, value)
        else:
            self._pairs[index] = (key, value)

    def __delitem__(self, key: Key):
        index = self._find(key)
        if index < 0:
            raise KeyError(key)
        del self._pairs[index]

    def __contains__(self, key) -> bool:
        return self._find(key) >= 0

    def __iter__(self) -> Iterator[Key]:
        return iter(self.keys())

    def __len__(self) -> int:
        return len(self._pairs)

    def __bool__(self) -> bool:
        return bool(self._pairs)

    def __eq__(self, other) -> bool:
        # str and bytes keys compare by the bytes they encode to
        if isinstance(other, SortedDict):
            return [(key_bytes(k), v) for k, v in self.pairs()] == \
                [(key_bytes(k), v) for k, v in other.pairs()]
        if isinstance(other, Mapping):
            return len(self) == len(other) and all(
                k in other and other[k] == v for k, v in self.items())
        return NotImplemented

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.pairs()!r})"

    def __str__(self) -> str:
        body = ", ".join(f"{k!r}: {v!r}" for k, v in self.items())
        return "{" + body + "}"
