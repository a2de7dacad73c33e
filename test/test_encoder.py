import enum
import unittest
from collections import OrderedDict
from dataclasses import dataclass, field
from typing import List, Optional

import bencoding
from bencoding import SortedDict
from bencoding.encoder import Encoder
from bencoding.errors import NestingTooDeep, UnsupportedValueType


class Colour(enum.Enum):
    RED = 1


class Level(enum.IntEnum):
    LOW = 1


@dataclass
class Publisher:
    name: str
    publisher_webpage: str
    publisher_location: Optional[str] = None
    tags: List[str] = field(default_factory=list)


@dataclass
class Info:
    name: str
    piece_length: int = field(metadata={"bencode": "piece length"})


class Magnet:
    def __init__(self, info_hash: bytes):
        self.info_hash = info_hash

    def __bencode__(self):
        return {"xt": self.info_hash}


class TestEncoder(unittest.TestCase):
    def testInt(self):
        output = Encoder(123).encode()
        golden = b"i123e"
        self.assertEqual(output, golden)

    def testStr(self):
        output = Encoder("Middle Earth").encode()
        golden = b"12:Middle Earth"
        self.assertEqual(output, golden)

    def testByteStr(self):
        output = Encoder(b"test_str").encode()
        golden = b"8:test_str"
        self.assertEqual(output, golden)

    def testList(self):
        output = Encoder(['spam', 'eggs', 123]).encode()
        golden = b"l4:spam4:eggsi123ee"
        self.assertEqual(output, golden)

    def testDict(self):
        d = OrderedDict()
        d['cow'] = 'moo'
        d['spam'] = 'eggs'
        output = Encoder(d).encode()
        golden = b"d3:cow3:moo4:spam4:eggse"
        self.assertEqual(output, golden)

    def testListWithDict(self):
        d = OrderedDict()
        d['cow'] = 'moo'
        d['spam'] = 'eggs'
        output = Encoder(['spam', 'eggs', 123, d]).encode()
        golden = b"l4:spam4:eggsi123ed3:cow3:moo4:spam4:eggsee"
        self.assertEqual(output, golden)

    def testDictWithList(self):
        d = OrderedDict()
        d['cow'] = 'moo'
        d['spam'] = 'eggs'
        d['t'] = ['spam', 'eggs', 123]
        output = Encoder(d).encode()
        golden = b"d3:cow3:moo4:spam4:eggs1:tl4:spam4:eggsi123eee"
        self.assertEqual(output, golden)


class CanonicalTests(unittest.TestCase):
    def test_zero_is_never_negative(self):
        self.assertEqual(b"i0e", bencoding.encode(0))
        self.assertEqual(b"i0e", bencoding.encode(-0))

    def test_negative(self):
        self.assertEqual(b"i-52e", bencoding.encode(-52))

    def test_large_integer(self):
        self.assertEqual(b"i18446744073709551616e", bencoding.encode(2**64))

    def test_strings(self):
        self.assertEqual(b"4:spam", bencoding.encode("spam"))
        self.assertEqual(b"0:", bencoding.encode(""))
        self.assertEqual("8:ϚРΑϺ".encode("utf-8"), bencoding.encode("ϚРΑϺ"))

    def test_bytes_like(self):
        self.assertEqual(b"3:\x00\xff\x10", bencoding.encode(b"\x00\xff\x10"))
        self.assertEqual(b"4:spam", bencoding.encode(bytearray(b"spam")))
        self.assertEqual(b"4:spam", bencoding.encode(memoryview(b"spam")))

    def test_lists(self):
        self.assertEqual(b"l4:spam4:eggse", bencoding.encode(["spam", "eggs"]))
        self.assertEqual(b"li15ei6ee", bencoding.encode([15, 6]))
        self.assertEqual(b"lli16ei3eeli12ei25eee", bencoding.encode([[16, 3], [12, 25]]))
        self.assertEqual(b"li1ei2ee", bencoding.encode((1, 2)))
        self.assertEqual(b"le", bencoding.encode([]))

    def test_dict_keys_are_sorted(self):
        d = {"spam": "eggs", "cow": "moo"}

        self.assertEqual(b"d3:cow3:moo4:spam4:eggse", bencoding.encode(d))

    def test_insertion_order_does_not_matter(self):
        first = SortedDict()
        first.append("open", [24, 34, 44])
        first.append("close", [42, 43, 44])
        second = SortedDict()
        second.append("close", [42, 43, 44])
        second.append("open", [24, 34, 44])

        golden = b"d5:closeli42ei43ei44ee4:openli24ei34ei44eee"
        self.assertEqual(golden, bencoding.encode(first))
        self.assertEqual(golden, bencoding.encode(second))
        self.assertEqual(golden, bencoding.encode(dict(open=[24, 34, 44], close=[42, 43, 44])))

    def test_keys_sort_by_bytes(self):
        d = {"publisher": "bob", "publisher-webpage": "www.example.com",
             "publisher.location": "home"}

        self.assertEqual(b"d9:publisher3:bob17:publisher-webpage15:www.example.com"
                         b"18:publisher.location4:homee", bencoding.encode(d))

    def test_mixed_str_and_bytes_keys(self):
        self.assertEqual(b"d1:ai1e1:bi2ee", bencoding.encode({b"b": 2, "a": 1}))

    def test_empty_dict(self):
        self.assertEqual(b"de", bencoding.encode({}))
        self.assertEqual(b"de", bencoding.encode(SortedDict()))


class UnsupportedTypeTests(unittest.TestCase):
    def test_rejected_values(self):
        for value in [True, False, 1.5, None, Colour.RED, Level.LOW, object(), {1, 2}]:
            with self.assertRaises(UnsupportedValueType):
                bencoding.encode(value)

    def test_rejected_nested(self):
        with self.assertRaises(UnsupportedValueType):
            bencoding.encode({"a": [1, 2, 3.0]})

    def test_rejected_key(self):
        with self.assertRaises(UnsupportedValueType):
            bencoding.encode({1: "one"})

    def test_is_type_error(self):
        with self.assertRaises(TypeError):
            bencoding.encode(True)

    def test_self_reference(self):
        loop = []
        loop.append(loop)

        with self.assertRaises(NestingTooDeep):
            bencoding.encode(loop)

    def test_self_referencing_bencode_method(self):
        class Loop:
            def __bencode__(self):
                return self

        with self.assertRaises(NestingTooDeep):
            bencoding.encode(Loop())


class StructuredValueTests(unittest.TestCase):
    def test_dataclass(self):
        p = Publisher("bob", "www.example.com", "home")

        self.assertEqual(b"d4:name3:bob18:publisher_location4:home"
                         b"17:publisher_webpage15:www.example.com4:tagslee",
                         bencoding.encode(p))

    def test_dataclass_skips_none(self):
        p = Publisher("bob", "www.example.com")

        self.assertEqual(b"d4:name3:bob17:publisher_webpage15:www.example.com4:tagslee",
                         bencoding.encode(p))

    def test_dataclass_renamed_field(self):
        self.assertEqual(b"d4:name3:iso12:piece lengthi262144ee",
                         bencoding.encode(Info("iso", 262144)))

    def test_bencode_method(self):
        self.assertEqual(b"d2:xt2:\x01\x02e", bencoding.encode(Magnet(b"\x01\x02")))


class RoundTripTests(unittest.TestCase):
    def test_round_trip(self):
        values = [
            0, -1, 2**63 - 1, -2**63, b"", b"spam", b"\x00\xff" * 10,
            [], [b"a", [1, [2, [3]]]],
            SortedDict([(b"cow", b"moo"), (b"list", [1, 2, SortedDict([(b"x", b"")])])]),
        ]
        for value in values:
            self.assertEqual(value, bencoding.decode(bencoding.encode(value)))

    def test_nested_lists(self):
        value = [[7, 2], [12, 53]]

        self.assertEqual(value, bencoding.decode(bencoding.encode(value)))
