import io
import os
import json
import tempfile
import unittest
from contextlib import redirect_stdout

from bencoding import SortedDict
from bencoding.cli import main, to_json

from . import no_logging


class ToJsonTests(unittest.TestCase):
    def test_text_and_binary(self):
        value = SortedDict([(b"name", b"spam"), (b"pieces", b"\xff\x00"), (b"\xfe", 1)])

        self.assertEqual({"name": "spam", "pieces": {"hex": "ff00"}, "fe": 1}, to_json(value))

    def test_list(self):
        self.assertEqual(["a", 1, []], to_json([b"a", 1, []]))

    def test_duplicate_keys_keep_last_value(self):
        value = SortedDict([(b"a", 1), (b"a", 2)])
        with self.assertLogs(level="DEBUG") as logs:
            self.assertEqual({"a": 2}, to_json(value))

        self.assertIn("Duplicate key 'a'", logs.output[0])


class CommandTests(unittest.TestCase):
    def setUp(self):
        self.folder = tempfile.TemporaryDirectory()

    def tearDown(self):
        self.folder.cleanup()

    def _write(self, name, data: bytes) -> str:
        path = os.path.join(self.folder.name, name)
        with open(path, "wb") as f:
            f.write(data)
        return path

    def test_decode(self):
        path = self._write("a.bencode", b"d3:cowli1ei2ee4:spam4:eggse")
        out = io.StringIO()
        with no_logging, redirect_stdout(out):
            status = main(["decode", path])

        self.assertEqual(0, status)
        self.assertEqual({"cow": [1, 2], "spam": "eggs"}, json.loads(out.getvalue()))

    def test_decode_invalid(self):
        path = self._write("a.bencode", b"l4:spam")
        with no_logging:
            self.assertEqual(1, main(["decode", path]))

    def test_decode_missing_file(self):
        with no_logging:
            self.assertEqual(1, main(["decode", os.path.join(self.folder.name, "missing")]))

    def test_encode(self):
        source = self._write("a.json", json.dumps({"spam": "eggs", "cow": [1, 2]}).encode())
        target = os.path.join(self.folder.name, "a.bencode")
        with no_logging:
            status = main(["encode", source, "-o", target])

        self.assertEqual(0, status)
        with open(target, "rb") as f:
            self.assertEqual(b"d3:cowli1ei2ee4:spam4:eggse", f.read())

    def test_encode_rejects_float(self):
        source = self._write("a.json", b'{"ratio": 1.5}')
        target = os.path.join(self.folder.name, "a.bencode")
        with no_logging:
            status = main(["encode", source, "-o", target])

        self.assertEqual(1, status)
        self.assertFalse(os.path.exists(target))

    def test_check(self):
        canonical = self._write("a.bencode", b"d3:cow3:moo4:spam4:eggse")
        unsorted = self._write("b.bencode", b"d4:spam4:eggs3:cow3:mooe")
        invalid = self._write("c.bencode", b"d4:spam")
        with no_logging:
            self.assertEqual(0, main(["check", canonical]))
            self.assertEqual(1, main(["check", unsorted]))
            self.assertEqual(2, main(["check", invalid]))

    def test_check_long_digit_run(self):
        path = self._write("a.bencode", b"i" + b"1" * 5000 + b"e")
        with no_logging:
            self.assertEqual(2, main(["check", path]))

    def test_check_strict(self):
        duplicated = self._write("a.bencode", b"d1:ai1e1:ai2ee")
        with no_logging:
            self.assertEqual(0, main(["check", duplicated]))
            self.assertEqual(2, main(["check", "--strict", duplicated]))
