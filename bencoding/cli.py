import sys
import json
import asyncio
import logging
import argparse

from bencoding.decoder import DEFAULT_MAX_DEPTH, Decoder
from bencoding.encoder import Encoder
from bencoding.errors import BencodeError
from bencoding.io import fetch_bytes
from bencoding.sorteddict import SortedDict


def to_json(value):
    """
        Make a decoded value printable as JSON. Byte strings that are valid
        UTF-8 become strings, anything else becomes {"hex": ...}
    """
    if isinstance(value, bytes):
        try:
            return value.decode("utf-8")
        except UnicodeDecodeError:
            return {"hex": value.hex()}
    elif isinstance(value, list):
        return [to_json(x) for x in value]
    elif isinstance(value, SortedDict):
        res = {}
        for key, item in value.items():
            name = to_json(key)
            if isinstance(name, dict):
                name = key.hex()
            if name in res:
                logging.debug(f"Duplicate key {name!r}, keeping the last value")
            res[name] = to_json(item)
        return res
    return value


def read_source(source: str, timeout: float = 60) -> bytes:
    if source == "-":
        return sys.stdin.buffer.read()
    if source.startswith(("http://", "https://")):
        return asyncio.run(fetch_bytes(source, timeout=timeout))
    with open(source, "rb") as f:
        return f.read()


def cmd_decode(args) -> int:
    data = read_source(args.source, args.timeout)
    value = Decoder(data, max_depth=args.max_depth, strict=args.strict).decode()
    json.dump(to_json(value), sys.stdout, indent=args.indent, ensure_ascii=False)
    sys.stdout.write("\n")
    return 0


def cmd_encode(args) -> int:
    if args.source == "-":
        value = json.load(sys.stdin)
    else:
        with open(args.source, "r", encoding="utf-8") as f:
            value = json.load(f)
    data = Encoder(value, max_depth=args.max_depth).encode()
    if args.output:
        with open(args.output, "wb") as f:
            f.write(data)
        logging.info(f"Wrote {len(data)} bytes to {args.output}")
    else:
        sys.stdout.buffer.write(data)
        sys.stdout.buffer.flush()
    return 0


def cmd_check(args) -> int:
    data = read_source(args.source, args.timeout)
    try:
        value = Decoder(data, max_depth=args.max_depth, strict=args.strict).decode()
    except BencodeError as e:
        logging.error(f"{args.source} is not valid bencode: {e}")
        return 2
    if Encoder(value, max_depth=args.max_depth).encode() != data:
        logging.warning(f"{args.source} decodes but is not canonically encoded")
        return 1
    logging.info(f"{args.source} is canonical bencode")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="bencoding",
                                     description="Decode, encode and check bencoded data")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="enable verbose output")
    parser.add_argument("-l", "--log", default=None,
                        help="Path of log file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_decode_options(sub):
        sub.add_argument("source",
                         help="file to read, '-' for stdin, or an http(s) URL")
        sub.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                         help="maximum nesting of lists and dictionaries")
        sub.add_argument("--strict", action="store_true",
                         help="reject dictionaries with duplicate keys")
        sub.add_argument("--timeout", type=float, default=60,
                         help="seconds to wait when fetching a URL")

    decode_parser = subparsers.add_parser("decode", help="print bencoded data as JSON")
    add_decode_options(decode_parser)
    decode_parser.add_argument("--indent", type=int, default=2,
                               help="JSON indentation")
    decode_parser.set_defaults(func=cmd_decode)

    encode_parser = subparsers.add_parser("encode", help="bencode a JSON document")
    encode_parser.add_argument("source",
                               help="JSON file to read, '-' for stdin")
    encode_parser.add_argument("-o", "--output", default=None,
                               help="file to write, stdout when omitted")
    encode_parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                               help="maximum nesting of lists and dictionaries")
    encode_parser.set_defaults(func=cmd_encode)

    check_parser = subparsers.add_parser("check",
                                         help="verify that data is canonical bencode")
    add_decode_options(check_parser)
    check_parser.set_defaults(func=cmd_check)
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    level_log = logging.INFO
    if args.verbose:
        level_log = logging.DEBUG

    if args.log:
        logging.basicConfig(filename=args.log, filemode="a",
                level=level_log, format='%(asctime)s %(levelname)s %(message)s')
    else:
        logging.basicConfig(level=level_log)

    try:
        return args.func(args)
    except BencodeError as e:
        logging.error(f"{args.command} failed: {e}")
    except (OSError, ValueError) as e:
        logging.error(f"Unable to read {args.source}: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
