from __future__ import annotations
import argparse, json, logging, sys
from pathlib import Path

from .binary.codecs.tokens import parse_layout
from .binary.reader import decode_layout, load_bytes


def cmd_info(args):
    data = load_bytes(args.input)
    print(json.dumps({
        "path": str(Path(args.input)),
        "size": len(data),
        "head": data[:args.head].hex(),
    }, indent=2))
    return 0


def cmd_decode(args):
    try:
        specs = parse_layout(args.tokens)
    except ValueError as e:
        print(f"error: {e}", file=sys.stderr)
        return 2

    values, failure = decode_layout(args.input, specs, stop_on_failure=not args.keep_going)
    print(json.dumps([v.model_dump(mode="json") for v in values], indent=2))
    if failure is not None:
        print(json.dumps(failure.model_dump(mode="json")), file=sys.stderr)
        return 1
    return 0


def build_parser():
    p = argparse.ArgumentParser(prog="datareader", description="Sequential native-order binary decoding")
    p.add_argument("-v", "--verbose", action="store_true", help="enable debug logging")
    sub = p.add_subparsers(dest="cmd", required=True)

    sp = sub.add_parser("info", help="print size and a hex preview of a file")
    sp.add_argument("input")
    sp.add_argument("--head", type=int, default=32, help="number of leading bytes to preview")
    sp.set_defaults(func=cmd_info)

    sp = sub.add_parser("decode", help="decode a sequence of values as JSON")
    sp.add_argument("input")
    sp.add_argument("tokens", nargs="+", help="layout tokens: u8..u64, s8..s64, f32, f64, bool, <scalar>[N], text:N")
    sp.add_argument("--keep-going", action="store_true", help="report every field instead of stopping at the first failure")
    sp.set_defaults(func=cmd_decode)

    return p


def main(argv=None):
    p = build_parser()
    ns = p.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if ns.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    return ns.func(ns)


if __name__ == "__main__":
    raise SystemExit(main())
