from __future__ import annotations
import argparse
import json
import logging
import sys
from typing import Iterable, Iterator, List, Optional

from .config import Config
from .logging_setup import setup_logging
from .options import ParseOptions
from .parser import URLParser
from .sources import registry_from_config

log = logging.getLogger(__name__)


def build_arg_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="urlapex", description="Split URLs into host, apex and public suffix.")
    ap.add_argument("urls", nargs="*", help="URLs to parse (default: read stdin, one per line)")
    ap.add_argument("--config", help="Path to config.yaml")
    ap.add_argument("--refresh", action="store_true", help="Re-download the suffix lists now")
    ap.add_argument("--offline", action="store_true", help="Never download; use cached lists only")
    ap.add_argument("--no-www", action="store_true", help="Toggle stripping of a leading www.")
    ap.add_argument("--no-idna", action="store_true", help="Toggle IDNA transcoding")
    ap.add_argument("--no-path", action="store_true", help="Toggle keeping the path")
    ap.add_argument("--no-port", action="store_true", help="Toggle keeping the port")
    ap.add_argument("--unknown-tld", action="store_true", help="Toggle accepting hosts without a known suffix")
    ap.add_argument("--only", choices=["ip", "host", "apex"], help="Accept only IPs, only hosts, or rewrite to apex")
    return ap


def options_from_args(base: ParseOptions, args: argparse.Namespace) -> ParseOptions:
    opts = base
    if args.no_www:
        opts = opts.no_www()
    if args.no_idna:
        opts = opts.no_idna()
    if args.no_path:
        opts = opts.no_path()
    if args.no_port:
        opts = opts.no_port()
    if args.unknown_tld:
        opts = opts.unknown_tld()
    if args.only == "ip":
        opts = opts.only_ip()
    elif args.only == "host":
        opts = opts.only_host()
    elif args.only == "apex":
        opts = opts.only_apex()
    return opts


def _inputs(urls: List[str], stream: Iterable[str]) -> Iterator[str]:
    if urls:
        yield from urls
        return
    for line in stream:
        line = line.strip()
        if line:
            yield line


def run(parser: URLParser, urls: Iterable[str], out=None) -> int:
    """Parse each URL and print one JSON line per input. Returns the reject count."""
    if out is None:
        out = sys.stdout
    rejected = 0
    for raw in urls:
        result = parser.parse(raw)
        record = {"input": raw, "ok": result is not None}
        if result is None:
            rejected += 1
        else:
            record.update(result.to_dict())
            record["display"] = str(result)
            record["compare"] = result.compare()
        out.write(json.dumps(record, ensure_ascii=False) + "\n")
    return rejected


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    cfg = Config.load(args.config) if args.config else Config()
    if args.offline:
        cfg.data["registry"] = dict(cfg.section("registry"), offline=True)
    setup_logging(cfg.data)
    log.debug("Starting urlapex with config: %s", args.config)

    registry = registry_from_config(cfg, refresh=args.refresh)
    options = options_from_args(ParseOptions.from_dict(cfg.section("parser")), args)
    parser = URLParser(registry, options)

    rejected = run(parser, _inputs(args.urls, sys.stdin))
    return 1 if rejected else 0


if __name__ == "__main__":
    sys.exit(main())
