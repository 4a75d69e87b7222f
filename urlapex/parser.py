"""Public-suffix aware URL parsing.

A public suffix (eTLD) is a suffix under which names can be registered
directly: "com", but also "co.uk" or "com.au". The apex (eTLD+1) is the
suffix plus one more label, so "www.books.amazon.co.uk",
"books.amazon.co.uk" and "amazon.co.uk" all share the apex "amazon.co.uk".
There is no closed form for this; it is driven by a SuffixRegistry built
from the IANA, Mozilla public suffix and local custom lists.
"""
from __future__ import annotations
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional
import logging

from .address import classify
from .errors import Rejected
from .normalize import split_authority
from .options import DEFAULT_OPTIONS, ParseOptions
from .registry import Kind, SuffixRegistry, kind_name
from .resolve import resolve_domain

log = logging.getLogger(__name__)

MAX_HOST_LENGTH = 253


@dataclass(frozen=True)
class ParseResult:
    host: str
    apex: str = ""
    tld: str = ""
    port: str = ""
    path: str = ""
    ip: bool = False
    idna: bool = False
    kind: Kind = Kind.UNKNOWN

    def __str__(self) -> str:
        url = f"[{self.host}]" if ":" in self.host else self.host
        if self.port:
            url += ":" + self.port
        if self.path:
            url += "/" + self.path
        return url

    def compare(self) -> bool:
        """True when the host already is its own apex, or is an IP.

        Apex is always a suffix of host, so equal length means equal.
        """
        return self.ip or bool(self.apex) and len(self.apex) == len(self.host)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["kind"] = int(self.kind)
        data["kind_name"] = kind_name(self.kind)
        return data


def _parse(raw: str, registry: SuffixRegistry, options: ParseOptions) -> ParseResult:
    authority, path = split_authority(raw, options.keep_path)
    if not authority:
        raise Rejected("empty authority")

    host, port, is_ip = classify(authority, options)
    if is_ip:
        result = ParseResult(host=host, port=port, path=path, ip=True)
    else:
        domain = resolve_domain(host, registry, options)
        if options.restrict_to_apex:
            port = path = ""
        result = ParseResult(
            host=domain.host,
            apex=domain.apex,
            tld=domain.tld,
            port=port,
            path=path,
            idna=domain.idna,
            kind=domain.kind,
        )

    if len(result.host) > MAX_HOST_LENGTH:
        raise Rejected(f"host longer than {MAX_HOST_LENGTH} characters")
    return result


def parse(raw: str, registry: SuffixRegistry, options: ParseOptions = DEFAULT_OPTIONS) -> Optional[ParseResult]:
    """Parse a URL-like string; returns None when it is rejected.

    Neither the registry nor the options are modified, so one registry may
    serve any number of concurrent callers.
    """
    try:
        return _parse(raw, registry, options)
    except Rejected as e:
        log.debug("Rejected %r: %s", raw, e.reason)
        return None


class URLParser:
    """A registry snapshot bound to a set of parse options."""

    def __init__(self, registry: SuffixRegistry, options: Optional[ParseOptions] = None):
        self.registry = registry
        self.options = options or DEFAULT_OPTIONS

    def parse(self, raw: str) -> Optional[ParseResult]:
        return parse(raw, self.registry, self.options)

    def __len__(self) -> int:
        return len(self.registry)

    def with_options(self, options: ParseOptions) -> "URLParser":
        return URLParser(self.registry, options)

    def with_registry(self, registry: SuffixRegistry) -> "URLParser":
        """Swap in a freshly built registry snapshot."""
        return URLParser(registry, self.options)
