from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
import logging

import idna

from .errors import Rejected
from .options import ParseOptions
from .registry import Kind, SuffixRegistry

log = logging.getLogger(__name__)

ACE_PREFIX = "xn--"
WWW_PREFIX = "www."


@dataclass(frozen=True)
class Domain:
    host: str
    apex: str = ""
    tld: str = ""
    kind: Kind = Kind.UNKNOWN
    idna: bool = False


def to_ascii(host: str) -> Tuple[str, bool]:
    """Transcode a host to its ASCII-compatible form.

    Returns (host, transcoded). On failure the host is returned unchanged and
    transcoded is False.
    """
    try:
        encoded = idna.encode(host, uts46=True).decode("ascii")
    except (idna.IDNAError, UnicodeError) as e:
        log.debug("IDNA encode failed for %r: %s", host, e)
        return host, False
    transcoded = encoded != host and any(
        label.startswith(ACE_PREFIX) for label in encoded.split(".")
    )
    return encoded, transcoded


def match_suffix(labels: List[str], registry: SuffixRegistry) -> Tuple[int, Kind]:
    """Find the longest registered suffix of the labels.

    Returns (index of its first label, kind), or (-1, Kind.UNKNOWN) when no
    suffix of the host is registered.
    """
    for idx in range(len(labels)):
        kind = registry.kind_of(".".join(labels[idx:]))
        if kind != Kind.UNKNOWN:
            return idx, kind
    return -1, Kind.UNKNOWN


def resolve_domain(host: str, registry: SuffixRegistry, options: ParseOptions) -> Domain:
    host = host.lower()
    if host.endswith("."):
        host = host[:-1]

    transcoded = False
    if options.allow_idna:
        host, transcoded = to_ascii(host)
        # no ASCII form means no DNS form (e.g. ACE longer than 253)
        if not host.isascii():
            raise Rejected(f"host {host!r} has no ASCII form")

    labels = host.split(".")
    if not host or "" in labels:
        raise Rejected(f"malformed host {host!r}")

    apex = tld = ""
    idx, kind = match_suffix(labels, registry)
    if idx == 0:
        raise Rejected(f"{host!r} is a public suffix")
    if idx > 0:
        tld = ".".join(labels[idx:])
        apex = ".".join(labels[idx - 1:])
    elif not options.accept_unknown_tld:
        raise Rejected(f"no known suffix for {host!r}")

    # www directly atop the suffix is the registrable label (www.fr, www.co.uk)
    if options.strip_www and host.startswith(WWW_PREFIX):
        if len(host) != len(tld) + len(WWW_PREFIX):
            host = host[len(WWW_PREFIX):]

    if options.restrict_to_apex:
        if not apex:
            raise Rejected(f"no apex for {host!r}")
        host = apex

    return Domain(host=host, apex=apex, tld=tld, kind=kind, idna=transcoded)
