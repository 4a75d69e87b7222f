from __future__ import annotations
from collections.abc import Mapping
from enum import IntEnum
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, Tuple
import logging

import idna

log = logging.getLogger(__name__)


class Kind(IntEnum):
    """Source tag of a registered suffix."""
    UNKNOWN = 0
    ICANN = 1
    PRIVATE = 2
    CUSTOM = 4


_KIND_NAMES = {
    Kind.ICANN: "icann",
    Kind.PRIVATE: "publicsuffix",
    Kind.CUSTOM: "custom",
}


def kind_name(kind: int) -> str:
    return _KIND_NAMES.get(kind, "bad")


class SuffixRegistry(Mapping):
    """Read-only suffix -> Kind table. Suffixes tagged UNKNOWN are never stored."""

    def __init__(self, entries: Mapping[str, Kind] | None = None):
        self._entries = MappingProxyType(dict(entries or {}))

    def __getitem__(self, suffix: str) -> Kind:
        return self._entries[suffix]

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def kind_of(self, suffix: str) -> Kind:
        return self._entries.get(suffix, Kind.UNKNOWN)

    def __repr__(self) -> str:
        return f"SuffixRegistry({len(self)} suffixes)"


class RegistryBuilder:
    """Collects suffixes from one or more lists; later additions win."""

    def __init__(self):
        self._entries: Dict[str, Kind] = {}

    def add(self, suffix: str, kind: Kind) -> None:
        suffix = suffix.strip().lower()
        if not suffix or kind == Kind.UNKNOWN:
            return
        self._entries[suffix] = Kind(kind)
        # Hosts are usually matched after IDNA transcoding, so keep the ACE form too.
        if not suffix.isascii():
            try:
                ace = idna.encode(suffix, uts46=True).decode("ascii")
            except (idna.IDNAError, UnicodeError):
                log.debug("Suffix %r has no ASCII form", suffix)
            else:
                self._entries[ace] = Kind(kind)

    def update(self, rows: Iterable[Tuple[str, Kind]]) -> int:
        count = 0
        for suffix, kind in rows:
            self.add(suffix, kind)
            count += 1
        return count

    def __len__(self) -> int:
        return len(self._entries)

    def build(self) -> SuffixRegistry:
        return SuffixRegistry(self._entries)


def parse_iana_tlds(lines: Iterable[str]) -> Iterator[Tuple[str, Kind]]:
    """IANA tlds-alpha-by-domain.txt: one TLD per line, '#' comments."""
    for line in lines:
        row = line.strip().lower()
        if not row or row.startswith("#"):
            continue
        yield row, Kind.ICANN


def parse_public_suffix(lines: Iterable[str]) -> Iterator[Tuple[str, Kind]]:
    """Mozilla effective_tld_names.dat.

    Rows are tagged by the section they appear in (ICANN or PRIVATE). Rows
    before the first section marker are skipped. Wildcard rules are reduced
    to their parent suffix and exception rules are ignored.
    """
    kind = Kind.UNKNOWN
    for line in lines:
        row = line.strip()
        if not row:
            continue
        if "BEGIN ICANN DOMAINS" in row:
            kind = Kind.ICANN
            continue
        if "BEGIN PRIVATE DOMAINS" in row:
            kind = Kind.PRIVATE
            continue
        if row.startswith("//"):
            continue
        rule = row.split()[0]
        if rule.startswith("!") or kind == Kind.UNKNOWN:
            continue
        if rule.startswith("*."):
            rule = rule[2:]
        yield rule.lower(), kind


def parse_custom(lines: Iterable[str]) -> Iterator[Tuple[str, Kind]]:
    """Local custom list: one suffix per line, '#' or '//' comments."""
    for line in lines:
        row = line.strip()
        if not row or row.startswith("#") or row.startswith("//"):
            continue
        yield row.lower(), Kind.CUSTOM
