from __future__ import annotations
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Mapping, Optional


class Restrict(str, Enum):
    """Which host forms a parse accepts or rewrites to; at most one at a time."""
    NONE = "none"
    IP = "ip"
    HOST = "host"
    APEX = "apex"


_TRUE = {"true", "yes", "on", "1"}
_FALSE = {"false", "no", "off", "0"}


def _flag(data: Mapping[str, Any], key: str, default: bool) -> bool:
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"parser.{key} must be a boolean, got {value!r}")


@dataclass(frozen=True)
class ParseOptions:
    """Per call-site parse policy.

    Every toggle returns a new value; calling the same toggle on the result
    restores the previous setting.

        opts = ParseOptions().no_www().only_apex()
    """

    strip_www: bool = True
    allow_idna: bool = True
    keep_path: bool = True
    keep_port: bool = True
    accept_unknown_tld: bool = False
    restrict: Restrict = Restrict.NONE

    def no_www(self) -> "ParseOptions":
        return replace(self, strip_www=not self.strip_www)

    def no_idna(self) -> "ParseOptions":
        return replace(self, allow_idna=not self.allow_idna)

    def no_path(self) -> "ParseOptions":
        return replace(self, keep_path=not self.keep_path)

    def no_port(self) -> "ParseOptions":
        return replace(self, keep_port=not self.keep_port)

    def unknown_tld(self) -> "ParseOptions":
        return replace(self, accept_unknown_tld=not self.accept_unknown_tld)

    def _flip_restrict(self, mode: Restrict) -> "ParseOptions":
        return replace(self, restrict=Restrict.NONE if self.restrict == mode else mode)

    def only_ip(self) -> "ParseOptions":
        return self._flip_restrict(Restrict.IP)

    def only_host(self) -> "ParseOptions":
        return self._flip_restrict(Restrict.HOST)

    def only_apex(self) -> "ParseOptions":
        return self._flip_restrict(Restrict.APEX)

    @property
    def restrict_to_ip(self) -> bool:
        return self.restrict == Restrict.IP

    @property
    def restrict_to_host(self) -> bool:
        return self.restrict == Restrict.HOST

    @property
    def restrict_to_apex(self) -> bool:
        return self.restrict == Restrict.APEX

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "ParseOptions":
        """Build options from the `parser` section of the config file."""
        data = data or {}
        defaults = cls()
        restrict = data.get("restrict") or Restrict.NONE.value
        return cls(
            strip_www=_flag(data, "strip_www", defaults.strip_www),
            allow_idna=_flag(data, "allow_idna", defaults.allow_idna),
            keep_path=_flag(data, "keep_path", defaults.keep_path),
            keep_port=_flag(data, "keep_port", defaults.keep_port),
            accept_unknown_tld=_flag(data, "accept_unknown_tld", defaults.accept_unknown_tld),
            restrict=Restrict(str(restrict).lower()),
        )


DEFAULT_OPTIONS = ParseOptions()
