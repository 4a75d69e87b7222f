from __future__ import annotations
from typing import Tuple

# Inputs this short cannot carry both a scheme and a host worth stripping to.
_MIN_SCHEMED_LENGTH = 8


def split_authority(raw: str, keep_path: bool = True) -> Tuple[str, str]:
    """Strip fragment, query, scheme, userinfo and path from a URL-like string.

    Returns (authority, path). The path has no leading or trailing slash and
    is empty when keep_path is off. Never fails; garbage in yields an empty
    or unusable authority which the later stages reject.
    """
    rest = raw or ""
    path = ""

    idx = rest.find("#")
    if idx > 0:
        rest = rest[:idx]

    idx = rest.find("?")
    if idx > 0:
        rest = rest[:idx]

    if len(rest) > _MIN_SCHEMED_LENGTH:
        idx = rest.find("://")
        if idx > -1:
            rest = rest[idx + 3:]

    authority, sep, tail = rest.partition("/")
    if sep and keep_path:
        path = tail.strip("/")

    # userinfo
    if "@" in authority:
        authority = authority.rsplit("@", 1)[1]

    return authority.strip(), path
