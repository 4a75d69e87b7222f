"""Acquisition and on-disk caching of the suffix lists.

Three lists feed the registry, merged in this order so later ones win:

    icann.dat   IANA root zone TLDs                      Kind.ICANN
    public.dat  Mozilla public suffix list               Kind.ICANN / Kind.PRIVATE
    custom.dat  local additions, never downloaded        Kind.CUSTOM

The downloaded lists are refreshed once they are older than max_age_hours
(72 by default, as publicsuffix.org recommends). A failed download leaves the
previous copy in place.
"""
from __future__ import annotations
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Tuple
import logging, time, requests

from .config import Config
from .registry import (
    Kind,
    RegistryBuilder,
    SuffixRegistry,
    parse_custom,
    parse_iana_tlds,
    parse_public_suffix,
)

log = logging.getLogger(__name__)

ICANN_URL = "https://data.iana.org/TLD/tlds-alpha-by-domain.txt"
PUBLIC_SUFFIX_URL = "https://publicsuffix.org/list/effective_tld_names.dat"

ICANN_FILE = "icann.dat"
PUBLIC_FILE = "public.dat"
CUSTOM_FILE = "custom.dat"

DEFAULT_DATA_DIR = "dat"
DEFAULT_MAX_AGE_HOURS = 72
DEFAULT_TIMEOUT = 30


def is_stale(path: Path, max_age_hours: float) -> bool:
    if not path.exists():
        return True
    age = time.time() - path.stat().st_mtime
    return age >= max_age_hours * 3600


def download_list(url: str, dest: Path, *, timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Stream url into dest via a temporary file. Returns True on success."""
    tmp = dest.with_name(dest.name + ".tmp")
    log.info("Fetching suffix list: %s -> %s", url, dest)
    try:
        with requests.get(url, timeout=timeout, stream=True, headers={
            "User-Agent": "urlapex/1.0",
            "Accept": "text/plain, */*; q=0.1",
        }) as resp:
            log.debug("Suffix list response: status=%s", resp.status_code)
            resp.raise_for_status()
            written = 0
            with open(tmp, "wb") as f:
                for chunk in resp.iter_content(chunk_size=65536):
                    if chunk:
                        f.write(chunk)
                        written += len(chunk)
        if written == 0:
            log.warning("Empty suffix list from %s; keeping %s", url, dest)
            tmp.unlink(missing_ok=True)
            return False
        tmp.replace(dest)
    except (requests.RequestException, OSError) as e:
        log.warning("Failed to fetch %s: %s", url, e)
        tmp.unlink(missing_ok=True)
        return False
    log.info("Saved suffix list: %s (bytes=%s)", dest, written)
    return True


def refresh_list(url: str, dest: Path, *, max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
                 timeout: int = DEFAULT_TIMEOUT) -> bool:
    """Download url into dest when dest is missing or older than max_age_hours."""
    if not is_stale(dest, max_age_hours):
        log.debug("Suffix list %s is fresh", dest)
        return False
    return download_list(url, dest, timeout=timeout)


def ensure_custom_list(path: Path) -> None:
    """Create an empty custom list with a dated header if none exists."""
    if path.exists():
        return
    stamp = datetime.now(timezone.utc).isoformat(timespec="seconds")
    path.write_text(f"# urlapex custom tld list | {stamp}\n", encoding="utf-8")
    log.info("Created custom suffix list %s", path)


def _read_lines(path: Path) -> Iterator[str]:
    with open(path, "r", encoding="utf-8") as f:
        yield from f


def _merge(builder: RegistryBuilder, path: Path,
           parser: Callable[[Iterable[str]], Iterable[Tuple[str, Kind]]]) -> None:
    if not path.exists():
        log.warning("Suffix list %s missing; skipped", path)
        return
    # read the whole list before merging so a bad file adds nothing
    try:
        rows = list(parser(_read_lines(path)))
    except (OSError, UnicodeDecodeError) as e:
        log.warning("Cannot read suffix list %s: %s", path, e)
        return
    count = builder.update(rows)
    log.debug("Merged %d rows from %s", count, path)


def load_registry(
    data_dir: Path | str = DEFAULT_DATA_DIR,
    *,
    offline: bool = False,
    max_age_hours: float = DEFAULT_MAX_AGE_HOURS,
    timeout: int = DEFAULT_TIMEOUT,
    icann_url: str = ICANN_URL,
    public_suffix_url: str = PUBLIC_SUFFIX_URL,
) -> SuffixRegistry:
    """Refresh the cached lists as needed and build a new registry snapshot."""
    data_dir = Path(data_dir)
    data_dir.mkdir(parents=True, exist_ok=True)

    icann = data_dir / ICANN_FILE
    public = data_dir / PUBLIC_FILE
    custom = data_dir / CUSTOM_FILE

    if not offline:
        refresh_list(icann_url, icann, max_age_hours=max_age_hours, timeout=timeout)
        refresh_list(public_suffix_url, public, max_age_hours=max_age_hours, timeout=timeout)
    ensure_custom_list(custom)

    builder = RegistryBuilder()
    _merge(builder, icann, parse_iana_tlds)
    _merge(builder, public, parse_public_suffix)
    _merge(builder, custom, parse_custom)

    registry = builder.build()
    log.info("Suffix registry built from %s: %d suffixes", data_dir, len(registry))
    return registry


def registry_from_config(cfg: Optional[Config], *, refresh: bool = False) -> SuffixRegistry:
    """Build a registry from the `registry` config section.

    refresh forces a download regardless of the age of the cached lists.
    """
    section = cfg.section("registry") if cfg is not None else {}
    return load_registry(
        section.get("data_dir", DEFAULT_DATA_DIR),
        offline=bool(section.get("offline", False)),
        max_age_hours=0 if refresh else float(section.get("max_age_hours", DEFAULT_MAX_AGE_HOURS)),
        timeout=int(section.get("request_timeout_seconds", DEFAULT_TIMEOUT)),
        icann_url=section.get("icann_url", ICANN_URL),
        public_suffix_url=section.get("public_suffix_url", PUBLIC_SUFFIX_URL),
    )
