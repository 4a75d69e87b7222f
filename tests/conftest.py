# tests/conftest.py
from __future__ import annotations
import types
import pytest
import requests

from urlapex.config import Config
from urlapex.registry import Kind, RegistryBuilder, SuffixRegistry


@pytest.fixture
def registry() -> SuffixRegistry:
    b = RegistryBuilder()
    for tld in ("com", "org", "net", "fr", "uk", "nz", "cn"):
        b.add(tld, Kind.ICANN)
    b.add("co.uk", Kind.ICANN)
    b.add("co.nz", Kind.ICANN)
    b.add("公司.cn", Kind.ICANN)
    b.add("duckdns.org", Kind.PRIVATE)
    b.add("internal", Kind.CUSTOM)
    b.add("corp.internal", Kind.CUSTOM)
    return b.build()


@pytest.fixture
def tmp_config(tmp_path) -> Config:
    cfg = {
        "registry": {
            "data_dir": str(tmp_path / "dat"),
            "max_age_hours": 72,
            "request_timeout_seconds": 5,
            "icann_url": "https://iana.test/tlds.txt",
            "public_suffix_url": "https://psl.test/effective_tld_names.dat",
        },
        "parser": {
            "strip_www": True,
            "restrict": "none",
        },
        "logging": {"level": "DEBUG", "console": False},
    }
    return Config(cfg)


IANA_TEXT = """# Version 2025101900, Last Updated Sun Oct 19 07:07:01 2025 UTC
COM
ORG
UK
FR
"""

PSL_TEXT = """// This Source Code Form is subject to the terms of the Mozilla Public License
stray.example

// ===BEGIN ICANN DOMAINS===
com
co.uk
*.ck
!www.ck
公司.cn

// ===END ICANN DOMAINS===
// ===BEGIN PRIVATE DOMAINS===
duckdns.org
blogspot.com  // trailing note
// ===END PRIVATE DOMAINS===
"""


@pytest.fixture
def iana_text() -> str:
    return IANA_TEXT


@pytest.fixture
def psl_text() -> str:
    return PSL_TEXT


# --- Simple fake response object for requests.get ---
class FakeResp:
    def __init__(self, status=200, text="", content=b"", headers=None):
        self.status_code = status
        self.text = text
        self._content = content
        self.headers = headers or {}

    def raise_for_status(self):
        if not (200 <= self.status_code < 300):
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def iter_content(self, chunk_size=65536):
        buf = self._content if self._content else self.text.encode("utf-8")
        for i in range(0, len(buf), chunk_size):
            yield buf[i:i + chunk_size]

    def __enter__(self): return self
    def __exit__(self, *exc): return False


@pytest.fixture
def fake_requests(monkeypatch):
    """
    Registry-based stub for requests.get; records every requested URL.
    """
    registry_get = {}
    calls = []

    def _get(url, *args, **kwargs):
        calls.append(url)
        resp = registry_get.get(url, FakeResp(404, "not found"))
        if isinstance(resp, Exception):
            raise resp
        return resp

    def register_get(url, resp):
        registry_get[url] = resp

    monkeypatch.setattr("requests.get", _get)
    return types.SimpleNamespace(register_get=register_get, calls=calls, FakeResp=FakeResp)
