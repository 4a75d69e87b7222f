from __future__ import annotations
import yaml
from dataclasses import dataclass, field
from typing import Any, Dict


@dataclass
class Config:
    data: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def load(cls, path: str) -> "Config":
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ValueError(f"Config must be a YAML mapping, got {type(data).__name__}")
        return cls(data=data)

    def __getitem__(self, item):
        return self.data[item]

    def get(self, key, default=None):
        return self.data.get(key, default)

    def section(self, key) -> Dict[str, Any]:
        """Return a mapping section, or an empty dict when it is absent."""
        return self.data.get(key) or {}
