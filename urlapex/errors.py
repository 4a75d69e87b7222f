from __future__ import annotations


class Rejected(ValueError):
    """Raised by a parse stage when the input cannot yield a result."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
