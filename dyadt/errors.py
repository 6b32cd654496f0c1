from __future__ import annotations


class CheckerError(RuntimeError):
    """Raised by a custom checker that could not evaluate its parameters."""


class ClaimLoadError(RuntimeError):
    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot load claims from {path}: {reason}")
