from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from dyadt.errors import ClaimLoadError
from dyadt_contracts import Claim, EvidenceFormatError, claim_from_dict


class ClaimFileSource:
    """Loads claims from a JSON or YAML file (chosen by file suffix)."""

    def __init__(self, claim_path: str) -> None:
        self._claim_path = Path(claim_path)

    @property
    def path(self) -> Path:
        return self._claim_path

    def load_claim(self) -> Claim:
        payload = self._load_payload()
        if not isinstance(payload, dict):
            raise ClaimLoadError(str(self._claim_path), "claim file must hold a single object")
        return self._parse(payload)

    def load_claims(self) -> tuple[Claim, ...]:
        """Load a list of claims; a file holding a single object yields one claim."""
        payload = self._load_payload()
        if isinstance(payload, dict):
            return (self._parse(payload),)
        if not isinstance(payload, list):
            raise ClaimLoadError(str(self._claim_path), "expected a claim object or a list")
        return tuple(self._parse(item) for item in payload)

    def _parse(self, payload: Any) -> Claim:
        try:
            return claim_from_dict(payload)
        except EvidenceFormatError as exc:
            raise ClaimLoadError(str(self._claim_path), str(exc)) from exc

    def _load_payload(self) -> Any:
        try:
            raw = self._claim_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ClaimLoadError(str(self._claim_path), str(exc)) from exc

        suffix = self._claim_path.suffix.lower()
        if suffix in {".yaml", ".yml"}:
            try:
                import yaml  # type: ignore[import-untyped]
            except ImportError as exc:  # pragma: no cover - env-dependent
                raise RuntimeError(
                    "YAML claim files require PyYAML. Install with: pip install pyyaml"
                ) from exc
            try:
                return yaml.safe_load(raw)
            except (yaml.YAMLError, ValueError, RecursionError) as exc:
                raise ClaimLoadError(str(self._claim_path), f"invalid YAML: {exc}") from exc
        try:
            return json.loads(raw)
        except (ValueError, RecursionError) as exc:
            raise ClaimLoadError(str(self._claim_path), f"invalid JSON: {exc}") from exc
