from __future__ import annotations

import json
from pathlib import Path

import pytest

from dyadt import ClaimFileSource, ClaimLoadError, Verifier
from dyadt_contracts import (
    CommandSucceedsEvidence,
    FileContainsEvidence,
    FileExistsEvidence,
    FileJsonPathEvidence,
    Verdict,
)


def test_loads_single_json_claim(tmp_path: Path) -> None:
    claim_file = tmp_path / "claim.json"
    claim_file.write_text(
        json.dumps(
            {
                "description": "Created the configuration file",
                "evidence": [
                    {"type": "FileExists", "spec": {"path": "/etc/myapp/config.toml"}},
                    {
                        "type": "FileContains",
                        "spec": {"path": "/etc/myapp/config.toml", "substring": "version = "},
                    },
                ],
                "source": "setup-agent",
            }
        ),
        encoding="utf-8",
    )
    claim = ClaimFileSource(str(claim_file)).load_claim()
    assert claim.description == "Created the configuration file"
    assert claim.source == "setup-agent"
    assert claim.evidence == (
        FileExistsEvidence(path="/etc/myapp/config.toml"),
        FileContainsEvidence(path="/etc/myapp/config.toml", substring="version = "),
    )


def test_loads_yaml_claim_list(tmp_path: Path) -> None:
    claims_file = tmp_path / "claims.yaml"
    claims_file.write_text(
        "\n".join(
            [
                "- description: Ran the tests",
                "  timestamp: 2024-05-01T12:30:00Z",
                "  evidence:",
                "    - type: CommandSucceeds",
                "      spec:",
                "        command: pytest",
                "        args: [-q]",
                "- description: Bumped the version",
                "  evidence:",
                "    - type: FileJsonPath",
                "      spec:",
                "        path: package.json",
                "        json_path: .version",
                "        expected: 2.0.0",
            ]
        ),
        encoding="utf-8",
    )
    claims = ClaimFileSource(str(claims_file)).load_claims()
    assert len(claims) == 2
    assert claims[0].evidence == (CommandSucceedsEvidence(command="pytest", args=("-q",)),)
    assert claims[0].timestamp.year == 2024
    assert claims[1].evidence == (
        FileJsonPathEvidence(path="package.json", json_path=".version", expected="2.0.0"),
    )


def test_single_object_loads_as_one_claim_list(tmp_path: Path) -> None:
    claim_file = tmp_path / "claim.json"
    claim_file.write_text(json.dumps({"description": "x", "evidence": []}), encoding="utf-8")
    assert len(ClaimFileSource(str(claim_file)).load_claims()) == 1


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(ClaimLoadError):
        ClaimFileSource(str(tmp_path / "missing.json")).load_claim()


def test_invalid_json_raises_load_error(tmp_path: Path) -> None:
    claim_file = tmp_path / "claim.json"
    claim_file.write_text("{", encoding="utf-8")
    with pytest.raises(ClaimLoadError, match="invalid JSON"):
        ClaimFileSource(str(claim_file)).load_claim()


def test_malformed_evidence_raises_load_error(tmp_path: Path) -> None:
    claim_file = tmp_path / "claim.json"
    claim_file.write_text(
        json.dumps({"description": "x", "evidence": [{"type": "Teleport", "spec": {}}]}),
        encoding="utf-8",
    )
    with pytest.raises(ClaimLoadError, match="Unknown evidence type"):
        ClaimFileSource(str(claim_file)).load_claim()


def test_list_is_not_a_single_claim(tmp_path: Path) -> None:
    claim_file = tmp_path / "claims.json"
    claim_file.write_text("[]", encoding="utf-8")
    with pytest.raises(ClaimLoadError):
        ClaimFileSource(str(claim_file)).load_claim()


def test_out_of_range_yaml_timestamp_raises_load_error(tmp_path: Path) -> None:
    claim_file = tmp_path / "claim.yaml"
    claim_file.write_text(
        "description: Shipped the release\ntimestamp: 2024-13-45\nevidence: []\n",
        encoding="utf-8",
    )
    with pytest.raises(ClaimLoadError, match="invalid YAML"):
        ClaimFileSource(str(claim_file)).load_claim()


def test_unquoted_yaml_date_is_read_as_json_string(tmp_path: Path) -> None:
    release = tmp_path / "release.json"
    release.write_text(json.dumps({"released": "2024-01-01"}), encoding="utf-8")
    claim_file = tmp_path / "claim.yaml"
    claim_file.write_text(
        "\n".join(
            [
                "description: Recorded the release date",
                "evidence:",
                "  - type: FileJsonPath",
                "    spec:",
                f"      path: {json.dumps(str(release))}",
                "      json_path: released",
                "      expected: 2024-01-01",
            ]
        ),
        encoding="utf-8",
    )
    claim = ClaimFileSource(str(claim_file)).load_claim()
    assert claim.evidence == (
        FileJsonPathEvidence(path=str(release), json_path="released", expected="2024-01-01"),
    )
    assert Verifier().verify(claim).overall_verdict == Verdict.CONFIRMED


def test_non_json_expected_value_raises_load_error(tmp_path: Path) -> None:
    claim_file = tmp_path / "claim.yaml"
    claim_file.write_text(
        "\n".join(
            [
                "description: Wrote the bitmap",
                "evidence:",
                "  - type: FileJsonPath",
                "    spec:",
                "      path: out.json",
                "      json_path: data",
                "      expected: !!binary aGVsbG8=",
            ]
        ),
        encoding="utf-8",
    )
    with pytest.raises(ClaimLoadError, match="bytes is not a JSON value"):
        ClaimFileSource(str(claim_file)).load_claim()
