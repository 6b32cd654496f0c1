from __future__ import annotations

import argparse
import json
from collections.abc import Mapping

from dyadt import CheckerError, Verifier, configure_logging
from dyadt_contracts import Claim, CustomEvidence, FileExistsEvidence, Verdict, report_to_dict


def port_is_reserved(params: Mapping[str, str]) -> Verdict:
    try:
        port = int(params["port"])
    except (KeyError, ValueError) as exc:
        raise CheckerError(f"port_is_reserved needs an integer 'port': {exc}") from exc
    return Verdict.CONFIRMED if port < 1024 else Verdict.REFUTED


def run(path: str, port: str) -> dict[str, object]:
    verifier = Verifier()
    verifier.register_checker("port_is_reserved", port_is_reserved)
    claim = Claim.new(
        "Configured the service on a privileged port",
        evidence=[
            FileExistsEvidence(path=path),
            CustomEvidence(name="port_is_reserved", params={"port": port}),
        ],
        source="custom-checker-example",
    )
    return report_to_dict(verifier.verify(claim))


def main() -> None:
    parser = argparse.ArgumentParser(description="Verify a claim using a custom checker")
    parser.add_argument("--path", default="/etc/hosts")
    parser.add_argument("--port", default="443")
    args = parser.parse_args()
    configure_logging(level="INFO")
    print(json.dumps(run(args.path, args.port), indent=2, ensure_ascii=False))


if __name__ == "__main__":
    main()
