from __future__ import annotations

import os
from dataclasses import dataclass


def parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    lowered = value.strip().lower()
    if lowered in {"1", "true", "yes", "y", "on"}:
        return True
    if lowered in {"0", "false", "no", "n", "off"}:
        return False
    return default


@dataclass(frozen=True)
class VerifierConfig:
    git_executable: str = "git"
    default_repo_path: str | None = None
    log_level: str = "WARNING"
    json_logs: bool = False

    @classmethod
    def from_env(cls) -> VerifierConfig:
        git_executable = os.getenv("DYADT_GIT_EXECUTABLE", "git")
        if git_executable.strip() == "":
            raise RuntimeError("DYADT_GIT_EXECUTABLE must not be empty.")
        default_repo_path = os.getenv("DYADT_REPO_PATH")
        if default_repo_path is not None and default_repo_path.strip() == "":
            default_repo_path = None
        return cls(
            git_executable=git_executable,
            default_repo_path=default_repo_path,
            log_level=os.getenv("DYADT_LOG_LEVEL", "WARNING"),
            json_logs=parse_bool(os.getenv("DYADT_LOG_JSON"), default=False),
        )
