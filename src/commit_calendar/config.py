from __future__ import annotations

import json
import subprocess
from pathlib import Path

from .git import DEFAULT_EXCLUDE_DIRNAMES, run_git
from .store import DEFAULT_STORE_FILENAME


def load_config(config_path: Path) -> dict:
    if not config_path.exists():
        return {}
    try:
        text = config_path.read_text(encoding="utf-8")
    except OSError as e:
        raise ValueError(f"{config_path}: {e.strerror or e}") from e
    config = json.loads(text)
    if not isinstance(config, dict):
        raise ValueError(f"{config_path}: expected a JSON object")
    return config


def store_path_from(config: dict, override: Path | None = None) -> Path:
    if override is not None:
        return override
    return Path(str(config.get("store_path") or DEFAULT_STORE_FILENAME))


def exclude_dirnames_from(config: dict) -> set[str]:
    names = config.get("exclude_dirnames")
    if isinstance(names, list):
        return {str(n) for n in names if str(n).strip()}
    return set(DEFAULT_EXCLUDE_DIRNAMES)


def infer_email() -> str:
    try:
        code, out, _ = run_git(["config", "--global", "--get", "user.email"], cwd=Path.cwd())
    except (OSError, subprocess.SubprocessError):
        return ""
    if code == 0:
        return out.strip()
    return ""
