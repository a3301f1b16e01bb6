"""JSON fixtures served by the stub service and read by tests.

A fixture object may carry a ``_fixture_version`` marker. It is checked
against the expected version and always removed, so the payload can be served
as a wire body unchanged.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

FIXTURE_VERSION_KEY = "_fixture_version"


class FixtureVersionError(ValueError):
    pass


def load_json_fixture(path: Path, expected_version: Optional[str] = None) -> Any:
    try:
        payload = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Fixture {path.name} is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        return payload
    version = payload.pop(FIXTURE_VERSION_KEY, None)
    if expected_version is not None and version is not None and version != expected_version:
        raise FixtureVersionError(f"Fixture {path.name}: expected version {expected_version}, got {version}")
    return payload


def load_fixture(base_dir: Path, name: str, expected_version: Optional[str] = None) -> Any:
    return load_json_fixture(base_dir / name, expected_version=expected_version)


def load_fixture_set(
    base_dir: Path,
    names: Mapping[str, str],
    expected_version: Optional[str] = None,
) -> Dict[str, Any]:
    return {key: load_fixture(base_dir, name, expected_version) for key, name in names.items()}


__all__ = ["FIXTURE_VERSION_KEY", "FixtureVersionError", "load_fixture", "load_fixture_set", "load_json_fixture"]
