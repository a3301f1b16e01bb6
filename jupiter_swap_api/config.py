from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from dotenv import load_dotenv

from jupiter_swap_api.core.exceptions import ProviderMisconfigured

DEFAULT_BASE_URL = "https://quote-api.jup.ag/v6"

_CONFIG_CACHE: Dict[str, Any] | None = None


def package_root() -> Path:
    return Path(__file__).resolve().parent


def repo_root() -> Path:
    return package_root().parent


def load_config(path: str | Path | None = None) -> Dict[str, Any]:
    env_path = repo_root() / ".env"
    if env_path.exists():
        load_dotenv(env_path)

    config_path = Path(path) if path else Path(os.getenv("JUPITER_SWAP_CONFIG", package_root() / "default.yaml"))
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}

    return data


def get_config(refresh: bool = False) -> Dict[str, Any]:
    global _CONFIG_CACHE
    if refresh or _CONFIG_CACHE is None:
        _CONFIG_CACHE = load_config()
    return _CONFIG_CACHE


def _setting(name: str, fallback: Any) -> Any:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return fallback
    return raw.strip()


def _as_float(name: str, value: Any, minimum: float = 0.0) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError) as exc:
        raise ProviderMisconfigured(f"{name} must be a number, got {value!r}") from exc
    if result < minimum:
        raise ProviderMisconfigured(f"{name} must be >= {minimum}, got {result}")
    return result


def _as_int(name: str, value: Any, minimum: int = 1) -> int:
    try:
        result = int(value)
    except (TypeError, ValueError) as exc:
        raise ProviderMisconfigured(f"{name} must be an integer, got {value!r}") from exc
    if result < minimum:
        raise ProviderMisconfigured(f"{name} must be >= {minimum}, got {result}")
    return result


@dataclass(frozen=True)
class JupiterSettings:
    base_url: str = DEFAULT_BASE_URL
    api_key: str = ""
    timeout: float = 10.0
    pool_idle_timeout: float = 60.0
    retry_attempts: int = 3
    retry_delay: float = 1.0

    @classmethod
    def from_env(cls, config: Optional[Mapping[str, Any]] = None) -> "JupiterSettings":
        cfg = get_config() if config is None else config
        section = cfg.get("jupiter") or {}
        retry = section.get("retry") or {}

        base_url = str(_setting("JUPITER_BASE_URL", section.get("base_url", DEFAULT_BASE_URL))).strip().rstrip("/")
        if not base_url.startswith(("http://", "https://")):
            raise ProviderMisconfigured(f"JUPITER_BASE_URL must be an http(s) URL, got {base_url!r}")
        return cls(
            base_url=base_url,
            api_key=str(_setting("JUPITER_API_KEY", "")),
            timeout=_as_float("JUPITER_TIMEOUT", _setting("JUPITER_TIMEOUT", section.get("timeout", 10.0)), 0.001),
            pool_idle_timeout=_as_float(
                "JUPITER_POOL_IDLE_TIMEOUT",
                _setting("JUPITER_POOL_IDLE_TIMEOUT", section.get("pool_idle_timeout", 60.0)),
            ),
            retry_attempts=_as_int(
                "JUPITER_RETRY_ATTEMPTS", _setting("JUPITER_RETRY_ATTEMPTS", retry.get("attempts", 3))
            ),
            retry_delay=_as_float("JUPITER_RETRY_DELAY", _setting("JUPITER_RETRY_DELAY", retry.get("delay", 1.0))),
        )


__all__ = [
    "DEFAULT_BASE_URL",
    "JupiterSettings",
    "get_config",
    "load_config",
    "package_root",
    "repo_root",
]
