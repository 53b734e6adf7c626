"""Configuration loading for gitinspect (.gitinspect.yml plus environment)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


DEFAULT_COMPLETION_URL = "https://api.deepseek.com/v1/chat/completions"
DEFAULT_MODEL = "deepseek-chat"
DEFAULT_GITHUB_API_URL = "https://api.github.com"
CONFIG_FILENAME = ".gitinspect.yml"


@dataclass
class CompletionConfig:
    """Chat-completion endpoint settings. Delays and timeouts are milliseconds."""

    url: str = DEFAULT_COMPLETION_URL
    model: str = DEFAULT_MODEL
    temperature: float = 0.5
    max_retries: int = 3
    retry_delay: int = 1000
    timeout: int = 15000
    api_key: Optional[str] = None


@dataclass
class GitHubConfig:
    """Repository metadata endpoint settings."""

    api_url: str = DEFAULT_GITHUB_API_URL
    token: Optional[str] = None
    timeout: int = 5000
    user_agent: str = "GitInspect-App"


@dataclass
class ServiceConfig:
    """Web service settings."""

    host: str = "0.0.0.0"
    port: int = 3000
    allowed_origins: List[str] = field(default_factory=list)
    debug: bool = False


@dataclass
class GitInspectConfig:
    """Top-level settings passed into the orchestrator and the service."""

    llm: CompletionConfig = field(default_factory=CompletionConfig)
    github: GitHubConfig = field(default_factory=GitHubConfig)
    service: ServiceConfig = field(default_factory=ServiceConfig)


def load_config(
    config_path: Path | None = None,
    env: Mapping[str, str] | None = None,
) -> GitInspectConfig:
    """Build configuration from defaults, an optional YAML file, then the environment."""
    config = GitInspectConfig()

    if config_path is not None:
        config_file = _resolve_config_path(config_path)
        if config_file.exists():
            data = _read_config(config_file)
            if not isinstance(data, dict):
                raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")
            _apply_file(config, data)

    _apply_env(config, os.environ if env is None else env)
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _apply_file(config: GitInspectConfig, data: Dict[str, Any]) -> None:
    llm_data = _as_dict(data.get("llm"))
    llm = config.llm
    llm.url = _as_str(llm_data.get("url")) or llm.url
    llm.model = _as_str(llm_data.get("model")) or llm.model
    llm.temperature = _clamp_temperature(_as_float(llm_data.get("temperature")), llm.temperature)
    llm.max_retries = _positive(_as_int(llm_data.get("max_retries")), llm.max_retries)
    llm.retry_delay = _non_negative(_as_int(llm_data.get("retry_delay")), llm.retry_delay)
    llm.timeout = _positive(_as_int(llm_data.get("timeout")), llm.timeout)
    llm.api_key = _as_str(llm_data.get("api_key")) or llm.api_key

    github_data = _as_dict(data.get("github"))
    github = config.github
    github.api_url = _as_str(github_data.get("api_url")) or github.api_url
    github.token = _as_str(github_data.get("token")) or github.token
    github.timeout = _positive(_as_int(github_data.get("timeout")), github.timeout)

    service_data = _as_dict(data.get("service"))
    service = config.service
    service.host = _as_str(service_data.get("host")) or service.host
    service.port = _positive(_as_int(service_data.get("port")), service.port)
    origins = _as_str_list(service_data.get("allowed_origins"))
    if origins:
        service.allowed_origins = origins
    debug = _as_bool(service_data.get("debug"))
    if debug is not None:
        service.debug = debug


def _apply_env(config: GitInspectConfig, env: Mapping[str, str]) -> None:
    llm = config.llm
    llm.api_key = env.get("DEEPSEEK_API_KEY") or llm.api_key
    llm.url = env.get("DEEPSEEK_URL") or llm.url
    llm.model = env.get("DEEPSEEK_MODEL") or llm.model
    llm.temperature = _clamp_temperature(_as_float(env.get("DEEPSEEK_TEMP")), llm.temperature)
    llm.max_retries = _positive(_as_int(env.get("DEEPSEEK_MAX_RETRIES")), llm.max_retries)
    llm.retry_delay = _non_negative(_as_int(env.get("DEEPSEEK_RETRY_DELAY")), llm.retry_delay)
    llm.timeout = _positive(_as_int(env.get("DEEPSEEK_TIMEOUT")), llm.timeout)

    github = config.github
    github.token = env.get("GITHUB_TOKEN") or github.token
    github.api_url = env.get("GITHUB_API_URL") or github.api_url

    service = config.service
    service.host = env.get("HOST") or service.host
    service.port = _positive(_as_int(env.get("PORT")), service.port)
    origins = _as_str_list(env.get("ALLOWED_ORIGINS"))
    if origins:
        service.allowed_origins = origins
    debug = _as_bool(env.get("DEBUG"))
    if debug is not None:
        service.debug = debug


def _clamp_temperature(value: Optional[float], current: float) -> float:
    if value is None:
        return current
    return min(max(value, 0.0), 1.0)


def _positive(value: Optional[int], current: int) -> int:
    return value if value is not None and value > 0 else current


def _non_negative(value: Optional[int], current: int) -> int:
    return value if value is not None and value >= 0 else current


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (str, int, float)):
        text = str(value).strip()
        return text or None
    return None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1", "on"}:
            return True
        if lowered in {"false", "no", "0", "off"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [part.strip() for part in value.split(",") if part.strip()]
    if isinstance(value, Sequence):
        return [str(item).strip() for item in value if isinstance(item, (str, int, float)) and str(item).strip()]
    return []
