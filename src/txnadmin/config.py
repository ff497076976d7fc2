import os
from pathlib import Path
from typing import Any, Dict, Optional
from urllib.parse import urlparse

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .logging_config import StructuredLogger

logger = StructuredLogger("config")

DEFAULT_CONFIG_FILE = Path.home() / ".txnadmin" / "client.yaml"

ENV_VARS = {
    "web_service_url": "TXNADMIN_WEB_SERVICE_URL",
    "auth_token": "TXNADMIN_AUTH_TOKEN",
    "timeout_seconds": "TXNADMIN_TIMEOUT",
    "log_level": "TXNADMIN_LOG_LEVEL",
}


class AdminSettings(BaseModel):
    web_service_url: str = "http://localhost:8080"
    auth_token: Optional[str] = None
    timeout_seconds: float = Field(30.0, gt=0)
    log_level: str = "WARNING"

    @field_validator("web_service_url")
    def validate_web_service_url(cls, v):
        raw = v.strip().rstrip("/")
        parsed = urlparse(raw)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError("web_service_url must be an absolute http(s) URL, e.g. http://broker:8080")
        return raw

    @field_validator("log_level")
    def validate_log_level(cls, v):
        level = v.strip().upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError(f"Unknown log level '{v}'")
        return level


def _config_path(config_file: Optional[str | Path]) -> Optional[Path]:
    if config_file:
        return Path(config_file).expanduser()
    env_path = (os.getenv("TXNADMIN_CONFIG") or "").strip()
    if env_path:
        return Path(env_path).expanduser()
    if DEFAULT_CONFIG_FILE.exists():
        return DEFAULT_CONFIG_FILE
    return None


def _read_file(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"Config file not found at {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Invalid configuration: {path} must contain a mapping")
    return data


def _read_env() -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for key, env_name in ENV_VARS.items():
        value = (os.getenv(env_name) or "").strip()
        if value:
            out[key] = value
    return out


def load_settings(config_file: Optional[str | Path] = None, **overrides: Any) -> AdminSettings:
    """
    Resolve settings from defaults, YAML file, environment, then explicit overrides.
    Raises ValueError("Invalid configuration: ...") on schema violations.
    """
    merged: Dict[str, Any] = {}
    path = _config_path(config_file)
    if path is not None:
        merged.update(_read_file(path))
        logger.debug("Loaded config file", path=str(path))
    merged.update(_read_env())
    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return AdminSettings(**merged)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}") from e
