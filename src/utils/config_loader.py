"""
Configuration loader for the Quantum Pay demo backend
"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent.parent / "config" / "app_config.yml"


class AppConfig(BaseModel):
    """Server, event log and simulator settings"""

    port: int = Field(default=8080, ge=1, le=65535)
    allowed_origins: List[str] = Field(default_factory=lambda: ["http://localhost:5173"])
    event_store: Literal["file", "memory"] = "file"
    log_dir: str = "logs"
    memory_capacity: int = Field(default=10, ge=1, le=10_000)
    recent_events_limit: int = Field(default=200, ge=1, le=1000)
    timeout_delay_seconds: float = Field(default=10.0, ge=0.0, le=300.0)
    client_build_dir: str = "client-build"

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [o.strip() for o in value.split(",") if o.strip()]
        return value

    @property
    def default_recent_limit(self) -> int:
        """Default page size for /api/events/recent; the ring buffer never holds more than its capacity."""
        if self.event_store == "memory":
            return min(self.recent_events_limit, self.memory_capacity)
        return self.recent_events_limit


# env var -> AppConfig field
ENV_OVERRIDES: Dict[str, str] = {
    "PORT": "port",
    "ALLOWED_ORIGIN": "allowed_origins",
    "EVENT_STORE": "event_store",
    "EVENT_LOG_DIR": "log_dir",
    "EVENT_BUFFER_SIZE": "memory_capacity",
    "CONNECT_TIMEOUT_SECONDS": "timeout_delay_seconds",
    "CLIENT_BUILD_DIR": "client_build_dir",
}


def load_app_config(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> AppConfig:
    """
    Load and validate the app configuration

    Values come from the YAML file first, then from environment variables,
    which win. The entry point loads a local ``.env`` into the environment.

    Args:
        config_path: Path to config file. Defaults to config/app_config.yml
        environ: Environment to read overrides from. Defaults to os.environ

    Returns:
        Validated AppConfig object

    Raises:
        ValidationError: If the merged values don't match the schema
    """
    if config_path is None:
        config_path = DEFAULT_CONFIG_PATH

    if environ is None:
        environ = os.environ

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    else:
        logger.warning("App config file not found, using defaults: %s", config_path)

    for env_name, field_name in ENV_OVERRIDES.items():
        raw = environ.get(env_name)
        if raw is not None and raw.strip():
            data[field_name] = raw.strip()

    try:
        config = AppConfig(**data)
        logger.info("Loaded app config (event_store=%s, port=%s)", config.event_store, config.port)
        return config
    except ValidationError as e:
        logger.error("App config validation failed: %s", e)
        raise
