"""Configuration models and loading."""

import json
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "proxx"
CONFIG_FILE = CONFIG_DIR / "config.json"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    debug: bool = False


class RoutingSettings(BaseModel):
    mode: Literal["prefix", "bare"] = "prefix"
    marker: str = Field(default="/proxx/", min_length=1)


class UpstreamSettings(BaseModel):
    # None disables the timeout entirely
    timeout: float | None = 60.0
    max_redirects: int = Field(default=20, ge=0)


class HeaderSettings(BaseModel):
    strip: list[str] = Field(
        default_factory=lambda: ["content-security-policy", "x-frame-options"]
    )
    allow_origin: str = "*"


class LimitsSettings(BaseModel):
    keep_alive_timeout: int = 5


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    routing: RoutingSettings = Field(default_factory=RoutingSettings)
    upstream: UpstreamSettings = Field(default_factory=UpstreamSettings)
    headers: HeaderSettings = Field(default_factory=HeaderSettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default
