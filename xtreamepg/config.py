"""
Configuration management for XtreamEPG.

Handles loading, validation, and access to application configuration.
Values come from an optional config.yaml, a .env file and the process
environment, in increasing order of precedence.
"""

import os
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# Global configuration instance
_config: Optional["XtreamEPGConfig"] = None


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""


class ServerConfig(BaseModel):
    """Server configuration."""
    host: str = "0.0.0.0"
    port: int = 10000
    debug: bool = False
    log_level: str = "INFO"


class ProviderConfig(BaseModel):
    """Xtream Codes provider configuration."""
    username: str = ""
    password: str = ""
    server: str = ""  # Base URL, e.g. http://provider.example:8080
    request_timeout: Optional[float] = None  # None = wait indefinitely

    @property
    def base_url(self) -> str:
        """Server URL without a trailing slash."""
        return self.server.rstrip("/")


class EPGConfig(BaseModel):
    """EPG configuration."""
    url: Optional[str] = None  # XMLTV feed; unset disables EPG
    refresh_interval: int = 86400
    window_hours: int = 24
    max_programmes_per_channel: int = 10

    @property
    def enabled(self) -> bool:
        return bool(self.url and self.url.strip())


class AddonConfig(BaseModel):
    """Addon manifest configuration."""
    id: str = "org.iptv.custom"
    version: str = "1.1.0"
    name: str = "My IPTV Addon with EPG"
    description: str = (
        "Streams live TV and VOD from your IPTV provider, with optional EPG support"
    )
    catalog_id: str = "iptv_live"
    catalog_name: str = "Live IPTV"
    content_type: str = "tv"
    id_prefix: str = "iptv_"


class LoggingConfig(BaseModel):
    """Logging configuration."""
    level: str = "INFO"
    file: str = "logs/xtreamepg.log"
    to_file: bool = True
    max_size: str = "10MB"
    backup_count: int = 5
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class XtreamEPGConfig(BaseModel):
    """Main XtreamEPG configuration."""
    server: ServerConfig = Field(default_factory=ServerConfig)
    provider: ProviderConfig = Field(default_factory=ProviderConfig)
    epg: EPGConfig = Field(default_factory=EPGConfig)
    addon: AddonConfig = Field(default_factory=AddonConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_config(config_path: Optional[str] = None) -> XtreamEPGConfig:
    """
    Load configuration from file and environment.

    Args:
        config_path: Path to config file. Defaults to $XTREAMEPG_CONFIG,
            then config.yaml in the working directory or project root.

    Returns:
        Loaded configuration. Required provider settings are not checked
        here; see validate_config().
    """
    global _config

    load_dotenv(override=False)

    if config_path is None:
        config_path = os.environ.get("XTREAMEPG_CONFIG")

    if config_path is None:
        possible_paths = [
            Path("config.yaml"),
            Path(__file__).parent.parent / "config.yaml",
        ]
        for path in possible_paths:
            if path.exists():
                config_path = str(path)
                break

    config_data: dict[str, Any] = {}

    if config_path and Path(config_path).exists():
        with open(config_path) as f:
            config_data = yaml.safe_load(f) or {}

    # Apply environment variable overrides
    env_overrides = _get_env_overrides()
    _deep_merge(config_data, env_overrides)

    _config = XtreamEPGConfig(**config_data)
    return _config


def get_config() -> XtreamEPGConfig:
    """
    Get the current configuration.

    Returns:
        Current configuration (loads default if not yet loaded).
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reload_config() -> XtreamEPGConfig:
    """Drop the cached configuration and load it again."""
    global _config
    _config = None
    return load_config()


def validate_config(config: XtreamEPGConfig) -> None:
    """
    Check settings the service cannot start without.

    Raises:
        ConfigurationError: If provider username, password or server is unset.
    """
    missing = [
        env_var
        for env_var, value in (
            ("IPTV_USER", config.provider.username),
            ("IPTV_PASS", config.provider.password),
            ("IPTV_SERVER", config.provider.server),
        )
        if not value
    ]
    if missing:
        raise ConfigurationError(
            f"Missing required environment variables: {', '.join(missing)}"
        )


def _get_env_overrides() -> dict[str, Any]:
    """Get configuration overrides from environment variables."""
    overrides: dict[str, Any] = {}

    # env var -> (config path, parse typed value)
    env_map = {
        "IPTV_USER": (("provider", "username"), False),
        "IPTV_PASS": (("provider", "password"), False),
        "IPTV_SERVER": (("provider", "server"), False),
        "EPG_URL": (("epg", "url"), False),
        "HOST": (("server", "host"), False),
        "PORT": (("server", "port"), True),
        "LOG_LEVEL": (("logging", "level"), False),
        "XTREAMEPG_DEBUG": (("server", "debug"), True),
        "XTREAMEPG_EPG_REFRESH_INTERVAL": (("epg", "refresh_interval"), True),
    }

    for env_var, (path, typed) in env_map.items():
        value = os.environ.get(env_var)
        if value is None or value == "":
            continue
        _set_nested(overrides, path, _parse_env_value(value) if typed else value)

    return overrides


def _parse_env_value(value: str) -> Any:
    """Parse environment variable value to appropriate type."""
    # Boolean
    if value.lower() in ("true", "yes"):
        return True
    if value.lower() in ("false", "no"):
        return False

    # Integer
    try:
        return int(value)
    except ValueError:
        pass

    # Float
    try:
        return float(value)
    except ValueError:
        pass

    return value


def _set_nested(d: dict[str, Any], path: tuple[str, ...], value: Any) -> None:
    """Set a nested dictionary value from a path tuple."""
    for key in path[:-1]:
        d = d.setdefault(key, {})
    d[path[-1]] = value


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
    """Deep merge override into base dictionary."""
    for key, value in override.items():
        if key in base and isinstance(base[key], dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value

