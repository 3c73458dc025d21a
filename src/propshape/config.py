"""
Settings for propshape.

Values are resolved from, in increasing precedence:
- built-in defaults
- a YAML file: PROPSHAPE_CONFIG, or ./propshape.yaml when it exists
- environment variables (PROPSHAPE_OUTPUT_DIR, PROPSHAPE_LOG_LEVEL,
  PROPSHAPE_LOG_FORMAT, PROPSHAPE_TIMEOUT, PROPSHAPE_TEMPLATE)
- explicit overrides, normally CLI options

The YAML file may reference environment variables as ${VAR} or ${VAR:-default}.
"""

import logging
import os
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, ValidationError, field_validator

from .common import LOG_FORMATS, ConfigError, expand_env_vars, logger
from .generator import DEFAULT_OUTPUT_DIR

DEFAULT_CONFIG_FILE = "propshape.yaml"
CONFIG_ENV_VAR = "PROPSHAPE_CONFIG"

ENV_VARS = {
    'output_dir': 'PROPSHAPE_OUTPUT_DIR',
    'log_level': 'PROPSHAPE_LOG_LEVEL',
    'log_format': 'PROPSHAPE_LOG_FORMAT',
    'timeout': 'PROPSHAPE_TIMEOUT',
    'template': 'PROPSHAPE_TEMPLATE',
}


class Settings(BaseModel):
    output_dir: str = DEFAULT_OUTPUT_DIR
    log_level: str = "INFO"
    log_format: str = "color"
    timeout: Optional[float] = None  # seconds; None waits indefinitely
    template: Optional[str] = None  # path to a Jinja2 template for the generated file

    @field_validator('log_level')
    @classmethod
    def _check_level(cls, value: str) -> str:
        if not isinstance(getattr(logging, value.upper(), None), int):
            raise ValueError(f"Invalid log level: {value}")
        return value.upper()

    @field_validator('log_format')
    @classmethod
    def _check_format(cls, value: str) -> str:
        if value not in LOG_FORMATS:
            raise ValueError(f"log_format must be one of {', '.join(LOG_FORMATS)}")
        return value

    @field_validator('timeout')
    @classmethod
    def _check_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("timeout must be positive")
        return value

    def template_path(self) -> Optional[Path]:
        return Path(self.template) if self.template else None


def load_config_file(filename) -> dict:
    path = Path(filename)
    try:
        data = yaml.load(expand_env_vars(path.read_text(encoding='utf-8')), Loader=yaml.FullLoader)
    except OSError as e:
        raise ConfigError(f"Could not read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Malformed config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping, got {type(data).__name__}")
    unknown = set(data) - set(Settings.model_fields)
    if unknown:
        raise ConfigError(f"Unknown setting(s) in {path}: {', '.join(sorted(unknown))}")
    return data


def load_settings(config_file: Optional[str] = None, **overrides) -> Settings:
    """Resolve settings from file, environment and `overrides` (None values are ignored)"""
    data = {}

    config_file = config_file or os.getenv(CONFIG_ENV_VAR)
    if config_file:
        data.update(load_config_file(config_file))
    elif os.path.isfile(DEFAULT_CONFIG_FILE):
        data.update(load_config_file(DEFAULT_CONFIG_FILE))

    for key, env_var in ENV_VARS.items():
        value = os.getenv(env_var)
        if value:
            data[key] = value

    data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        settings = Settings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings: {e}") from e

    logger().debug(f"Settings: {settings.model_dump()}")
    return settings
