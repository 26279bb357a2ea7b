"""Configuration loading.

The config is read once per invocation and passed explicitly to every
bundling call. It currently only controls rule severities::

    rules:
      spec: warn
      no-unresolved-refs: error
"""

import logging
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ValidationError

from openapi_tool.errors import ConfigError

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("openapi-tool.yaml", ".openapi-tool.yaml")

RuleSetting = Literal["error", "warn", "off"]

DEFAULT_RULES: dict[str, RuleSetting] = {
    "no-unresolved-refs": "error",
    "spec": "error",
}


class Config(BaseModel):
    rules: dict[str, RuleSetting] = {}

    def rule_severity(self, rule_id: str) -> RuleSetting:
        """Return the configured severity for a rule, falling back to defaults."""
        return self.rules.get(rule_id, DEFAULT_RULES.get(rule_id, "error"))


def load_config(config_path: Path | None = None, cwd: Path | None = None) -> Config:
    """Load configuration from ``config_path`` or the first default file found.

    Returns the default configuration when no file exists.
    """
    if config_path is None:
        base = cwd or Path.cwd()
        for name in CONFIG_FILENAMES:
            candidate = base / name
            if candidate.is_file():
                config_path = candidate
                break
        else:
            logger.debug("No config file found in %s, using defaults", base)
            return Config()

    logger.debug("Loading config from %s", config_path)
    try:
        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Could not read config {config_path}: {e}") from e

    if data is None:
        return Config()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_path} must be a mapping")

    try:
        return Config.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {config_path}: {e}") from e
