"""Process configuration for the extender, resolved once at startup."""

from __future__ import annotations

import os
import logging
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Mapping, Optional

import yaml

logger = logging.getLogger(__name__)

# Environment variable -> ExtenderConfig field
ENV_VARS = {
    "EXTENDER_HTTP_ADDR": "http_addr",
    "EXTENDER_API_PREFIX": "api_prefix",
    "EXTENDER_PRIORITIES_PREFIX": "priorities_prefix",
    "EXTENDER_MAX_CONTENT_LENGTH": "max_content_length",
    "LOG_LEVEL": "log_level",
}


@dataclass(frozen=True)
class ExtenderConfig:
    """
    Immutable extender settings.

    Build instances with ``create`` (or ``load_config``) so that the route
    prefixes and the bind address are normalised.
    """
    http_addr: str = ":80"  # <ip>:<port>; an empty ip binds all interfaces
    api_prefix: str = "/my_scheduler_extension"
    priorities_prefix: str = "/my_new_priorities"
    max_content_length: int = 10 * 1024 * 1024
    log_level: str = "INFO"

    @classmethod
    def create(cls, **values: Any) -> "ExtenderConfig":
        unknown = set(values) - {f.name for f in fields(cls)}
        if unknown:
            raise ValueError(f"unknown config keys: {sorted(unknown)}")
        return _normalize(cls(**values))

    @property
    def priorities_path(self) -> str:
        return self.api_prefix + self.priorities_prefix

    @property
    def bind(self) -> str:
        host, _, port = self.http_addr.rpartition(":")
        return f"{host or '0.0.0.0'}:{port}"

    def route_for(self, method_name: str) -> str:
        return f"{self.priorities_path}/{method_name}"


def _normalize(cfg: ExtenderConfig) -> ExtenderConfig:
    changes: Dict[str, Any] = {}
    # YAML turns `http_addr: 8080` into an int
    for name in ("http_addr", "api_prefix", "priorities_prefix"):
        value = getattr(cfg, name)
        if not isinstance(value, str):
            changes[name] = str(value)
    cfg = replace(cfg, **changes) if changes else cfg
    if ":" not in cfg.http_addr:
        changes["http_addr"] = ":" + cfg.http_addr
        logger.warning(f"the http_addr value was missing a `:`, it was automatically added -> {changes['http_addr']}")
    for name in ("api_prefix", "priorities_prefix"):
        value = getattr(cfg, name)
        if not value.startswith("/"):
            changes[name] = "/" + value
            logger.warning(f"the {name} value was missing a `/`, it was automatically added -> {changes[name]}")
    try:
        max_len = int(cfg.max_content_length)
    except (TypeError, ValueError):
        raise ValueError(f"max_content_length must be an integer, got {cfg.max_content_length!r}")
    if max_len <= 0:
        raise ValueError(f"max_content_length must be positive, got {max_len}")
    if max_len != cfg.max_content_length:
        changes["max_content_length"] = max_len
    level = str(cfg.log_level).upper()
    if level != cfg.log_level:
        changes["log_level"] = level
    return replace(cfg, **changes) if changes else cfg


def _load_yaml(path: str) -> Dict[str, Any]:
    try:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise ValueError(f"failed to read extender config from {path}: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"extender config {path} must be a mapping, got {type(data).__name__}")
    return data


def load_config(
    path: Optional[str] = None,
    environ: Optional[Mapping[str, str]] = None,
    **overrides: Any,
) -> ExtenderConfig:
    """
    Resolve the extender configuration.

    Precedence, lowest first: defaults, the YAML file at ``path`` (or
    ``EXTENDER_CONFIG``), environment variables, then ``overrides`` whose
    value is not None (command-line flags).
    """
    env = os.environ if environ is None else environ
    values: Dict[str, Any] = {}

    path = path or env.get("EXTENDER_CONFIG")
    if path:
        values.update(_load_yaml(path))
        logger.info(f"Loaded extender config from {path}")

    for var, name in ENV_VARS.items():
        if env.get(var):
            values[name] = env[var]

    values.update({k: v for k, v in overrides.items() if v is not None})
    return ExtenderConfig.create(**values)
