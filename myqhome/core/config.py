"""Configuration loading and validation for YAML-based myqhome settings."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

import yaml
from jsonschema import ValidationError

from myqhome.core.envelope import DEFAULT_DEPENDENT_SERVICE_NAME
from myqhome.core.errors import ConfigLoadError, ConfigValidationError
from myqhome.core.projector import DEFAULT_MANUFACTURER
from myqhome.core.schema import load_schema_validator
from myqhome.transports.myq_http import DEFAULT_ENDPOINT, DEFAULT_TIMEOUT_S

ENV_ENDPOINT = "MYQHOME_ENDPOINT"
ENV_TIMEOUT = "MYQHOME_REQUEST_TIMEOUT_S"
LOGGER = logging.getLogger(__name__)


class UniqueKeyLoader(yaml.SafeLoader):
    """YAML loader that rejects duplicate mapping keys."""


def _construct_mapping(loader: UniqueKeyLoader, node: yaml.Node, deep: bool = False) -> dict[str, Any]:
    mapping: dict[str, Any] = {}
    for key_node, value_node in node.value:
        key = loader.construct_object(key_node, deep=deep)
        if key in mapping:
            raise ConfigValidationError(f"Duplicate key '{key}' in YAML document")
        mapping[key] = loader.construct_object(value_node, deep=deep)
    return mapping


UniqueKeyLoader.add_constructor(
    yaml.resolver.BaseResolver.DEFAULT_MAPPING_TAG,
    _construct_mapping,
)


@dataclass(frozen=True)
class AdapterConfig:
    endpoint: str = DEFAULT_ENDPOINT
    request_timeout_s: float = DEFAULT_TIMEOUT_S
    manufacturer_name: str = DEFAULT_MANUFACTURER
    dependent_service_name: str = DEFAULT_DEPENDENT_SERVICE_NAME


@dataclass(frozen=True)
class LoadedConfig:
    config: AdapterConfig
    warnings: tuple[str, ...]


def config_path() -> Path:
    xdg_config = Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))
    return xdg_config / "myqhome/config.yaml"


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        content = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigLoadError(f"Could not read config file {path}: {exc}") from exc

    try:
        loaded = yaml.load(content, Loader=UniqueKeyLoader)
    except yaml.YAMLError as exc:
        raise ConfigValidationError(f"Invalid YAML in {path}: {exc}") from exc

    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(f"Config file {path} must contain a mapping at root")
    return loaded


def _normalize_endpoint(value: str, *, context: str) -> str:
    normalized = value.strip().rstrip("/")
    parsed = urlparse(normalized)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ConfigValidationError(f"{context} must be an http(s) URL, got '{value}'")
    return normalized


def _normalize_timeout(value: Any, *, context: str) -> float:
    try:
        timeout = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigValidationError(f"{context} must be a number") from exc
    if timeout <= 0:
        raise ConfigValidationError(f"{context} must be positive")
    return timeout


def _build_config(doc: dict[str, Any], source: Path) -> AdapterConfig:
    validator = load_schema_validator("config.schema.json")
    try:
        validator.validate(doc)
    except ValidationError as exc:
        path = ".".join(str(p) for p in exc.path)
        where = f" ({path})" if path else ""
        raise ConfigValidationError(f"Schema validation failed for {source}{where}: {exc.message}") from exc

    config = AdapterConfig()
    if "endpoint" in doc:
        config = replace(config, endpoint=_normalize_endpoint(doc["endpoint"], context=f"{source}: endpoint"))
    if "request_timeout_s" in doc:
        config = replace(
            config,
            request_timeout_s=_normalize_timeout(doc["request_timeout_s"], context=f"{source}: request_timeout_s"),
        )
    if "manufacturer_name" in doc:
        config = replace(config, manufacturer_name=doc["manufacturer_name"])
    if "dependent_service_name" in doc:
        config = replace(config, dependent_service_name=doc["dependent_service_name"])
    return config


def load_config() -> LoadedConfig:
    config = AdapterConfig()
    warnings: list[str] = []
    from_file: set[str] = set()

    path = config_path()
    if path.is_file():
        doc = _read_yaml(path)
        config = _build_config(doc, path)
        from_file = set(doc)

    endpoint = os.environ.get(ENV_ENDPOINT)
    if endpoint:
        config = replace(config, endpoint=_normalize_endpoint(endpoint, context=ENV_ENDPOINT))
        if "endpoint" in from_file:
            warnings.append(f"{ENV_ENDPOINT} overrides endpoint from {path}")

    timeout = os.environ.get(ENV_TIMEOUT)
    if timeout:
        config = replace(config, request_timeout_s=_normalize_timeout(timeout, context=ENV_TIMEOUT))
        if "request_timeout_s" in from_file:
            warnings.append(f"{ENV_TIMEOUT} overrides request_timeout_s from {path}")

    for warning in warnings:
        LOGGER.warning(warning)
    return LoadedConfig(config=config, warnings=tuple(warnings))
