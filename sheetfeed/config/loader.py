from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from ..filters.filter_factory import FilterFactory
from ..models.config_models import DEFAULT_TIMEOUT, ConfigurationError, ImportConfig, SheetConfig

"""Config loader.

Responsibilities:
- Load YAML config/import.yml
- Validate it against config_schema.json (next to this module)
- Apply defaults (worksheet=1, header_row=0, timeout=30)
- Apply environment overrides (SHEETFEED_URL_TEMPLATE / SHEETFEED_TIMEOUT)
- Build SheetConfig objects, turning declarative filters into Filter instances
"""

SCHEMA_PATH = Path(__file__).parent / "config_schema.json"

ENV_URL_TEMPLATE = "SHEETFEED_URL_TEMPLATE"
ENV_TIMEOUT = "SHEETFEED_TIMEOUT"


class ConfigError(ConfigurationError):
    pass


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate config data against JSON schema.

    Raises:
        ConfigError: schema file missing/unreadable, or the data fails validation
    """
    if not SCHEMA_PATH.exists():
        raise ConfigError(f"config schema not found: {SCHEMA_PATH}")

    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
        jsonschema.validate(data, schema)
    except json.JSONDecodeError as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def build_sheet_config(sheet_name: str, raw: Mapping[str, Any], factory: FilterFactory | None = None) -> SheetConfig:
    """Turn one validated ``sheets`` entry into a SheetConfig."""
    factory = factory or FilterFactory()
    try:
        filters = tuple(factory.create_filters(list(raw.get("filters") or [])))
    except ValueError as e:
        raise ConfigError(f"sheet '{sheet_name}': {e}") from e
    try:
        return SheetConfig(
            feed_key=raw["feed_key"],
            worksheet_index=raw.get("worksheet", 1),
            header_row_index=raw.get("header_row", 0),
            field_overrides=dict(raw.get("fields") or {}),
            filters=filters,
        )
    except ConfigurationError as e:
        raise ConfigError(f"sheet '{sheet_name}': {e}") from e


def _env_overrides(env: Mapping[str, str]) -> dict[str, Any]:
    overrides: dict[str, Any] = {}
    template = env.get(ENV_URL_TEMPLATE)
    if template:
        overrides["feed_url_template"] = template
    timeout = env.get(ENV_TIMEOUT)
    if timeout:
        try:
            overrides["timeout"] = int(timeout)
        except ValueError as e:
            raise ConfigError(f"{ENV_TIMEOUT} must be an integer: {timeout!r}") from e
        if overrides["timeout"] < 1:
            raise ConfigError(f"{ENV_TIMEOUT} must be >= 1: {timeout!r}")
    return overrides


def load_config(path: Path, env: Mapping[str, str] | None = None) -> ImportConfig:
    """Load, validate and build the import configuration.

    Args:
        path: YAML file (usually config/import.yml)
        env: Environment used for overrides; os.environ when omitted

    Raises:
        ConfigError: missing file, invalid YAML, schema violation or bad values
    """
    if not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")

    data.update(_env_overrides(os.environ if env is None else env))
    _validate_config_schema(data)

    factory = FilterFactory()
    sheets = {name: build_sheet_config(name, raw, factory) for name, raw in data["sheets"].items()}
    return ImportConfig(
        sheets=sheets,
        feed_url_template=data.get("feed_url_template"),
        timeout=data.get("timeout", DEFAULT_TIMEOUT),
    )
