"""YAML config loader: reads audit-config.yml into AuditConfig."""

import os
from pathlib import Path
from typing import Any

import yaml

from axefix.schemas.config import AuditConfig

AXE_SCRIPT_ENV = "AXEFIX_AXE_SCRIPT_PATH"


def build_config(raw: dict[str, Any]) -> AuditConfig:
    """Validate a raw mapping, dropping ``None`` values and applying env defaults.

    ``None`` entries (blank YAML keys, unset CLI options) fall back to the
    model defaults instead of failing validation.
    """
    data = {k: v for k, v in raw.items() if v is not None}
    if not data.get("axe_script_path") and os.environ.get(AXE_SCRIPT_ENV):
        data["axe_script_path"] = os.environ[AXE_SCRIPT_ENV]
    return AuditConfig(**data)


def load_config(path: str | Path, overrides: dict[str, Any] | None = None) -> AuditConfig:
    """Load and validate an audit config file.

    ``overrides`` (typically CLI flags) replace file values when not ``None``.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    for key, value in (overrides or {}).items():
        if value is not None:
            raw[key] = value

    return build_config(raw)
