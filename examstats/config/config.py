from __future__ import annotations

"""Configuration loading and validation for ExamStats.

This module loads YAML configuration, applies defaults, and validates the
analytics section into an `AnalyticsConfig`.
"""

from pathlib import Path
from typing import Any, Dict, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import sys

import yaml
from pydantic import ValidationError

from analytics.config import AnalyticsConfig


def _load_yaml(path: Path) -> Dict[str, Any]:
    try:
        with path.open("r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    except FileNotFoundError:
        print(f"ERROR: Config file not found: {path}", file=sys.stderr)
        sys.exit(1)


def load_config(path: Optional[str] = None) -> Dict[str, Any]:
    """Load configuration from YAML or defaults.

    Args:
        path: Optional path to a YAML config. If None, use package defaults.

    Returns:
        A dictionary with configuration values.
    """
    if path:
        cfg = _load_yaml(Path(path))
    else:
        cfg = _load_yaml(Path(__file__).with_name("defaults.yml"))
    return cfg


def _valid_timezone(name: Any) -> bool:
    try:
        ZoneInfo(str(name))
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Apply defaults and validate configuration values.

    Invalid values print a warning and fall back to the default rather than
    aborting. The `analytics` section is replaced by an `AnalyticsConfig`.

    Args:
        cfg: The raw configuration dictionary.

    Returns:
        The validated and merged configuration dictionary.
    """
    cfg.setdefault("analytics", {})
    cfg.setdefault("export", {})
    if cfg["analytics"] is None:
        cfg["analytics"] = {}
    if cfg["export"] is None:
        cfg["export"] = {}

    raw = cfg["analytics"]
    if isinstance(raw, AnalyticsConfig):
        raw = raw.model_dump()
    defaults = AnalyticsConfig()

    tz = raw.get("trend_timezone", defaults.trend_timezone)
    if not _valid_timezone(tz):
        print(f"WARNING: Unknown trend_timezone '{tz}', using 'UTC'.")
        raw["trend_timezone"] = "UTC"

    values: Dict[str, Any] = {}
    for name in AnalyticsConfig.model_fields:
        if name not in raw:
            continue
        try:
            AnalyticsConfig(**{name: raw[name]})
        except ValidationError:
            print(f"WARNING: Invalid analytics.{name} '{raw[name]}', using '{getattr(defaults, name)}'.")
            continue
        values[name] = raw[name]
    cfg["analytics"] = AnalyticsConfig(**values)

    export = cfg["export"]
    export.setdefault("attempts_csv", True)
    return cfg


def analytics_config(path: Optional[str] = None) -> AnalyticsConfig:
    """Shortcut: load, validate and return just the analytics section."""
    return validate_config(load_config(path))["analytics"]
