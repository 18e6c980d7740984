"""
YAML -> ScoringRules loader.

Loads the rule table from scoring.yaml (bundled with the package) and
optionally merges user overrides from ~/.axiom-log/scoring.yaml.

Usage:
    from axiom_log.core.engine.config_loader import load_rules
    rules = load_rules()

If the user override file exists but cannot be parsed or yields an invalid
rule table, a warning is logged and the bundled rules are used.
"""

from __future__ import annotations

import importlib.resources
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from ..rules import DEFAULT_RULES, ScoringRules, rules_from_dict

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a single YAML mapping.

    Raises:
        OSError: If the file cannot be read
        yaml.YAMLError: If the file is not valid YAML
        ValueError: If the top level is not a mapping
    """
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"{path}: top level must be a mapping")
    return data


def _deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (non-destructive to base)."""
    result = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(result.get(k), dict):
            result[k] = _deep_merge(result[k], v)
        else:
            result[k] = v
    return result


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def get_config_home() -> Path:
    """Return the axiom-log base directory (AXIOM_LOG_HOME or ~/.axiom-log)."""
    override = os.environ.get("AXIOM_LOG_HOME")
    if override:
        return Path(override).expanduser()
    home = Path(os.environ.get("HOME", "~")).expanduser()
    return home / ".axiom-log"


def get_bundled_yaml_path() -> Path:
    """Return the path to the bundled scoring.yaml."""
    ref = importlib.resources.files("axiom_log").joinpath("scoring.yaml")
    with importlib.resources.as_file(ref) as p:
        return p


def get_user_yaml_path() -> Path | None:
    """Return <config home>/scoring.yaml if it exists, else None."""
    p = get_config_home() / "scoring.yaml"
    return p if p.exists() else None


def load_scoring_config(user_path: Path | None = None) -> dict[str, Any]:
    """
    Load and merge scoring configuration from YAML sources.

    Load order (later overrides earlier):
    1. Bundled src/axiom_log/scoring.yaml
    2. User override (``user_path`` or <config home>/scoring.yaml)

    Returns:
        Merged dict of config sections
    """
    config = _load_yaml_file(get_bundled_yaml_path())

    user = user_path if user_path is not None else get_user_yaml_path()
    if user is not None and user.exists():
        try:
            user_cfg = _load_yaml_file(user)
        except (OSError, yaml.YAMLError, ValueError) as exc:
            logger.warning("Ignoring scoring override %s: %s", user, exc)
        else:
            config = _deep_merge(config, user_cfg)
            logger.debug("Merged scoring override from %s", user)

    return config


def load_rules(user_path: Path | None = None) -> ScoringRules:
    """
    Build ScoringRules from the merged YAML configuration.

    An override that produces an invalid rule table is ignored with a
    warning; the bundled table is then used on its own.
    """
    merged = load_scoring_config(user_path)
    try:
        return rules_from_dict(merged)
    except ValueError as exc:
        logger.warning("Invalid scoring rules (%s); falling back to bundled defaults", exc)

    bundled = _load_yaml_file(get_bundled_yaml_path())
    try:
        return rules_from_dict(bundled)
    except ValueError as exc:
        logger.warning("Bundled scoring.yaml is invalid (%s); using built-in defaults", exc)
        return DEFAULT_RULES
