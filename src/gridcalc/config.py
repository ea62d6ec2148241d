"""Unit display preferences.

Preferences come from a YAML file, either passed explicitly or named by the
GRIDCALC_CONFIG environment variable:

    system: metric_mm      # optional preset
    stress_scale: psi/ksi  # any field overrides the preset
"""

import os
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, ValidationError

CONFIG_ENV_VAR = "GRIDCALC_CONFIG"


class ConfigError(Exception):
    pass


class UnitPrefs(BaseModel):
    """Base units used when choosing how to display a derived quantity."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    length_base: Literal["in", "ft", "mm", "m"] = "in"
    force_base: Literal["lb", "kip", "N", "kN"] = "lb"
    time_base: Literal["s"] = "s"
    stress_scale: Literal["psi/ksi", "Pa/kPa/MPa"] = "psi/ksi"


UNIT_SYSTEMS: dict[str, UnitPrefs] = {
    "imperial_in": UnitPrefs(length_base="in", force_base="lb", stress_scale="psi/ksi"),
    "imperial_ft": UnitPrefs(length_base="ft", force_base="lb", stress_scale="psi/ksi"),
    "metric_mm": UnitPrefs(length_base="mm", force_base="N", stress_scale="Pa/kPa/MPa"),
    "metric_m": UnitPrefs(length_base="m", force_base="N", stress_scale="Pa/kPa/MPa"),
}

DEFAULT_PREFS = UNIT_SYSTEMS["imperial_in"]


def prefs_for_system(system: str) -> UnitPrefs:
    try:
        return UNIT_SYSTEMS[system]
    except KeyError:
        raise ConfigError(f"unknown unit system: {system!r} (expected one of {sorted(UNIT_SYSTEMS)})") from None


def load_prefs(path: str | Path | None = None) -> UnitPrefs:
    """Load preferences from YAML; defaults when no file is configured."""
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
    if not path:
        return DEFAULT_PREFS

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"cannot read config {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"config {path} must be a mapping")

    base = prefs_for_system(data.pop("system")) if "system" in data else DEFAULT_PREFS
    try:
        return UnitPrefs(**{**base.model_dump(), **data})
    except ValidationError as e:
        raise ConfigError(f"invalid config {path}: {e}") from e
