"""Runtime settings for the perception engine."""

from __future__ import annotations

from dataclasses import dataclass
import math
from typing import Any

from config import ConfigController


@dataclass(frozen=True)
class PerceptionSettings:
    """Thresholds, caps and worker limits for perception passes."""

    detector_confidence_floor: float = 0.5
    classifier_confidence_floor: float = 0.3
    classifier_candidate_cap: int = 3
    snapshot_cap: int = 5
    description_top_n: int = 3
    branch_timeout_s: float | None = 5.0
    max_workers: int = 4


def settings_from_mapping(perception_cfg: dict[str, Any]) -> PerceptionSettings:
    """Build settings from a ``perception`` config section, clamping bad values."""

    defaults = PerceptionSettings()

    timeout_value = perception_cfg.get("branch_timeout_s", defaults.branch_timeout_s)
    branch_timeout_s: float | None
    if timeout_value is None:
        branch_timeout_s = None
    else:
        branch_timeout_s = _to_float(timeout_value, 5.0)
        if branch_timeout_s <= 0.0:
            branch_timeout_s = None

    return PerceptionSettings(
        detector_confidence_floor=_clamp_unit(
            _to_float(
                perception_cfg.get("detector_confidence_floor"),
                defaults.detector_confidence_floor,
            )
        ),
        classifier_confidence_floor=_clamp_unit(
            _to_float(
                perception_cfg.get("classifier_confidence_floor"),
                defaults.classifier_confidence_floor,
            )
        ),
        classifier_candidate_cap=_at_least_one(
            perception_cfg.get("classifier_candidate_cap"),
            defaults.classifier_candidate_cap,
        ),
        snapshot_cap=_at_least_one(perception_cfg.get("snapshot_cap"), defaults.snapshot_cap),
        description_top_n=_at_least_one(
            perception_cfg.get("description_top_n"), defaults.description_top_n
        ),
        branch_timeout_s=branch_timeout_s,
        max_workers=_at_least_one(perception_cfg.get("max_workers"), defaults.max_workers),
    )


def load_perception_settings() -> PerceptionSettings:
    """Load perception settings from the active configuration."""

    config = ConfigController.get_instance().get_config()
    return settings_from_mapping(dict(config.get("perception") or {}))


def _to_float(value: Any, default: float) -> float:
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return number


def _clamp_unit(value: float) -> float:
    return max(0.0, min(1.0, value))


def _at_least_one(value: Any, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(1, number)
