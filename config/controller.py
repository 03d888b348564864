"""Configuration controller for YAML-based perception settings."""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any

import yaml

from core.logging import logger


CONFIG_DIR_ENV = "SCENE_PERCEPTION_CONFIG_DIR"


@dataclass(frozen=True)
class ConfigPaths:
    """Filesystem paths for configuration files."""

    config_dir: Path
    config_file: Path
    override_file: Path


class ConfigController:
    """Singleton controller for loading and updating configuration.

    ``config/default.yaml`` (relative to the working directory, or to
    ``$SCENE_PERCEPTION_CONFIG_DIR``) is read first; ``override.yaml`` beside
    it is deep-merged on top.
    """

    _instance: "ConfigController | None" = None

    def __init__(self, config_file: str = "default.yaml", config_dir: Path | None = None) -> None:
        if ConfigController._instance is not None:
            raise RuntimeError("You cannot create another ConfigController class")

        if config_dir is None:
            config_dir = Path(os.environ.get(CONFIG_DIR_ENV, "config"))
        self.paths = ConfigPaths(
            config_dir=config_dir,
            config_file=config_dir / config_file,
            override_file=config_dir / "override.yaml",
        )
        self.config: dict[str, Any] = {}
        self.load_config()

    @classmethod
    def get_instance(cls) -> "ConfigController":
        """Return the singleton instance of the controller."""

        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    def load_config(self) -> None:
        """Load configuration from default and override YAML files."""

        config = self._read_yaml(self.paths.config_file)
        if not self.paths.config_file.exists():
            logger.warning(
                "[CONFIG] %s not found; using built-in perception defaults",
                self.paths.config_file,
            )

        override_config = self._read_yaml(self.paths.override_file)
        if override_config:
            config = self._deep_merge(config, override_config)

        self.config = self._normalize_legacy_config(config)

    def save_config(self, config: dict[str, Any]) -> None:
        """Persist configuration to override.yaml, archiving previous overrides."""

        self.paths.config_dir.mkdir(parents=True, exist_ok=True)
        if self.paths.override_file.exists():
            archive_index = 1
            while self._archive_path(archive_index).exists():
                archive_index += 1
            self.paths.override_file.rename(self._archive_path(archive_index))

        with self.paths.override_file.open("w", encoding="utf-8") as file:
            yaml.safe_dump(config, file)

    def get_config(self) -> dict[str, Any]:
        """Return the currently loaded configuration."""

        return dict(self.config)

    def set_config(self, config: dict[str, Any]) -> None:
        """Normalize, apply and persist configuration values."""

        self.config = self._normalize_legacy_config(dict(config))
        self.save_config(self.config)

    def update_perception(self, **options: Any) -> dict[str, Any]:
        """Override named perception options and persist the result."""

        config = dict(self.config)
        config["perception"] = {**dict(config.get("perception") or {}), **options}
        self.set_config(config)
        return dict(self.config["perception"])

    def _read_yaml(self, path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        with path.open("r", encoding="utf-8") as file:
            payload = yaml.safe_load(file) or {}
        if not isinstance(payload, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return payload

    def _archive_path(self, index: int) -> Path:
        return self.paths.config_dir / f"override_{index:04d}.yaml"

    def _deep_merge(self, base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Deep merge dictionaries, overriding base values with override values."""

        merged = dict(base)
        for key, value in override.items():
            if isinstance(merged.get(key), dict) and isinstance(value, dict):
                merged[key] = self._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def _normalize_legacy_config(self, config: dict[str, Any]) -> dict[str, Any]:
        """Normalize config while preserving backwards-compatible perception keys."""

        normalized = dict(config)
        perception_cfg = dict(normalized.get("perception") or {})

        def _value(key: str, default: Any) -> Any:
            return perception_cfg.get(key, normalized.get(f"perception_{key}", default))

        perception_cfg["detector_confidence_floor"] = float(
            _value("detector_confidence_floor", 0.5)
        )
        perception_cfg["classifier_confidence_floor"] = float(
            _value("classifier_confidence_floor", 0.3)
        )
        perception_cfg["classifier_candidate_cap"] = int(_value("classifier_candidate_cap", 3))
        perception_cfg["snapshot_cap"] = int(_value("snapshot_cap", 5))
        perception_cfg["description_top_n"] = int(_value("description_top_n", 3))
        perception_cfg["max_workers"] = int(_value("max_workers", 4))

        branch_timeout_s = _value("branch_timeout_s", 5.0)
        perception_cfg["branch_timeout_s"] = (
            float(branch_timeout_s) if branch_timeout_s is not None else None
        )

        normalized["perception"] = perception_cfg
        normalized["logging_level"] = str(normalized.get("logging_level", "INFO")).upper()
        normalized["file_logging_enabled"] = bool(normalized.get("file_logging_enabled", False))
        normalized["log_file_path"] = str(
            normalized.get("log_file_path", "logs/scene_perception.log")
        )
        return normalized
