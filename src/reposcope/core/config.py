# src/reposcope/core/config.py
"""Configuration management for reposcope"""

import os
import yaml
import logging
from pathlib import Path
from typing import Dict, Any, Optional, List
from dataclasses import dataclass, fields

from .exceptions import ConfigurationError


logger = logging.getLogger(__name__)


@dataclass
class ReposcopeConfig:
    """Settings for the scan coordination core"""

    # Directory proposed for the first scan / refresh when no roots exist
    default_path: Optional[str] = None

    # Bounded derived lists
    largest_limit: int = 10
    most_active_limit: int = 10
    attention_limit: int = 20

    # Progress channel capacity; older events are dropped when full
    progress_queue_size: int = 100

    # Persistence and batch behaviour
    persist_after_scan: bool = True
    refresh_after_batch: bool = True
    batch_refresh_delay: float = 1.0

    path_separator: str = "/"
    log_level: str = "INFO"

    @classmethod
    def from_yaml(cls, config_path: Path) -> "ReposcopeConfig":
        """Load configuration from the `reposcope:` section of a YAML file."""
        if not config_path.exists():
            raise ConfigurationError(f"Config file not found: {config_path}")

        with open(config_path, 'r') as f:
            data = yaml.safe_load(f) or {}

        return cls.from_dict(data.get('reposcope', {}))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ReposcopeConfig":
        """Create configuration from dictionary, ignoring unknown keys"""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logger.warning(f"Ignoring unknown config keys: {sorted(unknown)}")

        config = cls(**{k: v for k, v in data.items() if k in known})
        issues = config.validate()
        if issues:
            raise ConfigurationError(f"Invalid configuration: {'; '.join(issues)}", details=issues)
        return config

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}

    def validate(self) -> List[str]:
        """Validate configuration and return list of issues"""
        issues = []

        for name in ('largest_limit', 'most_active_limit', 'attention_limit'):
            if getattr(self, name) < 0:
                issues.append(f"{name} must not be negative")

        if self.progress_queue_size < 1:
            issues.append("progress_queue_size must be at least 1")

        if self.batch_refresh_delay < 0:
            issues.append("batch_refresh_delay must not be negative")

        if not self.path_separator:
            issues.append("path_separator must not be empty")

        if self.log_level.upper() not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            issues.append(f"Unknown log_level: {self.log_level}")

        return issues


def _env_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")


class ConfigManager:
    """Loads reposcope configuration from YAML, falling back to the environment"""

    def __init__(self, config_path: Optional[str] = None):
        self.config = ReposcopeConfig()

        if config_path is None:
            possible_paths = [
                Path("config/reposcope.yaml"),
                Path(__file__).parent.parent.parent.parent / "config" / "reposcope.yaml",
            ]
            for path in possible_paths:
                if path.exists():
                    config_path = str(path)
                    break

        if config_path and Path(config_path).exists():
            logger.info(f"Loading configuration from {config_path}")
            self.config = ReposcopeConfig.from_yaml(Path(config_path))
        else:
            self._load_from_env()

    def _load_from_env(self):
        """Load configuration from REPOSCOPE_* environment variables (fallback)"""
        data: Dict[str, Any] = {}

        try:
            if value := os.getenv("REPOSCOPE_DEFAULT_PATH"):
                data['default_path'] = value
            if value := os.getenv("REPOSCOPE_LARGEST_LIMIT"):
                data['largest_limit'] = int(value)
            if value := os.getenv("REPOSCOPE_MOST_ACTIVE_LIMIT"):
                data['most_active_limit'] = int(value)
            if value := os.getenv("REPOSCOPE_ATTENTION_LIMIT"):
                data['attention_limit'] = int(value)
            if value := os.getenv("REPOSCOPE_PROGRESS_QUEUE_SIZE"):
                data['progress_queue_size'] = int(value)
            if value := os.getenv("REPOSCOPE_PERSIST_AFTER_SCAN"):
                data['persist_after_scan'] = _env_bool(value)
            if value := os.getenv("REPOSCOPE_REFRESH_AFTER_BATCH"):
                data['refresh_after_batch'] = _env_bool(value)
            if value := os.getenv("REPOSCOPE_BATCH_REFRESH_DELAY"):
                data['batch_refresh_delay'] = float(value)
            if value := os.getenv("REPOSCOPE_LOG_LEVEL"):
                data['log_level'] = value
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment configuration: {e}")

        self.config = ReposcopeConfig.from_dict(data)

    def get_config(self) -> ReposcopeConfig:
        return self.config
