"""
Configuration manager and logging setup.
"""

import copy
import json
import logging
import os
from typing import Dict, Any, Optional

from .math.constants import DEFAULT_TOLERANCE, DEFAULT_SINGULARITY_THRESHOLD

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


class Config:
    """Configuration manager for filters and geometry defaults."""

    DEFAULT_CONFIG = {
        # Geometry
        "hull_tolerance": DEFAULT_TOLERANCE,

        # Kalman filter
        "singularity_threshold": DEFAULT_SINGULARITY_THRESHOLD,

        # Default noise for the constant velocity example models
        "process_noise": {
            "acceleration": 0.1
        },
        "measurement_noise": {
            "position": 1.0
        },

        # Logging
        "log_level": "WARNING",
        "log_file": None
    }

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialize configuration.

        Args:
            config_file: Optional path to a JSON configuration file; missing
                files leave the defaults in place
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file is None:
            return

        # Load configuration from file if it exists
        if os.path.exists(config_file):
            self.load_config()
        else:
            logger.info("Config file %s not found, using defaults", config_file)

    def load_config(self) -> bool:
        """
        Load configuration from file.

        Returns:
            True if loaded successfully
        """
        try:
            with open(self.config_file, 'r') as f:
                file_config = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.error("Failed to load config %s: %s", self.config_file, e)
            return False

        if not isinstance(file_config, dict):
            logger.error("Config file %s must contain a JSON object", self.config_file)
            return False

        # Merge with defaults (file config overrides defaults)
        self._merge_config(self.config, file_config)

        logger.info("Configuration loaded from %s", self.config_file)
        return True

    def save_config(self, config_file: Optional[str] = None) -> bool:
        """
        Save current configuration to file.

        Args:
            config_file: Target path; defaults to the file the config was loaded from

        Returns:
            True if saved successfully
        """
        path = config_file or self.config_file
        if path is None:
            raise ValueError("No config file path given")

        try:
            with open(path, 'w') as f:
                json.dump(self.config, f, indent=2)
        except OSError as e:
            logger.error("Failed to save config %s: %s", path, e)
            return False

        logger.info("Configuration saved to %s", path)
        return True

    def _merge_config(self, base: Dict[str, Any], override: Dict[str, Any]):
        """Recursively merge configuration dictionaries."""
        for key, value in override.items():
            if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                self._merge_config(base[key], value)
            else:
                base[key] = value

    def get(self, key: str, default=None):
        """Get configuration value with optional default."""
        keys = key.split('.')
        value = self.config

        for k in keys:
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Set configuration value."""
        keys = key.split('.')
        config = self.config

        for k in keys[:-1]:
            if k not in config:
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value

    # Property accessors for common configuration values
    @property
    def hull_tolerance(self) -> float:
        return float(self.config["hull_tolerance"])

    @property
    def singularity_threshold(self) -> float:
        return float(self.config["singularity_threshold"])

    @property
    def process_noise(self) -> Dict[str, float]:
        return self.config["process_noise"]

    @property
    def measurement_noise(self) -> Dict[str, float]:
        return self.config["measurement_noise"]

    @property
    def log_level(self) -> str:
        return self.config["log_level"]

    @property
    def log_file(self) -> Optional[str]:
        return self.config["log_file"]


def setup_logging(config: Optional[Config] = None) -> logging.Logger:
    """
    Configure the mathkit logger from a configuration.

    Args:
        config: Configuration providing log_level and log_file; defaults are
            used when omitted

    Returns:
        The configured package logger
    """
    config = config or Config()

    level = logging.getLevelName(str(config.log_level).upper())
    if not isinstance(level, int):
        raise ValueError(f"Unknown log level: {config.log_level}")

    package_logger = logging.getLogger("mathkit")
    package_logger.setLevel(level)

    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if config.log_file:
        handler = logging.FileHandler(config.log_file)
    else:
        handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)

    return package_logger
