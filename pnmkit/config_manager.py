"""Configuration persistence manager for pnmkit.

This module handles loading and saving of codec configuration to/from JSON files.
"""

import json
import logging
from dataclasses import asdict, fields
from pathlib import Path
from typing import Optional, Tuple

from .models import CONFIG_FILE, CodecConfig

logger = logging.getLogger(__name__)


class ConfigManager:
    """Handles loading and saving of codec configuration."""

    def __init__(self, config_path: Path = CONFIG_FILE):
        """Initialize config manager.

        Args:
            config_path: Path to configuration file (defaults to ~/.pnmkit_config.json)
        """
        self.config_path = Path(config_path)

    def load(self) -> CodecConfig:
        """Load configuration from file, returning defaults if not found.

        Unknown keys and values of the wrong type are ignored.

        Returns:
            CodecConfig with loaded or default values
        """
        config = CodecConfig()

        if not self.config_path.exists():
            return config

        try:
            with open(self.config_path, "r") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Could not load config file %s: %s", self.config_path, e)
            return config

        if not isinstance(data, dict):
            logger.warning("Ignoring config file %s: not a JSON object", self.config_path)
            return config

        # Update config with loaded values (fallback to defaults)
        for field in fields(CodecConfig):
            if field.name not in data:
                continue
            value = data[field.name]
            default = getattr(config, field.name)
            if type(value) is not type(default):
                logger.warning(
                    "Ignoring config value %s=%r: expected %s",
                    field.name,
                    value,
                    type(default).__name__,
                )
                continue
            setattr(config, field.name, value)

        logger.info("Loaded configuration from %s", self.config_path)
        return config

    def save(self, config: CodecConfig) -> Tuple[bool, Optional[str]]:
        """Save configuration to file.

        Args:
            config: CodecConfig to save

        Returns:
            Tuple of (success: bool, error_message: Optional[str])
        """
        try:
            with open(self.config_path, "w") as f:
                json.dump(asdict(config), f, indent=2)
        except OSError as e:
            logger.warning("Could not save config file %s: %s", self.config_path, e)
            return False, str(e)
        logger.info("Saved configuration to %s", self.config_path)
        return True, None
