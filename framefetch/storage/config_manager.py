"""
Manages loading, validation and saving of the INI configuration file.
"""

import configparser
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from framefetch.exceptions import ConfigurationError
from framefetch.models.config import ClientConfig

log = logging.getLogger(__name__)


class ConfigManager:
    """Handles all operations related to the application's INI config file."""

    def __init__(self, config_file_path: Path):
        self.config_file_path = config_file_path
        self._parser = configparser.ConfigParser(interpolation=None)

    def load_config(self, cli_options: dict[str, Any] | None = None) -> ClientConfig:
        """
        Loads configuration from the INI file, applies CLI overrides, and validates it.

        A missing file is not an error: every setting then takes its default
        value unless overridden on the command line.

        Args:
            cli_options: A dictionary of options provided via the command line.

        Returns:
            A validated ClientConfig object.

        Raises:
            ConfigurationError: If the config file is unreadable or validation fails.
        """
        config_from_file: dict[str, Any] = {}
        if self.config_file_path.is_file():
            try:
                self._parser.read(self.config_file_path, encoding="utf-8")
                config_from_file = self._get_config_as_dict()
            except (configparser.Error, ValueError) as e:
                raise ConfigurationError(
                    f"Error parsing configuration file: {e}"
                ) from e
        else:
            log.debug(
                f"No configuration file at '{self.config_file_path}', using defaults."
            )

        # Override with CLI options
        if cli_options:
            config_from_file.update(
                {k: v for k, v in cli_options.items() if v is not None}
            )

        try:
            config_dir = self.config_file_path.parent
            return ClientConfig(**config_from_file, config_path=str(config_dir))
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

    def save_new_config(self, settings: dict[str, Any]) -> None:
        """
        Validates `settings` and writes them as a new configuration file.

        Settings that are not given are written with their default values.
        """
        try:
            config = ClientConfig(**settings)
        except ValidationError as e:
            raise ConfigurationError(f"Configuration validation failed:\n{e}") from e

        parser = configparser.ConfigParser(interpolation=None)
        parser["DEFAULT"] = {}
        for key in sorted(ClientConfig.get_ini_keys()):
            value = getattr(config, key)
            parser["DEFAULT"][key] = "" if value is None else str(value)

        try:
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, "w", encoding="utf-8") as configfile:
                parser.write(configfile)
        except OSError as e:
            raise ConfigurationError(f"Failed to save configuration file: {e}") from e

    def _get_config_as_dict(self) -> dict[str, Any]:
        """Reads the 'DEFAULT' section of the INI file into a dictionary."""
        section = self._parser["DEFAULT"]
        values: dict[str, Any] = {
            "base_url": section.get("base_url", ""),
            "user_agent": section.get("user_agent", "") or None,
            "connect_timeout": section.getfloat("connect_timeout", None),
            "read_timeout": section.getfloat("read_timeout", None),
            "total_timeout": section.getfloat("total_timeout", None),
            "buffer_size": section.getint("buffer_size", None)
            if section.get("buffer_size")
            else None,
            "json_log_dir": section.get("json_log_dir", "") or None,
        }
        # Unset keys fall back to the model defaults.
        return {k: v for k, v in values.items() if v is not None}
