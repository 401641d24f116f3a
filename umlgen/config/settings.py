"""
Settings module for code generation.

This module provides a settings class to manage configuration
options and defaults for generation runs, and the ProjectConfig the
descriptor builders consume.
"""

import copy
import os
import json
import logging
import re
from dataclasses import dataclass
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class Settings:
    """
    Settings for code generation runs.

    This class manages configuration options, environment variables,
    and user preferences. Values are read from the defaults, then an
    optional JSON file, then environment variables prefixed `UMLGEN_`
    whose path segments are separated by a double underscore
    (`UMLGEN_PROJECT__GROUP_ID=org.acme`).
    """

    ENV_PREFIX = "UMLGEN_"

    # Default settings
    DEFAULT_SETTINGS = {
        # Generated project
        "project": {
            "group_id": "com.example",
            "name": "demo",
            "version": "0.0.1-SNAPSHOT",
            "description": "Generated from a UML class diagram"
        },

        # Backend descriptor generation
        "generation": {
            "target": "all",
            "id_type": "Long",
            "timestamp_type": "LocalDateTime",
            "discriminator_column": "dtype",
            "api_prefix": "/api"
        },

        # Mobile client generation
        "mobile": {
            "package_name": "demo_app",
            "base_url": "http://localhost:8080/api"
        },

        # Output generation
        "output": {
            "output_directory": "output",
            "include_report": True,
            "indent": 2
        }
    }

    def __init__(self, config_path: Optional[str] = None):
        """
        Initialize settings.

        Args:
            config_path: Optional path to a JSON config file
        """
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)

        if config_path:
            self.load_from_file(config_path)

        self._load_from_env()

    def load_from_file(self, config_path: str) -> bool:
        """
        Load settings from a JSON config file.

        Args:
            config_path: Path to the config file

        Returns:
            True if successfully loaded, False otherwise
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                user_settings = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning("Failed to load settings from %s: %s", config_path, e)
            return False

        if not isinstance(user_settings, dict):
            logger.warning("Ignoring settings file %s: top level is not an object", config_path)
            return False

        self._update_dict_recursive(self.settings, user_settings)
        logger.info("Loaded settings from %s", config_path)
        return True

    def _update_dict_recursive(self, target: Dict, source: Dict) -> None:
        """
        Update a dictionary recursively.

        Args:
            target: Target dictionary to update
            source: Source dictionary with new values
        """
        for key, value in source.items():
            if key in target and isinstance(target[key], dict) and isinstance(value, dict):
                self._update_dict_recursive(target[key], value)
            else:
                target[key] = value

    def _load_from_env(self) -> None:
        """Load settings from environment variables."""
        for key, value in os.environ.items():
            if not key.startswith(self.ENV_PREFIX):
                continue

            setting_path = [part for part in key[len(self.ENV_PREFIX):].lower().split('__') if part]
            if not setting_path:
                continue

            current = self.settings
            for part in setting_path[:-1]:
                if not isinstance(current.get(part), dict):
                    current[part] = {}
                current = current[part]

            current[setting_path[-1]] = self._convert_value(value)
            logger.debug("Setting %s from environment variable", key)

    def _convert_value(self, value: str) -> Any:
        """
        Convert string value to appropriate type.

        Args:
            value: String value to convert

        Returns:
            Converted value
        """
        try:
            return int(value)
        except ValueError:
            pass

        try:
            return float(value)
        except ValueError:
            pass

        if value.lower() in ("true", "yes"):
            return True
        if value.lower() in ("false", "no"):
            return False

        try:
            return json.loads(value)
        except json.JSONDecodeError:
            pass

        return value

    def get(self, *path: str, default: Any = None) -> Any:
        """
        Get a setting value by path.

        Args:
            *path: Path components to the setting
            default: Default value if setting not found

        Returns:
            Setting value or default
        """
        current = self.settings

        for part in path:
            if not isinstance(current, dict) or part not in current:
                return default
            current = current[part]

        return current

    def set(self, *path_and_value: Any) -> None:
        """
        Set a setting value by path.

        Args:
            *path_and_value: Path components and value, where the last
                            element is the value to set

        Raises:
            ValueError: If no path component is given
        """
        if len(path_and_value) < 2:
            raise ValueError("set() requires at least one path component and a value")

        path = path_and_value[:-1]
        value = path_and_value[-1]

        current = self.settings
        for part in path[:-1]:
            if not isinstance(current.get(part), dict):
                current[part] = {}
            current = current[part]

        current[path[-1]] = value

    def save_to_file(self, config_path: str) -> bool:
        """
        Save current settings to a JSON file.

        Args:
            config_path: Path to save the config file

        Returns:
            True if successfully saved, False otherwise
        """
        try:
            os.makedirs(os.path.dirname(os.path.abspath(config_path)), exist_ok=True)
            with open(config_path, 'w', encoding='utf-8') as f:
                json.dump(self.settings, f, indent=2)
        except OSError as e:
            logger.warning("Failed to save settings to %s: %s", config_path, e)
            return False

        logger.info("Saved settings to %s", config_path)
        return True

    def get_all(self) -> Dict[str, Any]:
        """
        Get all settings.

        Returns:
            Copy of all settings
        """
        return copy.deepcopy(self.settings)

    def reset(self) -> None:
        """Reset all settings to defaults."""
        self.settings = copy.deepcopy(self.DEFAULT_SETTINGS)
        logger.info("Reset settings to defaults")

    def reset_section(self, section: str) -> bool:
        """
        Reset a specific section to defaults.

        Args:
            section: Section name

        Returns:
            True if section existed and was reset, False otherwise
        """
        if section not in self.DEFAULT_SETTINGS:
            logger.warning("Section %s not found in default settings", section)
            return False

        self.settings[section] = copy.deepcopy(self.DEFAULT_SETTINGS[section])
        logger.info("Reset %s settings to defaults", section)
        return True


@dataclass
class ProjectConfig:
    """
    Configuration of the generated project.

    Attributes:
        group_id: Maven group id, the first segments of every package
        name: Project name; its alphanumeric lower-case form is the
              artifact id and the last base-package segment
        version: Project version
        description: Project description
        package_name: Dart package name of the mobile client
        id_type: Java type of entity ids
        timestamp_type: Java type of createdAt/updatedAt
        discriminator_column: Column holding the subclass discriminator
        api_prefix: Path prefix of every REST controller
        base_url: Server URL the mobile providers call
    """

    group_id: str = "com.example"
    name: str = "demo"
    version: str = "0.0.1-SNAPSHOT"
    description: str = ""
    package_name: str = "demo_app"
    id_type: str = "Long"
    timestamp_type: str = "LocalDateTime"
    discriminator_column: str = "dtype"
    api_prefix: str = "/api"
    base_url: str = "http://localhost:8080/api"

    @property
    def artifact_id(self) -> str:
        return re.sub(r"[^a-z0-9]", "", (self.name or "").lower())

    @property
    def base_package(self) -> str:
        """Root Java package (e.g., "com.example.shop")."""
        if not self.artifact_id:
            return self.group_id
        return f"{self.group_id}.{self.artifact_id}"

    def package_for(self, layer: str) -> str:
        """Java package of a layer ("entity", "dto", "service", ...)."""
        return f"{self.base_package}.{layer}"

    @classmethod
    def from_settings(cls, settings: Settings) -> "ProjectConfig":
        """
        Build a project configuration from settings.

        Args:
            settings: Loaded settings

        Returns:
            ProjectConfig with every value read from the settings
        """
        defaults = cls()
        return cls(
            group_id=str(settings.get("project", "group_id", default=defaults.group_id)),
            name=str(settings.get("project", "name", default=defaults.name)),
            version=str(settings.get("project", "version", default=defaults.version)),
            description=str(settings.get("project", "description", default=defaults.description)),
            package_name=str(settings.get("mobile", "package_name", default=defaults.package_name)),
            id_type=str(settings.get("generation", "id_type", default=defaults.id_type)),
            timestamp_type=str(settings.get("generation", "timestamp_type", default=defaults.timestamp_type)),
            discriminator_column=str(
                settings.get("generation", "discriminator_column", default=defaults.discriminator_column)
            ),
            api_prefix=str(settings.get("generation", "api_prefix", default=defaults.api_prefix)),
            base_url=str(settings.get("mobile", "base_url", default=defaults.base_url)),
        )
